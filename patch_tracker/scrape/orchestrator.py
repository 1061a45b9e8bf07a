# patch_tracker/scrape/orchestrator.py
from __future__ import annotations

from typing import Callable, List, Optional, Protocol

from loguru import logger

from ..config import RAW_SAMPLE_CHARS
from ..gate import decide
from ..models import ExtractionOutcome, RunReport
from ..storage.catalog import CatalogStore
from ..utils import now_iso
from .http import fetch_page_text


ProgressCB = Callable[[int, int, str], None]
FetchFn = Callable[[str], str]

# Run states
IDLE = "idle"
RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"


class UpdateExtractor(Protocol):
    def extract(self, game_name: str, text: str, last_known_version: str) -> ExtractionOutcome:
        ...


class UpdatePipeline:
    """
    One batch run over the catalog: fetch, extract, gate, single save.

    Games are processed strictly one after another. A failure for one game
    is logged and skipped; only store failures end the run early.
    """

    def __init__(
        self,
        *,
        store: CatalogStore,
        extractor: UpdateExtractor,
        fetch: FetchFn = fetch_page_text,
        progress_cb: Optional[ProgressCB] = None,
    ) -> None:
        self.store = store
        self.extractor = extractor
        self.fetch = fetch
        self.progress_cb = progress_cb
        self.state = IDLE
        self.logs: List[str] = []

    def _log(self, msg: str) -> None:
        logger.info(msg)
        self.logs.append(msg)

    def run(self) -> RunReport:
        self.state = RUNNING
        self.logs = []
        updated: List[str] = []

        try:
            games = self.store.load()
            total = len(games)

            for idx, game in enumerate(games, start=1):
                url = game.source_url
                if not url:
                    logger.debug(f"Skipping {game.name}: no usable source URL")
                    continue

                try:
                    if self.progress_cb:
                        self.progress_cb(idx, total, f"Checking ({idx}/{total})\n{game.name}")

                    self._log(f"Checking updates for {game.name}...")
                    content = self.fetch(url)

                    if not content:
                        self._log(f"Failed to fetch content for {game.name}")
                        continue

                    self._log(f"Fetched content for {game.name} ({len(content)} chars), analyzing...")
                    outcome = self.extractor.extract(game.name, content, game.version)

                    if outcome.data is None:
                        self._log(f"Failed to parse data for {game.name}")
                        if outcome.error:
                            self._log(f"Error: {outcome.error}")
                        if outcome.raw:
                            self._log(f"Raw Response (First {RAW_SAMPLE_CHARS} chars): {outcome.raw[:RAW_SAMPLE_CHARS]}...")
                        continue

                    if outcome.error:
                        logger.warning(f"{game.name}: {outcome.error}")

                    decision = decide(game, outcome.data)
                    if decision.changed:
                        games[idx - 1] = decision.record
                        updated.append(game.name)
                        self._log(f"Update found for {game.name}: {decision.record.version}")
                    else:
                        self._log(f"No new update for {game.name} (Current: {game.version})")

                except Exception as e:
                    logger.exception(f"Unexpected error while checking {game.name}")
                    self._log(f"Error while checking {game.name}: {e}")

            if updated:
                self.store.save(games)
                self._log(f"Saved updates for: {', '.join(updated)}")
            else:
                self._log("No updates found.")

        except Exception as e:
            self.state = FAILED
            logger.exception("Update run failed")
            return RunReport(success=False, logs=list(self.logs), error=str(e) or "Internal Server Error")

        self.state = COMPLETED
        if self.progress_cb:
            try:
                self.progress_cb(total, total, f"Done ({total}/{total}), {len(updated)} updated")
            except Exception:
                logger.exception("Progress callback failed after the run")

        return RunReport(success=True, updated=updated, logs=list(self.logs), timestamp=now_iso())


def run_update_check(
    *,
    store: CatalogStore,
    extractor: UpdateExtractor,
    fetch: FetchFn = fetch_page_text,
    progress_cb: Optional[ProgressCB] = None,
) -> RunReport:
    return UpdatePipeline(store=store, extractor=extractor, fetch=fetch, progress_cb=progress_cb).run()
