# patch_tracker/storage/catalog.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from loguru import logger

from ..errors import StoreFailure
from ..models import Source, TrackedGame

DEFAULT_CATALOG: tuple[TrackedGame, ...] = (
    TrackedGame(
        name="Fortnite",
        accent_color="blue",
        version="Checking...",
        last_updated="Pending",
        description="Fetching latest data...",
        sources=(Source("fortnite.com", "https://www.fortnite.com/news"),),
    ),
    TrackedGame(
        name="Valorant",
        accent_color="red",
        version="11.10",
        last_updated="November 11, 2025",
        description="The absolute latest current live game client version for Valorant is Patch 11.10...",
        sources=(Source("playvalorant.com", "https://playvalorant.com/en-us/news/"),),
    ),
    TrackedGame(
        name="Rust",
        accent_color="orange",
        version="Checking...",
        last_updated="Pending",
        description="Fetching latest data...",
        sources=(Source("rust.facepunch.com", "https://rust.facepunch.com/news/"),),
    ),
    TrackedGame(
        name="Apex Legends",
        accent_color="red",
        version="23.1.0",
        last_updated="November 21, 2025",
        description="Apex Legends latest patch introduces the new 'Ignite' event...",
        sources=(Source("ea.com", "https://www.ea.com/games/apex-legends/news"),),
    ),
)


def _write_json_atomic(path: Path, data: list) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    tmp.replace(path)


class CatalogStore:
    """
    Whole-file JSON catalog of tracked games.

    No per-record API: callers load everything, mutate in memory and
    save everything.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> list[TrackedGame]:
        if not self.path.exists():
            logger.info(f"No catalog at {self.path}, seeding defaults")
            games = list(DEFAULT_CATALOG)
            self.save(games)
            return games

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreFailure(f"Cannot read catalog {self.path}: {e}") from e

        if not isinstance(raw, list):
            raise StoreFailure(f"Catalog {self.path} is not a JSON list")

        try:
            games = [TrackedGame.from_dict(item) for item in raw]
        except (KeyError, TypeError, AttributeError) as e:
            raise StoreFailure(f"Malformed record in catalog {self.path}: {e!r}") from e

        names = [g.name for g in games]
        if len(names) != len(set(names)):
            raise StoreFailure(f"Duplicate game names in catalog {self.path}")

        return games

    def save(self, games: Iterable[TrackedGame]) -> None:
        data = [g.to_dict() for g in games]
        try:
            _write_json_atomic(self.path, data)
        except OSError as e:
            raise StoreFailure(f"Cannot write catalog {self.path}: {e}") from e
        logger.debug(f"Wrote {len(data)} games to {self.path}")
