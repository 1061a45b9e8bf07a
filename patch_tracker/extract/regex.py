# patch_tracker/extract/regex.py
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from loguru import logger

from patch_tracker.config import FALLBACK_SUMMARY
from patch_tracker.errors import ExtractionNotFound
from patch_tracker.extract.base import Clock
from patch_tracker.models import ExtractionResult
from patch_tracker.utils import pretty_date, pretty_date_to_date

VERSION_RX = re.compile(r"v?(\d+\.\d+(\.\d+)?)|Patch\s+(\d+\.\d+(?:\.\d+)?)", re.IGNORECASE)
DATE_RX = re.compile(
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{1,2},?\s+\d{4}",
    re.IGNORECASE,
)


class RegexExtractor:
    """
    Deterministic fallback: first released version token and its date.

    A token counts as unreleased when the nearest month-name date after it
    lies in the future; such tokens are skipped.

    Novelty is plain string inequality against the last known version,
    weaker than what the AI strategy is asked to do. That is accepted for
    degraded mode.
    """

    name = "regex"

    def __init__(self, *, clock: Clock = date.today) -> None:
        self.clock = clock

    def extract(self, game_name: str, text: str, last_known_version: str) -> ExtractionResult:
        text = text or ""
        today = self.clock()

        version: Optional[str] = None
        found_date: Optional[str] = None
        skipped = 0

        for version_match in VERSION_RX.finditer(text):
            date_match = DATE_RX.search(text, version_match.end())
            released = pretty_date_to_date(date_match.group(0)) if date_match else None
            if released is not None and released > today:
                skipped += 1
                continue

            # "Patch 11.2" -> "11.2"; "v32.10" stays as matched
            version = version_match.group(3) or version_match.group(0)
            found_date = date_match.group(0) if date_match else None
            break

        if version is None:
            if skipped:
                raise ExtractionNotFound(f"Only future-dated version tokens found in {game_name} page text")
            raise ExtractionNotFound(f"No version token found in {game_name} page text")

        found_date = found_date or pretty_date(today)

        logger.debug(f"Regex fallback for {game_name}: version={version!r} date={found_date!r} skipped={skipped}")

        return ExtractionResult(
            version=version,
            date=found_date,
            summary=FALLBACK_SUMMARY,
            is_newer=version != last_known_version,
        )
