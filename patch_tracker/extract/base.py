# patch_tracker/extract/base.py
from __future__ import annotations

import re
from datetime import date
from typing import Callable, Optional, Protocol

from patch_tracker.models import ExtractionResult

Clock = Callable[[], date]

# Dotted numeric version token: "27.0.2", "v32.10", "1.5"
VERSION_TOKEN_RX = re.compile(r"\bv?\d+\.\d+(?:\.\d+)*\b", re.IGNORECASE)

# "Update November 19": the only accepted label when no numeric token exists
DATED_UPDATE_RX = re.compile(r"^Update\s+[A-Z][a-z]+\.?\s+\d{1,2}$")


class TextExtractor(Protocol):
    """
    One extraction strategy.

    Returns an ExtractionResult or raises an ExtractionError subclass.
    """

    name: str

    def extract(self, game_name: str, text: str, last_known_version: str) -> ExtractionResult:
        ...


def find_version_token(label: str) -> Optional[str]:
    m = VERSION_TOKEN_RX.search(label or "")
    return m.group(0) if m else None
