# patch_tracker/utils.py
from __future__ import annotations

import re
import sys
from datetime import date, datetime, timezone
from typing import Optional


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """
    Run timestamp, e.g. "2026-10-18T13:41:27.512Z".
    """
    dt = _now_utc()
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def normalize_url(url: str) -> str:
    return (url or "").strip()


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def pretty_date(d: date) -> str:
    """
    date(2026, 10, 8) -> "October 8, 2026"
    """
    return d.strftime("%B %-d, %Y") if sys.platform != "win32" else d.strftime("%B %#d, %Y")


def pretty_date_to_date(s: str) -> Optional[date]:
    """
    Parse month-name dates as they appear on patch-note pages.

    "November 19, 2025", "Nov 19 2025", "Sept 3, 2025" -> date
    Anything else -> None
    """
    s = collapse_whitespace(s).replace(",", "")
    if not s:
        return None

    # "Sept" is common on news pages but unknown to strptime
    s = re.sub(r"^Sept\b", "Sep", s, flags=re.IGNORECASE)

    for fmt in ("%B %d %Y", "%b %d %Y"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def truncate(text: str, limit: int) -> str:
    return (text or "")[:limit]
