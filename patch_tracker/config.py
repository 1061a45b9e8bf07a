# patch_tracker/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


# -----------------------------
# Defaults (CLI / web)
# -----------------------------

DEFAULT_CATALOG_FILE = "data/games.json"
DEFAULT_ENV = "production"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000


# -----------------------------
# Version labels
# -----------------------------

# "No confirmed version yet" sentinels; always treated as stale.
PLACEHOLDER_VERSIONS = ("Checking...", "Pending")

# Source URLs the pipeline never fetches
PLACEHOLDER_URLS = ("", "#")


# -----------------------------
# HTTP / scraping
# -----------------------------

UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)

REQUEST_HEADERS = {
    "User-Agent": UA,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Referer": "https://www.google.com/",
}

FETCH_TIMEOUT_S = 20.0
FETCH_MAX_CHARS = 25_000

# Elements that never carry patch-note content
STRIP_TAGS = ("script", "style", "nav", "footer", "header")


# -----------------------------
# Extraction
# -----------------------------

OPENAI_MODEL = "gpt-4o-mini"
EXTRACT_TIMEOUT_S = 30.0
EXTRACT_MAX_CHARS = 20_000
RAW_SAMPLE_CHARS = 100

FALLBACK_SUMMARY = "Latest update detected automatically (AI unavailable)."


@dataclass(frozen=True)
class Settings:
    catalog_file: Path = Path(DEFAULT_CATALOG_FILE)
    env: str = DEFAULT_ENV
    openai_api_key: str = ""
    openai_model: str = OPENAI_MODEL
    cron_secret: str = ""
    debug: bool = False
    log_file: str = ""

    @property
    def is_development(self) -> bool:
        return self.env.strip().lower() == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        A `.env` file in the working directory is loaded first; real
        environment variables win over it.
        """
        load_dotenv(find_dotenv(usecwd=True))

        return cls(
            catalog_file=Path(os.getenv("PATCH_TRACKER_CATALOG", DEFAULT_CATALOG_FILE)).expanduser(),
            env=os.getenv("PATCH_TRACKER_ENV", DEFAULT_ENV),
            openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
            openai_model=os.getenv("OPENAI_MODEL", OPENAI_MODEL).strip() or OPENAI_MODEL,
            cron_secret=os.getenv("CRON_SECRET", "").strip(),
            debug=os.getenv("PATCH_TRACKER_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"},
            log_file=os.getenv("PATCH_TRACKER_LOG_FILE", "").strip(),
        )
