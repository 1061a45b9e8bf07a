# patch_tracker/scrape/http.py
from __future__ import annotations

from typing import Any, Optional

import cloudscraper
from bs4 import BeautifulSoup
from loguru import logger

from patch_tracker.errors import FetchFailure
from patch_tracker.scrape.policy import FetchPolicy
from patch_tracker.utils import collapse_whitespace, normalize_url, truncate

DEFAULT_POLICY = FetchPolicy()


def create_session(policy: FetchPolicy = DEFAULT_POLICY) -> Any:
    return cloudscraper.create_scraper(
        browser={"browser": policy.browser, "platform": policy.platform, "mobile": False}
    )


def fetch_html(
    url: str,
    *,
    policy: FetchPolicy = DEFAULT_POLICY,
    session: Optional[Any] = None,
) -> str:
    """
    GET a page and return its HTML.

    Raises FetchFailure on transport errors, non-success status or a
    non-text content type. Single attempt, no retry.
    """
    scraper = session if session is not None else create_session(policy)

    try:
        resp = scraper.get(url, headers=policy.headers, timeout=policy.timeout_s)
        resp.raise_for_status()
    except Exception as e:
        raise FetchFailure(f"Failed to fetch {url}: {e}") from e

    content_type = (getattr(resp, "headers", None) or {}).get("Content-Type", "")
    if not policy.mime_allowed(content_type):
        raise FetchFailure(f"Unsupported content type for {url}: {content_type}")

    return resp.text or ""


def html_to_text(html: str, policy: FetchPolicy = DEFAULT_POLICY) -> str:
    """
    Strip non-content elements and flatten the page body to plain text.

    Whitespace runs collapse to single spaces; the result is capped at
    policy.max_chars.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    for tag in soup.find_all(list(policy.strip_tags)):
        # nested matches go away with their parent
        if not tag.decomposed:
            tag.decompose()

    root = soup.body or soup
    text = collapse_whitespace(root.get_text(" "))
    return truncate(text, policy.max_chars)


def fetch_page_text(
    url: str,
    *,
    policy: FetchPolicy = DEFAULT_POLICY,
    session: Optional[Any] = None,
) -> str:
    """
    Fetch a news page and return its sanitized text.

    Returns "" when no content is available; callers treat that as
    "skip this game", never as data.
    """
    url = normalize_url(url)
    if not url:
        return ""

    try:
        html = fetch_html(url, policy=policy, session=session)
    except FetchFailure as e:
        logger.warning(str(e))
        return ""

    text = html_to_text(html, policy)
    logger.debug(f"Fetched {url}: {len(html)} bytes html, {len(text)} chars text")
    return text
