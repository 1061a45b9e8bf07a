from __future__ import annotations

from dataclasses import dataclass, field

from patch_tracker.config import FETCH_MAX_CHARS, FETCH_TIMEOUT_S, REQUEST_HEADERS, STRIP_TAGS


def _default_headers() -> dict[str, str]:
    return dict(REQUEST_HEADERS)


@dataclass(frozen=True)
class FetchPolicy:
    # Identity: browser-like signature to get past trivial bot blocking
    headers: dict[str, str] = field(default_factory=_default_headers)
    browser: str = "chrome"
    platform: str = "windows"

    # Reliability (single attempt, no retries)
    timeout_s: float = FETCH_TIMEOUT_S

    # Content limits
    max_chars: int = FETCH_MAX_CHARS
    strip_tags: tuple[str, ...] = STRIP_TAGS
    accept_mime_prefixes: tuple[str, ...] = ("text/", "application/xhtml", "application/xml")

    def mime_allowed(self, content_type: str) -> bool:
        # Servers that send no Content-Type get the benefit of the doubt
        ct = (content_type or "").split(";", 1)[0].strip().lower()
        if not ct:
            return True
        return any(ct.startswith(p) for p in self.accept_mime_prefixes)
