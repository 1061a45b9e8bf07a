from __future__ import annotations

import json
from datetime import date
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Union

import pytest

from patch_tracker.models import Source, TrackedGame

TODAY = date(2026, 10, 18)


class DummyHTTPError(Exception):
    pass


class DummyResponse:
    def __init__(self, text: str = "", status_code: int = 200, content_type: str = "text/html; charset=utf-8") -> None:
        self.text = text
        self.status_code = status_code
        self.headers = {"Content-Type": content_type} if content_type else {}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise DummyHTTPError(f"{self.status_code} Error")


class DummySession:
    """Stands in for a cloudscraper session: url -> response or exception."""

    def __init__(self, responses: Dict[str, Union[DummyResponse, Exception]]) -> None:
        self._responses = responses
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, **kwargs):
        self.calls.append({"url": url, **kwargs})
        resp = self._responses[url]
        if isinstance(resp, Exception):
            raise resp
        return resp


class DummyCompletions:
    def __init__(self, replies: List[Union[str, None, Exception]]) -> None:
        self._replies = iter(replies)
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = next(self._replies)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class DummyOpenAI:
    """Just enough of the OpenAI client surface: client.chat.completions.create()."""

    def __init__(self, *replies: Union[str, None, Exception]) -> None:
        self.completions = DummyCompletions(list(replies))
        self.chat = SimpleNamespace(completions=self.completions)


def result_json(version: str, date_: str, summary: str = "Bug fixes.", is_newer: bool = True, **extra: Any) -> str:
    data = {"version": version, "date": date_, "summary": summary, "isNewer": is_newer}
    data.update(extra)
    return json.dumps(data)


def make_game(
    name: str,
    version: str = "1.0",
    *,
    url: Optional[str] = None,
    last_updated: str = "January 1, 2026",
    description: str = "Old notes.",
) -> TrackedGame:
    slug = name.lower().replace(" ", "-")
    return TrackedGame(
        name=name,
        accent_color="blue",
        version=version,
        last_updated=last_updated,
        description=description,
        sources=(Source(f"{slug}.example", url if url is not None else f"https://{slug}.example/news"),),
    )


@pytest.fixture
def clock():
    return lambda: TODAY
