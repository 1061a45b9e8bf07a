# patch_tracker/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .config import PLACEHOLDER_URLS, PLACEHOLDER_VERSIONS


def is_placeholder(version: str) -> bool:
    return (version or "").strip() in PLACEHOLDER_VERSIONS


@dataclass(frozen=True)
class Source:
    name: str
    url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Source":
        return cls(name=str(data.get("name") or ""), url=str(data.get("url") or ""))

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True)
class TrackedGame:
    """
    One catalog entry.

    Mirrors the objects stored in games.json (camelCase keys on disk,
    snake_case attributes here). `name` is the unique key.
    """
    name: str
    accent_color: str
    version: str
    last_updated: str
    description: str
    sources: tuple[Source, ...] = ()

    @property
    def has_placeholder_version(self) -> bool:
        return is_placeholder(self.version)

    @property
    def source_url(self) -> str:
        """
        URL of the first source, or "" when there is nothing to fetch.

        Later sources are kept in the catalog but never consulted.
        """
        if not self.sources:
            return ""
        url = (self.sources[0].url or "").strip()
        return "" if url in PLACEHOLDER_URLS else url

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackedGame":
        return cls(
            name=str(data["name"]),
            accent_color=str(data.get("accentColor") or ""),
            version=str(data.get("version") or ""),
            last_updated=str(data.get("lastUpdated") or ""),
            description=str(data.get("description") or ""),
            sources=tuple(Source.from_dict(s) for s in (data.get("sources") or [])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "accentColor": self.accent_color,
            "version": self.version,
            "lastUpdated": self.last_updated,
            "description": self.description,
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass(frozen=True)
class ExtractionResult:
    version: str
    date: str
    summary: str
    is_newer: bool


@dataclass(frozen=True)
class ExtractionOutcome:
    """
    What the fallback chain hands back to the pipeline.

    data is None when every strategy failed. error carries the message of
    the first failure (also set when a fallback produced `data`), raw the
    primary extraction response when one was received.
    """
    data: Optional[ExtractionResult]
    error: str = ""
    raw: str = ""


@dataclass(frozen=True)
class GateDecision:
    record: TrackedGame
    changed: bool


@dataclass
class RunReport:
    success: bool
    updated: list[str] = field(default_factory=list)
    logs: list[str] = field(default_factory=list)
    timestamp: str = ""
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "updated": list(self.updated),
                "logs": list(self.logs),
                "timestamp": self.timestamp,
            }
        return {"success": False, "error": self.error, "logs": list(self.logs)}
