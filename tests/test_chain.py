from __future__ import annotations

import pytest
from conftest import DummyOpenAI, result_json

from patch_tracker.config import Settings
from patch_tracker.errors import ConfigError
from patch_tracker.extract.ai import OpenAIExtractor
from patch_tracker.extract.chain import FallbackChain, build_update_extractor
from patch_tracker.extract.regex import RegexExtractor


def _chain(client, clock) -> FallbackChain:
    return FallbackChain([OpenAIExtractor(client=client, clock=clock), RegexExtractor(clock=clock)])


def test_primary_success_has_no_error(clock):
    outcome = _chain(DummyOpenAI(result_json("11.10", "October 7, 2026")), clock).extract("Valorant", "Patch 11.9", "11.9")

    assert outcome.data.version == "11.10"
    assert outcome.error == ""
    assert outcome.raw == ""


def test_service_failure_falls_back_to_regex(clock):
    client = DummyOpenAI(RuntimeError("503 Service Unavailable"))

    outcome = _chain(client, clock).extract("Valorant", "Patch 11.2 — March 3, 2025", "11.1")

    assert outcome.data.version == "11.2"
    assert outcome.data.date == "March 3, 2025"
    assert "used regex fallback" in outcome.error
    assert "503 Service Unavailable" in outcome.error


def test_fallback_sees_untruncated_text(clock):
    client = DummyOpenAI("garbage")
    text = "x " * 15_000 + "Patch 9.9 — May 1, 2026"

    outcome = _chain(client, clock).extract("Game", text, "9.8")

    assert outcome.data.version == "9.9"
    assert outcome.raw == "garbage"


def test_future_dated_answer_does_not_leak_through_the_fallback(clock):
    client = DummyOpenAI(result_json("28.0", "November 3, 2026"))
    page = "Upcoming: Patch 28.0 - November 3, 2026 (planned) Released: Patch 27.0.2 - October 14, 2026"

    outcome = _chain(client, clock).extract("Apex Legends", page, "27.0.1")

    assert outcome.data.version == "27.0.2"
    assert outcome.data.date == "October 14, 2026"
    assert "used regex fallback" in outcome.error
    assert "November 3, 2026" in outcome.error


def test_all_strategies_failing_reports_first_error_and_raw(clock):
    client = DummyOpenAI("I could not find anything useful in this page")

    outcome = _chain(client, clock).extract("Fortnite", "Season Update soon", "Pending")

    assert outcome.data is None
    assert outcome.error.startswith("Invalid JSON")
    assert outcome.raw == "I could not find anything useful in this page"


def test_empty_chain_is_rejected():
    with pytest.raises(ValueError):
        FallbackChain([])


def test_chain_emptied_after_construction_raises(clock):
    chain = _chain(DummyOpenAI(), clock)
    chain.strategies = []

    with pytest.raises(RuntimeError):
        chain.extract("Game", "Patch 1.0", "0.9")


def test_build_update_extractor_requires_api_key():
    with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
        build_update_extractor(Settings(openai_api_key=""))


def test_build_update_extractor_composes_openai_then_regex():
    chain = build_update_extractor(Settings(openai_api_key="sk-test", openai_model="gpt-4o-mini"))

    assert [s.name for s in chain.strategies] == ["openai", "regex"]
