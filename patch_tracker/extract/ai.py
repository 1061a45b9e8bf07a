# patch_tracker/extract/ai.py
"""
OpenAI-backed extraction strategy.

The model reads the sanitized news-page text and answers with a single JSON
object {version, date, summary, isNewer}. The answer is validated strictly;
anything off-shape raises ExtractionServiceFailure so the fallback chain can
take over.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Any, Optional

from loguru import logger
from openai import OpenAI

from patch_tracker.config import EXTRACT_MAX_CHARS, EXTRACT_TIMEOUT_S, OPENAI_MODEL
from patch_tracker.errors import ExtractionServiceFailure
from patch_tracker.extract.base import DATED_UPDATE_RX, Clock, find_version_token
from patch_tracker.models import ExtractionResult, is_placeholder
from patch_tracker.utils import pretty_date, pretty_date_to_date, truncate

RESULT_FIELDS = {"version": str, "date": str, "summary": str, "isNewer": bool}


def build_system_prompt(today: str, last_known_version: str) -> str:
    return f"""You are an expert game update tracker. Your goal is to identify the LATEST patch notes or update information available in the provided text.

Context:
- Current Date: {today}
- Last Known Version/Status: "{last_known_version}"

Instructions:
1. Search the text for markers like "Patch Notes", "Update", "Hotfix", "Version", "Release", "Latest Update".
2. CRITICAL FILTERING STEP: identify the most recent update that has ALREADY BEEN RELEASED.
   - Compare every date against the Current Date ({today}).
   - DISCARD entries labeled "Upcoming", "Future", "Leaks" or "Planned".
   - DISCARD entries dated after the Current Date.
   - From the remaining released entries, select the one with the highest version number.
3. Extract the specific version number of that entry.
   - Look for patterns like "27.0.2", "v32.10", "1.5.3", "Patch 11.2".
   - If the title says "Apex Legends: Latest Update 27.0.2", the version is "27.0.2".
   - If the title says "Update 1.5", the version is "1.5".
   - Never return generic titles like "Season Update", "November Update" or "Matchmaking Test" as the version.
   - ONLY if no numerical version (X.X or X.X.X) appears anywhere in the selected entry, fall back to "Update [Month] [Day]".
4. Extract the release date (e.g. "November 19, 2025").
5. Write a short 1-2 sentence summary of the key changes.
6. Compare the found update with the Last Known Version:
   - If the Last Known Version is "Checking..." or "Pending", set "isNewer" to true.
   - If the extracted version/date is different from AND newer than the known one, set "isNewer" to true.
   - Otherwise set "isNewer" to false.

Output format:
Return ONLY a raw JSON object (no markdown, no prose) with exactly these keys:
{{
  "version": "string (e.g. '27.0.2', 'v32.11')",
  "date": "string (e.g. 'November 19, 2025')",
  "summary": "string (e.g. 'This update introduces the new map and weapon balancing.')",
  "isNewer": boolean
}}"""


def build_user_prompt(game_name: str, text: str, max_chars: int = EXTRACT_MAX_CHARS) -> str:
    return (
        f"Here is the content scraped from the {game_name} news page. "
        f"Find the latest numerical version:\n\n{truncate(text, max_chars)}"
    )


def parse_result(raw: str, *, last_known_version: str, today: date) -> ExtractionResult:
    """
    Validate a raw model answer and turn it into an ExtractionResult.

    Raises ExtractionServiceFailure (carrying `raw`) on any deviation from
    the expected shape.
    """
    if not raw or not raw.strip():
        raise ExtractionServiceFailure("Empty response from extraction service", raw=raw)

    try:
        data: Any = json.loads(raw)
    except ValueError as e:
        raise ExtractionServiceFailure(f"Invalid JSON from extraction service: {e}", raw=raw) from e

    if not isinstance(data, dict):
        raise ExtractionServiceFailure("Extraction response is not a JSON object", raw=raw)

    if set(data) != set(RESULT_FIELDS):
        raise ExtractionServiceFailure(
            f"Extraction response has keys {sorted(data)}, expected {sorted(RESULT_FIELDS)}",
            raw=raw,
        )

    for key, typ in RESULT_FIELDS.items():
        if not isinstance(data[key], typ):
            raise ExtractionServiceFailure(f"Extraction field {key!r} is not a {typ.__name__}", raw=raw)

    version = _normalize_version_label(data["version"], raw=raw)

    released = pretty_date_to_date(data["date"])
    if released is not None and released > today:
        raise ExtractionServiceFailure(
            f"Extracted update is dated {data['date']}, after {pretty_date(today)}",
            raw=raw,
        )

    is_newer = bool(data["isNewer"]) or is_placeholder(last_known_version)

    return ExtractionResult(
        version=version,
        date=data["date"].strip(),
        summary=data["summary"].strip(),
        is_newer=is_newer,
    )


def _normalize_version_label(label: str, *, raw: str) -> str:
    label = (label or "").strip()
    if not label:
        raise ExtractionServiceFailure("Extraction returned an empty version", raw=raw)

    # "Apex Legends: Latest Update 27.0.2" -> "27.0.2", "Patch 11.2" -> "11.2"
    token = find_version_token(label)
    if token:
        return token

    if DATED_UPDATE_RX.match(label):
        return label

    raise ExtractionServiceFailure(f"Extraction returned a generic version label: {label!r}", raw=raw)


class OpenAIExtractor:
    name = "openai"

    def __init__(
        self,
        *,
        client: Optional[Any] = None,
        api_key: str = "",
        model: str = OPENAI_MODEL,
        timeout: float = EXTRACT_TIMEOUT_S,
        max_chars: int = EXTRACT_MAX_CHARS,
        clock: Clock = date.today,
    ) -> None:
        """
        Args:
            client: Pre-built OpenAI-compatible client (tests pass a fake)
            api_key: Used to build a client when none is given
            model: Chat model name
            timeout: Per-call timeout in seconds; no retries
            max_chars: Page text cap for the request
            clock: Source of "today" for the prompt and the future-date check
        """
        if client is None:
            client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.model = model
        self.max_chars = max_chars
        self.clock = clock

    def extract(self, game_name: str, text: str, last_known_version: str) -> ExtractionResult:
        today = self.clock()

        logger.debug(f"Extracting {game_name} update with {self.model}, {min(len(text), self.max_chars)} chars")

        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(pretty_date(today), last_known_version)},
                    {"role": "user", "content": build_user_prompt(game_name, text, self.max_chars)},
                ],
                response_format={"type": "json_object"},
            )
            raw = completion.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"Extraction call failed for {game_name}: {e}")
            raise ExtractionServiceFailure(str(e) or type(e).__name__) from e

        return parse_result(raw, last_known_version=last_known_version, today=today)
