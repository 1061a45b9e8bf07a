# patch_tracker/extract/chain.py
from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger

from patch_tracker.config import Settings
from patch_tracker.errors import ConfigError, ExtractionError
from patch_tracker.extract.ai import OpenAIExtractor
from patch_tracker.extract.base import TextExtractor
from patch_tracker.extract.regex import RegexExtractor
from patch_tracker.models import ExtractionOutcome


class FallbackChain:
    """
    Try extraction strategies in order; first success wins.

    Every strategy receives the same untruncated text; each applies its own
    limits.
    """

    def __init__(self, strategies: Sequence[TextExtractor]) -> None:
        if not strategies:
            raise ValueError("FallbackChain needs at least one strategy")
        self.strategies = list(strategies)

    def extract(self, game_name: str, text: str, last_known_version: str) -> ExtractionOutcome:
        first_error: Optional[ExtractionError] = None

        for strategy in self.strategies:
            try:
                data = strategy.extract(game_name, text, last_known_version)
            except ExtractionError as e:
                logger.warning(f"{strategy.name} extraction failed for {game_name}: {e}")
                if first_error is None:
                    first_error = e
                continue

            if first_error is None:
                return ExtractionOutcome(data=data)

            logger.info(f"Used {strategy.name} fallback for {game_name}")
            return ExtractionOutcome(
                data=data,
                error=f"{self.strategies[0].name} failed, used {strategy.name} fallback. Error: {first_error}",
                raw=first_error.raw,
            )

        if first_error is None:
            raise RuntimeError("Fallback chain has no strategies to run")
        return ExtractionOutcome(data=None, error=str(first_error), raw=first_error.raw)


def build_update_extractor(settings: Settings) -> FallbackChain:
    if not settings.openai_api_key:
        raise ConfigError("Missing OPENAI_API_KEY")

    return FallbackChain(
        [
            OpenAIExtractor(api_key=settings.openai_api_key, model=settings.openai_model),
            RegexExtractor(),
        ]
    )
