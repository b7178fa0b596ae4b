"""
Regex detection with an LLM second opinion.

Flow per call:
  ┌──────────┐
  │  Input   │
  └────┬─────┘
       │
  ┌────▼─────┐
  │  Regex   │   ← deterministic baseline, always computed
  └────┬─────┘
       │
  ┌────▼─────┐
  │   LLM    │   ← judges the baseline, may supply corrected matches
  │ Validate │
  └────┬─────┘
       │
  ┌────▼─────┐
  │  Merge   │   ← corrected matches REPLACE the baseline (never merged)
  └──────────┘

The baseline is always reported alongside the adjusted result, so callers
can see exactly what the LLM changed.
"""

from __future__ import annotations

import httpx

from .defaults import DefaultInstance
from .models import DetectionKind, ValidatedOutcome, ValidatorConfig
from .patterns import contains_variant, count_variants, find_variants, is_exact_variant
from .validator import LLMValidator


def _fold(value: str) -> str:
    return value.strip().casefold()


class ValidatedNameDetector:
    """Runs the regex detectors and lets the LLM correct them.

    Usage:
        detector = ValidatedNameDetector(ValidatorConfig(api_key="sk-..."))
        outcome = await detector.find_kris("Chris met Christian")
        outcome.result            # possibly corrected
        outcome.baseline_result   # regex-only answer
        outcome.judgment          # the LLM's verdict
    """

    def __init__(
        self,
        config: ValidatorConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.validator = LLMValidator(config, transport=transport)

    async def is_kris(self, text: str) -> ValidatedOutcome[bool]:
        """Validated containment check."""
        baseline = contains_variant(text)
        judgment = await self.validator.validate_boolean(
            text, baseline, DetectionKind.IS_KRIS
        )

        result = baseline
        if not judgment.is_valid and judgment.corrected_matches is not None:
            result = len(judgment.corrected_matches) > 0

        return ValidatedOutcome[bool](
            result=result, judgment=judgment, baseline_result=baseline
        )

    async def is_exactly_kris(self, text: str) -> ValidatedOutcome[bool]:
        """Validated exact check.

        A correction only counts as "exact" when it is a single name equal to
        the whole input, ignoring case and surrounding whitespace.
        """
        baseline = is_exact_variant(text)
        judgment = await self.validator.validate_boolean(
            text, baseline, DetectionKind.IS_EXACTLY_KRIS
        )

        result = baseline
        corrected = judgment.corrected_matches
        if not judgment.is_valid and corrected is not None:
            result = (
                isinstance(text, str)
                and len(corrected) == 1
                and _fold(corrected[0]) == _fold(text)
            )

        return ValidatedOutcome[bool](
            result=result, judgment=judgment, baseline_result=baseline
        )

    async def find_kris(self, text: str) -> ValidatedOutcome[list[str]]:
        """Validated find; a correction is taken verbatim, in its own order."""
        baseline = find_variants(text)
        judgment = await self.validator.validate_detection(
            text, baseline, DetectionKind.FIND_KRIS
        )

        result = baseline
        if not judgment.is_valid and judgment.corrected_matches is not None:
            result = list(judgment.corrected_matches)

        return ValidatedOutcome[list[str]](
            result=result, judgment=judgment, baseline_result=baseline
        )

    async def count_kris(self, text: str) -> ValidatedOutcome[int]:
        """Validated count. Reuses find_kris's single LLM round trip."""
        found = await self.find_kris(text)
        return ValidatedOutcome[int](
            result=len(found.result),
            judgment=found.judgment,
            baseline_result=count_variants(text),
        )


def create_validated_detector(
    config: ValidatorConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ValidatedNameDetector:
    """Create a new validated detector with the given configuration."""
    return ValidatedNameDetector(config, transport=transport)


# ─── Default-instance convenience functions ─────────────────────────

default_validated_detector: DefaultInstance[ValidatedNameDetector] = DefaultInstance(
    ValidatedNameDetector
)


async def is_kris_validated(text: str) -> ValidatedOutcome[bool]:
    return await default_validated_detector.get().is_kris(text)


async def is_exactly_kris_validated(text: str) -> ValidatedOutcome[bool]:
    return await default_validated_detector.get().is_exactly_kris(text)


async def find_kris_validated(text: str) -> ValidatedOutcome[list[str]]:
    return await default_validated_detector.get().find_kris(text)


async def count_kris_validated(text: str) -> ValidatedOutcome[int]:
    return await default_validated_detector.get().count_kris(text)
