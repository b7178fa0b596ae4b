"""
AI-first name detection — the LLM is the detector, not a reviewer.

No regex runs here. The LLM is asked directly for the Chris/Kris names in
the input and answers with a JSON list plus confidence and reasoning.
A malformed answer falls back to "no names, confidence 0.5" rather than
raising; only configuration and transport problems are errors.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .defaults import DefaultInstance
from .exceptions import ConfigurationError, DetectionError
from .models import DetectionKind, DetectionOutcome, ValidatorConfig
from .validator import (
    INVALID_NAMES_BLOCK,
    VALID_VARIANTS_BLOCK,
    LLMValidator,
    describe_kind,
    extract_json_object,
)

logger = logging.getLogger(__name__)

DETECTION_DESCRIPTIONS: dict[str, str] = {
    DetectionKind.IS_KRIS.value: "Detect if input contains ANY variation of Chris/Kris names",
    DetectionKind.IS_EXACTLY_KRIS.value: "Detect if input is EXACTLY a Chris/Kris name (no extra text)",
    DetectionKind.FIND_KRIS.value: "Find ALL Chris/Kris names in the input text",
    DetectionKind.COUNT_KRIS.value: "Count how many Chris/Kris names appear in the input",
}


class AINameDetector:
    """Delegates detection entirely to the LLM.

    is_kris and count_kris are derived from a single find_kris call;
    is_exactly_kris uses its own dedicated prompt.
    """

    def __init__(
        self,
        config: ValidatorConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.validator = LLMValidator(config, transport=transport)

    async def is_kris(self, text: str) -> DetectionOutcome[bool]:
        found = await self.find_kris(text)
        return DetectionOutcome[bool](
            result=len(found.result) > 0,
            confidence=found.confidence,
            reasoning=found.reasoning,
        )

    async def is_exactly_kris(self, text: str) -> DetectionOutcome[bool]:
        parsed = await self._detect(text, DetectionKind.IS_EXACTLY_KRIS)
        names = parsed["names"]
        is_exact = (
            isinstance(text, str)
            and len(names) == 1
            and names[0].strip().casefold() == text.strip().casefold()
        )
        return DetectionOutcome[bool](
            result=is_exact,
            confidence=parsed["confidence"],
            reasoning=parsed["reasoning"],
        )

    async def find_kris(self, text: str) -> DetectionOutcome[list[str]]:
        parsed = await self._detect(text, DetectionKind.FIND_KRIS)
        return DetectionOutcome[list[str]](
            result=parsed["names"],
            confidence=parsed["confidence"],
            reasoning=parsed["reasoning"],
        )

    async def count_kris(self, text: str) -> DetectionOutcome[int]:
        found = await self.find_kris(text)
        return DetectionOutcome[int](
            result=len(found.result),
            confidence=found.confidence,
            reasoning=found.reasoning,
        )

    # ─── Internals ───────────────────────────────────────────────────

    async def _detect(self, text: str, kind: DetectionKind) -> dict[str, Any]:
        prompt = self.build_detection_prompt(text, kind)
        try:
            response = await self.validator.make_api_call(prompt)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error("AI detection failed: %s", e)
            raise DetectionError(
                f"AI detection failed: {e}",
                details={"cause": str(e), "kind": kind.value},
            ) from e
        return self.parse_detection_response(response)

    def build_detection_prompt(self, text: str, kind: DetectionKind | str) -> str:
        kind_name = kind.value if isinstance(kind, DetectionKind) else str(kind)
        description = describe_kind(kind, DETECTION_DESCRIPTIONS)

        return f"""You are a name detection AI that identifies variations of "Chris" or "Kris" names in text.

Function: {kind_name}
Description: {description}

Input text: "{text}"

Valid Chris/Kris name variations include:
{VALID_VARIANTS_BLOCK}

Invalid matches (do NOT include):
{INVALID_NAMES_BLOCK}
- Partial matches within other words (like "Christmas" containing "Chris")

Respond with a JSON object containing:
{{
  "names": [array of detected Chris/Kris names],
  "confidence": number (0-1),
  "reasoning": "brief explanation of your detection"
}}"""

    @staticmethod
    def parse_detection_response(response: str) -> dict[str, Any]:
        """Extract names/confidence/reasoning from free LLM text; never raises.

        Confidence is left raw here; DetectionOutcome clamps it.
        """
        try:
            parsed = extract_json_object(response)
        except ValueError as e:
            logger.warning("Could not parse AI response: %s", e)
            return {
                "names": [],
                "confidence": 0.5,
                "reasoning": f"Could not parse AI response: {e}",
            }

        names = parsed.get("names")
        return {
            "names": [str(name) for name in names] if isinstance(names, list) else [],
            "confidence": parsed.get("confidence"),
            "reasoning": str(parsed.get("reasoning") or "No reasoning provided"),
        }


def create_ai_detector(
    config: ValidatorConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AINameDetector:
    """Create a new AI name detector with the given configuration."""
    return AINameDetector(config, transport=transport)


# ─── Default-instance convenience functions ─────────────────────────

default_ai_detector: DefaultInstance[AINameDetector] = DefaultInstance(AINameDetector)


async def is_kris_ai(text: str) -> DetectionOutcome[bool]:
    return await default_ai_detector.get().is_kris(text)


async def is_exactly_kris_ai(text: str) -> DetectionOutcome[bool]:
    return await default_ai_detector.get().is_exactly_kris(text)


async def find_kris_ai(text: str) -> DetectionOutcome[list[str]]:
    return await default_ai_detector.get().find_kris(text)


async def count_kris_ai(text: str) -> DetectionOutcome[int]:
    return await default_ai_detector.get().count_kris(text)
