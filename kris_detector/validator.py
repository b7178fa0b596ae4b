"""
LLM-based validation of name-detection results.

The LLM acts as a second opinion on the regex baseline: it is shown the
input, what was detected, and the canonical valid/invalid spellings, and
answers with a JSON verdict plus an optional corrected match list.

Design:
  - No API key → ConfigurationError before any network call
  - Network failure / timeout / non-2xx → ValidationError (wrapped cause)
  - Unparseable answer → NOT an error: falls back to "trust the baseline"
    (is_valid=True, confidence=0.5) so a flaky judge never blocks callers
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Sequence

import httpx

from .exceptions import ConfigurationError, ValidationError
from .models import DetectionKind, ValidationJudgment, ValidatorConfig

logger = logging.getLogger(__name__)

# First "{" through the last "}", so prose around the JSON object is ignored.
# Known sharp edge: stray braces in surrounding prose widen the span and
# make json.loads fail, which lands on the parse fallback.
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

VALIDATION_DESCRIPTIONS: dict[str, str] = {
    DetectionKind.IS_KRIS.value: "Checks if input contains ANY variation of Chris/Kris names",
    DetectionKind.IS_EXACTLY_KRIS.value: "Checks if input is EXACTLY a Chris/Kris name (no extra text)",
    DetectionKind.FIND_KRIS.value: "Finds ALL Chris/Kris names in the input text",
    DetectionKind.COUNT_KRIS.value: "Counts how many Chris/Kris names appear in the input",
}

VALID_VARIANTS_BLOCK = """\
- Chris, Chriss, Kris, Kriss, Khris
- Christopher, Christoph, Kristopher, Kristoph
- Christofer, Cristofer, Christoffer, Kristoffer"""

INVALID_NAMES_BLOCK = """\
- Christian, Christina, Christmas, Christ
- Kristen, Kristin, Christine, Christen"""


def describe_kind(kind: DetectionKind | str, descriptions: dict[str, str]) -> str:
    """Look up the human description of a detection kind."""
    key = kind.value if isinstance(kind, DetectionKind) else str(kind)
    return descriptions.get(key, "Unknown function")


def extract_json_object(response: str) -> dict[str, Any]:
    """Decode the JSON object embedded somewhere in free LLM text.

    Raises:
        ValueError: if no object is found or it does not decode to a dict.
    """
    match = _JSON_OBJECT.search(response)
    if not match:
        raise ValueError("No JSON found in response")
    try:
        parsed = json.loads(match.group(0))
    except RecursionError:
        raise ValueError("Response JSON is nested too deeply") from None
    if not isinstance(parsed, dict):
        raise ValueError("Response JSON is not an object")
    return parsed


class LLMValidator:
    """Asks an external chat-completions endpoint to judge detections.

    Usage:
        validator = LLMValidator(ValidatorConfig(api_key="sk-..."))
        judgment = await validator.validate_detection(
            "Chris and Kris", ["Chris", "Kris"], DetectionKind.FIND_KRIS
        )

    The instance holds only read-only config; every call opens its own
    HTTP client and nothing is cached.
    """

    def __init__(
        self,
        config: ValidatorConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ValidatorConfig()
        self._transport = transport

    # ─── Public API ──────────────────────────────────────────────────

    async def validate_detection(
        self,
        input_text: str,
        detected_names: Sequence[str],
        kind: DetectionKind | str,
    ) -> ValidationJudgment:
        """Validate a detection result with the LLM.

        Raises:
            ConfigurationError: no API key configured.
            ValidationError: the round trip failed (network, timeout, non-2xx,
                or the request could not be built).
        """
        self._require_api_key()
        prompt = self.build_validation_prompt(input_text, detected_names, kind)

        try:
            response = await self.make_api_call(prompt)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error("LLM validation failed: %s", e)
            raise ValidationError(
                f"LLM validation failed: {e}",
                details={"cause": str(e), "kind": str(kind)},
            ) from e

        return self.parse_validation_response(response)

    async def validate_boolean(
        self,
        input_text: str,
        result: bool,
        kind: DetectionKind | str,
    ) -> ValidationJudgment:
        """Validate a boolean detection: True is presented as [input_text]."""
        detected_names = [input_text] if result else []
        return await self.validate_detection(input_text, detected_names, kind)

    async def make_api_call(self, prompt: str) -> str:
        """POST one user prompt to the endpoint and return the reply text.

        Returns "" when the reply has no choices/message content. A 2xx body
        that is not JSON at all is returned verbatim for the caller's parser.

        Raises:
            ConfigurationError: no API key configured.
            httpx.HTTPError: network failure, timeout, or non-2xx status.
        """
        self._require_api_key()
        logger.info("Calling LLM endpoint (model=%s)", self.config.model)

        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds, transport=self._transport
        ) as client:
            resp = await client.post(
                self.config.endpoint,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.config.api_key}",
                },
                json={
                    "model": self.config.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": self.config.temperature,
                    "max_tokens": self.config.max_tokens,
                },
            )
            resp.raise_for_status()

        try:
            data = resp.json()
        except (ValueError, RecursionError):
            logger.warning("LLM endpoint returned a non-JSON body")
            return resp.text

        logger.info("LLM call succeeded")
        return _first_choice_content(data)

    # ─── Prompt ──────────────────────────────────────────────────────

    def build_validation_prompt(
        self,
        input_text: str,
        detected_names: Sequence[str],
        kind: DetectionKind | str,
    ) -> str:
        kind_name = kind.value if isinstance(kind, DetectionKind) else str(kind)
        description = describe_kind(kind, VALIDATION_DESCRIPTIONS)

        return f"""You are validating the results of a name detection function that identifies variations of "Chris" or "Kris" names.

Function: {kind_name}
Description: {description}

Input text: "{input_text}"
Detected names: {json.dumps(list(detected_names))}

Your task is to determine if the detection result is correct. Consider these variations as valid Chris/Kris names:
{VALID_VARIANTS_BLOCK}

Invalid matches should NOT include:
{INVALID_NAMES_BLOCK}
- Partial matches within other words

Respond with a JSON object containing:
{{
  "isValid": boolean,
  "confidence": number (0-1),
  "reasoning": "brief explanation",
  "correctedResult": [array of correct names if isValid is false, otherwise null]
}}"""

    # ─── Response Parsing ────────────────────────────────────────────

    @staticmethod
    def parse_validation_response(response: str) -> ValidationJudgment:
        """Turn free LLM text into a judgment; never raises."""
        try:
            parsed = extract_json_object(response)
        except ValueError as e:
            logger.warning("Could not parse LLM response, trusting baseline: %s", e)
            return ValidationJudgment(
                is_valid=True,
                confidence=0.5,
                reasoning=f"Could not parse LLM response: {e}",
                corrected_matches=None,
            )

        is_valid = bool(parsed.get("isValid"))
        corrected = parsed.get("correctedResult")
        corrected_matches: Optional[list[str]] = None
        if not is_valid and isinstance(corrected, list):
            corrected_matches = [str(name) for name in corrected]

        return ValidationJudgment(
            is_valid=is_valid,
            confidence=parsed.get("confidence"),
            reasoning=str(parsed.get("reasoning") or "No reasoning provided"),
            corrected_matches=corrected_matches,
        )

    # ─── Helpers ─────────────────────────────────────────────────────

    def _require_api_key(self) -> None:
        if not self.config.api_key:
            raise ConfigurationError(
                "API key is required for LLM validation",
                details={"env_var": "OPENAI_API_KEY"},
            )


def _first_choice_content(data: Any) -> str:
    """data["choices"][0]["message"]["content"], or "" if any step is missing."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def create_validator(
    config: ValidatorConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LLMValidator:
    """Create a new LLM validator with the given configuration."""
    return LLMValidator(config, transport=transport)
