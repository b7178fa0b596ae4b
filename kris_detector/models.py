"""
Pydantic models shared by every detection layer.

Confidence values coming back from the external judge are untrusted:
every model that carries one clamps it into [0, 1] at the boundary, and
non-numeric values become 0.
"""

from __future__ import annotations

import math
import os
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

T = TypeVar("T")

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_TOKENS = 500
API_KEY_ENV_VAR = "OPENAI_API_KEY"


def coerce_confidence(value: object) -> float:
    """Coerce an LLM-reported confidence into [0, 1].

    Permissive on purpose: numeric strings are parsed, booleans count as
    0/1, and anything else (including NaN) becomes 0 instead of rejecting
    the whole response.
    """
    if isinstance(value, str):
        value = value.strip() or 0
    if not isinstance(value, (bool, int, float, str)):
        return 0.0
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return max(0.0, min(1.0, number))


# ─── Detection Kinds ────────────────────────────────────────────────


class DetectionKind(str, Enum):
    """Which detection function a prompt or judgment refers to."""

    IS_KRIS = "is_kris"  # contains any variant
    IS_EXACTLY_KRIS = "is_exactly_kris"  # input is exactly one variant
    FIND_KRIS = "find_kris"  # all variants, in order
    COUNT_KRIS = "count_kris"  # how many variants


# ─── Configuration ──────────────────────────────────────────────────


class ValidatorConfig(BaseModel):
    """Settings for talking to the external judge.

    The API key falls back to the OPENAI_API_KEY environment variable and is
    kept out of repr() so it never ends up in logs.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", repr=False, validate_default=True)
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    timeout: float = Field(default=DEFAULT_TIMEOUT_MS, description="Milliseconds")
    max_tokens: int = DEFAULT_MAX_TOKENS

    @field_validator("api_key", mode="before")
    @classmethod
    def _api_key_from_env(cls, value: Any) -> Any:
        return value or os.environ.get(API_KEY_ENV_VAR, "")

    @field_validator("model", "endpoint", "timeout", mode="before")
    @classmethod
    def _falsy_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value:
            return value
        return cls.model_fields[info.field_name].default

    @field_validator("temperature", mode="before")
    @classmethod
    def _none_temperature_means_default(cls, value: Any) -> Any:
        # 0 is a legitimate temperature; only a missing value falls back.
        return DEFAULT_TEMPERATURE if value is None else value

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


# ─── Outcomes ───────────────────────────────────────────────────────


class DetectionOutcome(BaseModel, Generic[T]):
    """An AI-first detection answer with the judge's confidence."""

    result: T
    confidence: float
    reasoning: Optional[str] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        return coerce_confidence(value)


class ValidationJudgment(BaseModel):
    """The judge's verdict on a candidate detection.

    corrected_matches, when present, REPLACES the baseline matches outright.
    It is only ever set when is_valid is False.
    """

    is_valid: bool
    confidence: float
    reasoning: str = "No reasoning provided"
    corrected_matches: Optional[list[str]] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        return coerce_confidence(value)


class ValidatedOutcome(BaseModel, Generic[T]):
    """A judgment-adjusted result next to the pattern-only baseline."""

    result: T
    judgment: ValidationJudgment
    baseline_result: T
