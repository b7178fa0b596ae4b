"""
Kris Detector — FastAPI Server
==============================

HTTP access to all three detection families.

Endpoints:
    POST /detect             Regex-only detection (no LLM, no cost)
    POST /detect/validated   Regex detection with an LLM second opinion
    POST /detect/ai          AI-first detection (LLM only)
    GET  /health             Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from kris_detector import __version__
from kris_detector.ai_detector import AINameDetector
from kris_detector.exceptions import ConfigurationError, TransportError
from kris_detector.models import DetectionKind, ValidationJudgment
from kris_detector.patterns import (
    contains_variant,
    count_variants,
    find_variants,
    is_exact_variant,
)
from kris_detector.validated import ValidatedNameDetector

# ─── Load .env if available ──────────────────────────────────────────
try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


# ─── Application Lifespan (pre-build detectors) ─────────────────────

_validated_detector: ValidatedNameDetector | None = None
_ai_detector: AINameDetector | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the detectors (and read OPENAI_API_KEY) on startup."""
    global _validated_detector, _ai_detector  # noqa: PLW0603
    _validated_detector = ValidatedNameDetector()
    _ai_detector = AINameDetector()
    yield
    _validated_detector = None
    _ai_detector = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Kris Detector API",
    description=(
        "Detects variations of the name Chris/Kris in text. "
        "Regex-only, LLM-validated, and AI-first detection modes."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────

DetectionValue = Union[bool, int, list[str]]


class DetectRequest(BaseModel):
    """Request body shared by all /detect endpoints."""

    text: str = Field(
        ...,
        max_length=10_000,
        description="The text to search for Chris/Kris variations.",
        json_schema_extra={"example": "Chris talked to Kris about Christopher's project."},
    )
    kind: DetectionKind = Field(
        default=DetectionKind.FIND_KRIS,
        description="Which detection to run.",
    )


class PatternResponse(BaseModel):
    kind: DetectionKind
    result: DetectionValue


class ValidatedResponse(BaseModel):
    kind: DetectionKind
    result: DetectionValue
    baseline_result: DetectionValue
    judgment: ValidationJudgment


class AIResponse(BaseModel):
    kind: DetectionKind
    result: DetectionValue
    confidence: float
    reasoning: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    llm_configured: bool


# ─── Helpers ─────────────────────────────────────────────────────────

_PATTERN_FUNCTIONS = {
    DetectionKind.IS_KRIS: contains_variant,
    DetectionKind.IS_EXACTLY_KRIS: is_exact_variant,
    DetectionKind.FIND_KRIS: find_variants,
    DetectionKind.COUNT_KRIS: count_variants,
}

_LLM_ERROR_RESPONSES = {
    502: {"description": "The external LLM call failed"},
    503: {"description": "Detector not initialised or no API key configured"},
}


def _get_validated_detector() -> ValidatedNameDetector:
    if _validated_detector is None:
        raise HTTPException(status_code=503, detail="Detector not initialised")
    return _validated_detector


def _get_ai_detector() -> AINameDetector:
    if _ai_detector is None:
        raise HTTPException(status_code=503, detail="Detector not initialised")
    return _ai_detector


def _method_for(detector: ValidatedNameDetector | AINameDetector, kind: DetectionKind):
    """Map a detection kind to the detector's coroutine of the same name."""
    return getattr(detector, kind.value)


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post("/detect", summary="Regex-only detection", tags=["Detection"])
def detect(request: DetectRequest) -> PatternResponse:
    """Run the deterministic regex detector. Never calls the LLM."""
    result = _PATTERN_FUNCTIONS[request.kind](request.text)
    return PatternResponse(kind=request.kind, result=result)


@app.post(
    "/detect/validated",
    summary="Regex detection with LLM validation",
    tags=["Detection"],
    responses=_LLM_ERROR_RESPONSES,
)
async def detect_validated(request: DetectRequest) -> ValidatedResponse:
    """Run the regex detector, then let the LLM confirm or correct it.

    Returns:
    - **result**: the judgment-adjusted answer
    - **baseline_result**: the regex-only answer
    - **judgment**: the LLM's verdict (confidence 0.5 + parse-failure
      reasoning means the LLM answer could not be read)
    """
    detector = _get_validated_detector()
    try:
        outcome = await _method_for(detector, request.kind)(request.text)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except TransportError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ValidatedResponse(
        kind=request.kind,
        result=outcome.result,
        baseline_result=outcome.baseline_result,
        judgment=outcome.judgment,
    )


@app.post(
    "/detect/ai",
    summary="AI-first detection",
    tags=["Detection"],
    responses=_LLM_ERROR_RESPONSES,
)
async def detect_ai(request: DetectRequest) -> AIResponse:
    """Ask the LLM directly, without any regex baseline."""
    detector = _get_ai_detector()
    try:
        outcome = await _method_for(detector, request.kind)(request.text)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except TransportError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return AIResponse(
        kind=request.kind,
        result=outcome.result,
        confidence=outcome.confidence,
        reasoning=outcome.reasoning,
    )


@app.get("/health", summary="Health check", tags=["System"])
def health_check() -> HealthResponse:
    """Returns service status. Reports whether an API key is set, never the key."""
    detector = _get_validated_detector()
    return HealthResponse(
        status="healthy",
        version=__version__,
        llm_configured=bool(detector.validator.config.api_key),
    )
