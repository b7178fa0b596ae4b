"""
Exception hierarchy for name detection.

Only configuration and transport problems are errors. A malformed answer
from the external judge is NOT an error: it degrades to a low-confidence
fallback judgment (see validator.py) so pattern-matching baselines keep
working when the judge is flaky.
"""

from __future__ import annotations


class KrisDetectorError(Exception):
    """Base exception for all detection failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(KrisDetectorError):
    """No credential configured. Raised before any transport attempt."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("CONFIGURATION_MISSING", message, details)


class TransportError(KrisDetectorError):
    """Network failure, timeout, or non-2xx status from the external judge."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        code: str = "TRANSPORT_FAILED",
    ):
        super().__init__(code, message, details)


class ValidationError(TransportError):
    """The validation round trip to the external judge failed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details, code="LLM_VALIDATION_FAILED")


class DetectionError(TransportError):
    """The AI-first detection round trip to the external judge failed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details, code="AI_DETECTION_FAILED")
