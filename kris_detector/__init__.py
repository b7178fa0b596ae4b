"""
Kris Detector — spots variations of the name Chris/Kris in text.

Architecture: Regex baseline → optional LLM validation, or AI-first detection
Philosophy:  Regex is the cheap, deterministic answer. The LLM may overrule it,
             but a flaky LLM never breaks the regex answer.
"""

from .ai_detector import (
    AINameDetector,
    count_kris_ai,
    create_ai_detector,
    default_ai_detector,
    find_kris_ai,
    is_exactly_kris_ai,
    is_kris_ai,
)
from .exceptions import (
    ConfigurationError,
    DetectionError,
    KrisDetectorError,
    TransportError,
    ValidationError,
)
from .models import (
    DetectionKind,
    DetectionOutcome,
    ValidatedOutcome,
    ValidationJudgment,
    ValidatorConfig,
)
from .patterns import (
    EXACT_REGEX,
    REGEX,
    contains_variant,
    count_kris,
    count_variants,
    find_kris,
    find_variants,
    is_exact_variant,
    is_exactly_kris,
    is_kris,
)
from .validated import (
    ValidatedNameDetector,
    count_kris_validated,
    create_validated_detector,
    default_validated_detector,
    find_kris_validated,
    is_exactly_kris_validated,
    is_kris_validated,
)
from .validator import LLMValidator, create_validator

__version__ = "1.0.0"

# "Chris" spellings of the pattern functions.
is_chris = is_kris
is_exactly_chris = is_exactly_kris
find_chris = find_kris
count_chris = count_kris


def reset_default_detectors() -> None:
    """Drop the process-wide default detectors (mainly for tests)."""
    default_validated_detector.reset()
    default_ai_detector.reset()
