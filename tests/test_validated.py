"""
Tests for the regex + LLM-validation detector and its default instance.
"""

from __future__ import annotations

import pytest

import kris_detector
from kris_detector.exceptions import ConfigurationError, ValidationError
from kris_detector.models import ValidatorConfig
from kris_detector.validated import (
    ValidatedNameDetector,
    count_kris_validated,
    create_validated_detector,
    default_validated_detector,
    find_kris_validated,
    is_kris_validated,
)

CONFIG = ValidatorConfig(api_key="test-key")

AGREE = {"isValid": True, "confidence": 0.9, "reasoning": "Looks right", "correctedResult": None}


def _disagree(corrected, confidence=0.95):
    return {
        "isValid": False,
        "confidence": confidence,
        "reasoning": "Baseline was wrong",
        "correctedResult": corrected,
    }


def _detector(fake) -> ValidatedNameDetector:
    return ValidatedNameDetector(CONFIG, transport=fake.transport)


class TestIsKris:
    async def test_agreement_keeps_baseline(self, fake_llm):
        outcome = await _detector(fake_llm(AGREE)).is_kris("Hello Chris")
        assert outcome.result is True
        assert outcome.baseline_result is True
        assert outcome.judgment.is_valid is True

    async def test_empty_correction_flips_to_false(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree([]))).is_kris("Chris")
        assert outcome.result is False
        assert outcome.baseline_result is True

    async def test_non_empty_correction_flips_to_true(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree(["Krys"]))).is_kris("Krys")
        assert outcome.result is True
        assert outcome.baseline_result is False

    async def test_invalid_without_correction_keeps_baseline(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree(None))).is_kris("Chris")
        assert outcome.result is True

    async def test_baseline_is_sent_as_candidates(self, fake_llm):
        fake = fake_llm(AGREE)
        await _detector(fake).is_kris("Christmas")
        assert "Detected names: []" in fake.prompts[0]


class TestIsExactlyKris:
    async def test_agreement_keeps_baseline(self, fake_llm):
        outcome = await _detector(fake_llm(AGREE)).is_exactly_kris("Chris")
        assert outcome.result is True

    async def test_single_matching_correction_is_exact(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree([" chris "]))).is_exactly_kris("Chris ")
        assert outcome.baseline_result is False
        assert outcome.result is True

    async def test_correction_with_other_name_is_not_exact(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree(["Kris"]))).is_exactly_kris("Chris")
        assert outcome.result is False

    async def test_correction_with_two_names_is_not_exact(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree(["Chris", "Chris"]))).is_exactly_kris("Chris")
        assert outcome.result is False

    @pytest.mark.parametrize("value", [None, 123, ["Chris"]])
    async def test_non_text_input_is_not_exact(self, fake_llm, value):
        outcome = await _detector(fake_llm(_disagree([str(value)]))).is_exactly_kris(value)
        assert outcome.baseline_result is False
        assert outcome.result is False


class TestFindKris:
    async def test_agreement_keeps_baseline(self, fake_llm):
        outcome = await _detector(fake_llm(AGREE)).find_kris("Chris and Kris")
        assert outcome.result == ["Chris", "Kris"]
        assert outcome.baseline_result == ["Chris", "Kris"]

    async def test_correction_replaces_baseline_verbatim(self, fake_llm):
        corrected = ["Kris", "Chris", "Krys"]
        outcome = await _detector(fake_llm(_disagree(corrected))).find_kris("Chris and Kris")
        assert outcome.result == corrected
        assert outcome.baseline_result == ["Chris", "Kris"]

    async def test_correction_does_not_merge(self, fake_llm):
        outcome = await _detector(fake_llm(_disagree([]))).find_kris("Chris and Kris")
        assert outcome.result == []

    async def test_parse_fallback_trusts_baseline(self, fake_llm):
        outcome = await _detector(fake_llm("the model rambled")).find_kris("Chris and Kris")
        assert outcome.result == ["Chris", "Kris"]
        assert outcome.judgment.confidence == 0.5
        assert outcome.judgment.reasoning.startswith("Could not parse LLM response")


class TestCountKris:
    async def test_count_uses_single_round_trip(self, fake_llm):
        fake = fake_llm(_disagree(["Chris"]))
        outcome = await _detector(fake).count_kris("Chris and Kris and Christopher")
        assert outcome.result == 1
        assert outcome.baseline_result == 3
        assert outcome.judgment.is_valid is False
        assert len(fake.requests) == 1
        assert "Function: find_kris" in fake.prompts[0]


class TestErrors:
    async def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            await ValidatedNameDetector(ValidatorConfig()).find_kris("Chris")

    async def test_transport_error_propagates(self, fake_llm):
        with pytest.raises(ValidationError):
            await _detector(fake_llm(AGREE, status_code=500)).is_kris("Chris")


class TestDefaultInstance:
    def test_default_is_lazy_singleton(self):
        first = default_validated_detector.get()
        assert default_validated_detector.get() is first

    def test_reset_builds_fresh_instance(self):
        first = default_validated_detector.get()
        kris_detector.reset_default_detectors()
        assert default_validated_detector.get() is not first

    def test_default_reads_environment_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        assert default_validated_detector.get().validator.config.api_key == "env-key"

    async def test_convenience_functions_use_default(self, fake_llm):
        fake = fake_llm(AGREE)
        default_validated_detector.set(_detector(fake))

        assert (await is_kris_validated("Chris")).result is True
        assert (await find_kris_validated("Chris and Kris")).result == ["Chris", "Kris"]
        assert (await count_kris_validated("Chris and Kris")).result == 2
        assert len(fake.requests) == 3

    async def test_convenience_without_key_raises(self):
        with pytest.raises(ConfigurationError):
            await find_kris_validated("Chris")

    def test_factory_returns_new_instances(self):
        assert create_validated_detector(CONFIG) is not create_validated_detector(CONFIG)
