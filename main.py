#!/usr/bin/env python3
"""
Kris Detector — Entry Point
===========================

Runs every detector on a piece of text and prints a report.

Usage:
    python main.py                                # Regex-only on the sample text
    python main.py "Chris met Christian"          # Regex-only on your text
    OPENAI_API_KEY=sk-... python main.py "..."    # + LLM-validated and AI-first
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from kris_detector.ai_detector import AINameDetector
from kris_detector.exceptions import KrisDetectorError
from kris_detector.models import API_KEY_ENV_VAR
from kris_detector.patterns import (
    contains_variant,
    count_variants,
    find_variants,
    is_exact_variant,
)
from kris_detector.validated import ValidatedNameDetector

# ─── Load .env if available (optional dependency) ────────────────────
try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


SAMPLE_TEXT = (
    "In the office, Chris talked to Kris about Christopher's project. "
    "Kristopher was also there, but Christian and Christina were out for Christmas."
)


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _fmt(value) -> str:
    if isinstance(value, bool):
        return f"{_GREEN}yes{_RESET}" if value else f"{_DIM}no{_RESET}"
    return str(value)


def _print_section(title: str) -> None:
    print(f"{'─' * _WIDTH}")
    print(f"  {_BOLD}{title}{_RESET}")


def _print_pattern_results(text: str) -> None:
    _print_section("REGEX (baseline)")
    print(f"  Contains:    {_fmt(contains_variant(text))}")
    print(f"  Exact:       {_fmt(is_exact_variant(text))}")
    print(f"  Found:       {find_variants(text)}")
    print(f"  Count:       {count_variants(text)}")


async def _print_validated_results(text: str) -> None:
    _print_section("REGEX + LLM VALIDATION")
    outcome = await ValidatedNameDetector().find_kris(text)
    judgment = outcome.judgment
    verdict = f"{_GREEN}agrees{_RESET}" if judgment.is_valid else f"{_YELLOW}corrected{_RESET}"
    print(f"  Baseline:    {outcome.baseline_result}")
    print(f"  Result:      {outcome.result}")
    print(f"  LLM:         {verdict} (confidence: {judgment.confidence:.0%})")
    print(f"  {_DIM}{judgment.reasoning}{_RESET}")


async def _print_ai_results(text: str) -> None:
    _print_section("AI-FIRST")
    outcome = await AINameDetector().find_kris(text)
    print(f"  Found:       {outcome.result}")
    print(f"  Confidence:  {outcome.confidence:.0%}")
    print(f"  {_DIM}{outcome.reasoning}{_RESET}")


# ─── Main ────────────────────────────────────────────────────────────


async def run(text: str) -> int:
    """Print the full report for *text*. Returns the process exit code."""
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  KRIS DETECTION REPORT{_RESET}")
    print(f"{'=' * _WIDTH}")
    print(f"  Input:       {text!r}")

    _print_pattern_results(text)

    exit_code = 0
    if os.environ.get(API_KEY_ENV_VAR):
        try:
            await _print_validated_results(text)
            await _print_ai_results(text)
        except KrisDetectorError as e:
            print(f"\n  {_RED}{_BOLD}[{e.code}]{_RESET} {e}")
            exit_code = 1
    else:
        print(f"{'─' * _WIDTH}")
        print(f"  {_DIM}No {API_KEY_ENV_VAR} set — skipping LLM detectors{_RESET}")

    print(f"{'=' * _WIDTH}\n")
    return exit_code


def main():
    """Run the detectors on the command-line text (or the sample)."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    text = " ".join(sys.argv[1:]) or SAMPLE_TEXT
    sys.exit(asyncio.run(run(text)))


if __name__ == "__main__":
    main()
