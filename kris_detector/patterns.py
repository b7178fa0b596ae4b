"""
Deterministic regex-based detection of Chris/Kris name variants.

This module is PURE REGEX — no AI, no I/O, no state.
It is the BASELINE that the LLM-validated and AI-first detectors build on.

Recognized spellings (case-insensitive):
  - Chris, Chriss
  - Kris, Kriss, Khris
  - Christopher, Christoph
  - Kristopher, Kristoph
  - Christofer, Cristofer
  - Christoffer, Kristoffer

Word boundaries on both sides keep longer names that share a prefix
(Christian, Christina, Christmas, Christ, Kristen, ...) from matching.
None of the functions raise: non-string input is simply a non-match.
"""

from __future__ import annotations

import re

_VARIANT = r"(?:c|ch|k|kh)ri(?:s|ss|st(?:o(?:ph(?:er)?|fer|ffer)))"

# Containment: the variant anywhere in the text, bounded by word edges.
REGEX: re.Pattern[str] = re.compile(rf"\b{_VARIANT}\b", re.IGNORECASE)

# Exact: the variant must be the whole input. \A / \Z rather than ^ / $
# so a trailing newline is not silently accepted.
EXACT_REGEX: re.Pattern[str] = re.compile(rf"\A{_VARIANT}\Z", re.IGNORECASE)


def contains_variant(text: object) -> bool:
    """Return True if *text* contains any variation of Chris/Kris.

    Examples:
        contains_variant("Chris")             -> True
        contains_variant("My name is Chris")  -> True
        contains_variant("Christmas")         -> False
        contains_variant(None)                -> False
    """
    if not isinstance(text, str):
        return False
    return REGEX.search(text) is not None


def is_exact_variant(text: object) -> bool:
    """Return True if *text* is exactly a variation of Chris/Kris.

    Surrounding whitespace (including a trailing newline) disqualifies.

    Examples:
        is_exact_variant("christopher")       -> True
        is_exact_variant(" Chris ")           -> False
        is_exact_variant("My name is Chris")  -> False
    """
    if not isinstance(text, str):
        return False
    return EXACT_REGEX.search(text) is not None


def find_variants(text: object) -> list[str]:
    """Find all variations of Chris/Kris, left to right, with original casing.

    Examples:
        find_variants("Chris and Kris are friends")  -> ["Chris", "Kris"]
        find_variants("CHRIS and kris")              -> ["CHRIS", "kris"]
        find_variants("No matches here")             -> []
    """
    if not isinstance(text, str):
        return []
    return [match.group(0) for match in REGEX.finditer(text)]


def count_variants(text: object) -> int:
    """Count how many variations of Chris/Kris appear in *text*."""
    return len(find_variants(text))


# Detection-kind names used throughout the package and its public surface.
is_kris = contains_variant
is_exactly_kris = is_exact_variant
find_kris = find_variants
count_kris = count_variants
