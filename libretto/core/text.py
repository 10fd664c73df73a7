"""
Text utilities shared by the classifier, resolver and estimator.

Libretto text arrives with mixed Unicode forms, typographic quotes and
ellipses. This module provides the small set of normalizations the rest of
the library depends on.
"""

import math
import re
import unicodedata

_NON_ALNUM = re.compile(r"[^0-9a-z]+")
_MATCH_PUNCT = re.compile(r"[,;:!?]")
_WHITESPACE = re.compile(r"\s+")
_BLANK_RUN = re.compile(r"\n{3,}")

_QUOTE_FOLD = str.maketrans({
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
})


def slugify(text: str) -> str:
    """
    Turn a label into a lowercase, hyphen-separated identifier.

    Diacritics are stripped first so accented labels keep their letters.

    Args:
        text: Arbitrary label text

    Returns:
        Slug made of [0-9a-z] runs joined by "-" (may be empty)

    Examples:
        >>> slugify("Duettino")
        'duettino'
        >>> slugify("Finale: Atto Secondo")
        'finale-atto-secondo'
    """
    folded = strip_diacritics(text).lower()
    return "-".join(_NON_ALNUM.sub(" ", folded).split())


def strip_diacritics(text: str) -> str:
    """Decompose to NFD and drop combining marks."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def word_count(text: str | None) -> int:
    """Count whitespace-separated words."""
    if not text:
        return 0
    return len(text.split())


def normalize_for_match(text: str) -> str:
    """
    Normalize text for anchor comparison.

    Strips diacritics, lowercases, folds typographic quotes to straight
    ones, turns "..." into a single ellipsis character, removes light
    punctuation (, ; : ! ?) and collapses whitespace.

    Args:
        text: Libretto line or track-title anchor

    Returns:
        Normalized string

    Examples:
        >>> normalize_for_match("Se vuol ballare, signor Contino")
        'se vuol ballare signor contino'
    """
    result = strip_diacritics(text).lower()
    result = result.translate(_QUOTE_FOLD)
    result = result.replace("...", "…")
    result = _MATCH_PUNCT.sub("", result)
    return _WHITESPACE.sub(" ", result).strip()


def normalize_text(text: str) -> str:
    """NFC-normalize and strip trailing whitespace from every line."""
    text = unicodedata.normalize("NFC", text)
    return "\n".join(line.rstrip() for line in text.split("\n"))


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of blank lines to a single blank line."""
    return _BLANK_RUN.sub("\n\n", text)


def first_line(text: str) -> str:
    """Return the first line of a block of text."""
    return text.split("\n", 1)[0]


def round_ms(seconds: float) -> float:
    """
    Round a time in seconds to the nearest millisecond, halves rounding up.

    Examples:
        >>> round_ms(2.5004)
        2.5
    """
    return math.floor(seconds * 1000.0 + 0.5) / 1000.0
