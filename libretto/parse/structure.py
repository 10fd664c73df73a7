"""
Structural split of an element stream into musical numbers.

The walk tracks the current act and scene, opens a new number at every
meaningful NumberLabel and collects the elements that follow it. Content
that arrives with no open number forms an implicit recitative.
"""

import re
from dataclasses import dataclass, field
from functools import reduce
from typing import Callable

from libretto.core.text import slugify
from libretto.models import (
    ActHeader,
    BlankLine,
    ContentElement,
    NumberLabel,
    NumberType,
)

IMPLICIT_RECITATIVE_LABEL = "Recitativo"

_ACT_ORDINALS: list[tuple[tuple[str, ...], str]] = [
    (("PRIMO", "FIRST", "ONE"), "1"),
    (("SECONDO", "SECOND", "TWO"), "2"),
    (("TERZO", "THIRD", "THREE"), "3"),
    (("QUARTO", "FOURTH", "FOUR"), "4"),
    (("QUINTO", "FIFTH", "FIVE"), "5"),
]
_ACT_NUMERIC = re.compile(r"(?i)(?:act|atto)\s+(\d+)")

_SCENE_HEADER = re.compile(r"(?i)^\s*(?:scena|scene)\s+(\w+)")
_SCENE_WORDS = {
    "prima": "1", "primo": "1", "first": "1", "one": "1", "i": "1",
    "seconda": "2", "secondo": "2", "second": "2", "two": "2", "ii": "2",
    "terza": "3", "terzo": "3", "third": "3", "three": "3", "iii": "3",
    "quarta": "4", "quarto": "4", "fourth": "4", "four": "4", "iv": "4",
    "quinta": "5", "quinto": "5", "fifth": "5", "five": "5", "v": "5",
    "sesta": "6", "sixth": "6", "six": "6", "vi": "6",
    "settima": "7", "seventh": "7", "seven": "7", "vii": "7",
    "ottava": "8", "eighth": "8", "eight": "8", "viii": "8",
    "nona": "9", "ninth": "9", "nine": "9", "ix": "9",
    "decima": "10", "tenth": "10", "ten": "10", "x": "10",
}

_NUMBERED_LABEL = re.compile(r"(?i)n[°o.]\s*(\d+)\s*[:\-–]\s*(.+)")
_NUMBER_ONLY = re.compile(r"(?i)n[°o.]\s*(\d+)")
_CATALOG_REF = re.compile(r"(?i)^\s*(?:k|kv|bwv|hob|op)\.?\s*\d+")

_MUSICAL_KEYWORDS = (
    "aria", "duet", "terzet", "quartet", "quintet", "sextet",
    "cavatina", "canzone", "coro", "chorus", "finale", "recitativ",
    "overture", "sinfonia", "ouverture", "duettino",
)


def _contains(*words: str) -> Callable[[str], bool]:
    return lambda lower: any(w in lower for w in words)


# Evaluated in order, first match wins. Predicates receive the lowercased label.
NUMBER_TYPE_RULES: list[tuple[Callable[[str], bool], NumberType]] = [
    (_contains("sinfonia", "overture", "ouverture"), NumberType.OVERTURE),
    (_contains("finale"), NumberType.FINALE),
    (lambda lower: "recitativ" in lower and "aria" in lower, NumberType.ARIA),
    (_contains("recitativ"), NumberType.RECITATIVE),
    (_contains("duettino"), NumberType.DUETTINO),
    (_contains("duetto", "duet"), NumberType.DUET),
    (_contains("terzetto", "trio"), NumberType.TERZETTO),
    (_contains("quartetto", "quartet"), NumberType.QUARTET),
    (_contains("quintetto", "quintet"), NumberType.QUINTET),
    (_contains("sestetto", "sextet"), NumberType.SEXTET),
    (_contains("cavatina"), NumberType.CAVATINA),
    (_contains("canzone"), NumberType.CANZONE),
    (_contains("coro", "chorus"), NumberType.CHORUS),
    (_contains("aria"), NumberType.ARIA),
]


@dataclass
class RawNumber:
    """A musical number before segment splitting."""

    label: str
    id: str
    number_type: NumberType
    act: str
    scene: str | None = None
    elements: list[ContentElement] = field(default_factory=list)


@dataclass
class _WalkState:
    """Accumulator threaded through the structural walk."""

    act: str = ""
    scene: str | None = None
    numbers: list[RawNumber] = field(default_factory=list)
    block_open: bool = False
    recitatives: int = 0
    recitatives_by_act: dict[str, int] = field(default_factory=dict)


def parse_act_number(text: str) -> str | None:
    """
    Extract an act number from a header.

    Args:
        text: Header text, e.g. "ATTO PRIMO" or "Act 3"

    Returns:
        Act number as a string, or None if the header names no act

    Examples:
        >>> parse_act_number("ATTO SECONDO")
        '2'
        >>> parse_act_number("Personaggi") is None
        True
    """
    upper = text.strip().upper()
    for words, act in _ACT_ORDINALS:
        if any(w in upper for w in words):
            return act
    match = _ACT_NUMERIC.search(upper)
    if match:
        return match.group(1)
    return None


def parse_scene_number(text: str) -> str | None:
    """Extract a scene number from a "Scena ..." / "Scene ..." header."""
    match = _SCENE_HEADER.match(text)
    if not match:
        return None
    token = match.group(1).lower()
    if token.isdigit():
        return token
    return _SCENE_WORDS.get(token, token)


def classify_number(label: str) -> NumberType:
    """Classify a number label using NUMBER_TYPE_RULES."""
    lower = label.lower()
    for predicate, number_type in NUMBER_TYPE_RULES:
        if predicate(lower):
            return number_type
    return NumberType.OTHER


def generate_id(label: str, act: str, number_type: NumberType) -> str:
    """
    Generate a stable number id from its label.

    Args:
        label: Number label, e.g. "N° 1: Duettino"
        act: Current act, used when the label yields no slug
        number_type: Classified type

    Returns:
        "overture", "no-K-slug" when a ":", "-" or "–" separates the
        description, "no-K", a slug of the label, or "number-act{act}"

    Examples:
        >>> generate_id("N° 1: Duettino", "1", NumberType.DUETTINO)
        'no-1-duettino'
        >>> generate_id("N° 5 Aria", "1", NumberType.ARIA)
        'no-5'
        >>> generate_id("No. 3 Cavatina", "1", NumberType.CAVATINA)
        'no-3-cavatina'
    """
    if number_type == NumberType.OVERTURE:
        return "overture"

    match = _NUMBERED_LABEL.search(label)
    if match:
        num = match.group(1)
        desc_slug = slugify(match.group(2))
        return f"no-{num}-{desc_slug}" if desc_slug else f"no-{num}"

    match = _NUMBER_ONLY.search(label)
    if match:
        return f"no-{match.group(1)}"

    slug = slugify(label)
    return slug or f"number-act{act}"


def is_noise_label(text: str) -> bool:
    """
    Check whether a NumberLabel is incidental text rather than a number.

    Catalog references, symphony credits, end markers and labels with no
    digit, no musical keyword and no "N°"/"No." prefix are noise.
    """
    lower = text.strip().lower()
    if lower.startswith("symphony"):
        return True
    if _CATALOG_REF.match(lower):
        return True
    if lower.startswith("fin ") or lower == "fine":
        return True

    has_digit = any(c.isdigit() for c in lower)
    has_keyword = any(kw in lower for kw in _MUSICAL_KEYWORDS)
    has_prefix = lower.startswith("n°") or lower.startswith("no.")
    return not (has_digit or has_keyword or has_prefix)


def _open_recitative(state: _WalkState) -> RawNumber:
    if state.act:
        count = state.recitatives_by_act.get(state.act, 0) + 1
        state.recitatives_by_act[state.act] = count
        number_id = f"rec-{state.act}{_letter(count)}"
    else:
        state.recitatives += 1
        number_id = f"rec-{state.recitatives}"
    return RawNumber(
        label=IMPLICIT_RECITATIVE_LABEL,
        id=number_id,
        number_type=NumberType.RECITATIVE,
        act=state.act,
        scene=state.scene,
    )


def _letter(count: int) -> str:
    # a..z, then aa, ab, ...
    letters = ""
    while count > 0:
        count, rem = divmod(count - 1, 26)
        letters = chr(ord("a") + rem) + letters
    return letters


def _step(state: _WalkState, element: ContentElement) -> _WalkState:
    if isinstance(element, ActHeader):
        scene = parse_scene_number(element.text)
        if scene is not None:
            state.scene = scene
            return state
        act = parse_act_number(element.text)
        if act is not None and act != state.act:
            state.act = act
            state.scene = None
            state.block_open = False
        return state

    if isinstance(element, NumberLabel):
        if is_noise_label(element.text):
            return state
        number_type = classify_number(element.text)
        state.numbers.append(
            RawNumber(
                label=element.text,
                id=generate_id(element.text, state.act, number_type),
                number_type=number_type,
                act=state.act,
                scene=state.scene,
            )
        )
        state.block_open = True
        return state

    if not state.block_open:
        if isinstance(element, BlankLine):
            return state
        state.numbers.append(_open_recitative(state))
        state.block_open = True

    state.numbers[-1].elements.append(element)
    return state


def _dedupe_ids(numbers: list[RawNumber]) -> None:
    used: set[str] = set()
    for number in numbers:
        if number.id in used:
            count = 2
            while f"{number.id}-{count}" in used:
                count += 1
            number.id = f"{number.id}-{count}"
        used.add(number.id)


def split_into_numbers(elements: list[ContentElement]) -> list[RawNumber]:
    """
    Split an element stream (cast section already removed) into numbers.

    Empty numbers are dropped, except an empty overture, and repeated ids
    get "-2", "-3", ... suffixes.

    Args:
        elements: Elements following the cast section

    Returns:
        RawNumber list in source order
    """
    state = reduce(_step, elements, _WalkState())
    numbers = [
        n for n in state.numbers
        if n.elements or n.number_type == NumberType.OVERTURE
    ]
    _dedupe_ids(numbers)
    return numbers
