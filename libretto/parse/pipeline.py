"""
Classification pipeline: cast, then structure, then segments.
"""

from dataclasses import dataclass, field

from libretto._logging import log_classification_complete
from libretto.models import CastMember, ContentElement, MusicalNumber, Segment
from libretto.parse.cast import extract_cast
from libretto.parse.segments import split_segments
from libretto.parse.structure import split_into_numbers


@dataclass
class ClassificationResult:
    """
    Output of classify().

    Attributes:
        cast: Cast members from the opening cast section
        numbers: Musical numbers in source order, each carrying its segments
        segments: All segments flattened in source order
    """

    cast: list[CastMember] = field(default_factory=list)
    numbers: list[MusicalNumber] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)

    def number_ids(self) -> list[str]:
        return [n.id for n in self.numbers]

    def segment_ids(self) -> list[str]:
        return [s.id for s in self.segments]


def classify(elements: list[ContentElement]) -> ClassificationResult:
    """
    Classify an element stream into cast, numbers and segments.

    Never raises: a missing cast header, missing number labels or
    unrecognized labels all fall back to defined defaults.

    Args:
        elements: Element stream from the acquisition layer

    Returns:
        ClassificationResult

    Example:
        >>> from libretto.models import NumberLabel, Character, Text
        >>> result = classify([
        ...     NumberLabel(text="N° 1: Duettino"),
        ...     Character(text="FIGARO"),
        ...     Text(text="Cinque... dieci..."),
        ... ])
        >>> result.segment_ids()
        ['no-1-duettino-001']
    """
    cast_result = extract_cast(elements)
    raw_numbers = split_into_numbers(elements[cast_result.end_index:])

    numbers: list[MusicalNumber] = []
    all_segments: list[Segment] = []
    for raw in raw_numbers:
        segments = split_segments(raw)
        numbers.append(
            MusicalNumber(
                id=raw.id,
                label=raw.label,
                number_type=raw.number_type,
                act=raw.act,
                scene=raw.scene,
                segments=segments,
            )
        )
        all_segments.extend(segments)

    log_classification_complete(
        len(cast_result.members), len(numbers), len(all_segments)
    )
    return ClassificationResult(
        cast=cast_result.members,
        numbers=numbers,
        segments=all_segments,
    )
