"""
Base libretto data model: the untimed, recording-independent structure.
"""

from enum import Enum
from typing import Iterator, Optional

from pydantic import Field

from libretto.models._base import DocumentModel


class NumberType(str, Enum):
    """Classification of a musical number."""

    OVERTURE = "overture"
    ARIA = "aria"
    DUET = "duet"
    DUETTINO = "duettino"
    TERZETTO = "terzetto"
    QUARTET = "quartet"
    QUINTET = "quintet"
    SEXTET = "sextet"
    CAVATINA = "cavatina"
    CANZONE = "canzone"
    CHORUS = "chorus"
    FINALE = "finale"
    RECITATIVE = "recitative"
    OTHER = "other"


class SegmentType(str, Enum):
    """Type of content in a segment."""

    SUNG = "sung"
    SPOKEN = "spoken"
    DIRECTION = "direction"
    INTERLUDE = "interlude"


class OperaMetadata(DocumentModel):
    """
    Metadata about the opera itself.

    Attributes:
        title: Opera title
        composer: Composer name
        librettist: Librettist name, if known
        language: ISO 639-1 code of the original language
        translation_language: ISO 639-1 code of the translation, if included
        year: Year of the premiere
    """

    title: str
    composer: str
    librettist: Optional[str] = None
    language: str
    translation_language: Optional[str] = None
    year: Optional[int] = None


class CastMember(DocumentModel):
    """A member of the cast list."""

    character: str = Field(..., description="Character name as it appears in the libretto")
    short_name: Optional[str] = Field(
        default=None, description="Name used in segment attributions"
    )
    voice_type: Optional[str] = Field(default=None, description="Voice type, e.g. soprano")
    description: Optional[str] = Field(default=None, description="Role description")


class Segment(DocumentModel):
    """
    A segment of libretto text within a musical number.

    This is the unit that timing overlays reference by id.

    Attributes:
        id: Identifier unique across the whole libretto (e.g., "no-1-duettino-001")
        segment_type: Kind of content
        character: Character name(s) singing or speaking
        text: Original-language text
        translation: Translation text
        direction: Stage direction attached to this segment
        group: Ensemble tag; segments sharing a group are sung together
    """

    id: str
    segment_type: SegmentType = SegmentType.SUNG
    character: Optional[str] = None
    text: Optional[str] = None
    translation: Optional[str] = None
    direction: Optional[str] = None
    group: Optional[str] = None


class MusicalNumber(DocumentModel):
    """A musical number (aria, duet, recitative, finale, ...) and its segments."""

    id: str
    label: str
    number_type: NumberType
    act: str
    scene: Optional[str] = None
    segments: list[Segment] = Field(default_factory=list)


class BaseLibretto(DocumentModel):
    """
    The untimed, structured text of an opera.

    Segment ids are unique across all numbers, and each number keeps its
    segments in source order. Timing overlays reference segments by id only.
    """

    version: str = "1.0"
    opera: OperaMetadata
    cast: list[CastMember] = Field(default_factory=list)
    numbers: list[MusicalNumber] = Field(default_factory=list)

    def iter_segments(self) -> Iterator[tuple[MusicalNumber, Segment]]:
        """Yield (number, segment) pairs in document order."""
        for number in self.numbers:
            for segment in number.segments:
                yield number, segment

    def segment_ids(self) -> list[str]:
        """All segment ids, in order."""
        return [segment.id for _, segment in self.iter_segments()]

    def find_segment(self, segment_id: str) -> Optional[Segment]:
        """Look up a segment by id."""
        for _, segment in self.iter_segments():
            if segment.id == segment_id:
                return segment
        return None

    def find_number(self, number_id: str) -> Optional[MusicalNumber]:
        """Look up a musical number by id."""
        for number in self.numbers:
            if number.id == number_id:
                return number
        return None

    def __str__(self) -> str:
        return (
            f"BaseLibretto({self.opera.title}, numbers={len(self.numbers)}, "
            f"segments={len(self.segment_ids())})"
        )
