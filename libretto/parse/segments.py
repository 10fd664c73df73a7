"""
Segment split within a musical number.

Each Character element opens a new segment; text and stage directions
attach to the segment that is open when they arrive.
"""

from libretto.models import (
    Character,
    Direction,
    Segment,
    SegmentType,
    Text,
)
from libretto.parse.structure import RawNumber


def segment_id(number_id: str, seq: int) -> str:
    """Build a segment id: "{number_id}-{seq:03}"."""
    return f"{number_id}-{seq:03}"


def split_segments(number: RawNumber) -> list[Segment]:
    """
    Split a number's elements into character-attributed segments.

    Text lines append to the open segment, newline-joined. Directions append
    to the open segment's direction, space-joined, or start a standalone
    direction segment when nothing is open. Text always joins the open
    segment, standalone directions included; text arriving before anything
    is open starts an unattributed sung segment. Blank lines are dropped.

    Args:
        number: Raw number from split_into_numbers

    Returns:
        Segments in source order, numbered from 001
    """
    segments: list[Segment] = []

    def open_segment(segment_type: SegmentType, **fields) -> Segment:
        segment = Segment(
            id=segment_id(number.id, len(segments) + 1),
            segment_type=segment_type,
            **fields,
        )
        segments.append(segment)
        return segment

    for element in number.elements:
        if isinstance(element, Character):
            open_segment(SegmentType.SUNG, character=element.text)

        elif isinstance(element, Text):
            text = element.text.strip()
            if not text:
                continue
            if not segments:
                open_segment(SegmentType.SUNG, text=text)
                continue
            current = segments[-1]
            if current.text:
                current.text = f"{current.text}\n{text}"
            else:
                current.text = text

        elif isinstance(element, Direction):
            text = element.text.strip()
            if not text:
                continue
            if not segments:
                open_segment(SegmentType.DIRECTION, direction=text)
                continue
            current = segments[-1]
            if current.direction:
                current.direction = f"{current.direction} {text}"
            else:
                current.direction = text

    return segments
