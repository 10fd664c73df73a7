"""Tests for segment splitting within a number."""

from libretto.models import BlankLine, Character, Direction, NumberType, SegmentType, Text
from libretto.parse.segments import segment_id, split_segments
from libretto.parse.structure import RawNumber


def _number(*elements):
    return RawNumber(
        label="N° 1: Duettino",
        id="no-1-duettino",
        number_type=NumberType.DUETTINO,
        act="1",
        elements=list(elements),
    )


def test_segment_id_is_zero_padded():
    assert segment_id("no-1-duettino", 2) == "no-1-duettino-002"
    assert segment_id("rec-1a", 120) == "rec-1a-120"


def test_each_character_opens_a_segment():
    """Text attaches to the most recent character, lines joined by newline."""
    segments = split_segments(_number(
        Character(text="FIGARO"),
        Text(text="Cinque... dieci..."),
        Text(text="venti... trenta..."),
        Character(text="SUSANNA"),
        Text(text="Ora sì ch'io son contenta."),
    ))
    assert [s.id for s in segments] == ["no-1-duettino-001", "no-1-duettino-002"]
    assert segments[0].character == "FIGARO"
    assert segments[0].text == "Cinque... dieci...\nventi... trenta..."
    assert segments[1].character == "SUSANNA"
    assert all(s.segment_type == SegmentType.SUNG for s in segments)


def test_direction_attaches_to_open_segment():
    """Directions inside a segment are space-joined on that segment."""
    segments = split_segments(_number(
        Character(text="FIGARO"),
        Direction(text="(misurando)"),
        Text(text="Cinque..."),
        Direction(text="(si volta)"),
    ))
    assert len(segments) == 1
    assert segments[0].direction == "(misurando) (si volta)"
    assert segments[0].text == "Cinque..."


def test_leading_direction_is_standalone():
    """A direction before any character becomes its own segment."""
    segments = split_segments(_number(
        Direction(text="(Camera non affatto ammobiliata.)"),
        Character(text="FIGARO"),
        Text(text="Cinque..."),
    ))
    assert segments[0].segment_type == SegmentType.DIRECTION
    assert segments[0].direction == "(Camera non affatto ammobiliata.)"
    assert segments[0].character is None
    assert segments[1].character == "FIGARO"


def test_text_after_standalone_direction_joins_it():
    """Text following a standalone direction fills that segment."""
    segments = split_segments(_number(
        Direction(text="(Entra il coro.)"),
        Text(text="Giovani liete"),
        Text(text="fiori spargete"),
    ))
    assert len(segments) == 1
    assert segments[0].segment_type == SegmentType.DIRECTION
    assert segments[0].direction == "(Entra il coro.)"
    assert segments[0].text == "Giovani liete\nfiori spargete"


def test_character_after_direction_and_text_opens_next_segment():
    segments = split_segments(_number(
        Direction(text="(Entra il coro.)"),
        Text(text="Giovani liete"),
        Character(text="SUSANNA"),
        Text(text="Ricevete, o padroncina"),
    ))
    assert [s.id for s in segments] == ["no-1-duettino-001", "no-1-duettino-002"]
    assert segments[1].character == "SUSANNA"


def test_text_without_character_is_unattributed():
    """Text before anything else opens a sung segment with no character."""
    segments = split_segments(_number(
        Text(text="Giovani liete"),
        Character(text="SUSANNA"),
        Text(text="Ricevete, o padroncina"),
    ))
    assert len(segments) == 2
    assert segments[0].segment_type == SegmentType.SUNG
    assert segments[0].character is None
    assert segments[0].text == "Giovani liete"
    assert segments[1].text == "Ricevete, o padroncina"


def test_blank_and_empty_elements_are_dropped():
    """Blank lines and whitespace-only text leave no trace."""
    segments = split_segments(_number(
        Character(text="SUSANNA"),
        BlankLine(),
        Text(text="   "),
        Text(text="Ora sì"),
        BlankLine(),
    ))
    assert len(segments) == 1
    assert segments[0].text == "Ora sì"


def test_character_without_text():
    """A character with no lines still yields a segment with no text."""
    segments = split_segments(_number(Character(text="TUTTI")))
    assert segments[0].character == "TUTTI"
    assert segments[0].text is None


def test_empty_number_has_no_segments():
    assert split_segments(_number()) == []
