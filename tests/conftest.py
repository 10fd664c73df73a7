"""Shared fixtures for libretto tests."""

import pytest

from libretto.config import reset_settings
from libretto.models import (
    ActHeader,
    BaseLibretto,
    Character,
    MusicalNumber,
    NumberLabel,
    NumberType,
    OperaMetadata,
    RecordingMetadata,
    Segment,
    SegmentType,
    Text,
    TimingOverlay,
    TrackTiming,
)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Every test starts from default settings with no LIBRETTO_* overrides."""
    for name in (
        "LIBRETTO_DOCUMENT_VERSION",
        "LIBRETTO_MIN_SEGMENT_WEIGHT",
        "LIBRETTO_RECITATIVE_WEIGHT_FACTOR",
        "LIBRETTO_ANCHOR_PREFIX_CHARS",
        "LIBRETTO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def opera():
    return OperaMetadata(
        title="Le nozze di Figaro",
        composer="Wolfgang Amadeus Mozart",
        librettist="Lorenzo Da Ponte",
        language="it",
        translation_language="en",
        year=1786,
    )


@pytest.fixture
def figaro_elements():
    """Opening of Figaro: cast, overture and the first duettino."""
    return [
        ActHeader(text="Personaggi"),
        Text(text="Figaro - basso-baritono"),
        NumberLabel(text="Sinfonia"),
        ActHeader(text="ATTO PRIMO"),
        NumberLabel(text="N° 1: Duettino"),
        Character(text="FIGARO"),
        Text(text="Cinque... dieci..."),
        Character(text="SUSANNA"),
        Text(text="Ora sì ch'io son contenta."),
    ]


@pytest.fixture
def figaro_translation_elements():
    """English counterpart of figaro_elements, structurally parallel."""
    return [
        ActHeader(text="Characters"),
        Text(text="Figaro - bass-baritone"),
        NumberLabel(text="Sinfonia"),
        ActHeader(text="ATTO PRIMO"),
        NumberLabel(text="N° 1: Duettino"),
        Character(text="FIGARO"),
        Text(text="Five... ten..."),
        Character(text="SUSANNA"),
        Text(text="How happy I am now."),
    ]


def make_segment(segment_id, text=None, segment_type=SegmentType.SUNG, **kwargs):
    return Segment(id=segment_id, segment_type=segment_type, text=text, **kwargs)


@pytest.fixture
def weighted_base(opera):
    """One number with segment weights 3, 9 and 0.5 (a direction)."""
    return BaseLibretto(
        opera=opera,
        numbers=[
            MusicalNumber(
                id="no-1",
                label="No. 1",
                number_type=NumberType.ARIA,
                act="1",
                segments=[
                    make_segment("no-1-001", "one two three", character="A"),
                    make_segment(
                        "no-1-002",
                        "four five six seven eight nine ten eleven twelve",
                        character="B",
                    ),
                    make_segment(
                        "no-1-003", segment_type=SegmentType.DIRECTION, direction="exits"
                    ),
                ],
            )
        ],
    )


@pytest.fixture
def two_number_base(opera):
    """Two numbers of four-word segments, with distinct first lines."""
    return BaseLibretto(
        opera=opera,
        numbers=[
            MusicalNumber(
                id="no-1",
                label="N° 1: Duettino",
                number_type=NumberType.DUETTINO,
                act="1",
                scene="1",
                segments=[
                    make_segment("no-1-001", "Cinque dieci venti trenta", character="FIGARO"),
                    make_segment("no-1-002", "Ora sì ch'io son", character="SUSANNA"),
                    make_segment("no-1-003", "Bravo signor padrone ora", character="FIGARO"),
                    make_segment("no-1-004", "Se vuol ballare signor", character="FIGARO"),
                ],
            ),
            MusicalNumber(
                id="no-2",
                label="N° 2: Cavatina",
                number_type=NumberType.CAVATINA,
                act="1",
                segments=[
                    make_segment("no-2-001", "La vendetta oh la", character="BARTOLO"),
                    make_segment("no-2-002", "è un piacer serbato", character="BARTOLO"),
                ],
            ),
        ],
    )


@pytest.fixture
def single_track_overlay():
    return TimingOverlay(
        base_libretto="base.json",
        recording=RecordingMetadata(conductor="Böhm", orchestra="Deutsche Oper"),
        track_timings=[
            TrackTiming(
                track_title="Track 1",
                disc_number=1,
                track_number=1,
                duration_seconds=125.0,
                number_ids=["no-1"],
            )
        ],
    )


@pytest.fixture
def finale_base(opera):
    """A finale of four five-word segments."""
    words = [
        "one two three four five",
        "six seven eight nine ten",
        "eleven twelve thirteen fourteen fifteen",
        "sixteen seventeen eighteen nineteen twenty",
    ]
    return BaseLibretto(
        opera=opera,
        numbers=[
            MusicalNumber(
                id="no-2",
                label="No. 2 Finale",
                number_type=NumberType.FINALE,
                act="1",
                segments=[
                    make_segment(f"no-2-00{i + 1}", text, character="A" if i % 2 == 0 else "B")
                    for i, text in enumerate(words)
                ],
            )
        ],
    )

