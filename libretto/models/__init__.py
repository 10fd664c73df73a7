"""
Pydantic data models for the libretto library.

These models represent the documents passed between the pipeline stages:
- ContentElement: the typed token stream produced by acquisition
- BaseLibretto: cast, musical numbers and segments (untimed)
- TimingOverlay: recording-specific segment start times
- InterchangeLibretto: the merged, timed document for display
"""

from libretto.models.elements import (
    ELEMENT_LIST,
    AcquiredLibretto,
    ActHeader,
    BilingualRow,
    BlankLine,
    Character,
    ContentElement,
    Direction,
    NumberLabel,
    SourceInfo,
    Text,
    element_text,
)
from libretto.models.base_libretto import (
    BaseLibretto,
    CastMember,
    MusicalNumber,
    NumberType,
    OperaMetadata,
    Segment,
    SegmentType,
)
from libretto.models.timing_overlay import (
    Contributor,
    OmittedNumber,
    RecordingMetadata,
    SegmentTime,
    TimingOverlay,
    TrackTiming,
)
from libretto.models.interchange import (
    InterchangeLibretto,
    InterchangeOpera,
    InterchangeSegment,
    InterchangeTrack,
)

__all__ = [
    # Elements
    "ActHeader",
    "NumberLabel",
    "Character",
    "Direction",
    "Text",
    "BlankLine",
    "ContentElement",
    "ELEMENT_LIST",
    "element_text",
    "SourceInfo",
    "BilingualRow",
    "AcquiredLibretto",
    # Base libretto
    "BaseLibretto",
    "CastMember",
    "MusicalNumber",
    "NumberType",
    "OperaMetadata",
    "Segment",
    "SegmentType",
    # Timing overlay
    "Contributor",
    "OmittedNumber",
    "RecordingMetadata",
    "SegmentTime",
    "TimingOverlay",
    "TrackTiming",
    # Interchange
    "InterchangeLibretto",
    "InterchangeOpera",
    "InterchangeSegment",
    "InterchangeTrack",
]
