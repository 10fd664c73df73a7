"""
Timing overlay data model: recording-specific timing for a base libretto.
"""

from typing import Optional

from pydantic import Field

from libretto.models._base import DocumentModel


class RecordingMetadata(DocumentModel):
    """Metadata about the recording this timing is for."""

    conductor: Optional[str] = None
    orchestra: Optional[str] = None
    year: Optional[int] = None
    label: Optional[str] = None
    album_title: Optional[str] = None


class Contributor(DocumentModel):
    """A person who contributed timing data."""

    name: str
    role: Optional[str] = None
    date: Optional[str] = None


class SegmentTime(DocumentModel):
    """A segment's start time, in seconds from the beginning of its track."""

    segment_id: str
    start: float


class OmittedNumber(DocumentModel):
    """A musical number the recording does not perform."""

    number_id: str
    reason: Optional[str] = None


class TrackTiming(DocumentModel):
    """
    Timing data for a single audio track.

    Attributes:
        track_title: Title as it appears in the album metadata
        disc_number: Disc number, if known
        track_number: Track number on the disc, if known
        duration_seconds: Track length, needed for estimation
        number_ids: Musical numbers of the base libretto this track contains
        start_segment_id: Segment the track opens with (resolved or set by hand)
        segment_times: Timed segment references, ordered by start
    """

    OMIT_WHEN_EMPTY = ("segment_times",)

    track_title: str
    disc_number: Optional[int] = None
    track_number: Optional[int] = None
    duration_seconds: Optional[float] = None
    number_ids: list[str] = Field(default_factory=list)
    start_segment_id: Optional[str] = None
    segment_times: list[SegmentTime] = Field(default_factory=list)

    def label(self) -> str:
        """Short "D1T4" style tag used in warnings."""
        return f"D{self.disc_number or 0}T{self.track_number or 0}"


class TimingOverlay(DocumentModel):
    """
    Recording-specific timing data referencing base-libretto segment ids.

    The overlay holds no structural link to its base libretto; ids are looked
    up when resolving, estimating, validating or merging.
    """

    OMIT_WHEN_EMPTY = ("contributors", "omitted_numbers")

    version: str = "1.0"
    base_libretto: str = Field(
        default="", description="Path to the base libretto (informational)"
    )
    recording: RecordingMetadata = Field(default_factory=RecordingMetadata)
    contributors: list[Contributor] = Field(default_factory=list)
    track_timings: list[TrackTiming] = Field(default_factory=list)
    omitted_numbers: list[OmittedNumber] = Field(default_factory=list)

    def segment_ids(self) -> list[str]:
        """All segment ids referenced by track timings, in order."""
        return [
            st.segment_id for track in self.track_timings for st in track.segment_times
        ]

    def covered_number_ids(self) -> list[str]:
        """Number ids referenced by any track, deduplicated in first-seen order."""
        seen: dict[str, None] = {}
        for track in self.track_timings:
            for number_id in track.number_ids:
                seen.setdefault(number_id, None)
        return list(seen)

    def omitted_number_ids(self) -> list[str]:
        """Number ids declared as omitted."""
        return [o.number_id for o in self.omitted_numbers]

    def has_resolved_anchors(self) -> bool:
        """Whether any track carries a start_segment_id."""
        return any(t.start_segment_id for t in self.track_timings)
