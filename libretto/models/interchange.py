"""
Interchange data model: the timed, self-contained document for display systems.
"""

from typing import Optional

from pydantic import Field

from libretto.models._base import DocumentModel


class InterchangeOpera(DocumentModel):
    """Opera metadata in the interchange format."""

    title: str
    composer: str
    librettist: Optional[str] = None
    language: str
    translation_language: Optional[str] = None
    year: Optional[int] = None


class InterchangeSegment(DocumentModel):
    """
    A timed text segment.

    Attributes:
        start: Start time in seconds from the track start
        end: End time (next segment's start, or the track duration)
        type: Segment type; "sung" is the default and is not written out
        group: Ensemble tag; segments sharing a group are displayed together
    """

    OMIT_WHEN_DEFAULT = {"type": "sung"}

    start: float
    end: Optional[float] = None
    type: str = "sung"
    character: Optional[str] = None
    text: Optional[str] = None
    translation: Optional[str] = None
    direction: Optional[str] = None
    act: Optional[str] = None
    scene: Optional[str] = None
    group: Optional[str] = None


class InterchangeTrack(DocumentModel):
    """A track and its timed segments."""

    track_id: str
    title: str
    album: Optional[str] = None
    artist: Optional[str] = None
    disc_number: Optional[int] = None
    track_number: Optional[int] = None
    duration_seconds: Optional[float] = None
    act: Optional[str] = None
    scene: Optional[str] = None
    segments: list[InterchangeSegment] = Field(default_factory=list)

    def segment_at(self, time: float) -> Optional[InterchangeSegment]:
        """Return the active segment at a playback time: the last one starting at or before it."""
        for segment in reversed(self.segments):
            if segment.start <= time:
                return segment
        return None


class InterchangeLibretto(DocumentModel):
    """A timed libretto for a complete opera recording."""

    version: str = "1.0"
    opera: InterchangeOpera
    tracks: list[InterchangeTrack] = Field(default_factory=list)

    def find_track(self, track_id: str) -> Optional[InterchangeTrack]:
        """Look up a track by id."""
        for track in self.tracks:
            if track.track_id == track_id:
                return track
        return None
