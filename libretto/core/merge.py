"""
Merge a base libretto and a timing overlay into an interchange document.

Every SegmentTime becomes one interchange segment carrying its own text,
character, translation, direction, act and scene, plus an end time taken
from the next segment's start (or the track duration).
"""

from dataclasses import dataclass, field

from libretto._logging import log_merge_complete, log_warning
from libretto.config import LibrettoSettings, get_settings
from libretto.models import (
    BaseLibretto,
    InterchangeLibretto,
    InterchangeOpera,
    InterchangeSegment,
    InterchangeTrack,
    RecordingMetadata,
    Segment,
    SegmentTime,
    TimingOverlay,
    TrackTiming,
)


@dataclass
class MergeStats:
    """Counts describing a merge."""

    base_segments: int
    overlay_references: int
    merged_segments: int
    tracks: int


@dataclass
class MergeResult:
    """Output of merge()."""

    libretto: InterchangeLibretto
    stats: MergeStats
    warnings: list[str] = field(default_factory=list)


@dataclass
class _SegmentContext:
    segment: Segment
    act: str
    scene: str | None


def track_id(track: TrackTiming, index: int) -> str:
    """
    Build an interchange track id from the available numbering.

    Args:
        track: Track timing
        index: Zero-based position of the track in the overlay

    Returns:
        "d{disc}-t{track}", "t{track}" or "track-{index + 1}"
    """
    if track.disc_number is not None and track.track_number is not None:
        return f"d{track.disc_number}-t{track.track_number}"
    if track.track_number is not None:
        return f"t{track.track_number}"
    return f"track-{index + 1}"


def artist_name(recording: RecordingMetadata) -> str | None:
    """Conductor, or "conductor / orchestra" when both are known."""
    if not recording.conductor:
        return None
    if recording.orchestra:
        return f"{recording.conductor} / {recording.orchestra}"
    return recording.conductor


def merge(
    base: BaseLibretto,
    overlay: TimingOverlay,
    settings: LibrettoSettings | None = None,
) -> MergeResult:
    """
    Merge a base libretto with a timing overlay.

    A SegmentTime whose id is missing from the base still produces a slot
    (with empty text fields) and a warning, so positions are never lost.

    Args:
        base: Base libretto
        overlay: Validated timing overlay
        settings: Settings (default: get_settings())

    Returns:
        MergeResult with the interchange document, counts and warnings
    """
    settings = settings or get_settings()
    contexts = {
        segment.id: _SegmentContext(segment, number.act, number.scene)
        for number, segment in base.iter_segments()
    }
    warnings: list[str] = []
    artist = artist_name(overlay.recording)

    tracks = []
    for i, track in enumerate(overlay.track_timings):
        segments = [
            _merge_segment(track, j, contexts, warnings)
            for j in range(len(track.segment_times))
        ]
        tracks.append(
            InterchangeTrack(
                track_id=track_id(track, i),
                title=track.track_title,
                album=overlay.recording.album_title,
                artist=artist,
                disc_number=track.disc_number,
                track_number=track.track_number,
                duration_seconds=track.duration_seconds,
                act=segments[0].act if segments else None,
                scene=segments[0].scene if segments else None,
                segments=segments,
            )
        )

    opera = InterchangeOpera(**base.opera.model_dump())
    stats = MergeStats(
        base_segments=len(contexts),
        overlay_references=sum(len(t.segment_times) for t in overlay.track_timings),
        merged_segments=sum(len(t.segments) for t in tracks),
        tracks=len(tracks),
    )
    for warning in warnings:
        log_warning(warning)
    log_merge_complete(stats.tracks, stats.merged_segments)

    return MergeResult(
        libretto=InterchangeLibretto(
            version=settings.document_version, opera=opera, tracks=tracks
        ),
        stats=stats,
        warnings=warnings,
    )


def _merge_segment(
    track: TrackTiming,
    index: int,
    contexts: dict[str, _SegmentContext],
    warnings: list[str],
) -> InterchangeSegment:
    segment_time: SegmentTime = track.segment_times[index]
    if index + 1 < len(track.segment_times):
        end = track.segment_times[index + 1].start
    else:
        end = track.duration_seconds

    context = contexts.get(segment_time.segment_id)
    if context is None:
        warnings.append(
            f"Track '{track.track_title}': segment '{segment_time.segment_id}' "
            f"not found in base libretto"
        )
        return InterchangeSegment(start=segment_time.start, end=end)

    segment = context.segment
    return InterchangeSegment(
        start=segment_time.start,
        end=end,
        type=segment.segment_type.value,
        character=segment.character,
        text=segment.text,
        translation=segment.translation,
        direction=segment.direction,
        act=context.act,
        scene=context.scene,
        group=segment.group,
    )


def scaffold_overlay(
    base: BaseLibretto,
    base_path: str,
    settings: LibrettoSettings | None = None,
) -> TimingOverlay:
    """
    Build a starter overlay: one track per number, every segment at 0.0.

    Args:
        base: Base libretto
        base_path: Path recorded in the overlay's base_libretto field
        settings: Settings (default: get_settings())

    Returns:
        New TimingOverlay to be edited by hand or estimated
    """
    settings = settings or get_settings()
    return TimingOverlay(
        version=settings.document_version,
        base_libretto=base_path,
        track_timings=[
            TrackTiming(
                track_title=number.label,
                number_ids=[number.id],
                segment_times=[
                    SegmentTime(segment_id=segment.id, start=0.0)
                    for segment in number.segments
                ],
            )
            for number in base.numbers
        ],
    )
