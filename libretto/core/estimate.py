"""
Timing estimation from text proportions.

Segment start times are estimated by spreading a track's duration over its
segments in proportion to their word counts. Two modes exist:

- Boundary mode, used when any track has a start_segment_id: one ordered
  segment list covers every referenced number, and each track takes the
  range from its start segment up to the next track's start segment.
  Ranges may cross number boundaries.
- Number mode: whole numbers are assigned to the tracks that reference
  them. A number referenced by several tracks is spread over their pooled
  duration and split back per track.

Tracks that already have segment_times are never touched, so estimation
can be re-run safely after manual edits.
"""

from dataclasses import dataclass, field

from libretto._logging import (
    log_estimation_complete,
    log_track_estimated,
    log_warning,
)
from libretto.config import LibrettoSettings, get_settings
from libretto.core.resolve import (
    SegmentCandidate,
    build_segment_index,
    classify_title_anchors,
    match_anchor,
)
from libretto.core.text import round_ms, word_count
from libretto.models import (
    BaseLibretto,
    MusicalNumber,
    Segment,
    SegmentTime,
    SegmentType,
    TimingOverlay,
    TrackTiming,
)

BOUNDARY_MODE = "boundary"
NUMBER_MODE = "number"


@dataclass
class WeightedSegment:
    """A segment id and its share of a time range."""

    segment_id: str
    weight: float


@dataclass
class TrackEstimateStats:
    """Per-track estimation summary."""

    track_title: str
    disc_number: int | None
    track_number: int | None
    duration: float
    segments_estimated: int
    total_word_weight: float


@dataclass
class EstimateResult:
    """
    Output of estimate().

    Attributes:
        overlay: Copy of the input overlay with segment_times filled in
        stats: One entry per estimated track
        warnings: Human-readable warnings, in the order they were raised
        mode: "boundary" or "number"
    """

    overlay: TimingOverlay
    stats: list[TrackEstimateStats] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    mode: str = NUMBER_MODE

    @property
    def segments_estimated(self) -> int:
        return sum(s.segments_estimated for s in self.stats)


def segment_weight(
    segment: Segment,
    recitative: bool = False,
    settings: LibrettoSettings | None = None,
) -> float:
    """
    Compute a segment's estimation weight.

    The weight is the word count of the segment text. Directions,
    interludes and empty segments get the minimum weight. Segments inside
    a recitative range are discounted.

    Args:
        segment: Base-libretto segment
        recitative: Whether the segment falls in a recitative range
        settings: Settings (default: get_settings())

    Returns:
        Positive weight
    """
    settings = settings or get_settings()
    if segment.segment_type in (SegmentType.DIRECTION, SegmentType.INTERLUDE):
        weight = settings.min_segment_weight
    else:
        weight = float(word_count(segment.text)) or settings.min_segment_weight
    if recitative:
        weight *= settings.recitative_weight_factor
    return weight


def distribute(segments: list[WeightedSegment], duration: float) -> list[SegmentTime]:
    """
    Spread a duration over weighted segments.

    Segment i starts at duration * (sum of weights before i) / (total weight),
    rounded to the millisecond.

    Args:
        segments: Ordered weighted segments
        duration: Range length in seconds

    Returns:
        SegmentTime per segment; empty when duration <= 0 or total weight is 0

    Examples:
        >>> [t.start for t in distribute(
        ...     [WeightedSegment("a", 3), WeightedSegment("b", 9), WeightedSegment("c", 0.5)],
        ...     125.0)]
        [0.0, 30.0, 120.0]
    """
    if not segments or duration <= 0:
        return []
    total = sum(s.weight for s in segments)
    if total <= 0:
        return []

    times = []
    cumulative = 0.0
    for segment in segments:
        start = duration * cumulative / total
        times.append(SegmentTime(segment_id=segment.segment_id, start=round_ms(start)))
        cumulative += segment.weight
    return times


def estimate(
    base: BaseLibretto,
    overlay: TimingOverlay,
    settings: LibrettoSettings | None = None,
) -> EstimateResult:
    """
    Fill empty segment_times in a timing overlay.

    Args:
        base: Base libretto
        overlay: Timing overlay (not modified)
        settings: Settings (default: get_settings())

    Returns:
        EstimateResult with a modified copy of the overlay
    """
    settings = settings or get_settings()
    result = EstimateResult(overlay=overlay.model_copy(deep=True))

    if result.overlay.has_resolved_anchors():
        result.mode = BOUNDARY_MODE
        _estimate_boundaries(base, result, settings)
    else:
        result.mode = NUMBER_MODE
        _estimate_numbers(base, result, settings)

    for warning in result.warnings:
        log_warning(warning)
    log_estimation_complete(result.mode, len(result.stats), result.segments_estimated)
    return result


def _missing_number_warning(number_id: str) -> str:
    return f"Number '{number_id}' referenced by overlay but not found in base libretto"


def _needs_estimate(track: TrackTiming) -> bool:
    return not track.segment_times and bool(track.duration_seconds and track.duration_seconds > 0)


def _record(
    result: EstimateResult,
    track: TrackTiming,
    times: list[SegmentTime],
    weight: float,
) -> None:
    track.segment_times = times
    result.stats.append(
        TrackEstimateStats(
            track_title=track.track_title,
            disc_number=track.disc_number,
            track_number=track.track_number,
            duration=track.duration_seconds or 0.0,
            segments_estimated=len(times),
            total_word_weight=weight,
        )
    )
    log_track_estimated(track.label(), track.duration_seconds or 0.0, len(times), weight)


# Boundary mode

def _estimate_boundaries(
    base: BaseLibretto, result: EstimateResult, settings: LibrettoSettings
) -> None:
    tracks = result.overlay.track_timings
    referenced = set(result.overlay.covered_number_ids())
    known = {n.id for n in base.numbers}
    for number_id in result.overlay.covered_number_ids():
        if number_id not in known:
            result.warnings.append(_missing_number_warning(number_id))

    # Global segment list across referenced numbers, in base-libretto order
    ordered: list[Segment] = []
    first_positions: dict[str, int] = {}
    for number in base.numbers:
        if number.id not in referenced or not number.segments:
            continue
        first_positions[number.id] = len(ordered)
        ordered.extend(number.segments)
    positions = {segment.id: i for i, segment in enumerate(ordered)}

    starts = [
        _track_start(track, positions, first_positions, result.warnings)
        for track in tracks
    ]
    candidates = build_segment_index(base)

    for i, track in enumerate(tracks):
        start = starts[i]
        if start is None or not _needs_estimate(track):
            continue

        end = next((s for s in starts[i + 1:] if s is not None), len(ordered))
        if end <= start:
            result.warnings.append(
                f"{track.label()}: next track starts at or before this track's start "
                f"segment '{ordered[start].id}'; track order disagrees with the base "
                f"libretto, track left unestimated"
            )
            continue

        search_ids = list(track.number_ids)
        if i > 0:
            search_ids += [n for n in tracks[i - 1].number_ids if n not in search_ids]
        recitative = _recitative_flags(
            track, start, end, positions, search_ids, candidates, settings
        )

        weighted = [
            WeightedSegment(
                segment_id=segment.id,
                weight=segment_weight(segment, recitative[k], settings),
            )
            for k, segment in enumerate(ordered[start:end])
        ]
        times = distribute(weighted, track.duration_seconds)
        _record(result, track, times, sum(w.weight for w in weighted) if times else 0.0)


def _track_start(
    track: TrackTiming,
    positions: dict[str, int],
    first_positions: dict[str, int],
    warnings: list[str],
) -> int | None:
    if track.start_segment_id:
        if track.start_segment_id in positions:
            return positions[track.start_segment_id]
        warnings.append(
            f"{track.label()}: start segment '{track.start_segment_id}' not found "
            f"among referenced numbers, using first referenced number"
        )
    for number_id in track.number_ids:
        if number_id in first_positions:
            return first_positions[number_id]
    return None


def _recitative_flags(
    track: TrackTiming,
    start: int,
    end: int,
    positions: dict[str, int],
    search_ids: list[str],
    candidates: list[SegmentCandidate],
    settings: LibrettoSettings,
) -> list[bool]:
    """Mark the segments of [start, end) that fall under a recitative anchor."""
    flags = [False] * (end - start)

    anchored: list[tuple[int, bool]] = []
    for title_anchor in classify_title_anchors(track.track_title):
        matched = match_anchor(
            title_anchor.anchor, search_ids, candidates, settings.anchor_prefix_chars
        )
        if matched is None:
            continue
        pos = positions.get(matched[0])
        if pos is not None and start <= pos < end:
            anchored.append((pos, title_anchor.is_recitative))
    anchored.sort(key=lambda a: a[0])

    for k, (pos, is_recitative) in enumerate(anchored):
        if not is_recitative:
            continue
        until = anchored[k + 1][0] if k + 1 < len(anchored) else end
        for p in range(pos, until):
            flags[p - start] = True
    return flags


# Number mode

def _estimate_numbers(
    base: BaseLibretto, result: EstimateResult, settings: LibrettoSettings
) -> None:
    tracks = result.overlay.track_timings

    number_to_tracks: dict[str, list[int]] = {}
    for i, track in enumerate(tracks):
        for number_id in track.number_ids:
            indices = number_to_tracks.setdefault(number_id, [])
            if i not in indices:
                indices.append(i)

    estimated: set[int] = set()
    for number_id, indices in number_to_tracks.items():
        number = base.find_number(number_id)
        if number is None:
            result.warnings.append(_missing_number_warning(number_id))
            continue
        if not number.segments:
            continue

        eligible = [i for i in indices if _needs_estimate(tracks[i])]
        if not eligible:
            continue

        if len(eligible) == 1:
            index = eligible[0]
            if index in estimated:
                continue
            track = tracks[index]
            weighted: list[WeightedSegment] = []
            for nid in track.number_ids:
                track_number = base.find_number(nid)
                if track_number is not None:
                    weighted.extend(_weighted_number(track_number, settings))
            times = distribute(weighted, track.duration_seconds)
            _record(result, track, times, sum(w.weight for w in weighted) if times else 0.0)
            estimated.add(index)
            continue

        if any(i in estimated for i in eligible):
            continue
        _split_pooled(number, [tracks[i] for i in eligible], result, settings)
        estimated.update(eligible)

    for i, track in enumerate(tracks):
        if i in estimated or not _needs_estimate(track):
            continue
        if any(_has_segments(base, nid) for nid in track.number_ids):
            result.warnings.append(
                f"{track.label()}: shares a number with an already estimated track, "
                f"track left unestimated"
            )


def _has_segments(base: BaseLibretto, number_id: str) -> bool:
    number = base.find_number(number_id)
    return number is not None and bool(number.segments)


def _weighted_number(number: MusicalNumber, settings: LibrettoSettings) -> list[WeightedSegment]:
    return [
        WeightedSegment(segment_id=s.id, weight=segment_weight(s, settings=settings))
        for s in number.segments
    ]


def _split_pooled(
    number: MusicalNumber,
    tracks: list[TrackTiming],
    result: EstimateResult,
    settings: LibrettoSettings,
) -> None:
    """Spread one number over several tracks' pooled duration and split it back."""
    weighted = _weighted_number(number, settings)
    weights = {w.segment_id: w.weight for w in weighted}
    pooled = distribute(weighted, sum(t.duration_seconds for t in tracks))

    cursor = 0
    cumulative = 0.0
    for k, track in enumerate(tracks):
        track_end = cumulative + track.duration_seconds
        last = k == len(tracks) - 1
        times = []
        while cursor < len(pooled) and (last or pooled[cursor].start < track_end):
            segment_time = pooled[cursor]
            times.append(
                SegmentTime(
                    segment_id=segment_time.segment_id,
                    start=max(0.0, round_ms(segment_time.start - cumulative)),
                )
            )
            cursor += 1
        _record(result, track, times, sum(weights[t.segment_id] for t in times))
        cumulative = track_end
