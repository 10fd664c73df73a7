"""Tests for proportional timing estimation."""

import pytest

from libretto.config import configure
from libretto.core.estimate import (
    BOUNDARY_MODE,
    NUMBER_MODE,
    WeightedSegment,
    distribute,
    estimate,
    segment_weight,
)
from libretto.models import SegmentTime, SegmentType, TimingOverlay, TrackTiming

from conftest import make_segment


def _starts(track):
    return [t.start for t in track.segment_times]


def _ids(track):
    return [t.segment_id for t in track.segment_times]


# --- Weights and distribution ---

def test_segment_weight_counts_words():
    assert segment_weight(make_segment("a", "Cinque dieci venti")) == 3.0


def test_segment_weight_floor_for_directions_and_empty():
    """Directions, interludes and empty text fall back to the minimum weight."""
    assert segment_weight(make_segment("a", segment_type=SegmentType.DIRECTION)) == 0.5
    assert segment_weight(make_segment("b", "la la", segment_type=SegmentType.INTERLUDE)) == 0.5
    assert segment_weight(make_segment("c", "   ")) == 0.5


def test_segment_weight_recitative_discount():
    assert segment_weight(make_segment("a", "one two three four"), recitative=True) == 2.0


def test_segment_weight_follows_settings():
    configure(min_segment_weight=1.0, recitative_weight_factor=0.25)
    assert segment_weight(make_segment("a")) == 1.0
    assert segment_weight(make_segment("b", "one two three four"), recitative=True) == 1.0


def test_distribute_proportional_starts():
    """Each start is the duration times the share of weight before it."""
    weighted = [WeightedSegment(str(i), w) for i, w in enumerate([1, 2, 3, 4])]
    assert [t.start for t in distribute(weighted, 10.0)] == [0.0, 1.0, 3.0, 6.0]


def test_distribute_degenerate_inputs():
    assert distribute([], 10.0) == []
    assert distribute([WeightedSegment("a", 1.0)], 0.0) == []


# --- Number mode ---

def test_single_track_number(weighted_base, single_track_overlay):
    """Weights 3, 9 and 0.5 over 125 seconds."""
    result = estimate(weighted_base, single_track_overlay)

    track = result.overlay.track_timings[0]
    assert result.mode == NUMBER_MODE
    assert _ids(track) == ["no-1-001", "no-1-002", "no-1-003"]
    assert _starts(track) == [0.0, 30.0, 120.0]
    assert result.stats[0].total_word_weight == 12.5
    assert result.segments_estimated == 3


def test_estimate_does_not_modify_input(weighted_base, single_track_overlay):
    estimate(weighted_base, single_track_overlay)
    assert single_track_overlay.track_timings[0].segment_times == []


def test_multi_track_number_is_pooled(finale_base):
    """A finale over two tracks is spread over both and split back with offsets."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Finale I", duration_seconds=25.0, number_ids=["no-2"]),
            TrackTiming(track_title="Finale II", duration_seconds=25.0, number_ids=["no-2"]),
        ]
    )
    result = estimate(finale_base, overlay)

    first, second = result.overlay.track_timings
    assert _ids(first) == ["no-2-001", "no-2-002"]
    assert _starts(first) == [0.0, 12.5]
    assert _ids(second) == ["no-2-003", "no-2-004"]
    assert _starts(second) == [0.0, 12.5]
    assert [s.total_word_weight for s in result.stats] == [10.0, 10.0]


def test_tracks_with_times_are_left_alone(weighted_base):
    """Re-running estimation never overwrites existing segment times."""
    existing = [SegmentTime(segment_id="no-1-001", start=0.0)]
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(
                track_title="Track 1",
                duration_seconds=60.0,
                number_ids=["no-1"],
                segment_times=existing,
            )
        ]
    )
    result = estimate(weighted_base, overlay)
    assert result.overlay.track_timings[0].segment_times == existing
    assert result.stats == []


def test_track_without_duration_is_skipped(weighted_base):
    overlay = TimingOverlay(
        track_timings=[TrackTiming(track_title="Track 1", number_ids=["no-1"])]
    )
    result = estimate(weighted_base, overlay)
    assert result.overlay.track_timings[0].segment_times == []


def test_unknown_number_warns(weighted_base, caplog):
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Track 9", duration_seconds=10.0, number_ids=["no-9"])
        ]
    )
    result = estimate(weighted_base, overlay)
    message = "Number 'no-9' referenced by overlay but not found in base libretto"
    assert result.warnings == [message]
    assert message in caplog.text


# --- Boundary mode ---

def test_crossover_segment_goes_to_next_track(two_number_base):
    """The start segment of track 2 sits inside no-1 and is timed by track 2."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Track 1", disc_number=1, track_number=1,
                        duration_seconds=30.0, number_ids=["no-1"],
                        start_segment_id="no-1-001"),
            TrackTiming(track_title="Track 2", disc_number=1, track_number=2,
                        duration_seconds=40.0, number_ids=["no-1", "no-2"],
                        start_segment_id="no-1-003"),
        ]
    )
    result = estimate(two_number_base, overlay)

    first, second = result.overlay.track_timings
    assert result.mode == BOUNDARY_MODE
    assert _ids(first) == ["no-1-001", "no-1-002"]
    assert _starts(first) == [0.0, 15.0]
    assert _ids(second) == ["no-1-003", "no-1-004", "no-2-001", "no-2-002"]
    assert _starts(second) == [0.0, 10.0, 20.0, 30.0]


def test_recitative_range_is_discounted(two_number_base):
    """Segments from a recitative anchor up to the next anchor weigh half."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(
                track_title='Recitativo "Bravo signor padrone"; N° 1 Cavatina "Se vuol ballare"',
                duration_seconds=28.0,
                number_ids=["no-1"],
                start_segment_id="no-1-001",
            )
        ]
    )
    result = estimate(two_number_base, overlay)
    # weights 4, 4, 2, 4
    assert _starts(result.overlay.track_timings[0]) == [0.0, 8.0, 16.0, 20.0]
    assert result.stats[0].total_word_weight == 14.0


def test_unknown_start_segment_falls_back_to_first_number(two_number_base):
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Track 1", disc_number=2, track_number=1,
                        duration_seconds=12.0, number_ids=["no-2"],
                        start_segment_id="no-2-099"),
        ]
    )
    result = estimate(two_number_base, overlay)
    assert _ids(result.overlay.track_timings[0]) == ["no-2-001", "no-2-002"]
    assert "D2T1: start segment 'no-2-099' not found" in result.warnings[0]


def test_out_of_order_tracks_are_skipped(two_number_base):
    """A track whose successor starts earlier is warned about and left unestimated."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Track 1", disc_number=1, track_number=1,
                        duration_seconds=10.0, number_ids=["no-1"],
                        start_segment_id="no-1-003"),
            TrackTiming(track_title="Track 2", disc_number=1, track_number=2,
                        duration_seconds=10.0, number_ids=["no-1"],
                        start_segment_id="no-1-001"),
        ]
    )
    result = estimate(two_number_base, overlay)

    first, second = result.overlay.track_timings
    assert first.segment_times == []
    assert len(second.segment_times) == 4
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("D1T1:")
    assert "track order disagrees" in result.warnings[0]


@pytest.mark.parametrize("duration", [0.0, None])
def test_boundary_track_without_duration(two_number_base, duration):
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Track 1", duration_seconds=duration,
                        number_ids=["no-1"], start_segment_id="no-1-001"),
        ]
    )
    result = estimate(two_number_base, overlay)
    assert result.overlay.track_timings[0].segment_times == []
    assert result.segments_estimated == 0


def test_estimate_is_idempotent(two_number_base):
    """A second pass over an estimated overlay changes nothing."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Track 1", duration_seconds=30.0, number_ids=["no-1"]),
            TrackTiming(track_title="Track 2", duration_seconds=20.0, number_ids=["no-2"]),
        ]
    )
    once = estimate(two_number_base, overlay).overlay
    twice = estimate(two_number_base, once)
    assert twice.overlay == once
    assert twice.stats == []


def test_shared_number_skips_only_tracks_without_duration(finale_base):
    """A shared number goes wholly to the one sharing track that can be timed."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Finale I", number_ids=["no-2"]),
            TrackTiming(track_title="Finale II", duration_seconds=25.0, number_ids=["no-2"]),
        ]
    )
    result = estimate(finale_base, overlay)

    first, second = result.overlay.track_timings
    assert first.segment_times == []
    assert _ids(second) == ["no-2-001", "no-2-002", "no-2-003", "no-2-004"]
    assert _starts(second) == [0.0, 6.25, 12.5, 18.75]
    assert result.warnings == []


def test_shared_number_pools_over_remaining_tracks(finale_base):
    """Tracks that already have times drop out of the pool."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="Finale I", duration_seconds=25.0, number_ids=["no-2"]),
            TrackTiming(track_title="Finale II", duration_seconds=10.0, number_ids=["no-2"],
                        segment_times=[SegmentTime(segment_id="no-2-004", start=0.0)]),
            TrackTiming(track_title="Finale III", duration_seconds=25.0, number_ids=["no-2"]),
        ]
    )
    result = estimate(finale_base, overlay)

    first, second, third = result.overlay.track_timings
    assert _ids(first) == ["no-2-001", "no-2-002"]
    assert _ids(second) == ["no-2-004"]
    assert _ids(third) == ["no-2-003", "no-2-004"]
    assert _starts(third) == [0.0, 12.5]


def test_number_left_by_a_pool_goes_to_its_other_track(two_number_base):
    """After a pool fills a shared track, a later number falls to the track still open."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="A", disc_number=1, track_number=1,
                        duration_seconds=10.0, number_ids=["no-1"]),
            TrackTiming(track_title="B", disc_number=1, track_number=2,
                        duration_seconds=10.0, number_ids=["no-1", "no-2"]),
            TrackTiming(track_title="C", disc_number=1, track_number=3,
                        duration_seconds=10.0, number_ids=["no-2"]),
        ]
    )
    result = estimate(two_number_base, overlay)

    first, second, third = result.overlay.track_timings
    assert _ids(first) == ["no-1-001", "no-1-002"]
    assert _ids(second) == ["no-1-003", "no-1-004"]
    assert _ids(third) == ["no-2-001", "no-2-002"]
    assert _starts(third) == [0.0, 5.0]
    assert result.warnings == []


def test_track_blocked_by_estimated_neighbour_warns(two_number_base):
    """A timeable track left out of every pool is reported."""
    overlay = TimingOverlay(
        track_timings=[
            TrackTiming(track_title="A", disc_number=1, track_number=1,
                        duration_seconds=15.0, number_ids=["no-1"]),
            # too short to receive a segment of the no-1 pool
            TrackTiming(track_title="B", disc_number=1, track_number=2,
                        duration_seconds=1.0, number_ids=["no-1", "no-2"]),
            TrackTiming(track_title="C", disc_number=1, track_number=3,
                        duration_seconds=9.0, number_ids=["no-1"]),
            TrackTiming(track_title="D", disc_number=1, track_number=4,
                        duration_seconds=10.0, number_ids=["no-2"]),
        ]
    )
    result = estimate(two_number_base, overlay)

    tracks = result.overlay.track_timings
    assert _ids(tracks[0]) == ["no-1-001", "no-1-002", "no-1-003"]
    assert tracks[1].segment_times == []
    assert _ids(tracks[2]) == ["no-1-004"]
    assert tracks[3].segment_times == []
    assert result.warnings == [
        "D1T4: shares a number with an already estimated track, track left unestimated"
    ]
