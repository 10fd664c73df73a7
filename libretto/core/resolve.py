"""
Anchor resolution: find where each track starts in the base libretto.

Track titles of opera recordings conventionally quote the opening words of
the track, e.g. 'Recitativo "Bravo, signor padrone"; No. 3 Cavatina "Se vuol
ballare"'. The first quoted anchor is matched against segment text to set
the track's start_segment_id, which the estimator uses as a boundary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from libretto._logging import log_resolution_complete, log_warning
from libretto.config import LibrettoSettings, get_settings
from libretto.core.text import first_line, normalize_for_match
from libretto.models import BaseLibretto, TimingOverlay

_RECITATIVE_KEYWORD = "recitativ"
_SUNG_KEYWORDS = (
    "aria", "duet", "cavatina", "canzon", "terzet", "trio",
    "quartet", "quintet", "sestet", "sextet", "finale",
    "coro", "chorus", "sinfonia", "marcia",
)

_QUOTE_CLOSERS = {'"': ('"',), "“": ("”", '"')}


class MatchMethod(str, Enum):
    """How a track's start segment was determined."""

    PREFIX = "prefix"
    FIRST_LINE = "first_line"
    SUBSTRING = "substring"
    MANUAL = "manual"
    FALLBACK = "fallback"


@dataclass
class TitleAnchor:
    """A quoted anchor from a track title and whether it introduces a recitative."""

    is_recitative: bool
    anchor: str


@dataclass
class SegmentCandidate:
    """A segment that anchors can match against."""

    segment_id: str
    number_id: str
    first_line: str
    full_text: str
    first_line_norm: str
    full_text_norm: str


@dataclass
class TrackResolution:
    """Resolution outcome for one track."""

    track_title: str
    disc_number: int | None
    track_number: int | None
    anchors: list[str] = field(default_factory=list)
    resolved_segment_id: str | None = None
    match_method: MatchMethod | None = None


@dataclass
class ResolveResult:
    """
    Output of resolve_anchors().

    Attributes:
        overlay: Copy of the input overlay with start_segment_id filled in
        resolutions: One entry per track, in track order
        warnings: Human-readable warnings for unmatched anchors
    """

    overlay: TimingOverlay
    resolutions: list[TrackResolution] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def resolved_count(self) -> int:
        return sum(1 for r in self.resolutions if r.resolved_segment_id)


def extract_anchors(title: str) -> list[str]:
    """
    Extract quoted spans from a track title.

    Straight double quotes and typographic “...” quotes are recognized; a
    typographic opener may also be closed by a straight quote.

    Args:
        title: Track title

    Returns:
        Trimmed, non-empty quoted spans in left-to-right order

    Examples:
        >>> extract_anchors('Recitativo "Bravo, signor padrone"; No. 3 Cavatina "Se vuol ballare"')
        ['Bravo, signor padrone', 'Se vuol ballare']
    """
    anchors = []
    i = 0
    while i < len(title):
        closers = _QUOTE_CLOSERS.get(title[i])
        if closers is None:
            i += 1
            continue
        j = i + 1
        while j < len(title) and title[j] not in closers:
            j += 1
        quoted = title[i + 1:j].strip()
        if quoted:
            anchors.append(quoted)
        i = j + 1
    return anchors


def is_recitative_context(context: str) -> bool:
    """
    Decide whether title text preceding an anchor introduces a recitative.

    True when the last "recitativ" occurs after every sung-form keyword, or
    when there is a recitative keyword and no sung-form keyword at all.
    """
    context = context.lower()
    recit_pos = context.rfind(_RECITATIVE_KEYWORD)
    if recit_pos < 0:
        return False
    sung_pos = max(context.rfind(kw) for kw in _SUNG_KEYWORDS)
    return recit_pos > sung_pos


def classify_title_anchors(title: str) -> list[TitleAnchor]:
    """
    Extract anchors and classify each by the title text since the previous one.

    Examples:
        >>> [a.is_recitative for a in classify_title_anchors(
        ...     'Recitativo "Bravo, signor padrone"; No. 3 Cavatina "Se vuol ballare"')]
        [True, False]
    """
    result = []
    search_from = 0
    for anchor in extract_anchors(title):
        pos = title.find(anchor, search_from)
        if pos < 0:
            continue
        context = title[search_from:pos]
        result.append(
            TitleAnchor(is_recitative=is_recitative_context(context), anchor=anchor)
        )
        search_from = pos + len(anchor)
    return result


def build_segment_index(base: BaseLibretto) -> list[SegmentCandidate]:
    """Build match candidates for every segment with non-empty text."""
    candidates = []
    for number, segment in base.iter_segments():
        if not segment.text:
            continue
        line = first_line(segment.text)
        candidates.append(
            SegmentCandidate(
                segment_id=segment.id,
                number_id=number.id,
                first_line=line,
                full_text=segment.text,
                first_line_norm=normalize_for_match(line),
                full_text_norm=normalize_for_match(segment.text),
            )
        )
    return candidates


def _prefix_match(anchor_norm: str, candidate: SegmentCandidate, prefix_chars: int) -> bool:
    if not candidate.first_line_norm:
        return False
    anchor_prefix = anchor_norm[:prefix_chars]
    candidate_prefix = candidate.first_line_norm[:prefix_chars]
    return (
        candidate.first_line_norm.startswith(anchor_prefix)
        or anchor_norm.startswith(candidate_prefix)
    )


def _first_line_match(anchor_norm: str, candidate: SegmentCandidate, prefix_chars: int) -> bool:
    return anchor_norm in candidate.first_line_norm


def _full_text_match(anchor_norm: str, candidate: SegmentCandidate, prefix_chars: int) -> bool:
    return anchor_norm in candidate.full_text_norm


# Tried in order; each strategy runs a restricted pass and then an unrestricted one.
MATCH_STRATEGIES: list[tuple[MatchMethod, Callable[[str, SegmentCandidate, int], bool]]] = [
    (MatchMethod.PREFIX, _prefix_match),
    (MatchMethod.FIRST_LINE, _first_line_match),
    (MatchMethod.SUBSTRING, _full_text_match),
]


def match_anchor(
    anchor: str,
    number_ids: list[str],
    candidates: list[SegmentCandidate],
    prefix_chars: int = 15,
) -> tuple[str, MatchMethod] | None:
    """
    Find the segment an anchor refers to.

    Args:
        anchor: Quoted anchor text
        number_ids: Numbers to search first; the whole index is searched next
        candidates: Index from build_segment_index()
        prefix_chars: Normalized characters compared by the prefix strategy

    Returns:
        Tuple of (segment_id, method), or None if nothing matched
    """
    anchor_norm = normalize_for_match(anchor)
    if not anchor_norm:
        return None

    allowed = set(number_ids)
    for method, matches in MATCH_STRATEGIES:
        for restricted in (True, False):
            for candidate in candidates:
                if restricted and candidate.number_id not in allowed:
                    continue
                if matches(anchor_norm, candidate, prefix_chars):
                    return candidate.segment_id, method
    return None


def resolve_anchors(
    base: BaseLibretto,
    overlay: TimingOverlay,
    settings: LibrettoSettings | None = None,
) -> ResolveResult:
    """
    Set each track's start_segment_id from the first anchor in its title.

    Tracks that already carry a start_segment_id are left alone. Tracks with
    no quoted anchor start at the first segment of their first number. The
    first anchor is searched in the track's own numbers plus the previous
    track's, then everywhere.

    Args:
        base: Base libretto
        overlay: Timing overlay (not modified)
        settings: Settings (default: get_settings())

    Returns:
        ResolveResult with a modified copy of the overlay
    """
    settings = settings or get_settings()
    result_overlay = overlay.model_copy(deep=True)
    candidates = build_segment_index(base)
    resolutions: list[TrackResolution] = []
    warnings: list[str] = []

    for i, track in enumerate(result_overlay.track_timings):
        anchors = extract_anchors(track.track_title)
        resolution = TrackResolution(
            track_title=track.track_title,
            disc_number=track.disc_number,
            track_number=track.track_number,
            anchors=anchors,
        )
        resolutions.append(resolution)

        if track.start_segment_id:
            resolution.resolved_segment_id = track.start_segment_id
            resolution.match_method = MatchMethod.MANUAL
            continue

        if not anchors:
            fallback = _first_segment_of_first_number(base, track.number_ids)
            if fallback is not None:
                track.start_segment_id = fallback
                resolution.resolved_segment_id = fallback
                resolution.match_method = MatchMethod.FALLBACK
            continue

        search_ids = list(track.number_ids)
        if i > 0:
            for number_id in overlay.track_timings[i - 1].number_ids:
                if number_id not in search_ids:
                    search_ids.append(number_id)

        matched = match_anchor(
            anchors[0], search_ids, candidates, settings.anchor_prefix_chars
        )
        if matched is None:
            message = (
                f'{track.label()}: anchor "{anchors[0]}" - no match found in base libretto'
            )
            warnings.append(message)
            log_warning(message)
            continue

        segment_id, method = matched
        track.start_segment_id = segment_id
        resolution.resolved_segment_id = segment_id
        resolution.match_method = method

    result = ResolveResult(
        overlay=result_overlay, resolutions=resolutions, warnings=warnings
    )
    log_resolution_complete(result.resolved_count, len(resolutions), len(warnings))
    return result


def _first_segment_of_first_number(
    base: BaseLibretto, number_ids: list[str]
) -> str | None:
    if not number_ids:
        return None
    number = base.find_number(number_ids[0])
    if number is None or not number.segments:
        return None
    return number.segments[0].id
