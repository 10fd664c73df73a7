"""
Core modules for the libretto library.

This package contains the timing-alignment engine:
- Text normalization helpers
- Anchor resolution from track titles
- Proportional timing estimation
- Merging into the interchange format
- Cross-reference validation
"""

from libretto.core.text import normalize_for_match, round_ms, slugify, word_count
from libretto.core.resolve import (
    MatchMethod,
    ResolveResult,
    TitleAnchor,
    TrackResolution,
    build_segment_index,
    classify_title_anchors,
    extract_anchors,
    match_anchor,
    resolve_anchors,
)
from libretto.core.estimate import (
    EstimateResult,
    TrackEstimateStats,
    WeightedSegment,
    distribute,
    estimate,
    segment_weight,
)
from libretto.core.merge import MergeResult, MergeStats, merge, scaffold_overlay
from libretto.core.validate import (
    CoverageReport,
    IssueKind,
    ValidationIssue,
    coverage_report,
    raise_for_issues,
    validate_base,
    validate_overlay,
    validate_overlay_standalone,
)

__all__ = [
    # Text
    "normalize_for_match",
    "round_ms",
    "slugify",
    "word_count",
    # Resolve
    "MatchMethod",
    "ResolveResult",
    "TitleAnchor",
    "TrackResolution",
    "build_segment_index",
    "classify_title_anchors",
    "extract_anchors",
    "match_anchor",
    "resolve_anchors",
    # Estimate
    "EstimateResult",
    "TrackEstimateStats",
    "WeightedSegment",
    "distribute",
    "estimate",
    "segment_weight",
    # Merge
    "MergeResult",
    "MergeStats",
    "merge",
    "scaffold_overlay",
    # Validate
    "CoverageReport",
    "IssueKind",
    "ValidationIssue",
    "coverage_report",
    "raise_for_issues",
    "validate_base",
    "validate_overlay",
    "validate_overlay_standalone",
]
