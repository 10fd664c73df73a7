"""
libretto - structure opera librettos and align them to recording timings.

Usage:
    from libretto.data import load_elements, load_timing_overlay
    from libretto import OperaMetadata, build_base_libretto, resolve_anchors, estimate, merge

    # Classify the original and translated element streams
    opera = OperaMetadata(title="Le nozze di Figaro", composer="Mozart", language="it")
    base = build_base_libretto(opera, load_elements("it.json"), load_elements("en.json"))

    # Fill in timing for a recording
    overlay = load_timing_overlay("timing.json")
    overlay = resolve_anchors(base, overlay).overlay
    overlay = estimate(base, overlay).overlay

    # Merge into the interchange document
    interchange = merge(base, overlay).libretto
    for track in interchange.tracks:
        print(track.track_id, len(track.segments))
"""

from libretto.models import (
    ActHeader,
    BaseLibretto,
    BlankLine,
    CastMember,
    Character,
    ContentElement,
    Direction,
    InterchangeLibretto,
    MusicalNumber,
    NumberLabel,
    NumberType,
    OperaMetadata,
    Segment,
    SegmentTime,
    SegmentType,
    Text,
    TimingOverlay,
    TrackTiming,
)
from libretto.parse import ClassificationResult, align, build_base_libretto, classify
from libretto.core import (
    IssueKind,
    ValidationIssue,
    estimate,
    merge,
    resolve_anchors,
    scaffold_overlay,
    validate_base,
    validate_overlay,
)
from libretto.config import LibrettoSettings, get_settings, configure
from libretto.exceptions import (
    LibrettoError,
    DocumentError,
    DocumentNotFoundError,
    ConfigurationError,
    ValidationFailedError,
)

__version__ = "0.1.0"
__all__ = [
    # Version
    "__version__",
    # Models
    "ActHeader",
    "NumberLabel",
    "Character",
    "Direction",
    "Text",
    "BlankLine",
    "ContentElement",
    "BaseLibretto",
    "CastMember",
    "MusicalNumber",
    "NumberType",
    "OperaMetadata",
    "Segment",
    "SegmentType",
    "TimingOverlay",
    "TrackTiming",
    "SegmentTime",
    "InterchangeLibretto",
    # Classification
    "ClassificationResult",
    "classify",
    "align",
    "build_base_libretto",
    # Timing
    "resolve_anchors",
    "estimate",
    "merge",
    "scaffold_overlay",
    # Validation
    "IssueKind",
    "ValidationIssue",
    "validate_base",
    "validate_overlay",
    # Config
    "LibrettoSettings",
    "get_settings",
    "configure",
    # Exceptions
    "LibrettoError",
    "DocumentError",
    "DocumentNotFoundError",
    "ConfigurationError",
    "ValidationFailedError",
]
