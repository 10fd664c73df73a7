"""
Content classification for the libretto library.

This package turns a flat element stream into structure:
- Cast list extraction
- Act/scene tracking and musical-number split
- Character-attributed segment split
- Bilingual alignment by generated id
"""

from libretto.parse.cast import CastParseResult, extract_cast
from libretto.parse.structure import (
    RawNumber,
    classify_number,
    generate_id,
    is_noise_label,
    parse_act_number,
    split_into_numbers,
)
from libretto.parse.segments import split_segments
from libretto.parse.pipeline import ClassificationResult, classify
from libretto.parse.align import (
    align,
    align_numbers,
    build_base_libretto,
    parse_bilingual,
)

__all__ = [
    # Cast
    "CastParseResult",
    "extract_cast",
    # Structure
    "RawNumber",
    "classify_number",
    "generate_id",
    "is_noise_label",
    "parse_act_number",
    "split_into_numbers",
    # Segments
    "split_segments",
    # Pipeline
    "ClassificationResult",
    "classify",
    # Alignment
    "align",
    "align_numbers",
    "build_base_libretto",
    "parse_bilingual",
]
