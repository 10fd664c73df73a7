"""
Bilingual alignment by generated id.

Two structurally parallel element streams classify to the same number and
segment ids, so a translation is attached by looking up the segment with
the identical id. No fuzzy or semantic matching takes place.
"""

from libretto._logging import get_logger
from libretto.config import LibrettoSettings, get_settings
from libretto.models import (
    AcquiredLibretto,
    BaseLibretto,
    ContentElement,
    MusicalNumber,
    OperaMetadata,
    Segment,
)
from libretto.parse.pipeline import classify

logger = get_logger(__name__)


def align(original: list[Segment], translation: list[Segment]) -> list[Segment]:
    """
    Attach translation text to original segments with the same id.

    Args:
        original: Original-language segments
        translation: Translation-language segments

    Returns:
        New segments; originals without a counterpart are copied unchanged
        and translation segments without a counterpart are dropped
    """
    by_id = {s.id: s for s in translation}
    aligned = []
    for segment in original:
        counterpart = by_id.get(segment.id)
        if counterpart is None:
            aligned.append(segment.model_copy(deep=True))
        else:
            aligned.append(
                segment.model_copy(update={"translation": counterpart.text}, deep=True)
            )
    return aligned


def align_numbers(
    original: list[MusicalNumber], translation: list[MusicalNumber]
) -> list[MusicalNumber]:
    """Align whole numbers, pairing segments by id across all numbers."""
    translated_segments = [s for n in translation for s in n.segments]
    unmatched = len(
        {s.id for n in original for s in n.segments}
        - {s.id for s in translated_segments}
    )
    if unmatched:
        logger.debug(f"{unmatched} segments have no translation counterpart")

    return [
        number.model_copy(
            update={"segments": align(number.segments, translated_segments)}
        )
        for number in original
    ]


def parse_bilingual(
    acquired: AcquiredLibretto,
) -> tuple[list[ContentElement], list[ContentElement]]:
    """
    Flatten a pre-aligned bilingual table into two element streams.

    Args:
        acquired: Bilingual libretto from the acquisition layer

    Returns:
        Tuple of (first-language elements, second-language elements)
    """
    lang1 = [e for row in acquired.rows for e in row.lang1_elements]
    lang2 = [e for row in acquired.rows for e in row.lang2_elements]
    return lang1, lang2


def build_base_libretto(
    opera: OperaMetadata,
    elements: list[ContentElement],
    translation_elements: list[ContentElement] | None = None,
    settings: LibrettoSettings | None = None,
) -> BaseLibretto:
    """
    Classify an element stream (and optionally its translation) into a BaseLibretto.

    Args:
        opera: Opera metadata
        elements: Original-language elements
        translation_elements: Translation elements, structurally parallel to elements
        settings: Settings (default: get_settings())

    Returns:
        BaseLibretto ready to be saved
    """
    settings = settings or get_settings()
    result = classify(elements)
    numbers = result.numbers
    if translation_elements is not None:
        numbers = align_numbers(numbers, classify(translation_elements).numbers)

    return BaseLibretto(
        version=settings.document_version,
        opera=opera,
        cast=result.cast,
        numbers=numbers,
    )
