"""
JSON document loading and saving.

Every document type has a loader that reads a UTF-8 JSON file and
validates it into its model. File and parse problems surface as
DocumentError so callers handle one exception family.
"""

from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from libretto.core.text import normalize_text
from libretto.exceptions import DocumentError, DocumentNotFoundError
from libretto.models import (
    ELEMENT_LIST,
    AcquiredLibretto,
    BaseLibretto,
    ContentElement,
    InterchangeLibretto,
    TimingOverlay,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _read_text(path: str | Path) -> str:
    path = Path(path)
    if not path.exists():
        raise DocumentNotFoundError(path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Failed to read document: {e}", path=path) from e


def _load_model(path: str | Path, model: type[ModelT]) -> ModelT:
    raw = _read_text(path)
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise DocumentError(
            f"Invalid {model.__name__} document: {e.error_count()} error(s)",
            path=path,
            context={"first_error": e.errors()[0].get("msg", "")},
        ) from e


def load_base_libretto(path: str | Path) -> BaseLibretto:
    """
    Load a base libretto.

    Args:
        path: Path to the JSON file

    Returns:
        BaseLibretto

    Raises:
        DocumentNotFoundError: If the file does not exist
        DocumentError: If the file cannot be read or is not a base libretto
    """
    return _load_model(path, BaseLibretto)


def load_timing_overlay(path: str | Path) -> TimingOverlay:
    """Load a timing overlay."""
    return _load_model(path, TimingOverlay)


def load_interchange(path: str | Path) -> InterchangeLibretto:
    """Load an interchange document."""
    return _load_model(path, InterchangeLibretto)


def load_acquired(path: str | Path) -> AcquiredLibretto:
    """Load a bilingual libretto produced by the acquisition layer."""
    return _load_model(path, AcquiredLibretto)


def load_elements(path: str | Path) -> list[ContentElement]:
    """
    Load an element stream (a JSON array of tagged elements).

    Element text is NFC-normalized with trailing whitespace removed, so
    differently composed accents classify to the same ids.

    Args:
        path: Path to the JSON file

    Returns:
        List of elements in file order

    Raises:
        DocumentNotFoundError: If the file does not exist
        DocumentError: If the file is not a valid element list
    """
    raw = _read_text(path)
    try:
        elements = ELEMENT_LIST.validate_json(raw)
    except ValidationError as e:
        raise DocumentError(
            f"Invalid element stream: {e.error_count()} error(s)",
            path=path,
            context={"first_error": e.errors()[0].get("msg", "")},
        ) from e

    return [
        e.model_copy(update={"text": normalize_text(e.text)}) if hasattr(e, "text") else e
        for e in elements
    ]


def load_document(path: str | Path) -> BaseLibretto | TimingOverlay:
    """
    Load a file that is either a base libretto or a timing overlay.

    Raises:
        DocumentError: If the file parses as neither
    """
    raw = _read_text(path)
    for model in (BaseLibretto, TimingOverlay):
        try:
            return model.model_validate_json(raw)
        except ValidationError:
            continue
    raise DocumentError(
        "File does not parse as a base libretto or timing overlay", path=path
    )


def save_document(document: BaseModel, path: str | Path, indent: int = 2) -> Path:
    """
    Write a document as pretty-printed UTF-8 JSON.

    Parent directories are created as needed.

    Args:
        document: Any libretto document model
        path: Output path
        indent: JSON indentation

    Returns:
        The path written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document.model_dump_json(indent=indent) + "\n", encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Failed to write document: {e}", path=path) from e
    return path
