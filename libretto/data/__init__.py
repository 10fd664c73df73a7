"""
Document store for the libretto library.

Loads and saves every document type as JSON.
"""

from libretto.data.documents import (
    load_acquired,
    load_base_libretto,
    load_document,
    load_elements,
    load_interchange,
    load_timing_overlay,
    save_document,
)

__all__ = [
    "load_acquired",
    "load_base_libretto",
    "load_document",
    "load_elements",
    "load_interchange",
    "load_timing_overlay",
    "save_document",
]
