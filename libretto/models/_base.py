"""
Shared pydantic base for persisted documents.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, SerializerFunctionWrapHandler, model_serializer


class DocumentModel(BaseModel):
    """
    Base model for every JSON document type.

    Serialization drops fields that are None, list fields named in
    OMIT_WHEN_EMPTY when they are empty, and fields in OMIT_WHEN_DEFAULT when
    they hold their default. Loading restores the defaults, so a
    dump/validate round-trip gives back an equal model.
    """

    OMIT_WHEN_EMPTY: ClassVar[tuple[str, ...]] = ()
    OMIT_WHEN_DEFAULT: ClassVar[dict[str, Any]] = {}

    @model_serializer(mode="wrap")
    def _compact(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for key in list(data):
            value = data[key]
            if value is None:
                del data[key]
            elif key in self.OMIT_WHEN_EMPTY and not value:
                del data[key]
            elif key in self.OMIT_WHEN_DEFAULT and value == self.OMIT_WHEN_DEFAULT[key]:
                del data[key]
        return data

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to a JSON string."""
        return self.model_dump_json(indent=indent)
