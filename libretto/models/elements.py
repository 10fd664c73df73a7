"""
Content element token stream.

The acquisition layer turns source pages into a flat sequence of typed
elements. Each element kind is its own model, and ContentElement is the
closed union of them discriminated on "type", so classification can
dispatch on the class alone.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class ActHeader(BaseModel):
    """Act or section header (e.g., "ATTO PRIMO", "Personaggi", "Scena II")."""

    type: Literal["ActHeader"] = "ActHeader"
    text: str


class NumberLabel(BaseModel):
    """Musical number label (e.g., "N° 1: Duettino", "Sinfonia")."""

    type: Literal["NumberLabel"] = "NumberLabel"
    text: str


class Character(BaseModel):
    """Character name heading a sung line (e.g., "FIGARO", "SUSANNA, FIGARO")."""

    type: Literal["Character"] = "Character"
    text: str


class Direction(BaseModel):
    """Stage direction (e.g., "(Figaro is measuring the floor.)")."""

    type: Literal["Direction"] = "Direction"
    text: str


class Text(BaseModel):
    """Sung or spoken text."""

    type: Literal["Text"] = "Text"
    text: str


class BlankLine(BaseModel):
    """A blank line separating stanzas or sections."""

    type: Literal["BlankLine"] = "BlankLine"


ContentElement = Annotated[
    Union[ActHeader, NumberLabel, Character, Direction, Text, BlankLine],
    Field(discriminator="type"),
]

ELEMENT_LIST = TypeAdapter(list[ContentElement])


def element_text(element: ContentElement) -> str:
    """Return the text carried by an element ("" for a blank line)."""
    return getattr(element, "text", "")


class SourceInfo(BaseModel):
    """Provenance of an acquired libretto."""

    url: str
    site: str
    fetched_at: str
    opera: str


class BilingualRow(BaseModel):
    """A single row of a bilingual table: one passage in two languages."""

    index: int
    lang1_elements: list[ContentElement] = Field(default_factory=list)
    lang2_elements: list[ContentElement] = Field(default_factory=list)

    @staticmethod
    def plain_text(elements: list[ContentElement]) -> str:
        """Collapse one language column into plain lines."""
        return "\n".join(element_text(e) for e in elements)


class AcquiredLibretto(BaseModel):
    """
    A bilingual libretto as delivered by the acquisition layer.

    Attributes:
        source: Where the text came from
        lang1: ISO 639-1 code of the first column
        lang2: ISO 639-1 code of the second column
        rows: Pre-aligned rows, one passage per row
    """

    source: SourceInfo
    lang1: str
    lang2: str
    rows: list[BilingualRow] = Field(default_factory=list)

    def lang1_text(self) -> str:
        """Full plain text of the first language."""
        return "\n\n".join(BilingualRow.plain_text(r.lang1_elements) for r in self.rows)

    def lang2_text(self) -> str:
        """Full plain text of the second language."""
        return "\n\n".join(BilingualRow.plain_text(r.lang2_elements) for r in self.rows)
