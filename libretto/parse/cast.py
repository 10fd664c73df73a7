"""
Cast list extraction.

A libretto usually opens with a "Personaggi" (or "Cast", "Characters",
"Dramatis personae") header followed by one line per role. This module
turns that section into CastMember records and reports where the
structural content begins.
"""

import re
from dataclasses import dataclass, field

from libretto.models import (
    ActHeader,
    BlankLine,
    CastMember,
    Character,
    ContentElement,
    Direction,
    NumberLabel,
    Text,
)

CAST_HEADERS = frozenset({"personaggi", "cast", "characters", "dramatis personae"})

_CHARACTER_VOICE = re.compile(r"^(.+?)\s*\(([^)]+)\)\s*$")
_NAME_DASH_VOICE = re.compile(r"^(.+?)\s*[-–]\s*(\S.*)$")


@dataclass
class CastParseResult:
    """Cast members plus the index of the first element after the cast section."""

    members: list[CastMember] = field(default_factory=list)
    end_index: int = 0


def is_cast_header(text: str) -> bool:
    """Check whether an act header introduces the cast list."""
    return text.strip().lower() in CAST_HEADERS


def parse_character_entry(text: str) -> CastMember | None:
    """
    Parse a Character-tagged cast line such as "FIGARO (bass)".

    Args:
        text: Line text

    Returns:
        CastMember with short_name set to the name, or None for an empty line
    """
    text = text.strip()
    if not text:
        return None

    match = _CHARACTER_VOICE.match(text)
    if match:
        name = match.group(1).strip()
        return CastMember(
            character=name,
            short_name=name,
            voice_type=match.group(2).strip(),
        )
    return CastMember(character=text, short_name=text)


def parse_text_entry(text: str) -> CastMember | None:
    """
    Parse a free-text cast line.

    Accepts "Name[, description] - voice" and, without a dash, a
    capitalized "Name[, description]".

    Args:
        text: Line text

    Returns:
        CastMember, or None if the line is a continuation of the previous entry

    Examples:
        >>> parse_text_entry("Cherubino, paggio del Conte - mezzosoprano").description
        'paggio del Conte'
    """
    text = text.strip()
    if not text:
        return None

    match = _NAME_DASH_VOICE.match(text)
    if match:
        character, description = _split_name_description(match.group(1).strip())
        return CastMember(
            character=character,
            voice_type=match.group(2).strip(),
            description=description,
        )

    if not text[0].isupper():
        return None
    character, description = _split_name_description(text)
    return CastMember(character=character, description=description)


def _split_name_description(text: str) -> tuple[str, str | None]:
    name, sep, rest = text.partition(",")
    if not sep:
        return text, None
    rest = rest.strip()
    return name.strip(), rest or None


def extract_cast(elements: list[ContentElement]) -> CastParseResult:
    """
    Extract the cast list from the start of an element stream.

    The cast section is recognized only when the first non-blank element is
    a cast header. It ends at the first act header, number label or stage
    direction.

    Args:
        elements: Full element stream

    Returns:
        CastParseResult; end_index is 0 when there is no cast section
    """
    i = 0
    while i < len(elements) and isinstance(elements[i], BlankLine):
        i += 1
    if i >= len(elements):
        return CastParseResult()

    head = elements[i]
    if not (isinstance(head, ActHeader) and is_cast_header(head.text)):
        return CastParseResult()
    i += 1

    members: list[CastMember] = []
    while i < len(elements):
        element = elements[i]
        if isinstance(element, (ActHeader, NumberLabel, Direction)):
            break

        if isinstance(element, Character):
            member = parse_character_entry(element.text)
            if member is not None:
                members.append(member)
        elif isinstance(element, Text):
            member = parse_text_entry(element.text)
            if member is not None:
                members.append(member)
            elif members and element.text.strip():
                _append_description(members[-1], element.text.strip())
        i += 1

    return CastParseResult(members=members, end_index=i)


def _append_description(member: CastMember, text: str) -> None:
    if member.description:
        member.description = f"{member.description}; {text}"
    else:
        member.description = text
