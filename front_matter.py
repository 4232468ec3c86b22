"""Front-matter parsing for proposal markdown."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType

from models import ParsedMetadata

LOGGER = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(r"\A---\n(.*?)\n---(?:\n(.*))?\Z", re.DOTALL)

# Front-matter keys mapped onto ParsedMetadata attributes.
_STRING_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "discussions-to": "discussions_to",
    "status": "status",
    "type": "type",
    "category": "category",
    "created": "created",
}


class MetadataParseError(ValueError):
    """Raised when a typed front-matter field holds an unparseable value."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Invalid value for front-matter field {field!r}: {value!r}")
        self.field = field
        self.value = value


def split_front_matter(text: str) -> tuple[str, str]:
    """Split ``text`` into (metadata block, body).

    Text that does not open with a ``---`` delimited block is returned whole
    as the body with an empty metadata block.
    """
    normalized = text.replace("\r\n", "\n")
    match = _FRONT_MATTER_RE.match(normalized)
    if match is None:
        return "", text
    return match.group(1), match.group(2) or ""


def parse_metadata(block: str) -> ParsedMetadata:
    """Parse ``key: value`` lines into a ParsedMetadata record.

    Lines without ``": "`` or with an empty key or value are skipped. Values of
    ``eip`` and ``requires`` must be integers, otherwise MetadataParseError.
    """
    values: dict[str, object] = {}
    extra: dict[str, str] = {}

    for line in block.split("\n"):
        key, sep, value = line.partition(": ")
        key = key.strip()
        value = value.strip()
        if not sep or not key or not value:
            continue

        if key == "eip":
            values["eip"] = _parse_int(key, value)
        elif key == "requires":
            values["requires"] = tuple(
                _parse_int(key, item) for item in _split_list(value)
            )
        elif key == "author":
            values["author"] = tuple(_split_list(value))
        elif key in _STRING_FIELDS:
            values[_STRING_FIELDS[key]] = value
        else:
            extra[key] = value

    if extra:
        LOGGER.debug("Front matter has unrecognised keys: %s", sorted(extra))
    return ParsedMetadata(extra=MappingProxyType(extra), **values)


def parse_document(text: str) -> tuple[ParsedMetadata, str]:
    """Split and parse a raw proposal document."""
    block, body = split_front_matter(text)
    return parse_metadata(block), body


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_int(field: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise MetadataParseError(field, value) from exc
