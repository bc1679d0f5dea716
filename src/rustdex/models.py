"""Core rustdex data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from rustdex.errors import UnknownEntryType


class EntryKind(str, Enum):
    """Kind of an indexed symbol, stored by its display name."""

    CONSTANT = "Constant"
    ENUM = "Enum"
    FUNCTION = "Function"
    MACRO = "Macro"
    METHOD = "Method"
    MODULE = "Module"
    STRUCT = "Struct"
    TRAIT = "Trait"
    TYPE = "Type"
    VARIANT = "Variant"
    ATTRIBUTE = "Attribute"

    @classmethod
    def all(cls) -> List["EntryKind"]:
        return list(cls)

    @classmethod
    def parse(cls, token: str) -> "EntryKind":
        """Map a file-name or user token to a kind, case-insensitively."""
        kind = _ALIASES.get(token.lower())
        if kind is None:
            raise UnknownEntryType(token)
        return kind

    def __str__(self) -> str:
        return self.value


_ALIASES = {kind.value.lower(): kind for kind in EntryKind}
_ALIASES.update(
    {
        "fn": EntryKind.FUNCTION,
        "attr": EntryKind.ATTRIBUTE,
    }
)


@dataclass(frozen=True, slots=True)
class Location:
    """A docset-relative file path with an optional in-page anchor."""

    file_path: str
    fragment: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "Location":
        file_path, sep, fragment = value.rpartition("#")
        if not sep:
            return cls(value)
        return cls(file_path, fragment or None)

    def __str__(self) -> str:
        if self.fragment:
            return f"{self.file_path}#{self.fragment}"
        return self.file_path


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One indexable symbol."""

    name: str
    kind: EntryKind
    location: Location


@dataclass(slots=True)
class Item:
    """Documentation extracted for one entry from the live HTML."""

    path: str
    kind: EntryKind
    type_info: Optional[str] = None
    documentation: Optional[str] = None
    source_location: Optional[Location] = None
