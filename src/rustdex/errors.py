"""Exception hierarchy shared by the indexing and retrieval layers."""

from __future__ import annotations

from pathlib import Path


class RustdexError(Exception):
    """Base class for all rustdex errors."""


class StructuralAssumptionViolation(RustdexError):
    """The docset layout no longer matches the conventions we rely on."""


class UnknownEntryType(StructuralAssumptionViolation):
    def __init__(self, token: str) -> None:
        super().__init__(f"unknown entry type: {token}")
        self.token = token


class NotFoundError(RustdexError):
    """A queried name, fragment or element does not exist."""


class IndexNotBuiltError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("documentation has not been indexed yet")


class MissingDocsError(RustdexError):
    """The documentation root is unusable."""


class SourceNotFoundError(MissingDocsError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"source path does not exist: {path}")
        self.path = path


class SourceNotDirectoryError(MissingDocsError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"source path is not a directory: {path}")
        self.path = path
