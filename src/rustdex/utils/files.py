"""Utility helpers for working with docset files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from rustdex.errors import NotFoundError, SourceNotDirectoryError, SourceNotFoundError

SOURCE_DIR = "src"


def ensure_docset_root(root: Path) -> Path:
    """Validate that ``root`` is an existing directory."""
    root = Path(root)
    if not root.exists():
        raise SourceNotFoundError(root)
    if not root.is_dir():
        raise SourceNotDirectoryError(root)
    return root


def sorted_children(directory: Path) -> list[Path]:
    """Directory entries in name order, so traversals are reproducible."""
    return sorted(directory.iterdir(), key=lambda child: child.name)


def relative_posix(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def resolve_within(root: Path, relative: str | Path) -> Path:
    """Resolve ``relative`` against ``root``, refusing paths that escape it."""
    base = Path(root).resolve()
    candidate = (base / relative).resolve()
    if candidate != base and base not in candidate.parents:
        raise NotFoundError(f"path outside of the documentation root: {relative}")
    return candidate


def iter_source_pages(root: Path) -> Iterator[Path]:
    """Yield the rendered source pages (``src/**/*.html``) under a docset root."""
    source_dir = Path(root) / SOURCE_DIR
    if not source_dir.is_dir():
        return
    yield from sorted(p for p in source_dir.rglob("*.html") if p.is_file())
