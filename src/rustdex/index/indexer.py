"""Docset indexing pipeline."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from rustdex.html.dom import load_html
from rustdex.index.storage import SQLiteIndexStore
from rustdex.ingestion.classifier import classify, is_redirection_page, join_module_path
from rustdex.ingestion.nested import extract_nested, has_nested_items
from rustdex.models import IndexEntry, Location
from rustdex.utils.files import (
    SOURCE_DIR,
    ensure_docset_root,
    sorted_children,
)

LOGGER = logging.getLogger(__name__)

# Root directories holding the source mirror and the trait implementor listings.
ROOT_SKIP_DIRS = frozenset({SOURCE_DIR, "implementors"})


@dataclass(slots=True)
class IndexStats:
    files: int = 0
    redirects: int = 0
    unclassified: int = 0
    stored: int = 0
    kinds: Counter = field(default_factory=Counter)

    @property
    def entries(self) -> int:
        return sum(self.kinds.values())

    def record(self, entries: List[IndexEntry]) -> None:
        self.kinds.update(entry.kind for entry in entries)


def parse_docset_file(root: Path, path: Path, module_path: str, stats: IndexStats) -> List[IndexEntry]:
    """Produce the entries contributed by one file of the docset."""
    if path.suffix != ".html":
        return []

    stats.files += 1
    if is_redirection_page(path):
        LOGGER.debug("Skipping redirection page %s", path)
        stats.redirects += 1
        return []

    relative = path.relative_to(root)
    classified = classify(relative, module_path)
    if classified is None:
        LOGGER.debug("Skipping unclassified page %s", path)
        stats.unclassified += 1
        return []

    name, kind = classified
    file_path = relative.as_posix()
    entries: List[IndexEntry] = []
    if has_nested_items(kind):
        entries.extend(extract_nested(load_html(path), name, kind, file_path))
    entries.append(IndexEntry(name, kind, Location(file_path)))
    return entries


def _walk(root: Path, directory: Path, module_path: str, stats: IndexStats) -> List[IndexEntry]:
    entries: List[IndexEntry] = []
    at_root = directory == root
    for child in sorted_children(directory):
        if child.is_dir():
            if at_root:
                if child.name in ROOT_SKIP_DIRS:
                    continue
                # Top-level directories are the crate's own package directory.
                child_module = ""
            else:
                child_module = join_module_path(module_path, child.name)
            entries.extend(_walk(root, child, child_module, stats))
        elif child.is_file():
            entries.extend(parse_docset_file(root, child, module_path, stats))
    return entries


def walk_docset(root: Path, stats: IndexStats | None = None) -> List[IndexEntry]:
    """Collect every index entry of the docset rooted at ``root``.

    Raises:
        MissingDocsError: if ``root`` is missing or not a directory.
        UnknownEntryType: if a page uses an unrecognised kind prefix.
    """
    root = ensure_docset_root(root)
    stats = stats if stats is not None else IndexStats()
    entries = _walk(root, root, "", stats)
    stats.record(entries)
    return entries


class Indexer:
    """Coordinates docset traversal and persistence."""

    def __init__(self, store: SQLiteIndexStore) -> None:
        self.store = store

    def index(self, root: Path) -> IndexStats:
        """Rebuild the index from the docset rooted at ``root``."""
        stats = IndexStats()
        LOGGER.info("Indexing %s", root)
        entries = walk_docset(Path(root), stats)
        stats.stored = self.store.rebuild(entries)
        LOGGER.info(
            "Indexed %d entries from %d files (%d redirects, %d unclassified)",
            stats.stored,
            stats.files,
            stats.redirects,
            stats.unclassified,
        )
        return stats
