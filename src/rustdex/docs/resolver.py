"""Extraction of documentation fragments from the live docset HTML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from rustdex.errors import IndexNotBuiltError, MissingDocsError, NotFoundError
from rustdex.html.dom import QueryableNode, iter_subtree, load_html
from rustdex.index.storage import SQLiteIndexStore
from rustdex.models import EntryKind, Item, Location
from rustdex.utils.files import iter_source_pages, relative_posix, resolve_within

LOGGER = logging.getLogger(__name__)

MAIN_CONTENT_ID = "main-content"
DOCBLOCK_CLASS = "docblock"
TRAIT_IMPLEMENTATIONS_SELECTOR = "#trait-implementations-list .impl-items"
SOURCE_LINK_SELECTOR = "a.src"
SOURCE_LISTING_SELECTOR = "pre.rust"
LINE_NUMBER_SELECTOR = "[data-nosnippet]"


def _first_docblock(node: QueryableNode) -> Optional[QueryableNode]:
    for candidate in iter_subtree(node):
        if candidate.has_class(DOCBLOCK_CLASS):
            return candidate
    return None


def find_documentation(element: QueryableNode) -> Optional[str]:
    """Return the markup of the docblock nearest to ``element``.

    Each step checks the current node, then the subtrees of its following
    siblings in order, and then moves up to the parent. The search ends without
    a match once the document root has been checked.
    """
    current: Optional[QueryableNode] = element
    while current is not None:
        if current.has_class(DOCBLOCK_CLASS):
            return current.inner_html()

        sibling = current.next_sibling()
        while sibling is not None:
            docblock = _first_docblock(sibling)
            if docblock is not None:
                return docblock.inner_html()
            sibling = sibling.next_sibling()

        current = current.parent()
    return None


class Docs:
    """Read access to the documentation pages of one docset."""

    def __init__(self, root: Path, store: SQLiteIndexStore | None = None) -> None:
        root = Path(root)
        if not root.is_dir():
            raise MissingDocsError(f"documentation root is not a directory: {root}")
        self.root = root
        self.store = store

    def item_for(self, location: str) -> Item:
        """Resolve a stored location string such as ``foo/enum.Bar.html#variant.Baz``."""
        parsed = Location.parse(location)
        return self.item(parsed.file_path, parsed.fragment)

    def item(self, file_path: str, fragment: str | None = None) -> Item:
        """Extract the documentation of the entry stored at ``file_path#fragment``.

        Raises:
            NotFoundError: if the entry, its page section or its anchor is missing.
            OSError: if the page cannot be read.
        """
        location = Location(file_path, fragment or None)
        if self.store is None:
            raise IndexNotBuiltError()
        row = self.store.lookup(location)
        document = load_html(resolve_within(self.root, file_path))

        type_info = None
        if location.fragment is None:
            element = document.find_by_id(MAIN_CONTENT_ID)
            if element is None:
                raise NotFoundError(f"no main content in {file_path}")
            for noise in element.select(TRAIT_IMPLEMENTATIONS_SELECTOR):
                noise.remove()
            documentation = element.inner_html()
        else:
            element = document.find_by_id(location.fragment)
            if element is None:
                raise NotFoundError(f"no element #{location.fragment} in {file_path}")
            type_info = element.inner_html()
            documentation = find_documentation(element)

        return Item(
            path=row["name"],
            kind=EntryKind(row["type"]),
            type_info=type_info,
            documentation=documentation,
            source_location=self._source_location(element, file_path),
        )

    def _source_location(self, element: QueryableNode, file_path: str) -> Optional[Location]:
        link = element.select_one(SOURCE_LINK_SELECTOR)
        href = link.attr("href") if link is not None else None
        if not href:
            return None

        target, _, anchor = href.partition("#")
        if not target:
            return None
        page_dir = (self.root / file_path).parent
        try:
            resolved = (page_dir / target).resolve(strict=True)
            relative = resolved.relative_to(self.root.resolve())
        except (OSError, RuntimeError, ValueError) as exc:
            LOGGER.debug("Ignoring source link %s in %s: %s", href, file_path, exc)
            return None
        if not resolved.is_file():
            LOGGER.debug("Ignoring source link %s in %s: not a file", href, file_path)
            return None
        return Location(relative.as_posix(), anchor or None)

    def list_sources(self) -> List[str]:
        """Docset-relative paths of all rendered source pages."""
        return [relative_posix(page, self.root) for page in iter_source_pages(self.root)]

    def source(self, path: str) -> str:
        """Return the plain source code rendered on a ``src/`` page."""
        page = resolve_within(self.root, path)
        if not page.is_file():
            raise NotFoundError(f"no source page at {path}")

        document = load_html(page)
        listing = document.select_one(SOURCE_LISTING_SELECTOR)
        if listing is None:
            raise NotFoundError(f"no source listing in {path}")
        for gutter in listing.select(LINE_NUMBER_SELECTOR):
            gutter.remove()
        return listing.text()
