"""Fuzzy symbol search interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional

from rustdex.index.storage import SQLiteIndexStore
from rustdex.models import EntryKind, Item, Location

if TYPE_CHECKING:
    from rustdex.docs.resolver import Docs

LOGGER = logging.getLogger(__name__)

WILDCARD = "%"


@dataclass(slots=True)
class SearchResult:
    name: str
    kind: EntryKind
    location: Location
    item: Optional[Item] = None


def fuzzy_pattern(query: str) -> str:
    """Turn a user query into a ``LIKE`` pattern.

    Queries that already start or end with a wildcard are used verbatim; any
    other query matches as a substring, with spaces acting as gaps.
    """
    if not query:
        return WILDCARD
    if query.startswith(WILDCARD) or query.endswith(WILDCARD):
        return query
    return f"{WILDCARD}{query.replace(' ', WILDCARD)}{WILDCARD}"


def exact_literal(query: str) -> str:
    return query.replace(WILDCARD, "")


class Searcher:
    """High-level API to query the symbol index.

    When constructed with a :class:`~rustdex.docs.resolver.Docs` instance the
    searcher can attach the resolved documentation to every result.
    """

    def __init__(self, store: SQLiteIndexStore, docs: Docs | None = None) -> None:
        self.store = store
        self.docs = docs

    def search(
        self,
        query: str,
        *,
        kinds: Iterable[EntryKind] = (),
        limit: int | None = None,
        resolve: bool = False,
    ) -> List[SearchResult]:
        selected = list(dict.fromkeys(kinds)) or EntryKind.all()
        if not self.store.is_indexed():
            LOGGER.warning("Index at %s has not been built yet", self.store.db_path)
            return []

        entries = self.store.search(
            fuzzy_pattern(query), exact_literal(query), selected, limit=limit
        )
        LOGGER.debug("Query %r matched %d entries", query, len(entries))

        results: List[SearchResult] = []
        for entry in entries:
            item = None
            if resolve:
                if self.docs is None:
                    raise ValueError("Resolving search results requires a documentation root")
                item = self.docs.item(entry.location.file_path, entry.location.fragment)
            results.append(SearchResult(entry.name, entry.kind, entry.location, item))
        return results
