"""Library entry points for indexing, searching and resolving docset items."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from rustdex.config import AppConfig
from rustdex.docs.resolver import Docs
from rustdex.errors import MissingDocsError
from rustdex.index.indexer import Indexer, IndexStats
from rustdex.index.search import Searcher, SearchResult
from rustdex.index.storage import SQLiteIndexStore
from rustdex.models import EntryKind, Item
from rustdex.utils.files import ensure_docset_root


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


class DocsetContext:
    """Owns the index store handle for one docset.

    The store is opened lazily on first use and must be released with
    :meth:`close` (or by using the context as a ``with`` block).
    """

    def __init__(self, config: AppConfig, *, base_dir: Path | None = None) -> None:
        self.config = config
        self.db_path = config.resolve_db_path(base_dir)
        self._store: SQLiteIndexStore | None = None

    def __enter__(self) -> "DocsetContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def source_root(self) -> Path:
        if self.config.source_root is None:
            raise MissingDocsError("no documentation root configured")
        return Path(self.config.source_root)

    @property
    def store(self) -> SQLiteIndexStore:
        return self.open()

    def open(self) -> SQLiteIndexStore:
        if self._store is None:
            _ensure_db_parent(self.db_path)
            self._store = SQLiteIndexStore(self.db_path)
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def docs(self) -> Docs:
        return Docs(self.source_root, self.store)

    def index(self) -> IndexStats:
        root = ensure_docset_root(self.source_root)
        return Indexer(self.store).index(root)

    def search(
        self,
        query: str,
        *,
        kinds: Iterable[EntryKind] = (),
        limit: int | None = None,
        resolve: bool = False,
    ) -> List[SearchResult]:
        docs = self.docs() if resolve else None
        if limit is None:
            limit = self.config.search_limit
        return Searcher(self.store, docs).search(query, kinds=kinds, limit=limit, resolve=resolve)

    def resolve_item(self, file_path: str, fragment: str | None = None) -> Item:
        return self.docs().item(file_path, fragment)

    def source(self, path: str) -> str:
        return self.docs().source(path)


def index(source_root: Path, output_store: Path) -> IndexStats:
    """Rebuild the index of ``source_root`` into the SQLite file ``output_store``."""
    with DocsetContext(AppConfig(source_root=source_root, db_path=Path(output_store))) as context:
        return context.index()


def search(
    store: SQLiteIndexStore,
    query: str,
    kinds: Iterable[EntryKind] = (),
    limit: int | None = None,
    source_root: Path | None = None,
) -> List[SearchResult]:
    """Search an open store; results carry resolved items when a root is given."""
    docs = Docs(source_root, store) if source_root is not None else None
    return Searcher(store, docs).search(query, kinds=kinds, limit=limit, resolve=docs is not None)


def resolve_item(
    store: SQLiteIndexStore, source_root: Path, file_path: str, fragment: str | None = None
) -> Item:
    return Docs(source_root, store).item(file_path, fragment)
