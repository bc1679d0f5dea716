"""FastAPI application exposing the rustdex engine over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from rustdex.api import DocsetContext
from rustdex.config import AppConfig
from rustdex.docs.resolver import Docs
from rustdex.errors import MissingDocsError, NotFoundError, RustdexError, UnknownEntryType
from rustdex.index.search import SearchResult
from rustdex.models import EntryKind, Item

LOGGER = logging.getLogger(__name__)

MAX_LIMIT = 200

app = FastAPI(title="rustdex", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchPayload(BaseModel):
    query: str = ""
    source: Path | None = None
    db: Path | None = None
    kinds: List[str] = []
    limit: int | None = None
    resolve: bool = False


class IndexPayload(BaseModel):
    source: str
    db: str | None = None


def _context(source: Path | None, db: Path | None) -> DocsetContext:
    config = AppConfig(source_root=source, db_path=db)
    return DocsetContext(config, base_dir=Path.cwd())


def _http_error(exc: RustdexError) -> HTTPException:
    if isinstance(exc, (NotFoundError, MissingDocsError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, UnknownEntryType):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _item_payload(item: Item | None) -> Dict[str, Any] | None:
    if item is None:
        return None
    return {
        "path": item.path,
        "kind": str(item.kind),
        "type_info": item.type_info,
        "documentation": item.documentation,
        "source_location": str(item.source_location) if item.source_location else None,
    }


def _result_payload(result: SearchResult) -> Dict[str, Any]:
    return {
        "name": result.name,
        "kind": str(result.kind),
        "location": str(result.location),
        "item": _item_payload(result.item),
    }


def _parse_kinds(values: List[str]) -> List[EntryKind]:
    try:
        return [EntryKind.parse(value) for value in values]
    except UnknownEntryType as exc:
        raise _http_error(exc) from exc


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def _run_index_job(source: Path, db: Path | None) -> Dict[str, Any]:
    context = _context(source, db)
    try:
        stats = context.index()
    finally:
        context.close()

    return {
        "stored": stats.stored,
        "files": stats.files,
        "redirects": stats.redirects,
        "unclassified": stats.unclassified,
        "kinds": {str(kind): count for kind, count in sorted(stats.kinds.items())},
        "db": str(context.db_path),
    }


@app.post("/index")
async def index_docset(payload: IndexPayload) -> Dict[str, Any]:
    source = payload.source.strip().replace("\r", "").replace("\n", "")
    if not source:
        raise HTTPException(status_code=400, detail="No path provided")
    if "\0" in source:
        raise HTTPException(status_code=400, detail="Invalid path: contains null byte")

    db = Path(payload.db) if payload.db else None
    try:
        stats = await asyncio.to_thread(_run_index_job, Path(source).expanduser(), db)
    except RustdexError as exc:
        LOGGER.error("Indexing %s failed: %s", source, exc)
        raise _http_error(exc) from exc

    return {"status": "ok", "stats": stats}


@app.post("/search")
async def search_items(payload: SearchPayload) -> Dict[str, List[Dict[str, Any]]]:
    kinds = _parse_kinds(payload.kinds)
    limit = None if payload.limit is None else max(1, min(payload.limit, MAX_LIMIT))

    context = _context(payload.source, payload.db)
    if not context.db_path.exists():
        raise HTTPException(
            status_code=404,
            detail=f"Database not found at {context.db_path}. Index the documentation first.",
        )

    try:
        results = context.search(payload.query, kinds=kinds, limit=limit, resolve=payload.resolve)
    except RustdexError as exc:
        raise _http_error(exc) from exc
    finally:
        context.close()

    return {"results": [_result_payload(result) for result in results]}


@app.get("/items/{path:path}")
async def get_item(
    path: str, source: Path, fragment: str | None = None, db: Path | None = None
) -> Dict[str, Any]:
    context = _context(source, db)
    if not context.db_path.exists():
        raise HTTPException(status_code=404, detail="Database not found")

    try:
        item = context.resolve_item(path, fragment)
    except RustdexError as exc:
        raise _http_error(exc) from exc
    finally:
        context.close()

    return _item_payload(item)


@app.get("/sources")
async def list_sources(source: Path) -> Dict[str, List[str]]:
    try:
        return {"sources": Docs(source).list_sources()}
    except RustdexError as exc:
        raise _http_error(exc) from exc


@app.get("/sources/{path:path}")
async def get_source(path: str, source: Path) -> Dict[str, str]:
    try:
        return {"path": path, "source": Docs(source).source(path)}
    except RustdexError as exc:
        raise _http_error(exc) from exc


@app.get("/stats")
async def index_stats(source: Path | None = None, db: Path | None = None) -> Dict[str, Any]:
    context = _context(source, db)
    if not context.db_path.exists():
        return {"indexed": False, "total": 0, "kinds": {}}

    try:
        store = context.store
        return {"indexed": store.is_indexed(), "total": store.count(), "kinds": store.get_stats()}
    finally:
        context.close()
