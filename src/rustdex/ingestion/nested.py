"""Extraction of methods and enum variants from rustdoc symbol pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterator, List, Optional

from rustdex.html.dom import QueryableNode
from rustdex.ingestion.classifier import join_module_path
from rustdex.models import EntryKind, IndexEntry, Location


@dataclass(frozen=True, slots=True)
class NestedRule:
    """Where to find one family of nested items on a symbol page.

    ``scope`` narrows the document to container elements (None means the whole
    page). Within each container every ``toggle`` match contributes its first
    ``target`` element; without a toggle every ``target`` match is used.
    """

    parents: FrozenSet[EntryKind]
    scope: Optional[str]
    toggle: Optional[str]
    target: str
    id_prefix: str
    kind: EntryKind


NESTED_RULES = (
    NestedRule(
        parents=frozenset({EntryKind.STRUCT, EntryKind.ENUM, EntryKind.TRAIT}),
        scope="div.impl-items",
        toggle="details.toggle.method-toggle",
        target="section.method",
        id_prefix="method.",
        kind=EntryKind.METHOD,
    ),
    # Type aliases are included because they may alias an enum.
    NestedRule(
        parents=frozenset({EntryKind.ENUM, EntryKind.TYPE}),
        scope=None,
        toggle=None,
        target="section.variant",
        id_prefix="variant.",
        kind=EntryKind.VARIANT,
    ),
)


def has_nested_items(kind: EntryKind) -> bool:
    return any(kind in rule.parents for rule in NESTED_RULES)


def _iter_targets(document: QueryableNode, rule: NestedRule) -> Iterator[QueryableNode]:
    scopes = document.select(rule.scope) if rule.scope else [document]
    for scope in scopes:
        if rule.toggle is None:
            yield from scope.select(rule.target)
            continue
        for toggle in scope.select(rule.toggle):
            target = toggle.select_one(rule.target)
            if target is not None:
                yield target


def extract_nested(
    document: QueryableNode, parent_name: str, parent_kind: EntryKind, file_path: str
) -> List[IndexEntry]:
    """Return nested entries of ``document`` for a page of ``parent_kind``."""
    entries: List[IndexEntry] = []
    for rule in NESTED_RULES:
        if parent_kind not in rule.parents:
            continue
        for element in _iter_targets(document, rule):
            element_id = element.id
            if not element_id or not element_id.startswith(rule.id_prefix):
                continue
            name = join_module_path(parent_name, element_id[len(rule.id_prefix) :])
            entries.append(IndexEntry(name, rule.kind, Location(file_path, element_id)))
    return entries
