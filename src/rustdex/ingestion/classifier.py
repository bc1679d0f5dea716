"""Classification of rustdoc HTML files by their naming convention."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from rustdex.models import EntryKind

MODULE_SEPARATOR = "::"
REDIRECTION_MARKER = "<title>Redirection</title>"
# Enough to get past the head section of a redirection page in one read.
REDIRECTION_PROBE_BYTES = 512


def is_redirection_page(path: Path) -> bool:
    """Return True if the head of ``path`` carries the redirection title.

    Only the first :data:`REDIRECTION_PROBE_BYTES` bytes are read, line by line,
    stopping at the end of the head section.
    """
    with path.open("rb") as handle:
        head = handle.read(REDIRECTION_PROBE_BYTES).decode("utf-8", errors="replace")

    for line in head.splitlines():
        if REDIRECTION_MARKER in line:
            return True
        if "</head>" in line:
            break
    return False


def join_module_path(module_path: str, name: str) -> str:
    if not module_path:
        return name
    return f"{module_path}{MODULE_SEPARATOR}{name}"


def classify(
    relative_path: Path, module_path: str
) -> Optional[Tuple[str, EntryKind]]:
    """Map a docset-relative HTML path to its fully qualified name and kind.

    ``index.html`` files are modules named after their directory. Files named
    ``{kind}.{Symbol}.html`` are symbols of that kind inside ``module_path``.
    Anything else is not an indexable page and yields None.

    Raises:
        UnknownEntryType: if a three-part file name has an unrecognised kind.
    """
    if relative_path.suffix != ".html":
        return None

    parts = relative_path.name.split(".")

    if len(parts) == 2 and parts[0] == "index":
        parent = relative_path.parent
        if parent == Path("."):
            return "", EntryKind.MODULE
        return parent.as_posix().replace("/", MODULE_SEPARATOR), EntryKind.MODULE

    if len(parts) == 3:
        kind = EntryKind.parse(parts[0])
        return join_module_path(module_path, parts[1]), kind

    return None
