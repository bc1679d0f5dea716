"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_NAME = "index.sqlite"


@dataclass(slots=True)
class AppConfig:
    source_root: Path | None = None
    db_path: Path | None = None
    search_limit: int | None = None

    def __post_init__(self) -> None:
        if self.source_root is not None:
            self.source_root = Path(self.source_root)
        if self.db_path is None:
            self.db_path = self._default_db_path()

    def _default_db_path(self) -> Path:
        # The index lives next to the docset it describes.
        if self.source_root is not None:
            return self.source_root / DEFAULT_DB_NAME
        return Path(DEFAULT_DB_NAME)

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if self.db_path is None:
            self.db_path = self._default_db_path()
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path
