"""Application configuration defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path


def _get_default_index_path() -> Path:
    """Get the default index path based on platform and execution context."""
    user_index = Path.home() / "Documents" / "pdfrank" / "index.json"

    # When running as a frozen app (PyInstaller bundle)
    if getattr(sys, "frozen", False):
        return user_index

    # When running from source, prefer local data/ if it exists
    local_index = Path("data/pdfrank.json")
    if local_index.exists():
        return local_index

    return user_index


@dataclass(slots=True)
class AppConfig:
    index_path: Path | None = None
    workers: int = 4
    max_age_days: int = 7

    def __post_init__(self) -> None:
        if self.index_path is None:
            self.index_path = _get_default_index_path()

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.max_age_days)

    def resolve_index_path(self, base_dir: Path | None = None) -> Path:
        if self.index_path is None:
            self.index_path = _get_default_index_path()
        if Path(self.index_path).is_absolute() or base_dir is None:
            return Path(self.index_path)
        return base_dir / self.index_path
