"""Diff chunk data types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Chunk:
    """One contiguous run of deleted/added lines from a diff hunk."""

    deleted: tuple[str, ...]
    added: tuple[str, ...]
    source: str | None
    path: str | None = None
    old_start: int = 0
    new_start: int = 0

    @property
    def before_text(self) -> str:
        return "\n".join(self.deleted)

    @property
    def after_text(self) -> str:
        return "\n".join(self.added)

    @property
    def line_count(self) -> int:
        return len(self.deleted) + len(self.added)
