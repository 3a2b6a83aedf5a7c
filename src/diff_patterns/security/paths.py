"""Root-scoped path resolution for diff file reads."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathBlockedError(Exception):
    """Raised when a requested path leaves the configured root."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def resolve_root_path(root: Path, candidate: str) -> Path:
    """Resolve a root-relative (or in-root absolute) path, blocking escapes."""
    resolved_root = root.resolve()
    normalized = candidate.strip().replace("\\", "/")
    if not normalized:
        raise PathBlockedError(
            reason="Path is empty.",
            hint="Provide a root-relative path such as 'changes/fix.diff'.",
        )

    if normalized.startswith("/") or WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        resolved = Path(normalized).resolve(strict=False)
    else:
        parts = [part for part in normalized.split("/") if part not in ("", ".")]
        if ".." in parts:
            raise PathBlockedError(
                reason="Path traversal is blocked.",
                hint="Remove '..' segments and use a root-relative path.",
            )
        resolved = (resolved_root / Path(*parts)).resolve(strict=False)

    if not resolved.is_relative_to(resolved_root):
        raise PathBlockedError(
            reason="Path is outside the configured root.",
            hint="Use a path located under the --root directory.",
        )
    return resolved
