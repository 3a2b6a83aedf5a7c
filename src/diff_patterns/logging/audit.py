"""Structured JSONL audit log utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

_VERBATIM_STRING_KEYS = {"path", "language", "since"}


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Sanitized representation of a single tool request."""

    timestamp: str
    request_id: str
    tool: str
    ok: bool
    blocked: bool
    error_code: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Sanitize arguments so source text never lands in the audit log."""
    sanitized: dict[str, object] = {}
    for key in sorted(arguments.keys()):
        value = arguments[key]
        if key in _VERBATIM_STRING_KEYS and isinstance(value, str):
            sanitized[key] = value
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, list):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value.keys())
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlAuditLogger:
    """Append-only JSONL audit logger with a bounded, filterable reader.

    A disabled logger never touches the filesystem and reads back nothing.
    """

    def __init__(self, path: Path, *, enabled: bool = True) -> None:
        self._path = path
        self._enabled = enabled
        if enabled:
            self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    @property
    def enabled(self) -> bool:
        return self._enabled

    def append(self, event: AuditEvent) -> None:
        """Append one event as a single sorted-key JSON line."""
        if not self._enabled:
            return
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(
        self,
        since: str | None = None,
        limit: int = 50,
        tool: str | None = None,
    ) -> list[dict[str, object]]:
        """Return the newest ``limit`` events at or after ``since``, optionally for one tool."""
        if limit < 1 or not self._enabled or not self._path.exists():
            return []
        entries: list[dict[str, object]] = []
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                record = _decode_line(line)
                if record is None:
                    continue
                if tool is not None and record.get("tool") != tool:
                    continue
                if since is not None:
                    timestamp = record.get("timestamp")
                    if not isinstance(timestamp, str) or timestamp < since:
                        continue
                entries.append(record)
        return entries[-limit:]


def _decode_line(line: str) -> dict[str, object] | None:
    stripped = line.strip()
    if not stripped:
        return None
    try:
        record = json.loads(stripped)
    except json.JSONDecodeError:
        return None
    if not isinstance(record, dict):
        return None
    return record
