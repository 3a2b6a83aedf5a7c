"""Size limits policy for incoming diffs."""

from __future__ import annotations

from dataclasses import dataclass

from diff_patterns.config import ExtractionLimits


@dataclass(slots=True, frozen=True)
class PolicyBlockedError(Exception):
    """Raised when a size limit blocks an operation."""

    reason: str
    hint: str


def enforce_diff_size(text: str, limits: ExtractionLimits) -> None:
    """Block diff bodies larger than max_diff_bytes."""
    size = len(text.encode("utf-8"))
    if size > limits.max_diff_bytes:
        raise PolicyBlockedError(
            reason=f"Diff is {size} bytes, above the max_diff_bytes limit.",
            hint="Split the diff or raise limits.max_diff_bytes.",
        )
