"""Path safety and size limit primitives."""

from .paths import PathBlockedError, resolve_root_path
from .policy import PolicyBlockedError, enforce_diff_size

__all__ = [
    "PathBlockedError",
    "PolicyBlockedError",
    "enforce_diff_size",
    "resolve_root_path",
]
