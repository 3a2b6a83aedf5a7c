"""Unified diff parsing."""

from .models import Chunk
from .parser import parse_unified_diff

__all__ = ["Chunk", "parse_unified_diff"]
