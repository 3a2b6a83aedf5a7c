"""Pattern abstraction core."""

from .abstract import abstract_tokens
from .extract import (
    ChunkOutcome,
    ExtractionReport,
    build_pattern,
    extract_diff_report,
    pattern_from_chunk,
    pattern_from_texts,
    patterns_from_diff,
)
from .models import (
    AbstractLine,
    Identifier,
    Literal,
    Pattern,
    PatternContractError,
    Placeholder,
    validate_pattern,
)
from .normalize import min_leading_spaces, normalize_indentation
from .unify import is_abstractable, unify_identifiers

__all__ = [
    "AbstractLine",
    "ChunkOutcome",
    "ExtractionReport",
    "Identifier",
    "Literal",
    "Pattern",
    "PatternContractError",
    "Placeholder",
    "abstract_tokens",
    "build_pattern",
    "extract_diff_report",
    "is_abstractable",
    "min_leading_spaces",
    "normalize_indentation",
    "pattern_from_chunk",
    "pattern_from_texts",
    "patterns_from_diff",
    "unify_identifiers",
    "validate_pattern",
]
