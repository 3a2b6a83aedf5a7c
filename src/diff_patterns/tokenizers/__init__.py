"""Language tokenizer interfaces."""

from .base import (
    Token,
    Tokenizer,
    TokenizerContractError,
    TokenStream,
    validate_tokens,
)
from .grammars import (
    GENERIC_GRAMMAR,
    LANGUAGE_GRAMMARS,
    LexicalGrammar,
    LexicalRules,
    classify_identifier,
)
from .lexical import LexicalTokenizer, scan_tokens
from .python import PythonTokenizer
from .registry import TokenizerRegistry
from .runtime import build_tokenizer_registry

__all__ = [
    "GENERIC_GRAMMAR",
    "LANGUAGE_GRAMMARS",
    "LexicalGrammar",
    "LexicalRules",
    "LexicalTokenizer",
    "PythonTokenizer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenizerContractError",
    "TokenizerRegistry",
    "build_tokenizer_registry",
    "classify_identifier",
    "scan_tokens",
    "validate_tokens",
]
