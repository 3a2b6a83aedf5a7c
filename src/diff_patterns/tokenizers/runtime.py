"""Runtime tokenizer registry construction."""

from __future__ import annotations

from diff_patterns.config import AppConfig
from diff_patterns.tokenizers.grammars import GENERIC_GRAMMAR, LANGUAGE_GRAMMARS
from diff_patterns.tokenizers.lexical import LexicalTokenizer
from diff_patterns.tokenizers.python import PythonTokenizer
from diff_patterns.tokenizers.registry import TokenizerRegistry


def build_tokenizer_registry(config: AppConfig) -> TokenizerRegistry:
    """Build tokenizer registry from effective config."""
    registry = TokenizerRegistry()
    if config.tokenizer.python_native:
        registry.register(PythonTokenizer())
    for grammar in LANGUAGE_GRAMMARS:
        registry.register(LexicalTokenizer(grammar))
    if config.tokenizer.fallback_enabled:
        registry.register(LexicalTokenizer(GENERIC_GRAMMAR, languages=()), fallback=True)
    return registry
