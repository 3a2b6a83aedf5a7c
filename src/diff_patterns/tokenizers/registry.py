"""Tokenizer registry with deterministic selection behavior."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from diff_patterns.languages import normalize_language
from diff_patterns.tokenizers.base import Tokenizer, TokenStream, validate_tokens


@dataclass(slots=True)
class TokenizerRegistry:
    """Ordered tokenizer registry with optional fallback tokenizer."""

    _tokenizers: list[Tokenizer] = field(default_factory=list)
    _fallback: Tokenizer | None = None

    def register(self, tokenizer: Tokenizer, *, fallback: bool = False) -> None:
        """Register a tokenizer in deterministic insertion order."""
        if fallback:
            self._fallback = tokenizer
            return
        self._tokenizers.append(tokenizer)

    def select(self, language: str) -> Tokenizer | None:
        """Select the first tokenizer supporting the language, else the fallback."""
        canonical = normalize_language(language)
        for tokenizer in self._tokenizers:
            if tokenizer.supports_language(canonical):
                return tokenizer
        return self._fallback

    def names(self) -> tuple[str, ...]:
        """Return registered tokenizer names in deterministic order."""
        ordered = [tokenizer.name for tokenizer in self._tokenizers]
        if self._fallback is not None:
            ordered.append(self._fallback.name)
        return tuple(ordered)

    async def tokenize(self, text: str, language: str) -> TokenStream | None:
        """Tokenize text for a language; None when no tokenizer applies."""
        tokenizer = self.select(language)
        if tokenizer is None:
            return None
        stream = await asyncio.to_thread(tokenizer.tokenize, text)
        if stream is None:
            return None
        validate_tokens(stream.tokens)
        return stream
