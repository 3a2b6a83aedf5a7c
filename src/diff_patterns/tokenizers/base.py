"""Core tokenizer protocol and token data types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class Token:
    """Single lexeme with its scope path and 1-based position.

    ``scopes`` runs from the outermost scope to the innermost one. ``end_col``
    is exclusive, so the gap between two adjacent tokens on one line is
    ``next.start_col - previous.end_col``.
    """

    value: str
    scopes: tuple[str, ...]
    line: int
    start_col: int
    end_col: int

    @property
    def scope(self) -> str:
        """Return the innermost scope name."""
        return self.scopes[-1]


@dataclass(slots=True, frozen=True)
class TokenStream:
    """Tokens produced for one text block."""

    language: str
    tokens: tuple[Token, ...]
    strategy: str


class TokenizerContractError(ValueError):
    """Raised when tokenizer output violates the shared token contract."""


def validate_tokens(tokens: tuple[Token, ...] | list[Token]) -> None:
    """Validate tokens against required invariant fields."""
    previous_line = 0
    for token in tokens:
        if not token.value:
            raise TokenizerContractError("Token value must be non-empty.")
        if "\n" in token.value:
            raise TokenizerContractError("Token value must not span lines.")
        if not token.scopes or not all(token.scopes):
            raise TokenizerContractError("Token scopes must be non-empty strings.")
        if token.line < 1:
            raise TokenizerContractError("Token line must be >= 1.")
        if token.start_col < 1:
            raise TokenizerContractError("Token start_col must be >= 1.")
        if token.end_col <= token.start_col:
            raise TokenizerContractError("Token end_col must be > start_col.")
        if token.line < previous_line:
            raise TokenizerContractError("Token lines must be non-decreasing.")
        previous_line = token.line


class Tokenizer(Protocol):
    """Protocol implemented by language tokenizers."""

    name: str

    def supports_language(self, language: str) -> bool:
        """Return True when the tokenizer handles a canonical language id."""

    def tokenize(self, text: str) -> TokenStream | None:
        """Return tokens for text, or None when the text cannot be tokenized."""
