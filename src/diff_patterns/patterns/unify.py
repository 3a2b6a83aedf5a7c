"""Shared-identifier discovery across before/after token streams."""

from __future__ import annotations

import re
from collections.abc import Sequence

from diff_patterns.patterns.models import Identifier
from diff_patterns.tokenizers.base import Token

_ABSTRACTABLE_VALUE_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*|[0-9]+")
_STRUCTURAL_SCOPE_MARKERS = ("keyword", "builtin", "storage")


def is_abstractable(token: Token) -> bool:
    """Return True when a token is identifier/number shaped and not structural."""
    if _ABSTRACTABLE_VALUE_RE.fullmatch(token.value) is None:
        return False
    scope = token.scope
    return not any(marker in scope for marker in _STRUCTURAL_SCOPE_MARKERS)


def unify_identifiers(
    before_tokens: Sequence[Token],
    after_tokens: Sequence[Token],
) -> tuple[Identifier, ...]:
    """Return identifiers present with equal value and innermost scope on both sides.

    Order is first discovery while scanning ``before_tokens``; it fixes the
    placeholder numbering.
    """
    after_keys = {(token.value, token.scope) for token in after_tokens}
    found: dict[tuple[str, str], Identifier] = {}
    for token in before_tokens:
        key = (token.value, token.scope)
        if key in found or key not in after_keys:
            continue
        if not is_abstractable(token):
            continue
        found[key] = Identifier(value=token.value, scope=token.scope)
    return tuple(found.values())
