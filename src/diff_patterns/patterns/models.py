"""Pattern data types and structured abstracted lines."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Identifier:
    """Identifier shared by the before and after token streams."""

    value: str
    scope: str


@dataclass(slots=True, frozen=True)
class Literal:
    """Literal text span inside an abstracted line."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(slots=True, frozen=True)
class Placeholder:
    """Reference to the identifier at 1-based ``index``."""

    index: int
    scope: str

    def render(self) -> str:
        return f"${{{self.index}:{self.scope}}}"


Segment = Literal | Placeholder


@dataclass(slots=True, frozen=True)
class AbstractLine:
    """One abstracted source line as literal and placeholder segments."""

    segments: tuple[Segment, ...] = ()

    def render(self) -> str:
        """Serialize segments to the flat placeholder text form."""
        return "".join(segment.render() for segment in self.segments)

    def is_empty(self) -> bool:
        return not self.render()

    def placeholders(self) -> tuple[Placeholder, ...]:
        return tuple(segment for segment in self.segments if isinstance(segment, Placeholder))

    def leading_spaces(self) -> int:
        """Count leading space characters before the first non-space content."""
        count = 0
        for segment in self.segments:
            if not isinstance(segment, Literal):
                return count
            stripped = segment.text.lstrip(" ")
            count += len(segment.text) - len(stripped)
            if stripped:
                return count
        return count

    def strip_leading(self, width: int) -> AbstractLine:
        """Drop ``width`` leading characters from the literal prefix."""
        remaining = width
        segments: list[Segment] = []
        for segment in self.segments:
            if remaining > 0 and isinstance(segment, Literal):
                cut = min(remaining, len(segment.text))
                remaining -= cut
                segment = Literal(segment.text[cut:])
                if not segment.text:
                    continue
            else:
                remaining = 0
            segments.append(segment)
        return AbstractLine(segments=tuple(segments))


@dataclass(slots=True, frozen=True)
class Pattern:
    """Abstracted condition/consequent pair and its ordered identifiers."""

    condition: tuple[AbstractLine, ...]
    consequent: tuple[AbstractLine, ...]
    identifiers: tuple[Identifier, ...]

    def condition_lines(self) -> list[str]:
        return [line.render() for line in self.condition]

    def consequent_lines(self) -> list[str]:
        return [line.render() for line in self.consequent]

    def identifier_values(self) -> list[str]:
        return [identifier.value for identifier in self.identifiers]

    def is_degenerate(self) -> bool:
        """Return True when either side is exactly one empty line."""
        return _is_empty_side(self.condition) or _is_empty_side(self.consequent)

    def to_dict(self) -> dict[str, object]:
        """Return the flat form consumed by rule makers."""
        return {
            "condition": self.condition_lines(),
            "consequent": self.consequent_lines(),
            "identifiers": self.identifier_values(),
        }


class PatternContractError(ValueError):
    """Raised when placeholders do not align with the identifier list."""


def validate_pattern(pattern: Pattern) -> None:
    """Validate placeholder indices and scopes against identifiers."""
    count = len(pattern.identifiers)
    for line in pattern.condition + pattern.consequent:
        for placeholder in line.placeholders():
            if placeholder.index < 1 or placeholder.index > count:
                raise PatternContractError(
                    f"Placeholder index {placeholder.index} is outside 1..{count}."
                )
            expected_scope = pattern.identifiers[placeholder.index - 1].scope
            if placeholder.scope != expected_scope:
                raise PatternContractError(
                    f"Placeholder {placeholder.index} scope does not match its identifier."
                )


def _is_empty_side(lines: tuple[AbstractLine, ...]) -> bool:
    return len(lines) == 1 and lines[0].is_empty()
