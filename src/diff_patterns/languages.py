"""Language identifiers, aliases, and file-extension mapping."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePosixPath

KNOWN_LANGUAGES = (
    "javascript",
    "typescript",
    "python",
    "go",
    "java",
    "rust",
    "c",
    "cpp",
    "csharp",
)

LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "node": "javascript",
    "source.js": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "source.ts": "typescript",
    "py": "python",
    "python3": "python",
    "source.python": "python",
    "golang": "go",
    "source.go": "go",
    "source.java": "java",
    "rs": "rust",
    "source.rust": "rust",
    "h": "c",
    "source.c": "c",
    "c++": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "source.cpp": "cpp",
    "c#": "csharp",
    "cs": "csharp",
    "source.cs": "csharp",
}

EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".py": "python",
    ".pyi": "python",
    ".go": "go",
    ".java": "java",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".cs": "csharp",
}


def normalize_language(language: str) -> str:
    """Return the canonical language id for a raw id or alias."""
    lowered = language.strip().lower()
    return LANGUAGE_ALIASES.get(lowered, lowered)


def language_for_path(
    path: str | None,
    extensions: Mapping[str, str] | None = None,
) -> str | None:
    """Infer a language from a file path, preferring configured extension mappings."""
    if not path:
        return None
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    if not suffix:
        return None
    if extensions:
        for extension, language in extensions.items():
            if extension.lower() == suffix:
                return normalize_language(language)
    return EXTENSION_LANGUAGES.get(suffix)
