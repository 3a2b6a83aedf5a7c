"""Built-in pattern extraction tools."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from functools import partial

from diff_patterns.config import AppConfig
from diff_patterns.diff import parse_unified_diff
from diff_patterns.languages import KNOWN_LANGUAGES, normalize_language
from diff_patterns.logging import JsonlAuditLogger
from diff_patterns.patterns import ExtractionReport, extract_diff_report, pattern_from_texts
from diff_patterns.security import enforce_diff_size
from diff_patterns.tokenizers import TokenizerRegistry
from diff_patterns.tools.registry import ToolDispatchError, ToolHandler, ToolRegistry

MAX_AUDIT_ENTRIES = 200


def register_builtin_tools(
    registry: ToolRegistry,
    config: AppConfig,
    tokenizers: TokenizerRegistry,
    audit_logger: JsonlAuditLogger,
    read_diff_file: Callable[[str], str],
) -> None:
    """Register the pattern extraction tool set."""
    registry.register(
        "patterns.from_diff",
        _from_diff_handler(config, tokenizers, read_diff_file),
    )
    registry.register("patterns.from_pair", _from_pair_handler(config, tokenizers))
    registry.register("patterns.status", _status_handler(config, tokenizers, registry))
    registry.register("patterns.audit_log", _audit_log_handler(audit_logger))


def _from_diff_handler(
    config: AppConfig,
    tokenizers: TokenizerRegistry,
    read_diff_file: Callable[[str], str],
) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        diff_value = arguments.get("diff")
        path_value = arguments.get("path")
        if (diff_value is None) == (path_value is None):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="patterns.from_diff requires exactly one of diff or path.",
            )
        if diff_value is not None and not isinstance(diff_value, str):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="patterns.from_diff diff must be a string.",
            )
        if path_value is not None and (not isinstance(path_value, str) or not path_value):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="patterns.from_diff path must be a non-empty string.",
            )
        default_language = _optional_language(arguments, "patterns.from_diff")
        if default_language is None:
            default_language = config.languages.default

        diff_text = diff_value if isinstance(diff_value, str) else read_diff_file(str(path_value))
        enforce_diff_size(diff_text, config.limits)

        parse = partial(
            parse_unified_diff,
            extensions=config.languages.extension_map(),
            default_language=default_language,
        )
        report = asyncio.run(
            extract_diff_report(
                diff_text,
                tokenizers.tokenize,
                parse=parse,
                max_concurrency=config.extraction.max_concurrency,
                max_chunk_lines=config.extraction.max_chunk_lines,
            )
        )
        return _report_to_dict(report)

    return handler


def _from_pair_handler(config: AppConfig, tokenizers: TokenizerRegistry) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        before = arguments.get("before")
        after = arguments.get("after")
        if not isinstance(before, str) or not isinstance(after, str):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="patterns.from_pair before and after must be strings.",
            )
        language = _optional_language(arguments, "patterns.from_pair")
        if language is None:
            language = config.languages.default
        if language is None:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="patterns.from_pair language is required without a configured default.",
            )
        enforce_diff_size(before + after, config.limits)

        pattern = asyncio.run(pattern_from_texts(before, after, language, tokenizers.tokenize))
        if pattern is None:
            return {"pattern": None, "degenerate": False}
        return {"pattern": pattern.to_dict(), "degenerate": pattern.is_degenerate()}

    return handler


def _status_handler(
    config: AppConfig,
    tokenizers: TokenizerRegistry,
    registry: ToolRegistry,
) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {
            "root": str(config.root),
            "tools": list(registry.names()),
            "tokenizers": list(tokenizers.names()),
            "languages": list(KNOWN_LANGUAGES),
            "effective_config": config.to_public_dict(),
        }

    return handler


def _audit_log_handler(audit_logger: JsonlAuditLogger) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        since_value = arguments.get("since")
        limit_value = arguments.get("limit", 50)
        tool_value = arguments.get("tool")

        since = since_value if isinstance(since_value, str) else None
        tool = tool_value if isinstance(tool_value, str) else None
        limit = limit_value if isinstance(limit_value, int) else 50
        limit = min(max(limit, 1), MAX_AUDIT_ENTRIES)

        return {"entries": audit_logger.read(since=since, limit=limit, tool=tool)}

    return handler


def _optional_language(arguments: dict[str, object], tool: str) -> str | None:
    value = arguments.get("language")
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool} language must be a non-empty string.",
        )
    return normalize_language(value)


def _report_to_dict(report: ExtractionReport) -> dict[str, object]:
    chunks: list[dict[str, object]] = []
    warnings: list[str] = []
    for outcome in report.outcomes:
        chunks.append(
            {
                "index": outcome.index,
                "path": outcome.path,
                "source": outcome.source,
                "status": outcome.status,
            }
        )
        if outcome.status in {"no_source", "untokenizable", "too_large"}:
            location = outcome.path or "<unknown>"
            warnings.append(f"Chunk {outcome.index} ({location}) skipped: {outcome.status}.")
    return {
        "patterns": [pattern.to_dict() for pattern in report.patterns],
        "chunks": chunks,
        "counts": report.status_counts(),
        "__warnings__": warnings,
    }
