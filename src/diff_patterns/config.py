"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from diff_patterns.languages import normalize_language

CONFIG_FILE_NAME = "diff_patterns.toml"

MAX_CONCURRENCY_CAP = 16
MAX_CHUNK_LINES_CAP = 10_000
MAX_DIFF_BYTES_CAP = 16 * 1024 * 1024
MAX_TOTAL_BYTES_PER_RESPONSE_CAP = 4 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class TokenizerConfig:
    """Tokenizer feature toggles."""

    python_native: bool
    fallback_enabled: bool


@dataclass(slots=True, frozen=True)
class LanguagesConfig:
    """Language inference settings."""

    default: str | None
    extensions: tuple[tuple[str, str], ...]

    def extension_map(self) -> dict[str, str]:
        return dict(self.extensions)


@dataclass(slots=True, frozen=True)
class ExtractionConfig:
    """Pattern extraction settings."""

    max_concurrency: int
    max_chunk_lines: int


@dataclass(slots=True, frozen=True)
class ExtractionLimits:
    """Size limits for incoming diffs and outgoing responses."""

    max_diff_bytes: int = 1024 * 1024
    max_total_bytes_per_response: int = 512 * 1024


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Fully merged configuration."""

    root: Path
    data_dir: Path
    audit_enabled: bool
    limits: ExtractionLimits
    tokenizer: TokenizerConfig
    languages: LanguagesConfig
    extraction: ExtractionConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for tool responses."""
        return {
            "root": str(self.root),
            "data_dir": str(self.data_dir),
            "audit_enabled": self.audit_enabled,
            "limits": {
                "max_diff_bytes": self.limits.max_diff_bytes,
                "max_total_bytes_per_response": self.limits.max_total_bytes_per_response,
            },
            "tokenizer": {
                "python_native": self.tokenizer.python_native,
                "fallback_enabled": self.tokenizer.fallback_enabled,
            },
            "languages": {
                "default": self.languages.default,
                "extensions": self.languages.extension_map(),
            },
            "extraction": {
                "max_concurrency": self.extraction.max_concurrency,
                "max_chunk_lines": self.extraction.max_chunk_lines,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    audit_enabled: bool | None = None
    max_diff_bytes: int | None = None
    max_total_bytes_per_response: int | None = None
    max_concurrency: int | None = None
    max_chunk_lines: int | None = None
    python_native: bool | None = None
    fallback_enabled: bool | None = None
    default_language: str | None = None


def default_config(root: Path) -> AppConfig:
    """Build default config for a given working root."""
    resolved_root = root.resolve()
    return AppConfig(
        root=resolved_root,
        data_dir=resolved_root / ".diff_patterns",
        audit_enabled=True,
        limits=ExtractionLimits(),
        tokenizer=TokenizerConfig(python_native=True, fallback_enabled=True),
        languages=LanguagesConfig(default=None, extensions=()),
        extraction=ExtractionConfig(max_concurrency=1, max_chunk_lines=400),
    )


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional diff_patterns.toml from the root."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_language(value: object, name: str, default: str | None) -> str | None:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return normalize_language(value)


def _extension_pairs(value: object, name: str) -> tuple[tuple[str, str], ...]:
    if not isinstance(value, dict):
        raise ValueError(f"Config field '{name}' must be a table of strings.")
    pairs: list[tuple[str, str]] = []
    for extension in sorted(value.keys()):
        language = value[extension]
        if not isinstance(language, str) or not language.strip():
            raise ValueError(f"Config field '{name}' must contain only strings.")
        normalized_extension = extension.lower()
        if not normalized_extension.startswith("."):
            normalized_extension = f".{normalized_extension}"
        pairs.append((normalized_extension, normalize_language(language)))
    return tuple(pairs)


def merge_config(
    base: AppConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> AppConfig:
    """Merge defaults, config file, then CLI/startup overrides."""
    limits_payload = _get_table(file_payload, "limits")
    tokenizer_payload = _get_table(file_payload, "tokenizer")
    languages_payload = _get_table(file_payload, "languages")
    extraction_payload = _get_table(file_payload, "extraction")
    audit_payload = _get_table(file_payload, "audit")

    limits = ExtractionLimits(
        max_diff_bytes=_optional_positive_int_with_cap(
            limits_payload.get("max_diff_bytes"),
            "limits.max_diff_bytes",
            base.limits.max_diff_bytes,
            MAX_DIFF_BYTES_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            limits_payload.get("max_total_bytes_per_response"),
            "limits.max_total_bytes_per_response",
            base.limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
    )
    tokenizer = TokenizerConfig(
        python_native=_optional_bool(
            tokenizer_payload.get("python_native"),
            "tokenizer.python_native",
            base.tokenizer.python_native,
        ),
        fallback_enabled=_optional_bool(
            tokenizer_payload.get("fallback_enabled"),
            "tokenizer.fallback_enabled",
            base.tokenizer.fallback_enabled,
        ),
    )

    extensions = base.languages.extensions
    if "extensions" in languages_payload:
        extensions = _extension_pairs(languages_payload["extensions"], "languages.extensions")
    languages = LanguagesConfig(
        default=_optional_language(
            languages_payload.get("default"), "languages.default", base.languages.default
        ),
        extensions=extensions,
    )

    extraction = ExtractionConfig(
        max_concurrency=_optional_positive_int_with_cap(
            extraction_payload.get("max_concurrency"),
            "extraction.max_concurrency",
            base.extraction.max_concurrency,
            MAX_CONCURRENCY_CAP,
        ),
        max_chunk_lines=_optional_positive_int_with_cap(
            extraction_payload.get("max_chunk_lines"),
            "extraction.max_chunk_lines",
            base.extraction.max_chunk_lines,
            MAX_CHUNK_LINES_CAP,
        ),
    )

    merged = AppConfig(
        root=base.root,
        data_dir=base.data_dir,
        audit_enabled=_optional_bool(
            audit_payload.get("enabled"), "audit.enabled", base.audit_enabled
        ),
        limits=limits,
        tokenizer=tokenizer,
        languages=languages,
        extraction=extraction,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: AppConfig, overrides: CliOverrides) -> AppConfig:
    """Apply startup overrides at highest precedence."""
    limits = ExtractionLimits(
        max_diff_bytes=_optional_positive_int_with_cap(
            overrides.max_diff_bytes,
            "overrides.max_diff_bytes",
            config.limits.max_diff_bytes,
            MAX_DIFF_BYTES_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            overrides.max_total_bytes_per_response,
            "overrides.max_total_bytes_per_response",
            config.limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
    )
    extraction = ExtractionConfig(
        max_concurrency=_optional_positive_int_with_cap(
            overrides.max_concurrency,
            "overrides.max_concurrency",
            config.extraction.max_concurrency,
            MAX_CONCURRENCY_CAP,
        ),
        max_chunk_lines=_optional_positive_int_with_cap(
            overrides.max_chunk_lines,
            "overrides.max_chunk_lines",
            config.extraction.max_chunk_lines,
            MAX_CHUNK_LINES_CAP,
        ),
    )
    tokenizer = TokenizerConfig(
        python_native=(
            overrides.python_native
            if overrides.python_native is not None
            else config.tokenizer.python_native
        ),
        fallback_enabled=(
            overrides.fallback_enabled
            if overrides.fallback_enabled is not None
            else config.tokenizer.fallback_enabled
        ),
    )
    languages = LanguagesConfig(
        default=_optional_language(
            overrides.default_language, "overrides.default_language", config.languages.default
        ),
        extensions=config.languages.extensions,
    )
    data_dir = overrides.data_dir or config.data_dir
    return AppConfig(
        root=config.root,
        data_dir=data_dir.resolve(),
        audit_enabled=(
            overrides.audit_enabled
            if overrides.audit_enabled is not None
            else config.audit_enabled
        ),
        limits=limits,
        tokenizer=tokenizer,
        languages=languages,
        extraction=extraction,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> AppConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
