"""JSON-line STDIO server routing requests to the pattern tools."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from diff_patterns.config import AppConfig, CliOverrides, load_effective_config
from diff_patterns.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp
from diff_patterns.security import PathBlockedError, PolicyBlockedError, resolve_root_path
from diff_patterns.tokenizers import TokenizerRegistry, build_tokenizer_registry
from diff_patterns.tools.builtin import register_builtin_tools
from diff_patterns.tools.registry import ToolDispatchError, ToolRegistry


@dataclass(slots=True, frozen=True)
class Request:
    """Validated request with `tools/call` indirection already resolved."""

    request_id: str
    tool: str
    arguments: dict[str, object]


class RequestRejected(Exception):
    """Raised when a request is malformed and never reaches a tool."""

    def __init__(self, request_id: str, code: str, message: str) -> None:
        super().__init__(message)
        self.request_id = request_id
        self.code = code
        self.message = message


def envelope(
    request_id: str,
    *,
    result: dict[str, object] | None = None,
    warnings: list[str] | None = None,
    error: dict[str, str] | None = None,
    blocked: bool = False,
) -> dict[str, object]:
    """Build the response envelope shared by success, error and blocked outcomes."""
    response: dict[str, object] = {
        "request_id": request_id,
        "ok": error is None,
        "result": result if result is not None else {},
        "warnings": warnings or [],
        "blocked": blocked,
    }
    if error is not None:
        response["error"] = error
    return response


def error_envelope(request_id: str, code: str, message: str) -> dict[str, object]:
    return envelope(request_id, error={"code": code, "message": message})


def blocked_envelope(request_id: str, code: str, reason: str, hint: str) -> dict[str, object]:
    return envelope(
        request_id,
        result={"reason": reason, "hint": hint},
        error={"code": code, "message": reason},
        blocked=True,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(
        prog="diff-patterns",
        description="Serve diff pattern extraction over JSON lines on stdin/stdout.",
    )
    parser.add_argument("--root", default=".", help="Directory that diff paths resolve against.")
    parser.add_argument("--data-dir", default=None, help="Directory for the audit log.")
    for flag in (
        "--max-concurrency",
        "--max-chunk-lines",
        "--max-diff-bytes",
        "--max-total-bytes-per-response",
    ):
        parser.add_argument(flag, type=int, default=None)
    for flag in ("--python-native", "--fallback-tokenizer", "--audit"):
        parser.add_argument(flag, choices=("true", "false"), default=None)
    parser.add_argument("--default-language", default=None)
    return parser


class StdioServer:
    """Reads one JSON request per line and writes one JSON response per line."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._tokenizers: TokenizerRegistry = build_tokenizer_registry(config)
        self._audit_logger = JsonlAuditLogger(
            path=config.data_dir / "audit.jsonl",
            enabled=config.audit_enabled,
        )
        self._registry = ToolRegistry()
        register_builtin_tools(
            self._registry,
            config=config,
            tokenizers=self._tokenizers,
            audit_logger=self._audit_logger,
            read_diff_file=self._read_diff_file,
        )
        self._generated_ids = 0

    @property
    def config(self) -> AppConfig:
        return self._config

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(json.dumps(response, sort_keys=True) + "\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Decode one line and handle it; undecodable lines are rejected and audited."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            rejection = RequestRejected(
                self.next_request_id(), "INVALID_JSON", "Request must be valid JSON."
            )
            return self._reject(
                rejection, tool="invalid_json", arguments={"raw_line_length": len(raw_line)}
            )
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate, dispatch and audit one decoded request."""
        try:
            request = self.read_request(payload)
        except RequestRejected as rejection:
            return self._reject(rejection, tool="invalid_request", arguments={})
        response = self._dispatch(request)
        self._audit(request.request_id, request.tool, request.arguments, response)
        return response

    def read_request(self, payload: object) -> Request:
        """Return the tool and arguments a payload names, or raise RequestRejected.

        Both `{"method": "patterns.status"}` and
        `{"method": "tools/call", "params": {"name": "patterns.status"}}` are accepted.
        """
        if not isinstance(payload, dict):
            raise RequestRejected(
                self.next_request_id(), "INVALID_REQUEST", "Request must be an object."
            )
        request_id = self.request_id_for(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})
        if not isinstance(method, str) or not method:
            raise RequestRejected(
                request_id, "INVALID_REQUEST", "Request method must be a non-empty string."
            )
        if not isinstance(params, dict):
            raise RequestRejected(
                request_id, "INVALID_PARAMS", "Request params must be an object."
            )
        if method != "tools/call":
            return Request(request_id=request_id, tool=method, arguments=params)

        name = params.get("name")
        arguments = params.get("arguments", {})
        if not isinstance(name, str) or not name:
            raise RequestRejected(
                request_id, "INVALID_PARAMS", "tools/call params.name must be a non-empty string."
            )
        if not isinstance(arguments, dict):
            raise RequestRejected(
                request_id, "INVALID_PARAMS", "tools/call params.arguments must be an object."
            )
        return Request(request_id=request_id, tool=name, arguments=arguments)

    def request_id_for(self, raw_id: object) -> str:
        """Echo string and integer ids; generate one for anything else."""
        if isinstance(raw_id, str) and raw_id:
            return raw_id
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            return str(raw_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        self._generated_ids += 1
        return f"req-{self._generated_ids:06d}"

    def _dispatch(self, request: Request) -> dict[str, object]:
        request_id = request.request_id
        try:
            result = self._registry.dispatch(name=request.tool, arguments=request.arguments)
        except PathBlockedError as error:
            return blocked_envelope(request_id, "PATH_BLOCKED", error.reason, error.hint)
        except PolicyBlockedError as error:
            return blocked_envelope(request_id, "LIMIT_BLOCKED", error.reason, error.hint)
        except ToolDispatchError as error:
            return error_envelope(request_id, error.code, error.message)
        except Exception:
            return error_envelope(
                request_id, "INTERNAL_ERROR", "Unhandled server error while executing tool."
            )
        response = envelope(request_id, result=result, warnings=_pop_warnings(result))
        return self._within_size_limit(response)

    def _within_size_limit(self, response: dict[str, object]) -> dict[str, object]:
        """Replace responses above max_total_bytes_per_response with LIMIT_BLOCKED."""
        encoded_size = len(json.dumps(response, sort_keys=True).encode("utf-8"))
        if encoded_size <= self._config.limits.max_total_bytes_per_response:
            return response
        return blocked_envelope(
            str(response["request_id"]),
            "LIMIT_BLOCKED",
            "Response exceeds max_total_bytes_per_response limit.",
            "Submit a smaller diff or raise limits.max_total_bytes_per_response.",
        )

    def _reject(
        self, rejection: RequestRejected, *, tool: str, arguments: dict[str, object]
    ) -> dict[str, object]:
        response = error_envelope(rejection.request_id, rejection.code, rejection.message)
        self._audit(rejection.request_id, tool, arguments, response)
        return response

    def _audit(
        self,
        request_id: str,
        tool: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        error = response.get("error")
        error_code = error.get("code") if isinstance(error, dict) else None
        self._audit_logger.append(
            AuditEvent(
                timestamp=utc_timestamp(),
                request_id=request_id,
                tool=tool,
                ok=bool(response["ok"]),
                blocked=bool(response["blocked"]),
                error_code=error_code if isinstance(error_code, str) else None,
                metadata=sanitize_arguments(arguments),
            )
        )

    def _read_diff_file(self, path: str) -> str:
        resolved = resolve_root_path(root=self._config.root, candidate=path)
        if not resolved.is_file():
            raise ToolDispatchError(
                code="NOT_FOUND",
                message=f"Diff file not found: {path}",
            )
        size = resolved.stat().st_size
        if size > self._config.limits.max_diff_bytes:
            raise PolicyBlockedError(
                reason=f"Diff file is {size} bytes, above the max_diff_bytes limit.",
                hint="Split the diff or raise limits.max_diff_bytes.",
            )
        return resolved.read_text(encoding="utf-8", errors="replace")


def create_server(
    root: str | Path = ".",
    cli_overrides: CliOverrides | None = None,
) -> StdioServer:
    """Create a configured STDIO server instance."""
    config = load_effective_config(root=Path(root).resolve(), overrides=cli_overrides)
    return StdioServer(config=config)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the diff-patterns server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        audit_enabled=_parse_flag(args.audit),
        max_diff_bytes=args.max_diff_bytes,
        max_total_bytes_per_response=args.max_total_bytes_per_response,
        max_concurrency=args.max_concurrency,
        max_chunk_lines=args.max_chunk_lines,
        python_native=_parse_flag(args.python_native),
        fallback_enabled=_parse_flag(args.fallback_tokenizer),
        default_language=args.default_language,
    )
    try:
        server = create_server(root=args.root, cli_overrides=overrides)
    except ValueError as error:
        parser.error(str(error))
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


def _parse_flag(value: str | None) -> bool | None:
    return None if value is None else value == "true"


def _pop_warnings(result: dict[str, object]) -> list[str]:
    raw = result.pop("__warnings__", None)
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


if __name__ == "__main__":
    raise SystemExit(main())
