# =============================================================================
# tools/dispatcher.py  —  Request Dispatcher (tool name → handler → envelope)
# =============================================================================
#
# HOW A CALL FLOWS:
#   1. dispatch(name, arguments) receives one tool call
#   2. Missing arguments / unknown tool / missing required field → rejected
#      here, before any handler runs
#   3. The explicit _HANDLERS table routes the call to core/archive.py
#   4. The result is serialized to JSON text inside a ToolResponse
#
# ALL ERRORS BECOME DATA:
#   This is the single catch boundary.  A tagged ArchiveToolError becomes
#   {"content": [{"type": "text", "text": "Error: ..."}], "isError": true}.
#   Anything unexpected is logged with its traceback and converted the same
#   way, so the calling agent always gets a response it can read.
#
# LOGGING:
#   Every call is logged to STDERR (stdout belongs to the MCP transport):
#     - CYAN for incoming requests (tool name + parameters)
#     - YELLOW for intermediate status messages
#     - GREEN for successful responses
#     - RED for error responses
#   Set ZIP_MCP_LOG_COLOR=false to drop the ANSI codes (e.g. when stderr
#   is redirected to a file).
# =============================================================================

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from zip_mcp.core import archive
from zip_mcp.core.errors import ArchiveToolError, ValidationError
from zip_mcp.core.models import CompressOptions, DecompressOptions, InfoOptions
from zip_mcp.tools.registry import get_tool

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RED = "\033[31m"      # Error responses
_RESET = "\033[0m"     # Reset to default terminal color

# Option keys whose values never reach the log.
_SECRET_KEYS = frozenset({"password"})


def _paint(color: str, text: str) -> str:
    if os.environ.get("ZIP_MCP_LOG_COLOR", "true").lower() == "false":
        return text
    return f"{color}{text}{_RESET}"


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: "***" if key in _SECRET_KEYS and item is not None else _redact(item)
            for key, item in value.items()
        }
    return value


def _log_request(tool_name: str, arguments: dict[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in _redact(arguments).items())
    logger.info(_paint(_CYAN, f"{tool_name} called with: {param_str}"))


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(_paint(_YELLOW, f"  → {message}"))


# =============================================================================
# ToolResponse — the uniform envelope every call returns
# =============================================================================
@dataclass(frozen=True)
class ToolResponse:
    """Exactly one text payload plus an error flag."""

    text: str
    is_error: bool = False

    @property
    def content(self) -> list[dict[str, str]]:
        return [{"type": "text", "text": self.text}]

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "isError": self.is_error}

    @classmethod
    def success(cls, text: str) -> "ToolResponse":
        return cls(text=text)

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(text=f"Error: {message}", is_error=True)


def _log_response(tool_name: str, response: ToolResponse) -> ToolResponse:
    """Log the response as compact text (GREEN, or RED for errors), then return it."""
    if response.is_error:
        logger.info(_paint(_RED, f"  ← {tool_name} failed: {response.text}"))
        return response
    try:
        compact = json.dumps(json.loads(response.text), separators=(",", ":"))
    except ValueError:
        compact = response.text
    logger.info(_paint(_GREEN, f"  ← {tool_name} response: {compact}"))
    return response


# =============================================================================
# Handler adapters — arguments mapping → core call → JSON text
# =============================================================================
def _to_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _handle_echo(arguments: dict[str, Any]) -> str:
    return archive.echo(arguments.get("message"))


def _handle_compress(arguments: dict[str, Any]) -> str:
    options = CompressOptions.from_dict(arguments.get("options"))
    result = archive.compress(arguments["input"], arguments["output"], options)
    _log_status(f"Wrote {result.files} entries ({result.size} bytes) to {result.output}")
    return _to_json(result.to_dict())


def _handle_decompress(arguments: dict[str, Any]) -> str:
    options = DecompressOptions.from_dict(arguments.get("options"))
    result = archive.decompress(arguments["input"], arguments["output"], options)
    _log_status(f"Extracted {len(result.files)} entries, skipped {len(result.skipped)}")
    return _to_json(result.to_dict())


def _handle_get_zip_info(arguments: dict[str, Any]) -> str:
    options = InfoOptions.from_dict(arguments.get("options"))
    result = archive.get_zip_info(arguments["input"], options)
    _log_status(f"Read {len(result.entries)} entries from {result.path}")
    return _to_json(result.to_dict())


# Every tool → handler mapping is listed here; adding a tool means adding a
# descriptor in registry.py AND a line in this table.
_HANDLERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "echo": _handle_echo,
    "compress": _handle_compress,
    "decompress": _handle_decompress,
    "getZipInfo": _handle_get_zip_info,
}


def _check_required(tool_name: str, arguments: dict[str, Any]) -> None:
    descriptor = get_tool(tool_name)
    for key in descriptor.required:
        if arguments.get(key) is None:
            raise ValidationError(f"Missing required argument: {key}")


def dispatch(name: str, arguments: Optional[dict[str, Any]]) -> ToolResponse:
    """Run one tool call and wrap the outcome in a ToolResponse.

    Never raises: validation failures, precondition failures, backend
    failures and unexpected exceptions all come back as error responses.
    """
    if arguments is None:
        logger.info(_paint(_RED, f"{name} called without arguments"))
        return ToolResponse.error("Missing arguments")
    if not isinstance(arguments, dict):
        return _log_response(name, ToolResponse.error("Arguments must be an object"))

    _log_request(name, arguments)

    handler = _HANDLERS.get(name)
    if handler is None or get_tool(name) is None:
        return _log_response(name, ToolResponse.error(f"Unknown tool: {name}"))

    try:
        _check_required(name, arguments)
        text = handler(arguments)
    except ArchiveToolError as exc:
        _log_status(f"{exc.category.value} error")
        return _log_response(name, ToolResponse.error(exc.message))
    except Exception as exc:
        logger.exception("Unexpected failure in tool %s", name)
        return _log_response(name, ToolResponse.error(str(exc) or type(exc).__name__))

    return _log_response(name, ToolResponse.success(text))
