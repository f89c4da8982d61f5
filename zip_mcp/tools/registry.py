# =============================================================================
# tools/registry.py  —  Tool Registry (the fixed catalog of tools)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares the four tools this server offers and their JSON-Schema input
#   contracts.  The calling agent reads these descriptions to decide WHEN
#   to call a tool and WHAT to pass, so they are written for an LLM reader.
#
# INVARIANTS:
#   - Built once at import time, never mutated afterwards
#   - list_tools() always succeeds and returns the same descriptors in the
#     same order: compress, decompress, getZipInfo, echo
#   - The dispatcher rejects any tool name that is not in this catalog
# =============================================================================

import copy
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ToolDescriptor:
    """One tool: its unique name, a description and its input schema."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> dict[str, Any]:
        """MCP wire shape.  The schema is copied so callers can't edit ours."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


# -----------------------------------------------------------------------------
# compress
# -----------------------------------------------------------------------------
COMPRESS = ToolDescriptor(
    name="compress",
    description="Compress local files or directories into a ZIP file",
    input_schema={
        "type": "object",
        "properties": {
            "input": {
                "anyOf": [
                    {"type": "string"},
                    {"type": "array", "items": {"type": "string"}},
                ],
                "description": "File path(s) or directory to compress",
            },
            "output": {
                "type": "string",
                "description": "Output ZIP file path",
            },
            "options": {
                "type": "object",
                "properties": {
                    "overwrite": {
                        "type": "boolean",
                        "description": "Overwrite if output file exists",
                    },
                    "level": {
                        "type": "number",
                        "description": "Compression level (0-9)",
                        "minimum": 0,
                        "maximum": 9,
                    },
                    "password": {
                        "type": "string",
                        "description": "Password to encrypt ZIP file",
                    },
                    "comment": {
                        "type": "string",
                        "description": "ZIP file comment",
                    },
                    "encryptionStrength": {
                        "type": "number",
                        "enum": [1, 2, 3],
                        "description": "Encryption strength (1=AES-128, 2=AES-192, 3=AES-256)",
                    },
                },
            },
        },
        "required": ["input", "output"],
    },
)


# -----------------------------------------------------------------------------
# decompress
# -----------------------------------------------------------------------------
DECOMPRESS = ToolDescriptor(
    name="decompress",
    description="Decompress local ZIP file to specified directory",
    input_schema={
        "type": "object",
        "properties": {
            "input": {
                "type": "string",
                "description": "ZIP file path to decompress",
            },
            "output": {
                "type": "string",
                "description": "Output directory path",
            },
            "options": {
                "type": "object",
                "properties": {
                    "overwrite": {
                        "type": "boolean",
                        "description": "Overwrite existing files",
                    },
                    "password": {
                        "type": "string",
                        "description": "Password for encrypted ZIP",
                    },
                    "createDirectories": {
                        "type": "boolean",
                        "description": "Create output directory if it doesn't exist",
                    },
                },
            },
        },
        "required": ["input", "output"],
    },
)


# -----------------------------------------------------------------------------
# getZipInfo
# -----------------------------------------------------------------------------
GET_ZIP_INFO = ToolDescriptor(
    name="getZipInfo",
    description="Get metadata information of a local ZIP file",
    input_schema={
        "type": "object",
        "properties": {
            "input": {
                "type": "string",
                "description": "ZIP file path",
            },
            "options": {
                "type": "object",
                "properties": {
                    "password": {
                        "type": "string",
                        "description": "Password for encrypted ZIP",
                    },
                },
            },
        },
        "required": ["input"],
    },
)


# -----------------------------------------------------------------------------
# echo
# -----------------------------------------------------------------------------
ECHO = ToolDescriptor(
    name="echo",
    description="Return the input message (for testing)",
    input_schema={
        "type": "object",
        "properties": {
            "message": {
                "type": "string",
                "description": "Message to echo back",
            },
        },
        "required": ["message"],
    },
)


TOOLS: tuple[ToolDescriptor, ...] = (COMPRESS, DECOMPRESS, GET_ZIP_INFO, ECHO)
_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOLS}


def list_tools() -> list[ToolDescriptor]:
    """Return every tool descriptor, in catalog order."""
    return list(TOOLS)


def get_tool(name: str) -> Optional[ToolDescriptor]:
    """Look up a descriptor by tool name; None if the tool doesn't exist."""
    return _BY_NAME.get(name)
