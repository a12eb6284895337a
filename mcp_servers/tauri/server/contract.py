"""Protocol and server contract definitions.

Single source of truth for:
- supported MCP protocol versions
- server identity
- capabilities advertised by initialize
- the status resource
"""

from __future__ import annotations

from typing import Any

SERVER_INFO: dict[str, str] = {"name": "MCP Tauri", "version": "0.1.0"}

SUPPORTED_PROTOCOL_VERSIONS = ["2025-06-18", "2025-03-26", "2024-11-05"]
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]
DEFAULT_PROTOCOL_VERSION = LATEST_PROTOCOL_VERSION

CAPABILITIES: dict[str, Any] = {
    "logging": {},
    "resources": {"subscribe": False, "listChanged": False},
    "tools": {"listChanged": False},
}

STATUS_RESOURCE_URI = "tauri-status://current"

STATUS_RESOURCE: dict[str, Any] = {
    "uri": STATUS_RESOURCE_URI,
    "name": "tauri-status",
    "description": "Whether a Tauri session is active, and its session id",
    "mimeType": "text/plain",
}

STATUS_RESOURCE_TEMPLATE: dict[str, Any] = {
    "uriTemplate": STATUS_RESOURCE_URI,
    "name": "tauri-status",
    "mimeType": "text/plain",
}


def select_protocol(requested: Any) -> str:
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return DEFAULT_PROTOCOL_VERSION


def initialize_result(protocol: str) -> dict[str, Any]:
    return {
        "protocolVersion": protocol,
        "serverInfo": SERVER_INFO,
        "capabilities": CAPABILITIES,
        "instructions": "Call start_tauri_app first; every other tool targets the session it creates.",
    }
