"""
MCP server bridging tool calls to a Tauri application through tauri-driver.

This module provides the main entry point and protocol handling (newline
delimited JSON-RPC over stdio). Tool dispatch is handled via the registry in
server/registry.py; process teardown is owned by shutdown.ShutdownCoordinator.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from selenium.common.exceptions import WebDriverException

from .context import ServerContext
from .errors import TauriBridgeError
from .executor import error_message
from .server.contract import (
    STATUS_RESOURCE,
    STATUS_RESOURCE_TEMPLATE,
    STATUS_RESOURCE_URI,
    initialize_result,
    select_protocol,
)
from .server.registry import ToolRegistry, create_default_registry
from .server.types import ToolResult
from .shutdown import ShutdownCoordinator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("mcp.tauri")

# Argument keys whose values never go to the log verbatim.
_LOG_ELIDE_KEYS = {"script", "text"}

__all__ = ["McpServer", "main"]


def _write_message(payload: dict[str, Any]) -> None:
    """Write JSON-RPC message to stdout."""
    line = (json.dumps(payload, ensure_ascii=False, default=str) + "\n").encode()
    sys.stdout.buffer.write(line)
    sys.stdout.buffer.flush()


def _read_message() -> dict[str, Any] | None:
    """Read one JSON-RPC message from stdin; None means the stream closed."""
    line = sys.stdin.buffer.readline()
    if not line:
        return None
    line = line.strip()
    if not line:
        return {}
    msg = json.loads(line.decode())
    if os.environ.get("MCP_TRACE"):
        logger.info("recv %s", msg)
    return msg if isinstance(msg, dict) else {"_invalid": msg}


def _safe_args(arguments: dict[str, Any]) -> dict[str, Any]:
    return {k: (f"<{len(str(v))} chars>" if k in _LOG_ELIDE_KEYS else v) for k, v in arguments.items()}


class McpServer:
    """MCP Server with registry-based tool dispatch."""

    def __init__(
        self,
        ctx: ServerContext | None = None,
        *,
        registry: ToolRegistry | None = None,
        coordinator: ShutdownCoordinator | None = None,
    ) -> None:
        self.ctx = ctx or ServerContext.create()
        self.registry = registry or create_default_registry()
        self.coordinator = coordinator or ShutdownCoordinator(self.ctx.sessions, self.ctx.launcher)

    def handle_initialize(self, request_id: Any, params: dict[str, Any] | None = None) -> None:
        requested = (params or {}).get("protocolVersion") if isinstance(params, dict) else None
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": initialize_result(select_protocol(requested))})

    def handle_list_tools(self, request_id: Any) -> None:
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": {"tools": self.registry.definitions()}})

    def handle_list_resources(self, request_id: Any) -> None:
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": {"resources": [STATUS_RESOURCE]}})

    def handle_list_resource_templates(self, request_id: Any) -> None:
        _write_message(
            {"jsonrpc": "2.0", "id": request_id, "result": {"resourceTemplates": [STATUS_RESOURCE_TEMPLATE]}}
        )

    def handle_read_resource(self, request_id: Any, uri: str) -> None:
        if uri != STATUS_RESOURCE_URI:
            _write_message(
                {"jsonrpc": "2.0", "id": request_id, "error": {"code": -32002, "message": f"Resource not found: {uri}"}}
            )
            return
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {"contents": [{"uri": uri, "mimeType": "text/plain", "text": self.ctx.status_text()}]},
            }
        )

    def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run one tool call. Never raises: every failure becomes an error result."""
        logger.info("tool=%s args=%s", name, _safe_args(arguments))
        try:
            if not name:
                return ToolResult.error("Missing tool name")
            if not self.registry.has(name):
                return ToolResult.error(f"Unknown tool: {name}")
            return self.registry.dispatch(name, self.ctx, arguments)
        except TauriBridgeError as e:
            logger.info("tool_error tool=%s reason=%s", name, e)
            return ToolResult.error(f"Error in {name}: {e}")
        except WebDriverException as e:
            logger.info("webdriver_error tool=%s reason=%s", name, error_message(e))
            return ToolResult.error(f"Error in {name}: {error_message(e)}")
        except Exception as exc:
            logger.exception("tool_call_failed")
            return ToolResult.error(f"Error in {name}: {error_message(exc)}")

    def handle_call_tool(self, request_id: Any, name: str, arguments: dict[str, Any]) -> None:
        result = self.call_tool(name, arguments)
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {"content": result.to_content_list(), "isError": result.is_error},
            }
        )

    def dispatch(self, message: dict[str, Any]) -> None:
        """Dispatch incoming JSON-RPC message to appropriate handler."""
        if not message:
            return
        if "_invalid" in message:
            _write_message({"jsonrpc": "2.0", "id": None, "error": {"code": -32600, "message": "Invalid Request"}})
            return

        method = message.get("method")
        request_id = message.get("id")
        if isinstance(method, str) and method.startswith("notifications/"):
            return
        params = message.get("params") or {}
        if not isinstance(params, dict):
            _write_message(
                {"jsonrpc": "2.0", "id": request_id, "error": {"code": -32602, "message": "Invalid params: expected an object"}}
            )
            return

        if method == "initialize":
            self.handle_initialize(request_id, params)
        elif method in ("tools/list", "list_tools"):
            self.handle_list_tools(request_id)
        elif method in ("tools/call", "call_tool"):
            name = params.get("name")
            arguments = params.get("arguments") or params.get("args") or {}
            self.handle_call_tool(request_id, name or "", arguments if isinstance(arguments, dict) else {})
        elif method == "resources/list":
            self.handle_list_resources(request_id)
        elif method == "resources/templates/list":
            self.handle_list_resource_templates(request_id)
        elif method == "resources/read":
            self.handle_read_resource(request_id, str(params.get("uri") or ""))
        elif method == "ping":
            _write_message({"jsonrpc": "2.0", "id": request_id, "result": {}})
        else:
            _write_message(
                {
                    "jsonrpc": "2.0",
                    "id": request_id,
                    "error": {"code": -32601, "message": f"Method {method} not found"},
                }
            )

    def serve(self) -> None:
        """Read and dispatch messages until stdin closes, then shut down."""
        while True:
            try:
                message = _read_message()
            except ValueError as exc:
                # JSONDecodeError and UnicodeDecodeError both land here.
                _write_message({"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": f"Parse error: {exc}"}})
                continue
            if message is None:
                break
            self.dispatch(message)
        self.coordinator.trigger("stdin_closed")


def main() -> None:
    """Main entry point for MCP server."""
    server = McpServer()
    server.coordinator.install()
    logger.info(
        "mcp_tauri_start driver=%s port=%s tools=%s",
        server.ctx.config.driver_path,
        server.ctx.config.port,
        len(server.registry),
    )
    server.serve()


if __name__ == "__main__":
    main()
