"""
Tool registry with dispatch table for MCP server.

Maps a tool name to its ToolSpec (schema + handler); the command catalogue
lives in server/handlers and never leaks into the executor or locator code.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ..context import ServerContext

logger = logging.getLogger("mcp.tauri.registry")


class ToolRegistry:
    """Registry for tool handlers."""

    def __init__(self) -> None:
        self._specs: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._specs:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._specs[spec.name] = spec

    def register_many(self, specs: Iterable[ToolSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def get(self, name: str) -> ToolSpec | None:
        return self._specs.get(name)

    def has(self, name: str) -> bool:
        return name in self._specs

    def dispatch(self, name: str, ctx: ServerContext, arguments: dict[str, Any]) -> ToolResult:
        """Dispatch tool call to its handler.

        Raises:
            KeyError: If tool not found
        """
        spec = self._specs.get(name)
        if spec is None:
            raise KeyError(f"Unknown tool: {name}")

        required = spec.input_schema.get("required") or []
        missing = [key for key in required if arguments.get(key) is None]
        if missing:
            return ToolResult.error(f"Missing required argument(s) for {name}: {', '.join(missing)}")

        return spec.handler(ctx, arguments)

    def definitions(self) -> list[dict[str, Any]]:
        return [spec.definition() for spec in self._specs.values()]

    @property
    def tool_names(self) -> list[str]:
        return list(self._specs.keys())

    def __len__(self) -> int:
        return len(self._specs)


def create_default_registry() -> ToolRegistry:
    """Create registry with every built-in tool."""
    from .handlers import ALL_TOOLS

    registry = ToolRegistry()
    registry.register_many(ALL_TOOLS)
    return registry


__all__ = ["ToolRegistry", "create_default_registry", "logger"]
