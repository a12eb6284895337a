"""
Type definitions for MCP server responses and handlers.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..context import ServerContext


@dataclass(slots=True)
class ToolContent:
    """Single content item in tool response."""

    type: str  # "text" or "image"
    text: str | None = None
    data: str | None = None  # base64 for images
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP content format."""
        if self.type == "image":
            return {"type": "image", "data": self.data, "mimeType": self.mime_type}
        return {"type": "text", "text": self.text}


@dataclass(slots=True)
class ToolResult:
    """Outcome of a tool call: success payload or failure message, never an exception."""

    content: list[ToolContent] = field(default_factory=list)
    is_error: bool = False
    data: Any | None = None

    @classmethod
    def text(cls, text: str, *, data: Any | None = None) -> ToolResult:
        return cls(content=[ToolContent(type="text", text=text or "")], data=data)

    @classmethod
    def error(cls, message: str) -> ToolResult:
        return cls(content=[ToolContent(type="text", text=message)], is_error=True)

    @classmethod
    def json(cls, data: Any) -> ToolResult:
        return cls(content=[ToolContent(type="text", text=_json.dumps(data, indent=2, default=str))], data=data)

    @classmethod
    def image(cls, data_b64: str, mime_type: str = "image/png", *, caption: str | None = None) -> ToolResult:
        if not data_b64:
            return cls.error("Screenshot data is empty")
        content = [ToolContent(type="text", text=caption)] if caption else []
        content.append(ToolContent(type="image", data=data_b64, mime_type=mime_type))
        return cls(content=content)

    @property
    def first_text(self) -> str:
        return next((c.text for c in self.content if c.type == "text" and c.text is not None), "")

    def to_content_list(self) -> list[dict[str, Any]]:
        """Convert to MCP content list format."""
        return [c.to_dict() for c in self.content]


class ToolHandler(Protocol):
    """Protocol for tool handler functions."""

    def __call__(self, ctx: ServerContext, arguments: dict[str, Any]) -> ToolResult: ...


@dataclass(slots=True, frozen=True)
class ToolSpec:
    """A registered tool: wire description plus handler."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable[[ServerContext, dict[str, Any]], ToolResult]

    def definition(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}
