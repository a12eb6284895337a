"""
Tool handlers organized by domain.

Each handler module provides ToolSpec entries whose handlers follow the
signature: (ctx, arguments) -> ToolResult
"""

from .actions import ACTION_TOOLS
from .elements import ELEMENT_TOOLS
from .lifecycle import LIFECYCLE_TOOLS
from .navigation import NAVIGATION_TOOLS
from .scripts import SCRIPT_TOOLS
from .session import SESSION_TOOLS
from .waits import WAIT_TOOLS
from .windows import WINDOW_TOOLS

# Aggregate all tools (order is the order advertised by tools/list)
ALL_TOOLS = [
    *LIFECYCLE_TOOLS,
    *NAVIGATION_TOOLS,
    *ELEMENT_TOOLS,
    *WAIT_TOOLS,
    *SCRIPT_TOOLS,
    *ACTION_TOOLS,
    *WINDOW_TOOLS,
    *SESSION_TOOLS,
]

__all__ = [
    "ALL_TOOLS",
    "ACTION_TOOLS",
    "ELEMENT_TOOLS",
    "LIFECYCLE_TOOLS",
    "NAVIGATION_TOOLS",
    "SCRIPT_TOOLS",
    "SESSION_TOOLS",
    "WAIT_TOOLS",
    "WINDOW_TOOLS",
]
