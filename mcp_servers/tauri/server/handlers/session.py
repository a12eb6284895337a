"""
Session tool handlers - capabilities and WebDriver timeouts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..schemas import number_prop, object_schema
from ..types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ...context import ServerContext


def handle_get_capabilities(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    return ctx.executor.run("getting capabilities", lambda d: ToolResult.json(dict(d.capabilities)))


def handle_set_timeouts(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        applied: dict[str, float] = {}
        # WebDriver takes milliseconds on the wire; Selenium's Python API takes seconds.
        if args.get("script") is not None:
            applied["script"] = float(args["script"])
            driver.set_script_timeout(applied["script"] / 1000.0)
        if args.get("pageLoad") is not None:
            applied["pageLoad"] = float(args["pageLoad"])
            driver.set_page_load_timeout(applied["pageLoad"] / 1000.0)
        if args.get("implicit") is not None:
            applied["implicit"] = float(args["implicit"])
            driver.implicitly_wait(applied["implicit"] / 1000.0)
        return ToolResult.text(f"Timeouts set: {applied}", data=applied)

    return ctx.executor.run("setting timeouts", action)


def handle_get_timeouts(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        t = driver.timeouts
        return ToolResult.json(
            {
                "implicit": int(t.implicit_wait * 1000),
                "pageLoad": int(t.page_load * 1000),
                "script": int(t.script * 1000),
            }
        )

    return ctx.executor.run("getting timeouts", action)


SESSION_TOOLS: list[ToolSpec] = [
    ToolSpec(
        "get_capabilities", "gets the capabilities of the current session", object_schema(), handle_get_capabilities
    ),
    ToolSpec(
        "set_timeouts",
        "sets timeouts for script, page load, and implicit waits",
        object_schema(
            {
                "script": number_prop("Script timeout in ms"),
                "pageLoad": number_prop("Page load timeout in ms"),
                "implicit": number_prop("Implicit wait timeout in ms"),
            }
        ),
        handle_set_timeouts,
    ),
    ToolSpec(
        "get_timeouts",
        "gets the current timeouts for script, page load, and implicit waits",
        object_schema(),
        handle_get_timeouts,
    ),
]
