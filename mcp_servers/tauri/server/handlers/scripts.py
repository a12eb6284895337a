"""
Script tool handlers - JavaScript execution and scrolling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...errors import InvalidArgumentError
from ...executor import format_result
from ..schemas import locator_schema, number_prop, object_schema, string_prop
from ..types import ToolResult, ToolSpec
from .elements import element_handler

if TYPE_CHECKING:
    from ...context import ServerContext

_ARGS_PROPERTY: dict[str, Any] = {"type": "array", "items": {}, "description": "Arguments to pass to the script"}


def _script_args(args: dict[str, Any]) -> list[Any]:
    raw = args.get("args")
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidArgumentError("args must be an array")
    return raw


def handle_execute_script(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    script = str(args["script"])

    def action(driver: Any) -> ToolResult:
        result = driver.execute_script(script, *_script_args(args))
        return ToolResult.text(f"Script executed. Result: {format_result(result)}", data=result)

    return ctx.executor.run("executing script", action)


def handle_execute_async_script(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    script = str(args["script"])

    def action(driver: Any) -> ToolResult:
        result = driver.execute_async_script(script, *_script_args(args))
        return ToolResult.text(f"Async script executed. Result: {format_result(result)}", data=result)

    return ctx.executor.run("executing async script", action)


def _scroll_to_element(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    driver.execute_script("arguments[0].scrollIntoView(true);", element)
    return ToolResult.text("Scrolled to element")


def handle_scroll_by(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        x, y = float(args["x"]), float(args["y"])
        driver.execute_script("window.scrollBy(arguments[0], arguments[1]);", x, y)
        return ToolResult.text(f"Scrolled by x={args['x']}, y={args['y']}")

    return ctx.executor.run("scrolling", action)


def handle_scroll_to_top(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.execute_script("window.scrollTo(0, 0);")
        return ToolResult.text("Scrolled to top of page")

    return ctx.executor.run("scrolling to top", action)


def handle_scroll_to_bottom(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.execute_script("window.scrollTo(0, document.body.scrollHeight);")
        return ToolResult.text("Scrolled to bottom of page")

    return ctx.executor.run("scrolling to bottom", action)


SCRIPT_TOOLS: list[ToolSpec] = [
    ToolSpec(
        "execute_script",
        "executes JavaScript in the application webview",
        object_schema({"script": string_prop("JavaScript code to execute"), "args": _ARGS_PROPERTY}, ["script"]),
        handle_execute_script,
    ),
    ToolSpec(
        "execute_async_script",
        "executes asynchronous JavaScript in the application webview",
        object_schema(
            {"script": string_prop("Asynchronous JavaScript code to execute"), "args": _ARGS_PROPERTY}, ["script"]
        ),
        handle_execute_async_script,
    ),
    ToolSpec(
        "scroll_to_element",
        "scrolls to an element",
        locator_schema(),
        element_handler("scrolling to element", _scroll_to_element),
    ),
    ToolSpec(
        "scroll_by",
        "scrolls the page by specified pixels",
        object_schema(
            {"x": number_prop("Horizontal pixels to scroll"), "y": number_prop("Vertical pixels to scroll")},
            ["x", "y"],
        ),
        handle_scroll_by,
    ),
    ToolSpec("scroll_to_top", "scrolls to the top of the page", object_schema(), handle_scroll_to_top),
    ToolSpec("scroll_to_bottom", "scrolls to the bottom of the page", object_schema(), handle_scroll_to_bottom),
]
