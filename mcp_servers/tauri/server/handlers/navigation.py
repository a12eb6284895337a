"""
Navigation tool handlers - page navigation and history.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..schemas import object_schema, string_prop
from ..types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ...context import ServerContext


def handle_navigate(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    url = str(args["url"])

    def action(driver: Any) -> ToolResult:
        driver.get(url)
        return ToolResult.text(f"Navigated to {url}")

    return ctx.executor.run("navigating", action)


def handle_go_back(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.back()
        return ToolResult.text("Navigated back")

    return ctx.executor.run("navigating back", action)


def handle_go_forward(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.forward()
        return ToolResult.text("Navigated forward")

    return ctx.executor.run("navigating forward", action)


def handle_refresh_page(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.refresh()
        return ToolResult.text("Page refreshed")

    return ctx.executor.run("refreshing page", action)


def handle_get_current_url(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    return ctx.executor.run("getting current URL", lambda d: ToolResult.text(f"Current URL: {d.current_url}"))


def handle_get_title(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    return ctx.executor.run("getting title", lambda d: ToolResult.text(f"Page title: {d.title}"))


def handle_get_page_source(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    return ctx.executor.run("getting page source", lambda d: ToolResult.text(d.page_source))


NAVIGATION_TOOLS: list[ToolSpec] = [
    ToolSpec(
        "navigate",
        "navigates to a URL",
        object_schema({"url": string_prop("URL to navigate to")}, ["url"]),
        handle_navigate,
    ),
    ToolSpec("go_back", "navigates back in browser history", object_schema(), handle_go_back),
    ToolSpec("go_forward", "navigates forward in browser history", object_schema(), handle_go_forward),
    ToolSpec("refresh_page", "refreshes the current page", object_schema(), handle_refresh_page),
    ToolSpec("get_current_url", "gets the current page URL", object_schema(), handle_get_current_url),
    ToolSpec("get_title", "gets the page title", object_schema(), handle_get_title),
    ToolSpec("get_page_source", "gets the page source HTML", object_schema(), handle_get_page_source),
]
