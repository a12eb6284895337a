"""
Wait tool handlers - explicit waits built on Selenium expected conditions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from selenium.webdriver.support import expected_conditions as EC

from ...locators import resolve_locator
from ..schemas import TIMEOUT_PROPERTY, locator_schema, object_schema, string_prop
from ..types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ...context import ServerContext

Condition = Callable[[Any], Any]


def _locator_wait(label: str, make: Callable[[tuple[str, str]], Condition], done: str) -> Callable[..., ToolResult]:
    def handler(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
        def action(driver: Any) -> ToolResult:
            condition = make(resolve_locator(str(args["by"]), str(args["value"])))
            ctx.executor.wait_until(driver, condition, ctx.executor.timeout(args))
            return ToolResult.text(done)

        return ctx.executor.run(label, action)

    return handler


def handle_wait_for_title_contains(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    title = str(args["title"])

    def action(driver: Any) -> ToolResult:
        ctx.executor.wait_until(driver, EC.title_contains(title), ctx.executor.timeout(args))
        return ToolResult.text(f"Title now contains: {title}")

    return ctx.executor.run("waiting for title to contain text", action)


def handle_wait_for_url_contains(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    url = str(args["url"])

    def action(driver: Any) -> ToolResult:
        ctx.executor.wait_until(driver, EC.url_contains(url), ctx.executor.timeout(args))
        return ToolResult.text(f"URL now contains: {url}")

    return ctx.executor.run("waiting for URL to contain text", action)


WAIT_TOOLS: list[ToolSpec] = [
    ToolSpec(
        "wait_for_element_visible",
        "waits for an element to be visible",
        locator_schema(),
        _locator_wait(
            "waiting for element to be visible", EC.visibility_of_element_located, "Element is now visible"
        ),
    ),
    ToolSpec(
        "wait_for_element_not_visible",
        "waits for an element to not be visible",
        locator_schema(),
        _locator_wait(
            "waiting for element to not be visible",
            EC.invisibility_of_element_located,
            "Element is no longer visible",
        ),
    ),
    ToolSpec(
        "wait_for_element_clickable",
        "waits for an element to be clickable",
        locator_schema(),
        _locator_wait("waiting for element to be clickable", EC.element_to_be_clickable, "Element is now clickable"),
    ),
    ToolSpec(
        "wait_for_title_contains",
        "waits for the page title to contain specific text",
        object_schema(
            {"title": string_prop("Text that should be contained in title"), "timeout": TIMEOUT_PROPERTY}, ["title"]
        ),
        handle_wait_for_title_contains,
    ),
    ToolSpec(
        "wait_for_url_contains",
        "waits for the URL to contain specific text",
        object_schema({"url": string_prop("Text that should be contained in URL"), "timeout": TIMEOUT_PROPERTY}, ["url"]),
        handle_wait_for_url_contains,
    ),
]
