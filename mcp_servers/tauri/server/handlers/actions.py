"""
Input action handlers - pointer and keyboard actions via ActionChains.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.keys import Keys

from ...errors import InvalidArgumentError
from ...locators import LOCATOR_STRATEGIES, LocatorSpec
from ..schemas import locator_schema, number_prop, object_schema, string_prop
from ..types import ToolResult, ToolSpec
from .elements import element_handler

if TYPE_CHECKING:
    from ...context import ServerContext

# "PAGEUP" -> Keys.PAGE_UP, "ARROWLEFT" -> Keys.ARROW_LEFT, ...
_KEYS: dict[str, str] = {
    name.replace("_", ""): getattr(Keys, name) for name in dir(Keys) if name.isupper() and not name.startswith("_")
}
_KEY_ALIASES = {"CTRL": "CONTROL", "ESC": "ESCAPE", "DEL": "DELETE", "CMD": "COMMAND", "UP": "ARROWUP",
                "DOWN": "ARROWDOWN", "LEFT": "ARROWLEFT", "RIGHT": "ARROWRIGHT", "PGUP": "PAGEUP",
                "PGDN": "PAGEDOWN", "OPTION": "ALT"}


def resolve_key(raw: str) -> str:
    """Map a key name ('Enter', 'ArrowUp', 'ctrl') to its WebDriver code point; single chars pass through."""
    if not isinstance(raw, str) or not raw:
        raise InvalidArgumentError("key must be a non-empty string")
    if len(raw) == 1:
        return raw
    name = raw.strip().upper().replace("_", "").replace("-", "").replace(" ", "")
    name = _KEY_ALIASES.get(name, name)
    if name in _KEYS:
        return _KEYS[name]
    raise InvalidArgumentError(f"Unknown key: {raw}")


def _hover(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    ActionChains(driver).move_to_element(element).perform()
    return ToolResult.text("Hovered over element")


def _double_click(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    ActionChains(driver).double_click(element).perform()
    return ToolResult.text("Double click performed")


def _right_click(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    ActionChains(driver).context_click(element).perform()
    return ToolResult.text("Right click performed")


def _click_and_hold(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    ActionChains(driver).click_and_hold(element).perform()
    return ToolResult.text("Mouse button held down on element")


def handle_drag_and_drop(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        timeout = ctx.executor.timeout(args)
        source = ctx.executor.find(driver, str(args["by"]), str(args["value"]), timeout)
        target_spec = LocatorSpec.from_args(args, by_key="targetBy", value_key="targetValue")
        target = ctx.executor.find(driver, target_spec.by, target_spec.value, timeout)
        ActionChains(driver).drag_and_drop(source, target).perform()
        return ToolResult.text("Drag and drop completed")

    return ctx.executor.run("performing drag and drop", action)


def handle_press_key(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        key = resolve_key(args["key"])
        ActionChains(driver).key_down(key).key_up(key).perform()
        return ToolResult.text(f"Key '{args['key']}' pressed")

    return ctx.executor.run("pressing key", action)


def handle_key_down(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        ActionChains(driver).key_down(resolve_key(args["key"])).perform()
        return ToolResult.text(f"Key down: {args['key']}")

    return ctx.executor.run("pressing key down", action)


def handle_key_up(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        ActionChains(driver).key_up(resolve_key(args["key"])).perform()
        return ToolResult.text(f"Key up: {args['key']}")

    return ctx.executor.run("releasing key", action)


def handle_release(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        ActionChains(driver).release().perform()
        return ToolResult.text("Mouse button released")

    return ctx.executor.run("releasing mouse button", action)


def handle_move_by_offset(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        ActionChains(driver).move_by_offset(int(args["x"]), int(args["y"])).perform()
        return ToolResult.text(f"Mouse moved by offset x={args['x']}, y={args['y']}")

    return ctx.executor.run("moving mouse by offset", action)


def handle_send_keys_active(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    text = str(args["text"])

    def action(driver: Any) -> ToolResult:
        ActionChains(driver).send_keys(text).perform()
        return ToolResult.text(f"Sent keys to active element: {text}")

    return ctx.executor.run("sending keys to active element", action)


_KEY_SCHEMA = object_schema({"key": string_prop("Key to press (e.g., 'Enter', 'Tab', 'Shift', 'a')")}, ["key"])
_OFFSET_SCHEMA = object_schema(
    {"x": number_prop("Horizontal offset in pixels"), "y": number_prop("Vertical offset in pixels")}, ["x", "y"]
)

ACTION_TOOLS: list[ToolSpec] = [
    ToolSpec("hover", "moves the mouse to hover over an element", locator_schema(), element_handler("hovering", _hover)),
    ToolSpec(
        "drag_and_drop",
        "drags an element and drops it onto another element",
        locator_schema(
            {
                "targetBy": {
                    "type": "string",
                    "enum": LOCATOR_STRATEGIES,
                    "description": "Locator strategy to find target element",
                },
                "targetValue": string_prop("Value for the target locator strategy"),
            },
            ["targetBy", "targetValue"],
        ),
        handle_drag_and_drop,
    ),
    ToolSpec(
        "double_click",
        "performs a double click on an element",
        locator_schema(),
        element_handler("performing double click", _double_click),
    ),
    ToolSpec(
        "right_click",
        "performs a right click (context click) on an element",
        locator_schema(),
        element_handler("performing right click", _right_click),
    ),
    ToolSpec("press_key", "simulates pressing a keyboard key", _KEY_SCHEMA, handle_press_key),
    ToolSpec(
        "click_and_hold",
        "clicks and holds the mouse button on an element",
        locator_schema(),
        element_handler("clicking and holding", _click_and_hold),
    ),
    ToolSpec("release", "releases the mouse button (after click_and_hold)", object_schema(), handle_release),
    ToolSpec(
        "move_by_offset",
        "moves the mouse by a given offset from its current position",
        _OFFSET_SCHEMA,
        handle_move_by_offset,
    ),
    ToolSpec(
        "send_keys_active",
        "sends keys to the currently active element",
        object_schema({"text": string_prop("Text to send to the active element")}, ["text"]),
        handle_send_keys_active,
    ),
    ToolSpec("key_down", "presses a key down (without releasing)", _KEY_SCHEMA, handle_key_down),
    ToolSpec("key_up", "releases a key (after key_down)", _KEY_SCHEMA, handle_key_up),
]
