"""
Element tool handlers - locate elements, act on them and read their state.

Every handler waits for the element to be present (default 10s, `timeout`
argument in ms) before touching it.
"""

from __future__ import annotations

import base64
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from selenium.webdriver.support.select import Select

from ...locators import resolve_locator
from ..schemas import locator_schema, object_schema, string_prop
from ..types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ...context import ServerContext

ElementRender = Callable[[Any, Any, dict[str, Any]], ToolResult]


def element_handler(label: str, render: ElementRender) -> Callable[[ServerContext, dict[str, Any]], ToolResult]:
    """Build a handler that locates the element from by/value/timeout, then calls render(driver, element, args)."""

    def handler(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
        def action(driver: Any) -> ToolResult:
            element = ctx.executor.find_from_args(driver, args)
            return render(driver, element, args)

        return ctx.executor.run(label, action)

    return handler


def handle_find_elements(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        # Wait for the first match, then count all of them.
        ctx.executor.find_from_args(driver, args)
        elements = driver.find_elements(*resolve_locator(str(args["by"]), str(args["value"])))
        return ToolResult.text(f"Found {len(elements)} elements", data={"count": len(elements)})

    return ctx.executor.run("finding elements", action)


def _send_keys(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    text = str(args["text"])
    element.clear()
    element.send_keys(text)
    return ToolResult.text(f'Text "{text}" entered into element')


def _click(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    element.click()
    return ToolResult.text("Element clicked")


def _submit(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    element.submit()
    return ToolResult.text("Element submitted")


def _upload(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    file_path = str(args["filePath"])
    element.send_keys(file_path)
    return ToolResult.text(f"File upload initiated: {file_path}")


def _select_text(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    Select(element).select_by_visible_text(str(args["text"]))
    return ToolResult.text(f"Selected option with text: {args['text']}")


def _select_value(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    Select(element).select_by_value(str(args["optionValue"]))
    return ToolResult.text(f"Selected option with value: {args['optionValue']}")


def _size(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    size = element.size
    return ToolResult.text(f"Element size: width={size['width']}, height={size['height']}", data=size)


def _location(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    loc = element.location
    return ToolResult.text(f"Element location: x={loc['x']}, y={loc['y']}", data=loc)


def _rect(driver: Any, element: Any, args: dict[str, Any]) -> ToolResult:
    r = element.rect
    return ToolResult.text(
        f"Element rect: x={r['x']}, y={r['y']}, width={r['width']}, height={r['height']}", data=r
    )


def handle_take_screenshot(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    output_path = args.get("outputPath")

    def action(driver: Any) -> ToolResult:
        data_b64 = driver.get_screenshot_as_base64()
        if output_path:
            path = Path(str(output_path)).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(base64.b64decode(data_b64))
            return ToolResult.text(f"Screenshot saved to {path}")
        return ToolResult.image(data_b64, caption="Screenshot captured")

    return ctx.executor.run("taking screenshot", action)


def _text_tool(label: str, fmt: Callable[[Any, dict[str, Any]], str]) -> Callable[..., ToolResult]:
    return element_handler(label, lambda driver, el, args: ToolResult.text(fmt(el, args)))


ELEMENT_TOOLS: list[ToolSpec] = [
    ToolSpec(
        "find_element",
        "finds an element",
        locator_schema(),
        element_handler("finding element", lambda d, el, a: ToolResult.text("Element found")),
    ),
    ToolSpec("find_elements", "finds multiple elements", locator_schema(), handle_find_elements),
    ToolSpec("click_element", "clicks an element", locator_schema(), element_handler("clicking element", _click)),
    ToolSpec(
        "send_keys",
        "sends keys to an element, aka typing",
        locator_schema({"text": string_prop("Text to enter into the element")}, ["text"]),
        element_handler("entering text", _send_keys),
    ),
    ToolSpec(
        "get_element_text",
        "gets the text() of an element",
        locator_schema(),
        _text_tool("getting element text", lambda el, a: el.text),
    ),
    ToolSpec(
        "get_element_attribute",
        "gets an attribute value from an element",
        locator_schema({"attribute": string_prop("Attribute name to get")}, ["attribute"]),
        _text_tool(
            "getting element attribute",
            lambda el, a: f"Attribute '{a['attribute']}': {el.get_attribute(str(a['attribute']))}",
        ),
    ),
    ToolSpec(
        "get_element_property",
        "gets a property value from an element",
        locator_schema({"property": string_prop("Property name to get")}, ["property"]),
        _text_tool(
            "getting element property",
            lambda el, a: f"Property '{a['property']}': {el.get_property(str(a['property']))}",
        ),
    ),
    ToolSpec(
        "get_element_css_value",
        "gets a CSS value from an element",
        locator_schema({"cssProperty": string_prop("CSS property name to get")}, ["cssProperty"]),
        _text_tool(
            "getting element CSS value",
            lambda el, a: f"CSS property '{a['cssProperty']}': {el.value_of_css_property(str(a['cssProperty']))}",
        ),
    ),
    ToolSpec(
        "is_element_displayed",
        "checks if an element is displayed",
        locator_schema(),
        _text_tool("checking if element is displayed", lambda el, a: f"Element is displayed: {el.is_displayed()}"),
    ),
    ToolSpec(
        "is_element_enabled",
        "checks if an element is enabled",
        locator_schema(),
        _text_tool("checking if element is enabled", lambda el, a: f"Element is enabled: {el.is_enabled()}"),
    ),
    ToolSpec(
        "is_element_selected",
        "checks if an element is selected (for checkboxes, radio buttons, options)",
        locator_schema(),
        _text_tool("checking if element is selected", lambda el, a: f"Element is selected: {el.is_selected()}"),
    ),
    ToolSpec(
        "get_element_tag_name",
        "gets the tag name of an element",
        locator_schema(),
        _text_tool("getting element tag name", lambda el, a: f"Element tag name: {el.tag_name}"),
    ),
    ToolSpec("get_element_size", "gets the size of an element", locator_schema(), element_handler("getting element size", _size)),
    ToolSpec(
        "get_element_location",
        "gets the location of an element",
        locator_schema(),
        element_handler("getting element location", _location),
    ),
    ToolSpec(
        "get_element_rect",
        "gets the rectangle (location and size) of an element",
        locator_schema(),
        element_handler("getting element rect", _rect),
    ),
    ToolSpec("submit_element", "submits a form element", locator_schema(), element_handler("submitting element", _submit)),
    ToolSpec(
        "upload_file",
        "uploads a file using a file input element",
        locator_schema({"filePath": string_prop("Absolute path to the file to upload")}, ["filePath"]),
        element_handler("uploading file", _upload),
    ),
    ToolSpec(
        "select_by_visible_text",
        "selects an option from a dropdown by visible text",
        locator_schema({"text": string_prop("Visible text of the option to select")}, ["text"]),
        element_handler("selecting option by text", _select_text),
    ),
    ToolSpec(
        "select_by_value",
        "selects an option from a dropdown by value",
        locator_schema({"optionValue": string_prop("Value of the option to select")}, ["optionValue"]),
        element_handler("selecting option by value", _select_value),
    ),
    ToolSpec(
        "take_screenshot",
        "captures a screenshot of the current page",
        object_schema(
            {
                "outputPath": string_prop(
                    "Optional path where to save the screenshot. If not provided, returns base64 data."
                )
            }
        ),
        handle_take_screenshot,
    ),
]
