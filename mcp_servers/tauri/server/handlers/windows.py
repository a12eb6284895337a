"""
Window, frame and alert handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...errors import InvalidArgumentError
from ..schemas import number_prop, object_schema, string_prop
from ..types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ...context import ServerContext


def handle_get_window_handle(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    return ctx.executor.run(
        "getting window handle", lambda d: ToolResult.text(f"Current window handle: {d.current_window_handle}")
    )


def handle_get_all_window_handles(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        handles = list(driver.window_handles)
        return ToolResult.text(f"All window handles: {', '.join(handles)}", data=handles)

    return ctx.executor.run("getting window handles", action)


def handle_switch_to_window(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    handle = str(args["handle"])

    def action(driver: Any) -> ToolResult:
        driver.switch_to.window(handle)
        return ToolResult.text(f"Switched to window: {handle}")

    return ctx.executor.run("switching window", action)


def handle_new_window(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    kind = str(args.get("type") or "tab")

    def action(driver: Any) -> ToolResult:
        if kind not in {"tab", "window"}:
            raise InvalidArgumentError(f"type must be 'tab' or 'window', got {kind!r}")
        driver.switch_to.new_window(kind)
        return ToolResult.text(f"New {kind} opened with handle: {driver.current_window_handle}")

    return ctx.executor.run("opening new window", action)


def handle_close_window(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.close()
        return ToolResult.text("Current window closed")

    return ctx.executor.run("closing window", action)


def handle_maximize_window(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.maximize_window()
        return ToolResult.text("Window maximized")

    return ctx.executor.run("maximizing window", action)


def handle_minimize_window(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.minimize_window()
        return ToolResult.text("Window minimized")

    return ctx.executor.run("minimizing window", action)


def handle_set_window_size(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        width, height = int(args["width"]), int(args["height"])
        driver.set_window_rect(width=width, height=height)
        return ToolResult.text(f"Window size set to {width}x{height}")

    return ctx.executor.run("setting window size", action)


def handle_set_window_position(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        x, y = int(args["x"]), int(args["y"])
        driver.set_window_rect(x=x, y=y)
        return ToolResult.text(f"Window position set to ({x}, {y})")

    return ctx.executor.run("setting window position", action)


def handle_get_window_rect(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        r = driver.get_window_rect()
        return ToolResult.text(
            f"Window rect: x={r['x']}, y={r['y']}, width={r['width']}, height={r['height']}", data=r
        )

    return ctx.executor.run("getting window rect", action)


def handle_switch_to_frame(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    frame = args["frame"]

    def action(driver: Any) -> ToolResult:
        # Numeric strings are indices; anything else is a frame name or id.
        target = int(frame) if isinstance(frame, str) and frame.isdigit() else frame
        driver.switch_to.frame(target)
        return ToolResult.text(f"Switched to frame: {frame}")

    return ctx.executor.run("switching to frame", action)


def handle_switch_to_parent_frame(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.switch_to.parent_frame()
        return ToolResult.text("Switched to parent frame")

    return ctx.executor.run("switching to parent frame", action)


def handle_switch_to_default_content(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.switch_to.default_content()
        return ToolResult.text("Switched to default content")

    return ctx.executor.run("switching to default content", action)


def handle_accept_alert(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.switch_to.alert.accept()
        return ToolResult.text("Alert accepted")

    return ctx.executor.run("accepting alert", action)


def handle_dismiss_alert(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    def action(driver: Any) -> ToolResult:
        driver.switch_to.alert.dismiss()
        return ToolResult.text("Alert dismissed")

    return ctx.executor.run("dismissing alert", action)


def handle_get_alert_text(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    return ctx.executor.run("getting alert text", lambda d: ToolResult.text(f"Alert text: {d.switch_to.alert.text}"))


def handle_send_alert_text(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    text = str(args["text"])

    def action(driver: Any) -> ToolResult:
        driver.switch_to.alert.send_keys(text)
        return ToolResult.text(f"Text sent to alert: {text}")

    return ctx.executor.run("sending text to alert", action)


WINDOW_TOOLS: list[ToolSpec] = [
    ToolSpec("get_window_handle", "gets the current window handle", object_schema(), handle_get_window_handle),
    ToolSpec("get_all_window_handles", "gets all window handles", object_schema(), handle_get_all_window_handles),
    ToolSpec(
        "switch_to_window",
        "switches to a specific window by handle",
        object_schema({"handle": string_prop("Window handle to switch to")}, ["handle"]),
        handle_switch_to_window,
    ),
    ToolSpec(
        "new_window",
        "opens a new window or tab",
        object_schema(
            {"type": {"type": "string", "enum": ["tab", "window"], "description": "Type of new window to open"}}
        ),
        handle_new_window,
    ),
    ToolSpec("close_window", "closes the current window", object_schema(), handle_close_window),
    ToolSpec("maximize_window", "maximizes the current window", object_schema(), handle_maximize_window),
    ToolSpec("minimize_window", "minimizes the current window", object_schema(), handle_minimize_window),
    ToolSpec(
        "set_window_size",
        "sets the window size",
        object_schema(
            {"width": number_prop("Window width in pixels"), "height": number_prop("Window height in pixels")},
            ["width", "height"],
        ),
        handle_set_window_size,
    ),
    ToolSpec(
        "set_window_position",
        "sets the window position",
        object_schema({"x": number_prop("X coordinate"), "y": number_prop("Y coordinate")}, ["x", "y"]),
        handle_set_window_position,
    ),
    ToolSpec("get_window_rect", "gets the window position and size", object_schema(), handle_get_window_rect),
    ToolSpec(
        "switch_to_frame",
        "switches to a frame or iframe",
        object_schema(
            {"frame": {"type": ["number", "string"], "description": "Frame index, name, or id"}}, ["frame"]
        ),
        handle_switch_to_frame,
    ),
    ToolSpec("switch_to_parent_frame", "switches to the parent frame", object_schema(), handle_switch_to_parent_frame),
    ToolSpec(
        "switch_to_default_content",
        "switches to the default content (main document)",
        object_schema(),
        handle_switch_to_default_content,
    ),
    ToolSpec("accept_alert", "accepts the current alert", object_schema(), handle_accept_alert),
    ToolSpec("dismiss_alert", "dismisses the current alert", object_schema(), handle_dismiss_alert),
    ToolSpec("get_alert_text", "gets the text of the current alert", object_schema(), handle_get_alert_text),
    ToolSpec(
        "send_alert_text",
        "sends text to an alert prompt",
        object_schema({"text": string_prop("Text to send to the alert")}, ["text"]),
        handle_send_alert_text,
    ),
]
