"""
Lifecycle tool handlers - start and close the Tauri session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from selenium.common.exceptions import WebDriverException

from ...errors import DriverLaunchError, TauriBridgeError
from ...executor import error_message
from ..schemas import number_prop, object_schema, string_prop
from ..types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ...context import ServerContext

logger = logging.getLogger("mcp.tauri.lifecycle")


def handle_start_tauri_app(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    application = str(args.get("application") or "").strip()
    if not application:
        return ToolResult.error("Error starting Tauri app: application path is empty")
    try:
        port = int(args.get("port") or ctx.config.port)
        launch = ctx.launcher.ensure_started(port)
        driver = ctx.driver_factory(ctx.config.server_url(launch.port), application, ctx.config)
    except DriverLaunchError as exc:
        logger.info("start_failed stage=launch err=%s", exc)
        message = f"Error starting Tauri app: {exc}"
        if exc.log_tail:
            message += f"\n--- tauri-driver log ---\n{exc.log_tail}"
        return ToolResult.error(message)
    except WebDriverException as exc:
        logger.info("start_failed stage=connect err=%s", error_message(exc))
        return ToolResult.error(f"Error starting Tauri app: {error_message(exc)}")
    except Exception as exc:  # noqa: BLE001
        logger.exception("start_failed")
        return ToolResult.error(f"Error starting Tauri app: {error_message(exc)}")

    session = ctx.sessions.create(driver)
    return ToolResult.text(
        f"Started tauri-driver and connected to Tauri app at {application} with session_id: {session.id}",
        data={"session_id": session.id, "port": launch.port},
    )


def handle_close_session(ctx: ServerContext, args: dict[str, Any]) -> ToolResult:
    try:
        session_id = ctx.sessions.close()
    except TauriBridgeError as exc:
        return ToolResult.error(f"Error closing session: {exc}")
    return ToolResult.text(f"Tauri session {session_id} closed")


LIFECYCLE_TOOLS: list[ToolSpec] = [
    ToolSpec(
        "start_tauri_app",
        "launches tauri-driver and connects to Tauri application",
        object_schema(
            {
                "application": string_prop("Path to Tauri application binary"),
                "port": number_prop("Port for tauri-driver (defaults to 4444)"),
            },
            ["application"],
        ),
        handle_start_tauri_app,
    ),
    ToolSpec("close_session", "closes the current Tauri session", object_schema(), handle_close_session),
]
