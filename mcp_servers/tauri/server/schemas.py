"""JSON schema fragments shared by tool definitions."""

from __future__ import annotations

from typing import Any

from ..locators import LOCATOR_STRATEGIES

TIMEOUT_PROPERTY: dict[str, Any] = {
    "type": "number",
    "description": "Maximum time to wait for element in milliseconds (default: 10000)",
}

LOCATOR_PROPERTIES: dict[str, Any] = {
    "by": {"type": "string", "enum": LOCATOR_STRATEGIES, "description": "Locator strategy to find element"},
    "value": {"type": "string", "description": "Value for the locator strategy"},
    "timeout": TIMEOUT_PROPERTY,
}


def object_schema(properties: dict[str, Any] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


def locator_schema(extra: dict[str, Any] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    return object_schema({**LOCATOR_PROPERTIES, **(extra or {})}, ["by", "value", *(required or [])])


def string_prop(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def number_prop(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}
