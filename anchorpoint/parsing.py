"""Command data parsing and validation."""

from __future__ import annotations

import math
from typing import Any

from anchorpoint.types import ClosePath, Command, CurveTo, LineTo, MoveTo

COORD_FIELDS: dict[str, tuple[str, ...]] = {
    "M": ("x", "y"),
    "L": ("x", "y"),
    "C": ("x1", "y1", "x2", "y2", "x", "y"),
    "Z": (),
}

COMMAND_TYPES: dict[str, type[MoveTo | LineTo | CurveTo | ClosePath]] = {
    "M": MoveTo,
    "L": LineTo,
    "C": CurveTo,
    "Z": ClosePath,
}


def parse_command_data(data: dict[str, Any]) -> Command | None:
    """Parse a command dictionary into a Command model.

    Accepts ``{"command": "L", "x": 1, "y": 2, "id": "..."}`` shaped data.
    Returns None for unknown commands or missing/non-finite coordinates.
    """
    if not isinstance(data, dict):
        return None

    tag = data.get("command")
    if not isinstance(tag, str) or tag.upper() not in COMMAND_TYPES:
        return None
    tag = tag.upper()

    values: dict[str, Any] = {}
    for name in COORD_FIELDS[tag]:
        raw = data.get(name)
        if raw is None or isinstance(raw, bool):
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        values[name] = value

    command_id = data.get("id")
    if command_id is not None:
        if not isinstance(command_id, str) or not command_id:
            return None
        values["id"] = command_id

    return COMMAND_TYPES[tag](**values)


def parse_commands_data(data: list[Any]) -> list[Command] | None:
    """Parse a list of command dictionaries; None if any entry is invalid."""
    if not isinstance(data, list):
        return None
    commands: list[Command] = []
    for item in data:
        command = parse_command_data(item)
        if command is None:
            return None
        commands.append(command)
    return commands
