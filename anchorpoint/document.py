"""Sub-path bookkeeping for callers that own a document model.

The engine transforms one sub-path at a time. These helpers split a flat
command list on MoveTo, locate anchors and splice a transformed sub-path
back while keeping the MoveTo-first invariant.
"""

import logging

from anchorpoint.errors import InvalidSubPathError
from anchorpoint.types import ClosePath, Command, MoveTo

logger = logging.getLogger(__name__)


def split_subpaths(commands: list[Command]) -> list[list[Command]]:
    """Split a flat command list into sub-paths, one per MoveTo.

    Commands before the first MoveTo form their own leading group.
    """
    subpaths: list[list[Command]] = []
    current: list[Command] = []
    for cmd in commands:
        if isinstance(cmd, MoveTo) and current:
            subpaths.append(current)
            current = []
        current.append(cmd)
    if current:
        subpaths.append(current)
    return subpaths


def join_subpaths(subpaths: list[list[Command]]) -> list[Command]:
    return [cmd for subpath in subpaths for cmd in subpath]


def find_anchor(subpaths: list[list[Command]], anchor_id: str) -> tuple[int, int] | None:
    """Return (subpath_index, command_index) of a command id, or None."""
    for sub_index, subpath in enumerate(subpaths):
        for cmd_index, cmd in enumerate(subpath):
            if cmd.id == anchor_id:
                return sub_index, cmd_index
    return None


def ensure_move_first(commands: list[Command]) -> list[Command]:
    """Make the first command a MoveTo.

    A leading LineTo/CurveTo is replaced by a MoveTo at its anchor (keeping
    its id). Raises InvalidSubPathError if the sequence has no leading
    position to start from.
    """
    if not commands:
        raise InvalidSubPathError("Sub-path is empty")

    first = commands[0]
    if isinstance(first, MoveTo):
        return commands
    anchor = first.anchor
    if anchor is None:
        raise InvalidSubPathError(f"Sub-path cannot start with {first.command}")

    logger.debug(f"Converting leading {first.command} command {first.id} to MoveTo")
    return [MoveTo(id=first.id, x=anchor.x, y=anchor.y), *commands[1:]]


def replace_subpath(
    subpaths: list[list[Command]], index: int, replacement: list[Command]
) -> list[list[Command]]:
    """Return a copy of subpaths with subpaths[index] replaced.

    Other sub-paths are left untouched and keep their identity.
    """
    if not 0 <= index < len(subpaths):
        raise InvalidSubPathError(f"Sub-path index out of range: {index}")

    replacement = ensure_move_first(list(replacement))
    if any(isinstance(cmd, MoveTo) for cmd in replacement[1:]):
        raise InvalidSubPathError("Replacement contains more than one MoveTo")
    if any(isinstance(cmd, ClosePath) for cmd in replacement[:-1]):
        raise InvalidSubPathError("ClosePath must be the last command of a sub-path")

    result = list(subpaths)
    result[index] = replacement
    return result
