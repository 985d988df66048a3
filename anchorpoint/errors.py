"""Exceptions raised at the engine's boundaries.

The geometry algorithms themselves never raise for malformed input; they
return the input unchanged. These errors cover parsing, document splicing
and normalizer lookups of unknown anchors.
"""


class AnchorpointError(Exception):
    """Base class for all anchorpoint errors."""


class PathParseError(AnchorpointError):
    """An SVG path string could not be parsed."""


class InvalidSubPathError(AnchorpointError):
    """A sub-path replacement would violate the MoveTo-first invariant."""


class UnknownAnchorError(AnchorpointError):
    """The requested anchor id is not part of the command sequence."""

    def __init__(self, anchor_id: str) -> None:
        super().__init__(f"Anchor not found: {anchor_id}")
        self.anchor_id = anchor_id

