"""Tests for sub-path bookkeeping."""

import pytest

from anchorpoint.document import (
    ensure_move_first,
    find_anchor,
    join_subpaths,
    replace_subpath,
    split_subpaths,
)
from anchorpoint.errors import InvalidSubPathError
from anchorpoint.types import ClosePath, Command, CurveTo, LineTo, MoveTo


@pytest.fixture
def two_subpaths() -> list[Command]:
    return [
        MoveTo(id="m1", x=0, y=0),
        LineTo(id="l1", x=10, y=0),
        ClosePath(id="z1"),
        MoveTo(id="m2", x=50, y=50),
        LineTo(id="l2", x=60, y=50),
    ]


class TestSplitSubpaths:
    def test_splits_on_move(self, two_subpaths: list[Command]) -> None:
        subpaths = split_subpaths(two_subpaths)
        assert [[cmd.id for cmd in sub] for sub in subpaths] == [
            ["m1", "l1", "z1"],
            ["m2", "l2"],
        ]

    def test_leading_commands_form_a_group(self) -> None:
        commands: list[Command] = [LineTo(x=0, y=0), MoveTo(x=5, y=5), LineTo(x=6, y=6)]
        assert [len(sub) for sub in split_subpaths(commands)] == [1, 2]

    def test_empty(self) -> None:
        assert split_subpaths([]) == []

    def test_join_is_inverse(self, two_subpaths: list[Command]) -> None:
        assert join_subpaths(split_subpaths(two_subpaths)) == two_subpaths


class TestFindAnchor:
    def test_found(self, two_subpaths: list[Command]) -> None:
        assert find_anchor(split_subpaths(two_subpaths), "l2") == (1, 1)

    def test_missing(self, two_subpaths: list[Command]) -> None:
        assert find_anchor(split_subpaths(two_subpaths), "nope") is None


class TestEnsureMoveFirst:
    def test_move_first_unchanged(self, two_subpaths: list[Command]) -> None:
        assert ensure_move_first(two_subpaths) is two_subpaths

    def test_leading_line_converted(self) -> None:
        commands: list[Command] = [LineTo(id="a", x=3, y=4), LineTo(x=5, y=6)]
        result = ensure_move_first(commands)

        assert isinstance(result[0], MoveTo)
        assert result[0].id == "a"
        assert (result[0].x, result[0].y) == (3, 4)
        assert result[1] is commands[1]

    def test_leading_curve_converted(self) -> None:
        commands: list[Command] = [CurveTo(x1=0, y1=0, x2=1, y2=1, x=2, y=2)]
        assert isinstance(ensure_move_first(commands)[0], MoveTo)

    def test_empty_raises(self) -> None:
        with pytest.raises(InvalidSubPathError):
            ensure_move_first([])

    def test_leading_close_raises(self) -> None:
        with pytest.raises(InvalidSubPathError, match="cannot start with Z"):
            ensure_move_first([ClosePath()])


class TestReplaceSubpath:
    def test_replaces_one_subpath(self, two_subpaths: list[Command]) -> None:
        subpaths = split_subpaths(two_subpaths)
        replacement: list[Command] = [MoveTo(x=1, y=1), LineTo(x=2, y=2)]
        result = replace_subpath(subpaths, 1, replacement)

        assert result[0] is subpaths[0]
        assert result[1] == replacement
        assert subpaths[1][0].id == "m2"

    def test_index_out_of_range(self, two_subpaths: list[Command]) -> None:
        with pytest.raises(InvalidSubPathError, match="out of range"):
            replace_subpath(split_subpaths(two_subpaths), 2, [MoveTo(x=0, y=0)])

    def test_extra_move_rejected(self, two_subpaths: list[Command]) -> None:
        replacement: list[Command] = [MoveTo(x=0, y=0), MoveTo(x=1, y=1)]
        with pytest.raises(InvalidSubPathError, match="more than one MoveTo"):
            replace_subpath(split_subpaths(two_subpaths), 0, replacement)

    def test_close_must_be_last(self, two_subpaths: list[Command]) -> None:
        replacement: list[Command] = [MoveTo(x=0, y=0), ClosePath(), LineTo(x=1, y=1)]
        with pytest.raises(InvalidSubPathError, match="ClosePath"):
            replace_subpath(split_subpaths(two_subpaths), 0, replacement)
