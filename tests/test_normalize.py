"""Tests for the anchor normalizer."""

import math

import pytest

from anchorpoint.errors import UnknownAnchorError
from anchorpoint.geometry import subtract
from anchorpoint.normalize import (
    AnchorNormalizer,
    actions_for,
    align_tangents,
    break_control_points,
    classify,
    convert_and_normalize,
    normalize_from_current,
    normalize_from_other,
)
from anchorpoint.svg import parse_path_d
from anchorpoint.types import (
    ClosePath,
    Command,
    CurveTo,
    LineTo,
    MoveTo,
    NormalizeActionType,
    Point,
    SegmentKind,
)


def _cross(a: Point, b: Point) -> float:
    return a.x * b.y - a.y * b.x


@pytest.fixture
def curve_pair() -> list[Command]:
    """Two curves meeting at the origin with a kinked handle pair."""
    return [
        MoveTo(id="m", x=-60, y=0),
        CurveTo(id="a", x1=-40, y1=0, x2=-20, y2=5, x=0, y=0),
        CurveTo(id="b", x1=10, y1=10, x2=40, y2=0, x=60, y=0),
    ]


@pytest.fixture
def straight_pair() -> list[Command]:
    """Two curves with collinear handles 20 units from the shared anchor."""
    return [
        MoveTo(id="m", x=-60, y=0),
        CurveTo(id="a", x1=-40, y1=0, x2=-20, y2=0, x=0, y=0),
        CurveTo(id="b", x1=20, y1=0, x2=40, y2=0, x=60, y=0),
    ]


@pytest.fixture
def corner() -> list[Command]:
    return [
        MoveTo(id="m", x=0, y=0),
        LineTo(id="a", x=100, y=0),
        LineTo(id="b", x=100, y=100),
    ]


class TestClassify:
    def test_curve_curve(self, curve_pair: list[Command]) -> None:
        info = classify(curve_pair, 1)
        assert info.incoming == SegmentKind.CURVE
        assert info.outgoing == SegmentKind.CURVE
        assert info.prev_command is curve_pair[0]
        assert info.next_command is curve_pair[2]

    def test_line_line(self, corner: list[Command]) -> None:
        info = classify(corner, 1)
        assert (info.incoming, info.outgoing) == (SegmentKind.LINE, SegmentKind.LINE)

    def test_move_has_no_incoming_segment(self, corner: list[Command]) -> None:
        info = classify(corner, 0)
        assert info.incoming == SegmentKind.NONE
        assert info.outgoing == SegmentKind.LINE

    def test_last_anchor_has_no_outgoing_segment(self, corner: list[Command]) -> None:
        info = classify(corner, 2)
        assert info.outgoing == SegmentKind.NONE
        assert info.next_command is None

    def test_close_path_is_not_a_segment(self) -> None:
        commands: list[Command] = [MoveTo(x=0, y=0), LineTo(x=10, y=0), ClosePath()]
        assert classify(commands, 1).outgoing == SegmentKind.NONE


class TestActionsFor:
    def _types(self, commands: list[Command], index: int, modifier: bool = False) -> list[str]:
        return [a.type.value for a in actions_for(classify(commands, index), modifier)]

    def test_curve_curve_order(self, curve_pair: list[Command]) -> None:
        assert self._types(curve_pair, 1) == [
            "normalize-from-current",
            "normalize-from-other",
            "break-control-points",
        ]

    def test_modifier_moves_break_first(self, curve_pair: list[Command]) -> None:
        assert self._types(curve_pair, 1, modifier=True) == [
            "break-control-points",
            "normalize-from-current",
            "normalize-from-other",
        ]

    def test_line_line_offers_conversion(self, corner: list[Command]) -> None:
        assert self._types(corner, 1) == ["convert-and-normalize"]

    def test_mixed_segments_offer_conversion(self) -> None:
        line_curve: list[Command] = [
            MoveTo(x=0, y=0),
            LineTo(x=50, y=0),
            CurveTo(x1=60, y1=0, x2=90, y2=10, x=100, y=20),
        ]
        curve_line: list[Command] = [
            MoveTo(x=0, y=0),
            CurveTo(x1=10, y1=0, x2=40, y2=0, x=50, y=0),
            LineTo(x=100, y=20),
        ]
        assert self._types(line_curve, 1) == ["convert-and-normalize"]
        assert self._types(curve_line, 1) == ["convert-and-normalize"]

    def test_endpoint_offers_nothing(self, corner: list[Command]) -> None:
        assert self._types(corner, 2) == []
        assert self._types(corner, 0) == []


class TestNormalizeFromCurrent:
    def test_mirrors_incoming_handle(self, curve_pair: list[Command]) -> None:
        result = normalize_from_current(curve_pair, 1)

        assert (result[1].x2, result[1].y2) == (-20, 5)
        assert (result[2].x1, result[2].y1) == (20, -5)

    def test_only_the_two_handles_change(self, curve_pair: list[Command]) -> None:
        result = normalize_from_current(curve_pair, 1)

        assert result[0] is curve_pair[0]
        assert result[1].model_dump(exclude={"x2", "y2"}) == curve_pair[1].model_dump(
            exclude={"x2", "y2"}
        )
        assert result[2].model_dump(exclude={"x1", "y1"}) == curve_pair[2].model_dump(
            exclude={"x1", "y1"}
        )

    def test_idempotent(self, curve_pair: list[Command]) -> None:
        once = normalize_from_current(curve_pair, 1)
        assert normalize_from_current(once, 1) == once

    def test_input_not_mutated(self, curve_pair: list[Command]) -> None:
        normalize_from_current(curve_pair, 1)
        assert (curve_pair[2].x1, curve_pair[2].y1) == (10, 10)


class TestNormalizeFromOther:
    def test_mirrors_outgoing_handle(self, curve_pair: list[Command]) -> None:
        result = normalize_from_other(curve_pair, 1)

        assert (result[2].x1, result[2].y1) == (10, 10)
        assert (result[1].x2, result[1].y2) == (-10, -10)

    def test_idempotent(self, curve_pair: list[Command]) -> None:
        once = normalize_from_other(curve_pair, 1)
        assert normalize_from_other(once, 1) == once


class TestBreakControlPoints:
    def test_rotates_handles_apart(self, straight_pair: list[Command]) -> None:
        result = break_control_points(straight_pair, 1)
        sin15 = 20 * math.sin(math.radians(15))
        cos15 = 20 * math.cos(math.radians(15))

        assert result[1].x2 == pytest.approx(-cos15)
        assert result[1].y2 == pytest.approx(-sin15)
        assert result[2].x1 == pytest.approx(cos15)
        assert result[2].y1 == pytest.approx(-sin15)

    def test_handles_no_longer_collinear(self, straight_pair: list[Command]) -> None:
        result = break_control_points(straight_pair, 1)
        anchor = result[1].anchor
        incoming = subtract(result[1].control2, anchor)
        outgoing = subtract(result[2].control1, anchor)
        assert abs(_cross(incoming, outgoing)) > 1.0

    def test_handle_lengths_preserved(self, straight_pair: list[Command]) -> None:
        result = break_control_points(straight_pair, 1)
        assert math.hypot(result[1].x2, result[1].y2) == pytest.approx(20)
        assert math.hypot(result[2].x1, result[2].y1) == pytest.approx(20)

    def test_custom_angle(self, straight_pair: list[Command]) -> None:
        result = break_control_points(straight_pair, 1, angle_degrees=90)
        assert result[1].x2 == pytest.approx(0, abs=1e-9)
        assert result[1].y2 == pytest.approx(-20)


class TestAlignTangents:
    def test_bisector_of_right_angle(self) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            CurveTo(x1=30, y1=0, x2=70, y2=0, x=100, y=0),
            CurveTo(x1=100, y1=30, x2=100, y2=70, x=100, y=100),
        ]
        result = align_tangents(commands, 1)
        offset = 30 / math.sqrt(2)

        assert result[1].x2 == pytest.approx(100 - offset)
        assert result[1].y2 == pytest.approx(-offset)
        assert result[2].x1 == pytest.approx(100 + offset)
        assert result[2].y1 == pytest.approx(offset)

    def test_handle_length_uses_ratio(self) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            CurveTo(x1=5, y1=0, x2=15, y2=0, x=20, y=0),
            CurveTo(x1=25, y1=0, x2=35, y2=0, x=40, y=0),
        ]
        result = align_tangents(commands, 1, handle_ratio=0.5)
        assert result[1].x2 == pytest.approx(10)
        assert result[2].x1 == pytest.approx(30)


class TestConvertAndNormalize:
    def test_converts_corner(self, corner: list[Command]) -> None:
        result = convert_and_normalize(corner, 1)
        offset = 30 / math.sqrt(2)

        assert isinstance(result[1], CurveTo)
        assert isinstance(result[2], CurveTo)
        assert (result[1].x1, result[1].y1) == pytest.approx((30, 0))
        assert (result[1].x2, result[1].y2) == pytest.approx((100 - offset, -offset))
        assert (result[2].x1, result[2].y1) == pytest.approx((100 + offset, offset))
        assert (result[2].x2, result[2].y2) == pytest.approx((100, 70))

    def test_converted_curves_keep_ids(self, corner: list[Command]) -> None:
        result = convert_and_normalize(corner, 1)
        assert [cmd.id for cmd in result] == ["m", "a", "b"]

    def test_anchors_unchanged(self, corner: list[Command]) -> None:
        result = convert_and_normalize(corner, 1)
        assert [cmd.anchor for cmd in result] == [cmd.anchor for cmd in corner]

    def test_reversing_segments_use_perpendicular(self) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            LineTo(x=100, y=0),
            LineTo(x=0, y=0),
        ]
        result = convert_and_normalize(commands, 1)

        assert (result[1].x2, result[1].y2) == pytest.approx((100, -30))
        assert (result[2].x1, result[2].y1) == pytest.approx((100, 30))

    def test_existing_curve_side_is_realigned(self) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            LineTo(x=100, y=0),
            CurveTo(x1=150, y1=50, x2=200, y2=0, x=200, y=0),
        ]
        result = convert_and_normalize(commands, 1)

        assert isinstance(result[1], CurveTo)
        assert (result[2].x2, result[2].y2) == (200, 0)
        incoming = subtract(result[1].control2, result[1].anchor)
        outgoing = subtract(result[2].control1, result[1].anchor)
        assert _cross(incoming, outgoing) == pytest.approx(0, abs=1e-9)

    def test_zero_length_segment_is_atomic(self) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            LineTo(x=0, y=0),
            LineTo(x=50, y=50),
        ]
        result = convert_and_normalize(commands, 1)
        assert all(new is old for new, old in zip(result, commands, strict=True))

    def test_endpoint_index_is_ignored(self, corner: list[Command]) -> None:
        result = convert_and_normalize(corner, 2)
        assert all(new is old for new, old in zip(result, corner, strict=True))


class TestDegenerateInput:
    def test_nan_coordinates_leave_sequence_unchanged(self) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            CurveTo(x1=10, y1=0, x2=math.nan, y2=0, x=50, y=0),
            CurveTo(x1=60, y1=0, x2=90, y2=0, x=100, y=0),
        ]
        for action in (normalize_from_current, normalize_from_other, break_control_points):
            result = action(commands, 1)
            assert all(new is old for new, old in zip(result, commands, strict=True))

    def test_collapsed_handle_is_skipped(self) -> None:
        commands: list[Command] = [
            MoveTo(x=-50, y=0),
            CurveTo(x1=-40, y1=0, x2=0, y2=0, x=0, y=0),
            CurveTo(x1=20, y1=0, x2=40, y2=0, x=50, y=0),
        ]
        result = normalize_from_current(commands, 1)
        assert all(new is old for new, old in zip(result, commands, strict=True))

    def test_non_curve_pair_is_ignored(self, corner: list[Command]) -> None:
        result = normalize_from_current(corner, 1)
        assert all(new is old for new, old in zip(result, corner, strict=True))


class TestAnchorNormalizer:
    """Tests for the stateful AnchorNormalizer."""

    @pytest.fixture
    def normalizer(self) -> AnchorNormalizer:
        return AnchorNormalizer()

    def test_initial_state(self, normalizer: AnchorNormalizer) -> None:
        assert normalizer.selected_anchor is None
        assert normalizer.modifier_held is False

    def test_set_modifier_reports_change(self, normalizer: AnchorNormalizer) -> None:
        assert normalizer.set_modifier(True) is True
        assert normalizer.set_modifier(True) is False
        assert normalizer.set_modifier(False) is True

    def test_analyze_selected_anchor(
        self, normalizer: AnchorNormalizer, curve_pair: list[Command]
    ) -> None:
        normalizer.select("a")
        info = normalizer.analyze(curve_pair)
        assert info is not None
        assert info.index == 1
        assert info.command.id == "a"

    def test_analyze_unknown_anchor(
        self, normalizer: AnchorNormalizer, curve_pair: list[Command]
    ) -> None:
        assert normalizer.analyze(curve_pair) is None
        assert normalizer.analyze(curve_pair, "missing") is None
        assert normalizer.available_actions(curve_pair, "missing") == []

    def test_available_actions_follow_modifier(
        self, normalizer: AnchorNormalizer, curve_pair: list[Command]
    ) -> None:
        normalizer.select("a")
        first = normalizer.available_actions(curve_pair)[0].type
        normalizer.set_modifier(True)
        held = normalizer.available_actions(curve_pair)[0].type

        assert first == NormalizeActionType.NORMALIZE_FROM_CURRENT
        assert held == NormalizeActionType.BREAK_CONTROL_POINTS

    def test_execute(self, normalizer: AnchorNormalizer, curve_pair: list[Command]) -> None:
        normalizer.select("a")
        result = normalizer.execute(curve_pair, NormalizeActionType.NORMALIZE_FROM_CURRENT)
        assert (result[2].x1, result[2].y1) == (20, -5)

    def test_execute_unknown_anchor(
        self, normalizer: AnchorNormalizer, curve_pair: list[Command]
    ) -> None:
        with pytest.raises(UnknownAnchorError, match="missing"):
            normalizer.execute(curve_pair, NormalizeActionType.NORMALIZE_FROM_CURRENT, "missing")

    def test_execute_without_selection(
        self, normalizer: AnchorNormalizer, curve_pair: list[Command]
    ) -> None:
        with pytest.raises(UnknownAnchorError):
            normalizer.execute(curve_pair, NormalizeActionType.NORMALIZE_FROM_CURRENT)

    def test_execute_action_not_offered_is_noop(
        self, normalizer: AnchorNormalizer, corner: list[Command]
    ) -> None:
        result = normalizer.execute(corner, NormalizeActionType.BREAK_CONTROL_POINTS, "a")
        assert all(new is old for new, old in zip(result, corner, strict=True))

    def test_break_on_line_curve_anchor_is_noop(self, normalizer: AnchorNormalizer) -> None:
        """Break needs curves on both sides of the anchor."""
        commands = parse_path_d("M 0 0 L 50 0 C 60 10 90 10 100 0")
        normalizer.select(commands[1].id)
        result = normalizer.execute(commands, NormalizeActionType.BREAK_CONTROL_POINTS)

        assert result == commands
        assert result is not commands

    def test_execute_in_second_subpath(
        self, normalizer: AnchorNormalizer, corner: list[Command]
    ) -> None:
        first: list[Command] = [MoveTo(x=-10, y=-10), LineTo(x=-5, y=-10), ClosePath()]
        commands = first + corner
        result = normalizer.execute(commands, NormalizeActionType.CONVERT_AND_NORMALIZE, "a")

        assert all(new is old for new, old in zip(result[:3], first, strict=True))
        assert isinstance(result[4], CurveTo)
        assert result[4].id == "a"
        assert len(result) == len(commands)

    def test_execute_degenerate_returns_unchanged(self, normalizer: AnchorNormalizer) -> None:
        commands: list[Command] = [
            MoveTo(x=0, y=0),
            LineTo(id="a", x=0, y=0),
            LineTo(x=50, y=50),
        ]
        result = normalizer.execute(commands, NormalizeActionType.CONVERT_AND_NORMALIZE, "a")
        assert result == commands

    def test_anchor_point_unchanged_by_every_action(
        self, normalizer: AnchorNormalizer, curve_pair: list[Command]
    ) -> None:
        for action in normalizer.available_actions(curve_pair, "a"):
            result = normalizer.execute(curve_pair, action.type, "a")
            assert result[1].anchor == Point(x=0, y=0)
