import math

import pytest

from htree.core.geometry import Line, Point, round_half_away


class TestRounding:
    @pytest.mark.parametrize("value,expected", [
        (0.5, 1), (-0.5, -1), (2.5, 3), (-2.5, -3), (1.4, 1), (1.6, 2), (0.0, 0),
    ])
    def test_halves_round_away_from_zero(self, value: float, expected: int) -> None:
        assert round_half_away(value) == expected


class TestPoint:
    def test_value_equality(self) -> None:
        assert Point(1, 2) == Point(1, 2)
        assert len({Point(1, 2), Point(1, 2)}) == 1

    def test_is_inside(self) -> None:
        assert Point(0, 0).is_inside(0, 10)
        assert Point(9, 9).is_inside(0, 10)
        assert not Point(10, 5).is_inside(0, 10)
        assert not Point(5, 10).is_inside(0, 10)
        assert not Point(-1, 5).is_inside(0, 10)


class TestLine:
    def test_endpoint_order_matters(self) -> None:
        a, b = Point(0, 0), Point(3, 4)
        assert Line(a, b) != Line(b, a)
        assert len({Line(a, b), Line(b, a)}) == 2

    def test_gradient(self) -> None:
        assert Line(Point(0, 0), Point(4, 0)).gradient == 0.0
        assert Line(Point(0, 0), Point(2, 2)).gradient == 1.0
        assert Line(Point(0, 0), Point(2, -1)).gradient == -0.5

    def test_vertical_gradient_is_infinite(self) -> None:
        assert Line(Point(3, 0), Point(3, 5)).gradient == math.inf
        assert Line(Point(3, 5), Point(3, 0)).gradient == -math.inf

    def test_degenerate_gradient_is_nan(self) -> None:
        assert math.isnan(Line(Point(2, 2), Point(2, 2)).gradient)

    def test_length(self) -> None:
        assert Line(Point(0, 0), Point(3, 4)).length == 5
        assert Line(Point(0, 0), Point(1, 1)).length == 1
        assert Line(Point(0, 0), Point(1, 2)).length == 2
        assert Line(Point(0, 0), Point(3, 3)).length == 4
        assert Line(Point(7, 7), Point(7, 7)).length == 0


class TestCenteredAt:
    def test_vertical(self) -> None:
        line = Line.centered_at(Point(10, 10), math.inf, 10)
        assert line == Line(Point(10, 5), Point(10, 15))

    def test_vertical_odd_length_halves_down(self) -> None:
        line = Line.centered_at(Point(10, 10), -math.inf, 7)
        assert line == Line(Point(10, 7), Point(10, 13))

    def test_vertical_length_is_rounded_first(self) -> None:
        # 90.51 rounds to 91, halved to 45
        line = Line.centered_at(Point(0, 0), math.inf, 128 / math.sqrt(2))
        assert line == Line(Point(0, -45), Point(0, 45))

    def test_horizontal(self) -> None:
        line = Line.centered_at(Point(10, 10), 0.0, 10)
        assert line == Line(Point(15, 10), Point(5, 10))

    def test_diagonal(self) -> None:
        line = Line.centered_at(Point(10, 10), 1.0, 10 * math.sqrt(2))
        assert line == Line(Point(15, 15), Point(5, 5))

    def test_coordinates_round_independently(self) -> None:
        # dx = 4.47, dy = 2.24
        line = Line.centered_at(Point(0, 0), 0.5, 10)
        assert line == Line(Point(4, 2), Point(-4, -2))

    def test_steep_gradient_stays_near_vertical(self) -> None:
        line = Line.centered_at(Point(0, 0), 1e200, 20)
        assert line.p.x == 0 and line.q.x == 0
        assert line.length == 20

    def test_nan_gradient_does_not_raise(self) -> None:
        line = Line.centered_at(Point(4, 4), math.nan, 0.0)
        assert line == Line(Point(4, 4), Point(4, 4))

    def test_midpoint_is_center(self) -> None:
        center = Point(50, 60)
        for gradient in (-3.0, -0.25, 0.0, 0.7, 2.0):
            line = Line.centered_at(center, gradient, 40)
            assert line.p.x + line.q.x == 2 * center.x
            assert line.p.y + line.q.y == 2 * center.y


class TestPointsAlong:
    def test_horizontal(self) -> None:
        points = list(Line(Point(0, 0), Point(3, 0)).points_along())
        assert points == [Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0)]

    def test_reversed_runs_from_p_to_q(self) -> None:
        points = list(Line(Point(3, 0), Point(0, 0)).points_along())
        assert points == [Point(3, 0), Point(2, 0), Point(1, 0), Point(0, 0)]

    def test_vertical(self) -> None:
        points = list(Line(Point(2, 5), Point(2, 2)).points_along())
        assert points == [Point(2, 5), Point(2, 4), Point(2, 3), Point(2, 2)]

    def test_diagonal(self) -> None:
        points = list(Line(Point(0, 0), Point(2, 2)).points_along())
        assert points == [Point(0, 0), Point(1, 1), Point(2, 2)]

    def test_shallow_ties_step_late(self) -> None:
        points = list(Line(Point(0, 0), Point(4, 2)).points_along())
        assert points == [Point(0, 0), Point(1, 0), Point(2, 1), Point(3, 1), Point(4, 2)]

    def test_steep(self) -> None:
        points = list(Line(Point(0, 0), Point(1, 3)).points_along())
        assert points[0] == Point(0, 0)
        assert points[-1] == Point(1, 3)
        assert [p.y for p in points] == [0, 1, 2, 3]

    def test_single_point(self) -> None:
        assert list(Line(Point(5, 5), Point(5, 5)).points_along()) == [Point(5, 5)]

    def test_connected_and_complete(self) -> None:
        line = Line(Point(-7, 3), Point(12, -20))
        points = list(line.points_along())

        assert points[0] == line.p
        assert points[-1] == line.q
        assert len(points) == max(abs(line.q.x - line.p.x), abs(line.q.y - line.p.y)) + 1
        for a, b in zip(points, points[1:]):
            assert abs(a.x - b.x) <= 1 and abs(a.y - b.y) <= 1

    def test_restartable(self) -> None:
        line = Line(Point(0, 0), Point(5, 2))
        assert list(line.points_along()) == list(line.points_along())

    def test_lazy(self) -> None:
        points = Line(Point(0, 0), Point(10 ** 6, 0)).points_along()
        assert next(points) == Point(0, 0)
        assert next(points) == Point(1, 0)
