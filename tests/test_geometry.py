"""Tests for primitives, path building and scene transforms."""
import math

import pytest

from chartgeom import Dimensions, Hexagon, InvalidExtentError, Path, Rect, Scene, Text
from chartgeom.geometry import PathBuilder


class TestPrimitives:
    def test_path_to_svg(self):
        commands = PathBuilder().move_to(0, 0).line_to(10, 5.5).bezier_curve_to(1, 2, 3, 4, 5, 6).close_path().commands
        assert Path(commands).to_svg() == "M0,0L10,5.5C1,2,3,4,5,6Z"

    @pytest.mark.parametrize("orientation,first", [("pointy", (0, -10)), ("flat", (10, 0))])
    def test_hexagon_corners(self, orientation, first):
        corners = Hexagon(0, 0, 10, orientation).corners()
        assert len(corners) == 6
        assert corners[0] == pytest.approx(first, abs=1e-9)
        assert all(math.hypot(x, y) == pytest.approx(10) for x, y in corners)

    def test_rect_overlap_ignores_shared_edges(self):
        assert not Rect(0, 0, 10, 10).overlaps(Rect(10, 0, 10, 10))
        assert Rect(0, 0, 10, 10).overlaps(Rect(5, 5, 10, 10))


class TestScene:
    def test_transform(self):
        scene = Scene((Text(0, 0, "a"),), 100, 100, translate=(10, 20), scale=0.5)
        assert scene.to_surface(40, 40) == (30, 40)

    def test_sequence_behaviour(self):
        rect, text = Rect(0, 0, 1, 1, role="leaf"), Text(0, 0, "x", role="label")
        scene = Scene((rect, text))
        assert len(scene) == 2
        assert list(scene) == [rect, text]
        assert scene.of_role("leaf") == [rect]

    def test_empty(self):
        assert Scene.empty(10, 10).is_empty
        assert not Scene(legend=(Rect(0, 0, 1, 1),)).is_empty


def test_dimensions():
    assert Dimensions(0, 10).is_empty
    assert not Dimensions(1, 1).is_empty
    with pytest.raises(InvalidExtentError):
        Dimensions(5, -1)
