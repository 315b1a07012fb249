"""Tests for the matplotlib preview adapter."""
import math

import matplotlib.pyplot as plt
import pytest

from chartgeom import Arc, Dimensions, Scene, Text, flow_layout, hexbin_layout, treemap_layout
from chartgeom.render import draw, figure, save


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


class TestFigure:
    def test_surface_units_with_y_down(self):
        fig, ax = figure(400, 300)
        assert ax.get_xlim() == (0, 400)
        assert ax.get_ylim() == (300, 0)

    def test_zero_size_still_creates_axes(self):
        _, ax = figure(0, 0)
        assert ax.get_xlim() == (0, 1)


class TestDraw:
    def test_treemap_patches(self, nested_tree):
        scene = treemap_layout(nested_tree, Dimensions(640, 480))
        _, ax = draw(scene)
        shapes = [p for p in scene.primitives if not isinstance(p, Text)]
        swatches = [p for p in scene.legend if not isinstance(p, Text)]
        assert len(ax.patches) == len(shapes) + len(swatches)
        assert ax.texts

    def test_hexagons_and_ribbons(self, bare_config):
        points = [{"x": 10, "y": 10, "value": 1}, {"x": 90, "y": 60, "value": 2}]
        _, ax = draw(hexbin_layout(points, Dimensions(200, 200), bare_config, radius=15))
        assert len(ax.patches) == 2

        records = [{"a": "x", "b": "p", "value": 2}, {"a": "y", "b": "p", "value": 1}]
        _, ax = draw(flow_layout(records, ["a", "b"], Dimensions(300, 200), bare_config))
        assert len(ax.patches) == 2 + 2

    def test_arc(self):
        scene = Scene((Arc(100, 100, 20, 50, 0, math.pi / 2, fill="#4e79a7"),), 200, 200)
        _, ax = draw(scene)
        assert len(ax.patches) == 1

    def test_draw_into_existing_axes(self, nested_tree):
        fig, ax = figure(640, 480)
        drawn_fig, drawn_ax = draw(treemap_layout(nested_tree, Dimensions(640, 480)), ax)
        assert (drawn_fig, drawn_ax) == (fig, ax)


def test_save(tmp_path, nested_tree):
    fig, _ = draw(treemap_layout(nested_tree, Dimensions(320, 240)))
    path = save(fig, "treemap.png", tmp_path / "out")
    assert path == tmp_path / "out" / "treemap.png"
    assert path.exists() and path.stat().st_size > 0
