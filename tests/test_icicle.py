"""Tests for the icicle partition layout."""
import pytest

from chartgeom import Dimensions, HierarchyNode, PALETTE, Text, icicle_layout
from chartgeom.hierarchy import build_hierarchy
from chartgeom.icicle import partition

TWO_LEAVES = {"name": "Root", "children": [{"name": "A", "value": 30}, {"name": "B", "value": 70}]}


class TestPartition:
    def test_depth_columns_and_value_bands(self):
        root = partition(build_hierarchy(HierarchyNode.from_dict(TWO_LEAVES)), band=200, depth=300)
        assert (root.x0, root.x1, root.y0, root.y1) == (0, 200, 0, 150)
        b, a = root.children
        assert (b.name, b.x0, b.x1, b.y0, b.y1) == ("B", 0, 140, 150, 300)
        assert (a.name, a.x0, a.x1) == ("A", 140, 200)

    def test_bands_nest_inside_parent(self, nested_tree):
        root = partition(build_hierarchy(nested_tree), band=500, depth=400)
        for node in root.descendants():
            if node.children:
                assert node.children[0].x0 == pytest.approx(node.x0)
                assert node.children[-1].x1 == pytest.approx(node.x1)
                assert sum(c.x1 - c.x0 for c in node.children) == pytest.approx(node.x1 - node.x0)
                assert all(c.y0 == pytest.approx(node.y1) for c in node.children)


class TestIcicleLayout:
    def test_cells(self, bare_config):
        scene = icicle_layout(TWO_LEAVES, Dimensions(300, 200), bare_config)
        cells = {rect.label: rect for rect in scene.of_role("cell")}
        assert (cells["Root"].x, cells["Root"].y, cells["Root"].width, cells["Root"].height) == (0, 0, 149, 199)
        assert (cells["B"].x, cells["B"].y, cells["B"].width, cells["B"].height) == (150, 0, 149, 139)
        assert cells["Root"].fill == "#ccc"
        assert cells["A"].fill == PALETTE[0]
        assert cells["B"].fill == PALETTE[1]

    def test_fit_never_upscales(self, nested_tree, bare_config):
        scene = icicle_layout(nested_tree, Dimensions(640, 480), bare_config)
        assert scene.scale <= 1
        assert scene.translate == (0, 0)

    def test_tooltip_uses_slash_path(self, bare_config):
        scene = icicle_layout(TWO_LEAVES, Dimensions(300, 200), bare_config)
        b = next(rect for rect in scene.of_role("cell") if rect.label == "B")
        assert b.tooltip == "Root/B\n70"

    def test_labels_only_on_tall_cells(self, nested_tree, bare_config):
        scene = icicle_layout(nested_tree, Dimensions(640, 200), bare_config)
        labelled = {text.key.split("#")[0] for text in scene.of_role("label")}
        assert labelled
        for rect in scene.of_role("cell"):
            if rect.key in labelled:
                assert rect.height > 15
            else:
                assert rect.height <= 16

    def test_zero_dimensions(self, nested_tree):
        assert icicle_layout(nested_tree, Dimensions(0, 100)).is_empty

    def test_zero_sum(self, bare_config):
        data = {"name": "Root", "children": [{"name": "A", "value": 0}]}
        assert icicle_layout(data, Dimensions(300, 200), bare_config).is_empty

    def test_idempotent(self, nested_tree):
        assert icicle_layout(nested_tree, Dimensions(640, 480)) == icicle_layout(nested_tree, Dimensions(640, 480))

    def test_legend(self, nested_tree):
        scene = icicle_layout(nested_tree, Dimensions(640, 480))
        assert [item.content for item in scene.legend if isinstance(item, Text)] == ["Sales", "Ops", "Misc"]

    def test_empty_record_list(self, bare_config):
        assert icicle_layout([], Dimensions(300, 200), bare_config).is_empty

    def test_narrow_columns_elide_labels(self, bare_config):
        data = {"name": "Root", "children": [{"name": "AVeryLongCategoryName", "value": 10}]}
        scene = icicle_layout(data, Dimensions(60, 200), bare_config)
        assert [text.content for text in scene.of_role("label")] == ["R 10", "A 10"]

    def test_columns_too_narrow_for_labels(self, bare_config):
        data = {"name": "Root", "children": [{"name": "A", "value": 10}]}
        scene = icicle_layout(data, Dimensions(30, 200), bare_config)
        assert len(scene.of_role("cell")) == 2
        assert scene.of_role("label") == []
