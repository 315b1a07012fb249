import matplotlib

matplotlib.use("Agg")

import pytest

from chartgeom import ChartConfig, HierarchyNode, Margin


@pytest.fixture
def bare_config():
    """No margins, so local coordinates equal the full surface."""
    return ChartConfig(margin=Margin(0, 0, 0, 0))


@pytest.fixture
def nested_tree():
    return HierarchyNode.from_dict({
        "name": "Root",
        "children": [
            {"name": "Sales", "children": [
                {"name": "North", "value": 40},
                {"name": "South", "value": 25},
                {"name": "East", "value": 10},
            ]},
            {"name": "Ops", "children": [
                {"name": "Fleet", "value": 30},
                {"name": "Depots", "children": [
                    {"name": "Main", "value": 12},
                    {"name": "Spare", "value": 3},
                ]},
            ]},
            {"name": "Misc", "value": 5},
        ],
    })
