"""
Hierarchy input types and the value-weighted tree shared by treemap and icicle.

Callers hand in a HierarchyNode tree. Flat record lists become a tree only
through an explicit adapter (wrap_records), never by sniffing the input.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class HierarchyNode:
    name: str
    value: Optional[float] = None
    children: list[HierarchyNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HierarchyNode:
        """Convert the ``{name, value, children}`` mapping shape."""
        return cls(
            name=str(data.get("name", "")),
            value=data.get("value"),
            children=[cls.from_dict(child) for child in data.get("children") or ()],
        )


def record_to_node(record: Mapping[str, Any]) -> HierarchyNode:
    """Stock adapter for flat records: name/label and value/size fields."""
    value = record.get("value")
    if value is None:
        value = record.get("size")
    if value is None:
        value = 1
    name = record.get("name") or record.get("label") or f"Item {record.get('value')}"
    return HierarchyNode(name=str(name), value=value)


def wrap_records(
    records: Iterable[Mapping[str, Any]],
    adapter: Callable[[Mapping[str, Any]], HierarchyNode] = record_to_node,
    name: str = "Root",
) -> HierarchyNode:
    """Wrap a flat list of records in a synthetic root."""
    return HierarchyNode(name=name, children=[adapter(record) for record in records])


def is_empty_input(data: Any) -> bool:
    """True for missing data or an empty record list."""
    if data is None:
        return True
    return isinstance(data, Sequence) and not isinstance(data, str) and len(data) == 0


def as_hierarchy(
    data: HierarchyNode | Mapping[str, Any] | Iterable[Mapping[str, Any]],
    adapter: Optional[Callable[[Mapping[str, Any]], HierarchyNode]] = None,
) -> HierarchyNode:
    """Coerce layout input to a HierarchyNode.

    Record lists need an adapter; passing one without it is a caller error.
    """
    if isinstance(data, HierarchyNode):
        return data
    if isinstance(data, Mapping):
        return HierarchyNode.from_dict(data)
    if adapter is None:
        raise TypeError("Flat record input needs an adapter, e.g. adapter=record_to_node")
    return wrap_records(data, adapter)


def _leaf_value(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


class Node:
    """A laid-out hierarchy node with aggregate value and partition bounds."""

    __slots__ = ("data", "parent", "children", "depth", "height", "value", "index",
                 "x0", "y0", "x1", "y1")

    def __init__(self, data: HierarchyNode, parent: Optional[Node] = None, index: int = 0):
        self.data = data
        self.parent = parent
        self.children: list[Node] = []
        self.depth = parent.depth + 1 if parent else 0
        self.height = 0
        self.value = 0.0
        self.index = index
        self.x0 = self.y0 = self.x1 = self.y1 = 0.0

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def key(self) -> str:
        """Deterministic path key, e.g. ``Root/0:A/1:B``."""
        parts = [f"{node.index}:{node.name}" if node.parent else node.name
                 for node in reversed(self.ancestors())]
        return "/".join(parts)

    def ancestors(self) -> list[Node]:
        """This node, then its parent, up to the root."""
        chain = []
        node: Optional[Node] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain

    def path_names(self) -> list[str]:
        return [node.name for node in reversed(self.ancestors())]

    def top_level(self) -> Node:
        """Nearest depth-1 ancestor (self when depth <= 1)."""
        node = self
        while node.depth > 1:
            node = node.parent
        return node

    def descendants(self) -> list[Node]:
        return list(self.each_before())

    def each_before(self) -> Iterator[Node]:
        """Pre-order traversal."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def each_after(self) -> Iterator[Node]:
        """Post-order traversal."""
        for child in self.children:
            yield from child.each_after()
        yield self

    def leaves(self) -> list[Node]:
        return [node for node in self.each_before() if node.is_leaf]

    def __repr__(self) -> str:
        return f"Node({self.key!r}, value={self.value}, depth={self.depth})"


def build_hierarchy(root: HierarchyNode) -> Node:
    """Build the computed tree: aggregate values bottom-up, then sort siblings.

    Children are ordered by subtree height descending, then aggregate value
    descending; equal keys keep input order. Nodes with neither value nor
    children are leaves worth zero.
    """
    top = Node(root)
    stack = [top]
    while stack:
        node = stack.pop()
        for i, child in enumerate(node.data.children):
            child_node = Node(child, node, i)
            node.children.append(child_node)
            stack.append(child_node)

    for node in top.each_after():
        if node.children:
            node.value = sum(child.value for child in node.children)
            node.height = 1 + max(child.height for child in node.children)
            node.children.sort(key=lambda c: (-c.height, -c.value))
        else:
            node.value = _leaf_value(node.data.value)
            if node.data.value is None:
                logger.debug("Leaf %r has no value; counting it as zero", node.data.name)
    return top
