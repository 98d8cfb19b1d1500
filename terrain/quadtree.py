from __future__ import annotations

import math
from dataclasses import dataclass, field

from fractal.errors import ConfigurationError, InvalidInput


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def center(self) -> tuple[float, float]:
        return (0.5 * (self.min_x + self.max_x), 0.5 * (self.min_y + self.max_y))

    @property
    def size(self) -> tuple[float, float]:
        return (self.max_x - self.min_x, self.max_y - self.min_y)

    @property
    def area(self) -> float:
        w, h = self.size
        return w * h

    def quadrants(self) -> tuple[Bounds, Bounds, Bounds, Bounds]:
        """Bottom-left, bottom-right, top-left, top-right, split at the center."""
        mx, my = self.center
        return (
            Bounds(self.min_x, self.min_y, mx, my),
            Bounds(mx, self.min_y, self.max_x, my),
            Bounds(self.min_x, my, mx, self.max_y),
            Bounds(mx, my, self.max_x, self.max_y),
        )


@dataclass
class QuadTreeNode:
    bounds: Bounds
    children: list[QuadTreeNode] = field(default_factory=list)

    @property
    def center(self) -> tuple[float, float]:
        return self.bounds.center

    @property
    def size(self) -> tuple[float, float]:
        return self.bounds.size

    @property
    def is_leaf(self) -> bool:
        return not self.children


class QuadTree:
    """Distance-driven quadtree over a square region.

    A node splits when the query point is closer to its center than the node
    is wide and the node is still wider than ``min_node_size``. Each
    :meth:`insert` rebuilds the tree from the root.
    """

    def __init__(
        self,
        min_corner: tuple[float, float],
        max_corner: tuple[float, float],
        min_node_size: float,
    ):
        min_node_size = float(min_node_size)
        if not math.isfinite(min_node_size) or min_node_size <= 0.0:
            raise ConfigurationError("min_node_size must be > 0")

        bounds = Bounds(
            float(min_corner[0]),
            float(min_corner[1]),
            float(max_corner[0]),
            float(max_corner[1]),
        )
        w, h = bounds.size
        if not (math.isfinite(w) and math.isfinite(h)) or w <= 0.0 or h <= 0.0:
            raise ConfigurationError("quadtree bounds must have max > min on both axes")
        if not math.isclose(w, h):
            raise ConfigurationError("quadtree bounds must be square")

        self._bounds = bounds
        self._min_node_size = min_node_size
        self._root = QuadTreeNode(bounds)

    @property
    def root(self) -> QuadTreeNode:
        return self._root

    @property
    def min_node_size(self) -> float:
        return self._min_node_size

    def insert(self, point: tuple[float, float]) -> None:
        px = float(point[0])
        py = float(point[1])
        if not (math.isfinite(px) and math.isfinite(py)):
            raise InvalidInput("QuadTree.insert: invalid position parameter")

        self._root = QuadTreeNode(self._bounds)
        stack = [self._root]
        while stack:
            node = stack.pop()
            cx, cy = node.center
            width = node.size[0]
            if math.hypot(cx - px, cy - py) < width and width > self._min_node_size:
                node.children = [QuadTreeNode(b) for b in node.bounds.quadrants()]
                stack.extend(node.children)

    def leaves(self) -> list[QuadTreeNode]:
        """Depth-first leaves, children visited in quadrant order."""
        out: list[QuadTreeNode] = []

        def visit(node: QuadTreeNode) -> None:
            if node.is_leaf:
                out.append(node)
                return
            for c in node.children:
                visit(c)

        visit(self._root)
        return out
