"""Skyline bottom-left / best-fit rectangle packing."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Sequence

__all__ = ["Heuristic", "Rect", "RectPacker", "MAXVAL"]

MAXVAL = 0x7FFFFFFF
_FAR = 1 << 30


class Heuristic(enum.IntEnum):
    """How the packer chooses among candidate positions."""

    BOTTOM_LEFT = 0
    BEST_FIT = 1


@dataclass
class Rect:
    """A rectangle to pack; ``x``, ``y`` and ``was_packed`` are filled in by packing.

    A rectangle that does not fit gets ``x`` and ``y`` set to ``MAXVAL``.
    """

    w: int
    h: int
    id: int = 0
    x: int = 0
    y: int = 0
    was_packed: bool = False


@dataclass
class _Node:
    x: int
    y: int


@dataclass(frozen=True)
class _Placement:
    node: int
    x: int
    y: int


class RectPacker:
    """Packs rectangles into a ``width`` by ``height`` area, keeping a skyline.

    ``num_nodes`` bounds the skyline's length (by default ``width``). Unless
    ``allow_out_of_mem`` is set, widths are rounded up to a multiple that
    guarantees the skyline never runs out of nodes. Repeated calls to
    ``pack`` keep filling the same area.
    """

    def __init__(
        self,
        width: int,
        height: int,
        num_nodes: Optional[int] = None,
        heuristic: Heuristic = Heuristic.BOTTOM_LEFT,
        allow_out_of_mem: bool = False,
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"target size must not be negative, got {width}x{height}")
        if num_nodes is None:
            num_nodes = width
        if num_nodes < 1:
            raise ValueError(f"num_nodes must be at least 1, got {num_nodes}")
        self.width = width
        self.height = height
        self.num_nodes = num_nodes
        self.heuristic = Heuristic(heuristic)
        if allow_out_of_mem:
            self.align = 1
        else:
            self.align = (width + num_nodes - 1) // num_nodes
        # The last node is a sentinel marking the right edge.
        self._skyline: list[_Node] = [_Node(0, 0), _Node(width, _FAR)]

    def __repr__(self) -> str:
        return (
            f"RectPacker(width={self.width}, height={self.height}, "
            f"num_nodes={self.num_nodes}, heuristic={self.heuristic.name})"
        )

    @property
    def _free_nodes(self) -> int:
        return self.num_nodes + 2 - len(self._skyline)

    def _find_min_y(self, first: int, x0: int, width: int) -> tuple[int, int]:
        nodes = self._skyline
        x1 = x0 + width
        min_y = 0
        waste = 0
        visited = 0
        i = first
        while nodes[i].x < x1:
            node, following = nodes[i], nodes[i + 1]
            if node.y > min_y:
                waste += visited * (node.y - min_y)
                min_y = node.y
                if node.x < x0:
                    visited += following.x - x0
                else:
                    visited += following.x - node.x
            else:
                under = following.x - node.x
                if under + visited > width:
                    under = width - visited
                waste += under * (min_y - node.y)
                visited += under
            i += 1
        return min_y, waste

    def _find_best_pos(self, width: int, height: int) -> Optional[_Placement]:
        width = width + self.align - 1
        width -= width % self.align
        if width > self.width or height > self.height:
            return None

        nodes = self._skyline
        best: Optional[int] = None
        best_y = _FAR
        best_waste = _FAR

        i = 0
        while nodes[i].x + width <= self.width:
            y, waste = self._find_min_y(i, nodes[i].x, width)
            if self.heuristic is Heuristic.BOTTOM_LEFT:
                if y < best_y:
                    best_y, best = y, i
            elif y + height <= self.height and (
                y < best_y or (y == best_y and waste < best_waste)
            ):
                best_y, best_waste, best = y, waste, i
            i += 1

        best_x = 0 if best is None else nodes[best].x

        if self.heuristic is Heuristic.BEST_FIT:
            tail = 0
            while nodes[tail].x < width:
                tail += 1
            node = 0
            for tail_node in nodes[tail:]:
                xpos = tail_node.x - width
                while nodes[node + 1].x <= xpos:
                    node += 1
                y, waste = self._find_min_y(node, xpos, width)
                if y + height <= self.height and y <= best_y:
                    if (
                        y < best_y
                        or waste < best_waste
                        or (waste == best_waste and xpos < best_x)
                    ):
                        best_x, best_y, best_waste, best = xpos, y, waste, node

        if best is None:
            return None
        return _Placement(best, best_x, best_y)

    def _pack_one(self, width: int, height: int) -> Optional[tuple[int, int]]:
        found = self._find_best_pos(width, height)
        if found is None or found.y + height > self.height or self._free_nodes == 0:
            return None

        nodes = self._skyline
        right = found.x + width
        start = found.node + 1 if nodes[found.node].x < found.x else found.node
        end = start
        while end + 1 < len(nodes) and nodes[end + 1].x <= right:
            end += 1
        if nodes[end].x < right:
            nodes[end].x = right
        nodes[start:end] = [_Node(found.x, found.y + height)]
        return found.x, found.y

    def pack(self, rects: Sequence[Rect]) -> bool:
        """Place ``rects`` in the area, setting their positions in place.

        Taller rectangles are placed first. Returns True if every rectangle fit.
        """
        order = sorted(range(len(rects)), key=lambda i: (-rects[i].h, -rects[i].w))
        for i in order:
            rect = rects[i]
            if rect.w == 0 or rect.h == 0:
                rect.x = rect.y = 0
                continue
            placed = self._pack_one(rect.w, rect.h)
            if placed is None:
                rect.x = rect.y = MAXVAL
            else:
                rect.x, rect.y = placed

        all_packed = True
        for rect in rects:
            rect.was_packed = not (rect.x == MAXVAL and rect.y == MAXVAL)
            all_packed = all_packed and rect.was_packed
        return all_packed