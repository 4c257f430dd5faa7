"""Union-find forest over integer cells.

Cells are indices into a parent list.  Classes only ever merge; there is no
removal.  ``find`` compresses paths as it goes, which does not change any
answer the structure gives.
"""

from __future__ import annotations

from typing import Dict, List


class Partition:
    """Disjoint-set forest with path compression."""

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise ValueError(f"Partition size must be non-negative, got {size}.")
        self._parent: List[int] = list(range(size))

    def __len__(self) -> int:
        return len(self._parent)

    def add(self) -> int:
        """Create a new singleton cell and return its index."""
        cell = len(self._parent)
        self._parent.append(cell)
        return cell

    def find(self, cell: int) -> int:
        parent = self._parent
        root = cell
        while parent[root] != root:
            root = parent[root]
        while parent[cell] != root:
            parent[cell], cell = root, parent[cell]
        return root

    def combine(self, a: int, b: int) -> bool:
        """Merge the classes of ``a`` and ``b``; True iff they were distinct."""
        x = self.find(a)
        y = self.find(b)
        if x == y:
            return False
        self._parent[x] = y
        return True

    def same(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def classes(self) -> List[List[int]]:
        """Classes as ascending cell lists, ordered by their smallest cell."""
        groups: Dict[int, List[int]] = {}
        for cell in range(len(self._parent)):
            groups.setdefault(self.find(cell), []).append(cell)
        return list(groups.values())

    def __repr__(self) -> str:
        return f"Partition({self.classes()!r})"


__all__ = ["Partition"]
