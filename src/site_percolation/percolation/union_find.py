"""
Weighted quick-union connectivity structure.

Elements are integers 0..n-1 stored in flat numpy arrays (an arena of indices):
``parent[i]`` points towards the representative of ``i``'s component and
``size[r]`` is the number of elements under root ``r``.
"""

import numpy as np

from ..errors import InvalidArgument, OutOfRange


class WeightedQuickUnionUF:
    """
    Union-find with union by size and path halving.

    Components only ever merge; there is no deletion.

    Example:
        uf = WeightedQuickUnionUF(10)
        uf.union(3, 4)
        uf.connected(3, 4)  # True
    """

    def __init__(self, n: int):
        """
        Create n singleton components.

        Args:
            n: Size of the universe (must be > 0)
        """
        if n <= 0:
            raise InvalidArgument(f"n should be > 0, got {n}")

        self._parent = np.arange(n, dtype=np.int64)
        self._size = np.ones(n, dtype=np.int64)
        self._count = n

    def __len__(self) -> int:
        return len(self._parent)

    @property
    def count(self) -> int:
        """Number of components."""
        return self._count

    def _validate(self, p: int) -> None:
        n = len(self._parent)
        if p < 0 or p >= n:
            raise OutOfRange(f"index {p} is not between 0 and {n - 1}")

    def find(self, p: int) -> int:
        """
        Return the representative of the component containing p.

        Every other node on the path is pointed at its grandparent.
        """
        self._validate(p)
        parent = self._parent
        while p != parent[p]:
            parent[p] = parent[parent[p]]
            p = int(parent[p])
        return int(p)

    def connected(self, p: int, q: int) -> bool:
        return self.find(p) == self.find(q)

    def union(self, p: int, q: int) -> None:
        """
        Merge the components of p and q.

        The smaller tree is attached under the larger root; on equal sizes
        q's root goes under p's root.
        """
        root_p = self.find(p)
        root_q = self.find(q)
        if root_p == root_q:
            return

        if self._size[root_p] < self._size[root_q]:
            self._parent[root_p] = root_q
            self._size[root_q] += self._size[root_p]
        else:
            self._parent[root_q] = root_p
            self._size[root_p] += self._size[root_q]
        self._count -= 1
