"""
Incremental site percolation on an n-by-n grid.

Sites are opened one at a time. Each union-find component carries a boundary
status on its representative (``site_status[find(i)]``), so whether a site is
connected to the top row is answered from its own component only. There is no
virtual top/bottom node shared by every column, which is what makes bottom-row
sites look full once the grid percolates (backwash).
"""

from enum import IntEnum
from typing import Iterator, Tuple

import numpy as np

from ..errors import InvalidArgument
from .union_find import WeightedQuickUnionUF


class SiteStatus(IntEnum):
    """
    Per-site status. The numeric order is the dominance order used when two
    components merge:

        OPENED + OPENED  -> OPENED
        OPENED + BOTTOM  -> BOTTOM
        OPENED + TOP     -> TOP
        BOTTOM + BOTTOM  -> BOTTOM
        BOTTOM + TOP     -> TOP (the merge that percolates)
        TOP    + TOP     -> TOP
    """
    BLOCKED = 0
    OPENED = 1
    CONNECTED_BOTTOM = 2
    CONNECTED_TOP = 3


class Percolation:
    """
    n-by-n grid of sites, all blocked at construction.

    Rows and columns are 1-indexed. Site (row, col) lives at linear index
    ``(row - 1) * n + col``; index 0 is a reserved cell preset to
    CONNECTED_TOP and never joined to any site.

    Example:
        p = Percolation(2)
        p.open(2, 1)
        p.open(1, 1)
        p.percolates()  # True
        p.is_full(2, 1)  # True
    """

    def __init__(self, n: int):
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise InvalidArgument(f"n should be an integer, got {n!r}")
        if n <= 0:
            raise InvalidArgument(f"n should be > 0, got {n}")

        self._n = int(n)
        n_cells = self._n * self._n + 1

        self._uf = WeightedQuickUnionUF(n_cells)
        self._site_status = np.zeros(n_cells, dtype=np.int8)
        self._site_status[0] = SiteStatus.CONNECTED_TOP

        self._open_sites = 0
        self._percolates = False

    def __repr__(self) -> str:
        return (f"Percolation(n={self._n}, open_sites={self._open_sites}, "
                f"percolates={self._percolates})")

    @property
    def grid_size(self) -> int:
        return self._n

    def _index(self, row: int, col: int) -> int:
        return self._n * (row - 1) + col

    def _validate(self, row: int, col: int) -> None:
        if row < 1 or row > self._n or col < 1 or col > self._n:
            raise InvalidArgument(
                f"site ({row}, {col}) is outside the grid [1, {self._n}]"
            )

    def _neighbors(self, row: int, col: int) -> Iterator[Tuple[int, int]]:
        for r, c in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
            if 1 <= r <= self._n and 1 <= c <= self._n:
                yield r, c

    def _connect(self, src: int, dst: int) -> None:
        src_root = self._uf.find(src)
        dst_root = self._uf.find(dst)
        if src_root == dst_root:
            return

        src_status = self._site_status[src_root]
        dst_status = self._site_status[dst_root]
        if {int(src_status), int(dst_status)} == {SiteStatus.CONNECTED_TOP,
                                                   SiteStatus.CONNECTED_BOTTOM}:
            self._percolates = True

        self._uf.union(src, dst)

        # union() picks one of the two roots; both get the dominant status so
        # whichever survives keeps it.
        status = max(src_status, dst_status)
        self._site_status[src_root] = status
        self._site_status[dst_root] = status

    def open(self, row: int, col: int) -> None:
        """Open site (row, col) if it is not open already."""
        self._validate(row, col)
        if self.is_open(row, col):
            return

        idx = self._index(row, col)
        self._open_sites += 1

        if row == 1:
            self._site_status[idx] = SiteStatus.CONNECTED_TOP
        elif row == self._n:
            self._site_status[idx] = SiteStatus.CONNECTED_BOTTOM
        else:
            self._site_status[idx] = SiteStatus.OPENED

        if self._n == 1:
            self._percolates = True
            return

        for r, c in self._neighbors(row, col):
            if self.is_open(r, c):
                self._connect(idx, self._index(r, c))

    def is_open(self, row: int, col: int) -> bool:
        """Is site (row, col) open?"""
        self._validate(row, col)
        return self._site_status[self._index(row, col)] != SiteStatus.BLOCKED

    def is_full(self, row: int, col: int) -> bool:
        """Is site (row, col) connected to the top row through open sites?"""
        self._validate(row, col)
        root = self._uf.find(self._index(row, col))
        return self._site_status[root] == SiteStatus.CONNECTED_TOP

    def number_of_open_sites(self) -> int:
        return self._open_sites

    def percolates(self) -> bool:
        return self._percolates

    def open_mask(self) -> np.ndarray:
        """
        Boolean (n, n) array of open sites; row 1 is index 0.
        """
        return (self._site_status[1:] != SiteStatus.BLOCKED).reshape(self._n, self._n)

    def full_mask(self) -> np.ndarray:
        """
        Boolean (n, n) array of full sites; row 1 is index 0.
        """
        roots = np.fromiter(
            (self._uf.find(i) for i in range(1, self._n * self._n + 1)),
            dtype=np.int64,
            count=self._n * self._n,
        )
        full = self._site_status[roots] == SiteStatus.CONNECTED_TOP
        return full.reshape(self._n, self._n)
