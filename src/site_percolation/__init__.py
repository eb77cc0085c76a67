"""
Site Percolation - percolation threshold estimation on n-by-n grids.

This package provides tools for:
- Incremental site percolation on square grids (open / is_full / percolates)
- Weighted quick-union connectivity
- Monte Carlo estimation of the percolation threshold
- Chunked job lists for running large trial batches on HPC clusters
"""

__version__ = "1.0.0"
