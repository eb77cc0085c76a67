"""Site percolation on square grids and threshold estimation."""

from .union_find import WeightedQuickUnionUF
from .grid import Percolation, SiteStatus
from .stats import PercolationStats, run_trial, run_trials, summarize_samples

__all__ = ['WeightedQuickUnionUF', 'Percolation', 'SiteStatus', 'PercolationStats',
           'run_trial', 'run_trials', 'summarize_samples']
