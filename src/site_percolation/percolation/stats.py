"""
Monte Carlo estimation of the site percolation threshold.

Each trial opens uniformly random sites of a fresh grid until it percolates
and records the fraction of open sites. The threshold estimate is the sample
mean with a 95% normal-approximation confidence interval.
"""

import math
from typing import Any, Dict, Optional

import numpy as np

from ..errors import InvalidArgument
from .grid import Percolation

# Two-sided 95% quantile of the standard normal
CONFIDENCE_95 = 1.96


def run_trial(n: int, rng: np.random.Generator) -> float:
    """
    Run one trial on a fresh n-by-n grid.

    Args:
        n: Grid size
        rng: Random source with numpy Generator.integers semantics

    Returns:
        Fraction of sites open at the moment the grid first percolates
    """
    perc = Percolation(n)
    while not perc.percolates():
        row = int(rng.integers(1, n, endpoint=True))
        col = int(rng.integers(1, n, endpoint=True))
        perc.open(row, col)
    return perc.number_of_open_sites() / (n * n)


def run_trials(n: int, trials: int, rng: np.random.Generator) -> np.ndarray:
    """Run independent trials and return their open-site fractions."""
    samples = np.empty(trials, dtype=np.float64)
    for i in range(trials):
        samples[i] = run_trial(n, rng)
    return samples


def summarize_samples(samples: np.ndarray) -> Dict[str, Any]:
    """
    Summarize open-site fractions.

    The standard deviation uses the trials - 1 divisor and is NaN for a single
    sample, in which case the confidence bounds are NaN too.

    Returns:
        Dict with 'trials', 'mean', 'stddev', 'confidence_lo', 'confidence_hi'
    """
    samples = np.asarray(samples, dtype=np.float64)
    trials = len(samples)
    if trials == 0:
        raise InvalidArgument("cannot summarize an empty sample")

    mean = float(np.mean(samples))
    if trials > 1:
        stddev = float(np.std(samples, ddof=1))
    else:
        stddev = float('nan')

    half_width = CONFIDENCE_95 * stddev / math.sqrt(trials)
    return {
        'trials': trials,
        'mean': mean,
        'stddev': stddev,
        'confidence_lo': mean - half_width,
        'confidence_hi': mean + half_width,
    }


class PercolationStats:
    """
    Perform independent percolation trials on an n-by-n grid.

    All trials run in the constructor; the results are read-only afterwards.

    Example:
        ps = PercolationStats(200, 100, seed=42)
        ps.mean()  # ~0.593
    """

    def __init__(self, n: int, trials: int, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            n: Grid size (> 0)
            trials: Number of trials (> 0)
            seed: Seed for numpy.random.default_rng, ignored if rng is given
            rng: Random source to draw row/column from
        """
        for name, value in (('n', n), ('trials', trials)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidArgument(f"{name} should be an integer, got {value!r}")
        if n <= 0 or trials <= 0:
            raise InvalidArgument(
                f"both n and trials should be > 0, got n={n}, trials={trials}"
            )
        if rng is None:
            rng = np.random.default_rng(seed)

        self.n = n
        self.trials = trials
        self.samples = run_trials(n, trials, rng)
        self.samples.flags.writeable = False
        self._summary = summarize_samples(self.samples)

    def mean(self) -> float:
        """Sample mean of percolation threshold."""
        return self._summary['mean']

    def stddev(self) -> float:
        """Sample standard deviation of percolation threshold (NaN for one trial)."""
        return self._summary['stddev']

    def confidence_lo(self) -> float:
        """Low endpoint of 95% confidence interval."""
        return self._summary['confidence_lo']

    def confidence_hi(self) -> float:
        """High endpoint of 95% confidence interval."""
        return self._summary['confidence_hi']

    def to_dict(self) -> Dict[str, Any]:
        return {'grid_size': self.n, **self._summary}
