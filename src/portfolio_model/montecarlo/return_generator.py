# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Correlated return generator for simulation workers.

Each worker pairs the run's shared, read-only StatisticalResources with a
random generator it owns exclusively. Correlation is imposed on independent
standard normal draws with a Cholesky factor; for the Student's-t model the
correlated normals are pushed through a Gaussian copula.
"""

from typing import Optional, Tuple, Union

import numpy as np
from scipy import stats

from .request import DistributionType
from .statistics import StatisticalResources

Size = Union[int, Tuple[int, ...], None]


def make_generator(seed: int, stream: int) -> np.random.Generator:
    """PCG64 generator for one independent stream of a global seed."""
    return np.random.Generator(np.random.PCG64(np.random.SeedSequence(seed, spawn_key=(stream,))))


class WorkerResource:
    """Samples correlated return vectors for one simulation worker.

    The shared statistics are only read. The generator is advanced by the
    owning worker thread only and must not be handed to another thread.

    Example:
        >>> shared = get_statistical_resources(history)
        >>> worker = WorkerResource(shared, seed=42, stream=0)
        >>> worker.correlated_returns()          # one period, shape (n,)
        >>> worker.correlated_returns((100, 12)) # 100 paths x 12 periods x n
    """

    def __init__(self, shared: StatisticalResources, seed: int, stream: int = 0):
        """Initialize the worker resource.

        Args:
            shared: Statistics of the run, shared by every worker
            seed: Global seed of the run
            stream: Stream key, normally the worker index
        """
        self.shared = shared
        self.seed = seed
        self.stream = stream
        self._rng = make_generator(seed, stream)

    def reset_stream(self, stream: int) -> None:
        """Switch to a fresh generator for another stream of the same seed."""
        self.stream = stream
        self._rng = make_generator(self.seed, stream)

    def correlated_returns(self, size: Size = None) -> np.ndarray:
        """Draw correlated per-period returns.

        Args:
            size: None for a single vector, otherwise the leading shape of
                independent vectors to draw

        Returns:
            Array of shape ``size + (n_assets,)``, in the asset order of the
            shared statistics
        """
        if self.shared.distribution is DistributionType.NORMAL:
            return self._normal_returns(size)
        if self.shared.distribution is DistributionType.STUDENT_T:
            return self._student_t_returns(size)
        raise ValueError(f"Unsupported distribution: {self.shared.distribution}")

    def _standard_normals(self, size: Size) -> np.ndarray:
        n = self.shared.n_assets
        if size is None:
            return self._rng.standard_normal(n)
        leading = (size,) if isinstance(size, (int, np.integer)) else tuple(size)
        return self._rng.standard_normal(leading + (n,))

    def _normal_returns(self, size: Size) -> np.ndarray:
        z = self._standard_normals(size)
        # y = L @ z for every trailing vector
        return z @ self.shared.cholesky_cov.T + self.shared.mean_returns

    def _student_t_returns(self, size: Size) -> np.ndarray:
        z = self._standard_normals(size)
        w = z @ self.shared.cholesky_corr.T
        df = self.shared.degrees_of_freedom
        # t quantile of Phi(w); the upper half goes through the survival
        # function so u never rounds to exactly 1
        t_values = np.where(
            w > 0,
            stats.t.isf(stats.norm.sf(w), df),
            stats.t.ppf(stats.norm.cdf(w), df),
        )
        return t_values * self.shared.std_dev + self.shared.mean_returns

    def __repr__(self) -> str:
        return (f"WorkerResource(seed={self.seed}, stream={self.stream}, "
                f"n_assets={self.shared.n_assets})")
