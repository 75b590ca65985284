# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation results aggregation and analysis.

This module provides the SimulationResult record written once per path and
the MonteCarloResults container, which behaves like the ordered result array
and adds percentile bands and summary statistics across paths.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence
import numpy as np
import pandas as pd

from .config import INITIAL_PORTFOLIO_VALUE
from .request import TimeUnit


@dataclass(eq=False)
class SimulationResult:
    """Outcome of one simulated path.

    Attributes:
        final_value: Portfolio value after the last period
        total_return: final_value / initial value - 1
        annualized_return: Total growth restated per year
        path_values: Portfolio value at the start and after every period
    """
    final_value: float
    total_return: float
    annualized_return: float
    path_values: np.ndarray


class MonteCarloResults:
    """Ordered simulation results with cross-path analysis.

    Indexing, iteration and ``len`` follow path order, so the container can
    be used wherever the plain result array is expected.

    Example:
        >>> results = simulator.run(request)
        >>> len(results) == request.iterations
        True
        >>> bands = results.get_percentile_data()
        >>> print(bands['Median'][-1])
    """

    # Standard percentile levels for analysis
    PERCENTILES = {
        "Top 5%": 0.95,
        "Top 10%": 0.90,
        "Top 25%": 0.75,
        "Median": 0.50,
        "Bottom 25%": 0.25,
        "Bottom 10%": 0.10,
        "Bottom 5%": 0.05,
    }

    FIELDS = ("final_value", "total_return", "annualized_return")

    def __init__(self,
                 results: Sequence[SimulationResult],
                 initial_value: float = INITIAL_PORTFOLIO_VALUE,
                 unit_of_time: Optional[TimeUnit] = None):
        """Initialize with simulation results.

        Args:
            results: One result per path, in path order
            initial_value: Baseline value every path started from
            unit_of_time: Length of one simulated period
        """
        self._results = list(results)
        self.initial_value = initial_value
        self.unit_of_time = unit_of_time
        self.num_simulations = len(self._results)
        self._num_periods = len(self._results[0].path_values) - 1 if self._results else 0

    def __len__(self) -> int:
        return self.num_simulations

    def __getitem__(self, index):
        return self._results[index]

    def __iter__(self) -> Iterator[SimulationResult]:
        return iter(self._results)

    @property
    def num_periods(self) -> int:
        return self._num_periods

    @property
    def horizon_years(self) -> Optional[float]:
        """Simulated horizon in years, None if the period length is unknown."""
        if self.unit_of_time is None:
            return None
        return self._num_periods / self.unit_of_time.periods_per_year

    def final_values(self) -> np.ndarray:
        """Final portfolio value of every path."""
        return np.array([r.final_value for r in self._results])

    def path_matrix(self) -> np.ndarray:
        """All paths stacked into a (paths, periods + 1) array."""
        if self.num_simulations == 0:
            return np.empty((0, 0))
        return np.vstack([r.path_values for r in self._results])

    def get_percentile_data(self) -> Dict[str, List[float]]:
        """Get percentile bands of the portfolio value for every period.

        Returns:
            Dict mapping percentile names to lists of values (one per period,
            starting with the baseline)
        """
        if self.num_simulations == 0:
            return {name: [] for name in self.PERCENTILES}

        paths = self.path_matrix()
        return {name: np.quantile(paths, pct, axis=0).tolist()
                for name, pct in self.PERCENTILES.items()}

    def get_percentile_df(self) -> pd.DataFrame:
        """Get percentile data as a DataFrame indexed by period."""
        df = pd.DataFrame(self.get_percentile_data())
        df.index.name = 'Period'
        return df

    def success_rate(self, min_value: Optional[float] = None, all_periods: bool = False) -> float:
        """Fraction of paths that stay at or above a threshold.

        Args:
            min_value: Threshold value. Defaults to the initial value.
            all_periods: If True, every period must meet the threshold.
                If False, only the final value is checked.

        Returns:
            Success rate as decimal (0.0 to 1.0)
        """
        if self.num_simulations == 0:
            return 0.0

        threshold = self.initial_value if min_value is None else min_value
        if all_periods:
            successful = np.all(self.path_matrix() >= threshold, axis=1)
        else:
            successful = self.final_values() >= threshold
        return float(np.mean(successful))

    def get_statistics(self, field: str = 'final_value') -> Dict[str, float]:
        """Get summary statistics of one result field across paths.

        Args:
            field: One of final_value, total_return, annualized_return

        Returns:
            Dict with mean, std, min, max and percentile values
        """
        if field not in self.FIELDS:
            raise ValueError(f"Field '{field}' not found. Available: {list(self.FIELDS)}")
        if self.num_simulations == 0:
            return {}

        values = np.array([getattr(r, field) for r in self._results])

        return {
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
            'p5': float(np.percentile(values, 5)),
            'p25': float(np.percentile(values, 25)),
            'p50': float(np.percentile(values, 50)),
            'p75': float(np.percentile(values, 75)),
            'p95': float(np.percentile(values, 95)),
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per path with its final value and returns."""
        return pd.DataFrame(
            {field: [getattr(r, field) for r in self._results] for field in self.FIELDS}
        )

    def __repr__(self) -> str:
        return (f"MonteCarloResults(num_simulations={self.num_simulations}, "
                f"num_periods={self._num_periods})")
