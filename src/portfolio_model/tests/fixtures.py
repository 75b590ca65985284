# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Synthetic market history shared by the Monte Carlo tests.
"""

from datetime import datetime, timedelta
from typing import List, Sequence

import numpy as np

from ..montecarlo.request import AssetAllocation
from ..montecarlo.series import ReturnObservation

# Three assets with known per-period parameters
MU = np.array([0.08, 0.10, 0.12])
SIGMA = np.array([0.15, 0.20, 0.25])
CORR_AB = 0.5
CORR_AC = 0.0
CORR_BC = 0.0
CORRELATION = np.array([
    [1.0, CORR_AB, CORR_AC],
    [CORR_AB, 1.0, CORR_BC],
    [CORR_AC, CORR_BC, 1.0],
])

WEEKS_PER_YEAR = 52
START = datetime(2015, 1, 2)

ALLOCATIONS = [
    AssetAllocation(1, "AAA", 0.5),
    AssetAllocation(2, "BBB", 0.3),
    AssetAllocation(3, "CCC", 0.2),
]


def correlated_history(n: int,
                       mu: np.ndarray = MU,
                       sigma: np.ndarray = SIGMA,
                       correlation: np.ndarray = CORRELATION,
                       seed: int = 42) -> np.ndarray:
    """Draw ``n`` correlated normal returns per asset, shape (assets, n)."""
    rng = np.random.default_rng(seed)
    chol = np.linalg.cholesky(correlation)
    z = rng.standard_normal((n, len(mu))) @ chol.T
    return (mu + sigma * z).T


def weekly_history(n_weeks: int = 520, seed: int = 7) -> np.ndarray:
    """Annual parameters restated per week, shape (assets, n_weeks)."""
    return correlated_history(
        n_weeks,
        mu=MU / WEEKS_PER_YEAR,
        sigma=SIGMA / np.sqrt(WEEKS_PER_YEAR),
        seed=seed,
    )


def to_observations(history: np.ndarray,
                    asset_ids: Sequence[int],
                    start: datetime = START) -> List[ReturnObservation]:
    """Weekly observations interleaved by date, as a database would return them."""
    observations = []
    for week in range(history.shape[1]):
        timestamp = start + timedelta(weeks=week)
        for row, asset_id in enumerate(asset_ids):
            observations.append(ReturnObservation(asset_id, timestamp, float(history[row, week])))
    return observations
