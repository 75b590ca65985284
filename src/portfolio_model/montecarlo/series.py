# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Historical return series and their alignment check.

Raw per-asset return observations are grouped into one ordered series per
asset. Statistics are only meaningful when every series covers the same
window, so aggregation ends with an integrity check on first date, last date
and observation count.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Sequence, Tuple
import logging

import numpy as np
import pandas as pd

from .errors import AlignmentError
from .request import AssetAllocation, TimeUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReturnObservation:
    """One stored log-return of one asset."""
    asset_id: int
    timestamp: datetime
    log_return: float


@dataclass
class SeriesReturns:
    """Ordered return history of one requested asset.

    Attributes:
        asset_id: Asset identifier
        ticker: Display symbol
        weight: Portfolio weight from the request
        returns: Log returns in storage order
        dates: Timestamps matching ``returns`` one to one
        annualization_factor: History periods per year
    """
    asset_id: int
    ticker: str
    weight: float
    returns: List[float] = field(default_factory=list)
    dates: List[datetime] = field(default_factory=list)
    annualization_factor: int = TimeUnit.WEEK.periods_per_year

    def __post_init__(self):
        if len(self.returns) != len(self.dates):
            raise ValueError(
                f"asset {self.asset_id} has {len(self.returns)} returns "
                f"but {len(self.dates)} dates"
            )

    def time_range(self) -> Tuple[datetime, datetime, int]:
        """Return (first date, last date, observation count)."""
        if not self.dates:
            raise AlignmentError(f"asset {self.asset_id} has no observations")
        return min(self.dates), max(self.dates), len(self.dates)


def aggregate_series_returns(observations: Iterable[ReturnObservation],
                             allocations: Sequence[AssetAllocation],
                             history_unit: TimeUnit = TimeUnit.WEEK) -> List[SeriesReturns]:
    """Group observations into one aligned series per requested asset.

    Args:
        observations: Flat rows for the requested assets, in storage order
        allocations: Requested allocations supplying ticker and weight
        history_unit: Sampling frequency of the observations

    Returns:
        One SeriesReturns per allocation, ordered by asset id ascending

    Raises:
        AlignmentError: If a requested asset has no history or the series
            are not aligned
    """
    lookup: Dict[int, AssetAllocation] = {a.id: a for a in allocations}
    frame = pd.DataFrame(
        [(o.asset_id, o.timestamp, o.log_return) for o in observations
         if o.asset_id in lookup],
        columns=["asset_id", "timestamp", "log_return"],
    )

    missing = sorted(set(lookup) - set(frame["asset_id"].unique()))
    if missing:
        raise AlignmentError(f"no historical returns for asset ids {missing}")

    series = []
    # groupby keeps row order inside each group and sorts the keys
    for asset_id, group in frame.groupby("asset_id", sort=True):
        allocation = lookup[int(asset_id)]
        series.append(SeriesReturns(
            asset_id=allocation.id,
            ticker=allocation.ticker,
            weight=allocation.weight,
            returns=group["log_return"].astype(float).tolist(),
            dates=group["timestamp"].tolist(),
            annualization_factor=history_unit.periods_per_year,
        ))

    logger.debug("aggregated %d observations into %d series", len(frame), len(series))
    verify_series_integrity(series)
    return series


def verify_series_integrity(series: Sequence[SeriesReturns]) -> None:
    """Require every series to share first date, last date and length.

    Raises:
        AlignmentError: Naming the first quantity that differs
    """
    if not series:
        raise AlignmentError("no series to verify")

    summary = pd.DataFrame(
        [s.time_range() for s in series],
        index=[s.asset_id for s in series],
        columns=["first", "last", "length"],
    )
    for column, label in (("first", "first dates"),
                          ("last", "last dates"),
                          ("length", "lengths")):
        if summary[column].nunique() > 1:
            detail = summary[column].to_dict()
            raise AlignmentError(f"series {label} do not align: {detail}")


def log_returns_from_prices(prices: pd.DataFrame) -> pd.DataFrame:
    """Convert a price frame to log returns.

    Args:
        prices: Rows are timestamps in ascending order, columns are assets

    Returns:
        Frame of ln(p_t / p_{t-1}) without the first (undefined) row
    """
    return np.log(prices / prices.shift(1)).iloc[1:]
