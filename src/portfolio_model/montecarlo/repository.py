# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Sources of historical return observations.

The simulator only depends on the ReturnRepository protocol. Production
deployments back it with a database; InMemoryReturnRepository keeps the
history in a pandas frame for tests, notebooks and batch jobs.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

import pandas as pd

from .series import ReturnObservation, log_returns_from_prices

_COLUMNS = ["asset_id", "timestamp", "log_return"]


@runtime_checkable
class ReturnRepository(Protocol):
    """Protocol for anything that can supply stored log returns."""

    def get_time_series_returns(self,
                                asset_ids: Sequence[int],
                                max_lookback: Optional[timedelta]) -> List[ReturnObservation]:
        """Return observations for the given assets inside the lookback window."""
        ...


class InMemoryReturnRepository:
    """Return history held in memory.

    Example:
        >>> repo = InMemoryReturnRepository.from_prices(weekly_closes)
        >>> rows = repo.get_time_series_returns([1, 2], timedelta(weeks=156))
    """

    def __init__(self, frame: Optional[pd.DataFrame] = None, as_of: Optional[datetime] = None):
        """Initialize the repository.

        Args:
            frame: Long frame with asset_id, timestamp and log_return columns
            as_of: End of every lookback window. Defaults to the latest
                stored timestamp.
        """
        if frame is None:
            frame = pd.DataFrame(columns=_COLUMNS)
        missing = [c for c in _COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"Return frame is missing columns: {missing}")
        self._frame = frame[_COLUMNS].sort_values(["timestamp", "asset_id"], kind="stable")
        self.as_of = as_of

    @classmethod
    def from_observations(cls, observations: Iterable[ReturnObservation],
                          as_of: Optional[datetime] = None) -> 'InMemoryReturnRepository':
        frame = pd.DataFrame(
            [(o.asset_id, o.timestamp, o.log_return) for o in observations],
            columns=_COLUMNS,
        )
        return cls(frame, as_of)

    @classmethod
    def from_prices(cls, prices: pd.DataFrame,
                    as_of: Optional[datetime] = None) -> 'InMemoryReturnRepository':
        """Build the repository from a wide price frame.

        Args:
            prices: Rows are timestamps in ascending order, columns are
                asset ids, values are (adjusted) closing prices
            as_of: See ``__init__``
        """
        returns = log_returns_from_prices(prices)
        frame = (returns.rename_axis("timestamp")
                 .reset_index()
                 .melt(id_vars="timestamp", var_name="asset_id", value_name="log_return")
                 .dropna(subset=["log_return"]))
        frame["asset_id"] = frame["asset_id"].astype(int)
        return cls(frame, as_of)

    def get_time_series_returns(self,
                                asset_ids: Sequence[int],
                                max_lookback: Optional[timedelta]) -> List[ReturnObservation]:
        frame = self._frame[self._frame["asset_id"].isin(list(asset_ids))]
        if max_lookback is not None and not frame.empty:
            end = self.as_of if self.as_of is not None else self._frame["timestamp"].max()
            frame = frame[(frame["timestamp"] >= end - max_lookback) & (frame["timestamp"] <= end)]
        return [ReturnObservation(int(a), t, float(r))
                for a, t, r in frame.itertuples(index=False, name=None)]

    def __len__(self) -> int:
        return len(self._frame)
