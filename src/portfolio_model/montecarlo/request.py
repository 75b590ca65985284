# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Simulation request types and request validation.

A SimulationRequest carries the client's allocations together with the
sampling parameters of one Monte Carlo run. Validation is pure and happens
before any data is fetched or any statistics are computed.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import List, Optional
import math

from .config import WEIGHT_TOLERANCE
from .errors import ValidationError


class TimeUnit(Enum):
    """Length of one simulated period, valued by periods per year."""
    DAY = 252
    WEEK = 52
    MONTH = 12
    QUARTER = 4
    YEAR = 1

    @property
    def periods_per_year(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower() + "s"


class DistributionType(Enum):
    """Marginal distribution of simulated per-period returns."""
    NORMAL = "normal"
    STUDENT_T = "student_t"


@dataclass(frozen=True)
class AssetAllocation:
    """One asset of the requested portfolio.

    Attributes:
        id: Asset identifier used by the return repository
        ticker: Display symbol of the asset
        weight: Fraction of the portfolio held in the asset
    """
    id: int
    ticker: str
    weight: float


@dataclass
class SimulationRequest:
    """Parameters of a single Monte Carlo run.

    Attributes:
        allocations: Portfolio constituents; weights must sum to 1.0
        iterations: Number of independent paths to simulate
        simulation_duration: Number of periods per path
        unit_of_time: Length of one simulated period
        seed: Global seed. None draws fresh entropy for the run.
        distribution: Normal or Student's-t marginals
        degrees_of_freedom: Required for the Student's-t distribution
        max_lookback: How far back historical returns are read. None reads
            the full history.
        history_unit: Sampling frequency of the stored returns
    """
    allocations: List[AssetAllocation]
    iterations: int
    simulation_duration: int
    unit_of_time: TimeUnit = TimeUnit.WEEK
    seed: Optional[int] = None
    distribution: DistributionType = DistributionType.NORMAL
    degrees_of_freedom: Optional[float] = None
    max_lookback: Optional[timedelta] = None
    history_unit: TimeUnit = TimeUnit.WEEK

    @property
    def asset_ids(self) -> List[int]:
        return [a.id for a in self.allocations]

    @property
    def period_scale(self) -> float:
        """Ratio turning per-history-period moments into per-simulated-period ones."""
        return self.history_unit.periods_per_year / self.unit_of_time.periods_per_year

    def validate(self) -> None:
        validate_request(self)


def validate_request(request: SimulationRequest) -> None:
    """Check a request for structural soundness.

    Args:
        request: Request to check

    Raises:
        ValidationError: On the first failed check. Weights are checked
            first, then asset id uniqueness, then the sampling parameters.
    """
    non_finite = [a.id for a in request.allocations if not math.isfinite(a.weight)]
    if non_finite:
        raise ValidationError(f"weights must be finite, non-finite for asset ids {non_finite}")

    weight_sum = math.fsum(a.weight for a in request.allocations)
    if not abs(weight_sum - 1.0) <= WEIGHT_TOLERANCE:
        raise ValidationError(f"weights must sum to 1.0, got {weight_sum:.6f}")

    ids = request.asset_ids
    if len(set(ids)) != len(ids):
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        raise ValidationError(f"asset ids must be unique, duplicated: {duplicates}")

    if request.iterations < 1:
        raise ValidationError("iterations must be at least 1")
    if request.simulation_duration < 1:
        raise ValidationError("simulation_duration must be at least 1")
    if request.seed is not None and request.seed < 0:
        raise ValidationError("seed must be non-negative")
    if request.distribution is DistributionType.STUDENT_T:
        dof = request.degrees_of_freedom
        if dof is None or dof <= 0:
            raise ValidationError(
                "degrees_of_freedom must be positive for the Student's-t distribution"
            )
