# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation module for portfolio projections.

This module simulates many independent portfolio paths whose per-period
returns are correlated according to the historical covariance of the
portfolio's assets, sampling from a multivariate normal or a Student's-t
Gaussian copula on a fixed pool of worker threads.
"""

from .config import MonteCarloConfig
from .errors import (
    SimulationError,
    ValidationError,
    AlignmentError,
    FactorizationError,
    DimensionError,
    SimulationCancelled,
)
from .request import (
    AssetAllocation,
    SimulationRequest,
    TimeUnit,
    DistributionType,
    validate_request,
)
from .series import (
    ReturnObservation,
    SeriesReturns,
    aggregate_series_returns,
    verify_series_integrity,
    log_returns_from_prices,
)
from .repository import ReturnRepository, InMemoryReturnRepository
from .statistics import StatisticalResources, get_statistical_resources
from .return_generator import WorkerResource
from .results import SimulationResult, MonteCarloResults
from .simulator import MonteCarloSimulator, SimulationJob, run_simulation

__all__ = [
    'MonteCarloConfig',
    'SimulationError',
    'ValidationError',
    'AlignmentError',
    'FactorizationError',
    'DimensionError',
    'SimulationCancelled',
    'AssetAllocation',
    'SimulationRequest',
    'TimeUnit',
    'DistributionType',
    'validate_request',
    'ReturnObservation',
    'SeriesReturns',
    'aggregate_series_returns',
    'verify_series_integrity',
    'log_returns_from_prices',
    'ReturnRepository',
    'InMemoryReturnRepository',
    'StatisticalResources',
    'get_statistical_resources',
    'WorkerResource',
    'SimulationResult',
    'MonteCarloResults',
    'MonteCarloSimulator',
    'SimulationJob',
    'run_simulation',
]
