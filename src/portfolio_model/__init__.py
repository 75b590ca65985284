# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Portfolio Projection Engine

Monte Carlo projections of a multi-asset portfolio driven by the historical
covariance of its assets.

Example usage:
    from portfolio_model import (
        AssetAllocation, InMemoryReturnRepository, SimulationRequest,
        TimeUnit, run_simulation,
    )

    repository = InMemoryReturnRepository.from_prices(weekly_closes)
    request = SimulationRequest(
        allocations=[AssetAllocation(1, 'VTI', 0.6), AssetAllocation(2, 'BND', 0.4)],
        iterations=50_000,
        simulation_duration=52,
        unit_of_time=TimeUnit.WEEK,
        seed=42,
    )
    results = run_simulation(request, repository)
    print(results.get_statistics('annualized_return'))
"""

# Monte Carlo Simulation
from .montecarlo import (
    MonteCarloSimulator,
    MonteCarloConfig,
    MonteCarloResults,
    SimulationResult,
    SimulationRequest,
    AssetAllocation,
    TimeUnit,
    DistributionType,
    InMemoryReturnRepository,
    ReturnRepository,
    StatisticalResources,
    get_statistical_resources,
    WorkerResource,
    run_simulation,
    SimulationError,
    ValidationError,
    AlignmentError,
    FactorizationError,
    DimensionError,
    SimulationCancelled,
)

# Version
from .__meta__ import __version__

__all__ = [
    # Monte Carlo
    'MonteCarloSimulator', 'MonteCarloConfig', 'MonteCarloResults',
    'SimulationResult', 'SimulationRequest', 'AssetAllocation',
    'TimeUnit', 'DistributionType',
    'InMemoryReturnRepository', 'ReturnRepository',
    'StatisticalResources', 'get_statistical_resources', 'WorkerResource',
    'run_simulation',
    # Errors
    'SimulationError', 'ValidationError', 'AlignmentError',
    'FactorizationError', 'DimensionError', 'SimulationCancelled',
    # Version
    '__version__',
]
