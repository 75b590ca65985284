# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation orchestrator.

This module provides the MonteCarloSimulator class which turns a validated
SimulationRequest into one simulated portfolio path per iteration, running
batches of paths on a fixed pool of worker threads.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging
import math
import queue
import threading
import time

import numpy as np

from .config import MonteCarloConfig
from .errors import SimulationCancelled, SimulationError
from .repository import ReturnRepository
from .request import SimulationRequest, TimeUnit
from .results import MonteCarloResults, SimulationResult
from .return_generator import WorkerResource
from .series import SeriesReturns, aggregate_series_returns
from .statistics import StatisticalResources, dot_product, get_statistical_resources

logger = logging.getLogger(__name__)

_CLOSED = None  # queue sentinel, one per worker


@dataclass(frozen=True)
class SimulationJob:
    """Half-open range [start, end) of path indices processed as one batch."""
    index: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


def plan_jobs(iterations: int, batch_size: int) -> List[SimulationJob]:
    """Split ``iterations`` paths into ceil(iterations / batch_size) jobs."""
    n_jobs = math.ceil(iterations / batch_size)
    return [SimulationJob(i, i * batch_size, min((i + 1) * batch_size, iterations))
            for i in range(n_jobs)]


def resolve_worker_count(workers: int, job_count: int) -> int:
    """Never start more threads than there are jobs."""
    return max(0, min(workers, job_count))


def annualize_return(growth, duration: int, unit: TimeUnit):
    """Annualized return of a total growth factor earned over ``duration`` periods.

    ``years = duration / unit.periods_per_year`` and the result is
    ``growth ** (1 / years) - 1``. Works on scalars and arrays.
    """
    return np.power(growth, unit.periods_per_year / duration) - 1.0


class _RunState:
    """First failure of a run, shared by its workers."""

    def __init__(self):
        self._lock = threading.Lock()
        self.error: Optional[BaseException] = None
        self.abort = threading.Event()

    def fail(self, error: BaseException) -> None:
        with self._lock:
            if self.error is None:
                self.error = error
        self.abort.set()


class MonteCarloSimulator:
    """Runs correlated Monte Carlo simulations of a portfolio.

    The workflow:
    1. Validate the request
    2. Read aligned return history for the requested assets
    3. Build the shared statistics (once per run)
    4. Split the paths into jobs and run them on the worker pool
    5. Collect one SimulationResult per path, in path order

    Example:
        >>> simulator = MonteCarloSimulator(repository, MonteCarloConfig(workers=4))
        >>> results = simulator.run(request)
        >>> print(results.get_statistics()['p50'])
    """

    def __init__(self,
                 repository: ReturnRepository,
                 config: Optional[MonteCarloConfig] = None):
        """Initialize the simulator.

        Args:
            repository: Source of historical log returns
            config: Engine configuration. If None, uses defaults.
        """
        self.repository = repository
        self.config = config or MonteCarloConfig()

    def run(self, request: SimulationRequest,
            cancel_event: Optional[threading.Event] = None) -> MonteCarloResults:
        """Run a full Monte Carlo simulation.

        Args:
            request: Simulation parameters
            cancel_event: Optional event checked before every job

        Returns:
            MonteCarloResults with exactly ``request.iterations`` paths

        Raises:
            ValidationError: If the request is malformed
            AlignmentError: If the history of the assets does not line up
            FactorizationError: If the history yields a degenerate covariance
            DimensionError: If weights and sampled returns disagree in size
            SimulationCancelled: If ``cancel_event`` was set mid-run
        """
        shared, weights, _ = self.prepare(request)
        results = self.simulate(request, shared, weights, cancel_event)
        return MonteCarloResults(results, initial_value=self.config.initial_value,
                                 unit_of_time=request.unit_of_time)

    def prepare(self, request: SimulationRequest
                ) -> Tuple[StatisticalResources, np.ndarray, List[SeriesReturns]]:
        """Validate the request and build the run's shared statistics.

        Returns:
            Tuple of (statistics, weight vector, aligned series). Weights
            follow the asset order of the statistics.
        """
        request.validate()

        observations = self.repository.get_time_series_returns(
            request.asset_ids, request.max_lookback
        )
        series = aggregate_series_returns(observations, request.allocations, request.history_unit)

        shared = get_statistical_resources(
            [s.returns for s in series],
            distribution=request.distribution,
            degrees_of_freedom=request.degrees_of_freedom,
            period_scale=request.period_scale,
        )
        weights = np.array([s.weight for s in series], dtype=float)
        weights.setflags(write=False)
        return shared, weights, series

    def simulate(self,
                 request: SimulationRequest,
                 shared: StatisticalResources,
                 weights: np.ndarray,
                 cancel_event: Optional[threading.Event] = None) -> List[SimulationResult]:
        """Simulate every path of ``request`` on the worker pool.

        Args:
            request: Validated simulation parameters
            shared: Statistics shared read-only by all workers
            weights: Allocation weights in the asset order of ``shared``
            cancel_event: Optional event checked before every job

        Returns:
            One SimulationResult per path, indexed by path number
        """
        jobs = plan_jobs(request.iterations, self.config.batch_size)
        worker_count = resolve_worker_count(self.config.workers, len(jobs))
        seed = request.seed if request.seed is not None else int(np.random.SeedSequence().entropy)

        logger.info("Starting monte carlo simulation:")
        logger.info("\t Simulation duration: %d %s",
                    request.simulation_duration, request.unit_of_time.label)
        logger.info("\t Simulation paths: %d", request.iterations)
        logger.info("\t Simulation batch size: %d", self.config.batch_size)
        logger.info("\t Workers: %d", worker_count)
        logger.info("\t Distribution: %s", shared.distribution.value)
        logger.debug("\t Seed: %d", seed)
        started = time.perf_counter()

        results: List[Optional[SimulationResult]] = [None] * request.iterations
        job_queue: "queue.Queue[Optional[SimulationJob]]" = queue.Queue(maxsize=len(jobs) + worker_count)
        state = _RunState()

        threads = []
        for i in range(worker_count):
            worker = WorkerResource(shared, seed, stream=i)
            thread = threading.Thread(
                target=self._work,
                args=(worker, job_queue, request, weights, results, state, cancel_event),
                name=f"mc-worker-{i}",
                daemon=True,
            )
            threads.append(thread)
            thread.start()

        for job in jobs:
            job_queue.put(job)
        for _ in threads:
            job_queue.put(_CLOSED)

        for thread in threads:
            thread.join()

        if state.error is not None:
            raise state.error

        missing = sum(1 for r in results if r is None)
        if missing:
            if cancel_event is not None and cancel_event.is_set():
                raise SimulationCancelled(
                    f"simulation cancelled with {missing} of {request.iterations} paths pending"
                )
            raise SimulationError(f"{missing} of {request.iterations} paths were not simulated")

        logger.info("Monte carlo simulation complete in %.2fs", time.perf_counter() - started)
        return results

    def _work(self, worker: WorkerResource, job_queue: queue.Queue, request: SimulationRequest,
              weights: np.ndarray, results: list, state: _RunState,
              cancel_event: Optional[threading.Event]) -> None:
        while True:
            job = job_queue.get()
            if job is _CLOSED:
                return
            if state.abort.is_set() or (cancel_event is not None and cancel_event.is_set()):
                continue
            try:
                self._simulate_job(worker, job, request, weights, results)
            except Exception as e:
                logger.error("Worker %s failed on job %d: %s",
                             threading.current_thread().name, job.index, e)
                state.fail(e)

    def _simulate_job(self, worker: WorkerResource, job: SimulationJob,
                      request: SimulationRequest, weights: np.ndarray, results: list) -> None:
        if self.config.stream_per_batch:
            worker.reset_stream(job.index)

        initial = self.config.initial_value
        duration = request.simulation_duration

        paths = np.empty((len(job), duration + 1))
        paths[:, 0] = initial
        for period in range(duration):
            # one (paths, assets) draw per period, periods in order
            draws = worker.correlated_returns(len(job))
            paths[:, period + 1] = paths[:, period] * np.exp(dot_product(weights, draws))
        paths.setflags(write=False)

        growth = paths[:, -1] / initial
        annualized = annualize_return(growth, duration, request.unit_of_time)

        for offset in range(len(job)):
            results[job.start + offset] = SimulationResult(
                final_value=float(paths[offset, -1]),
                total_return=float(growth[offset] - 1.0),
                annualized_return=float(annualized[offset]),
                path_values=paths[offset],
            )


def run_simulation(request: SimulationRequest,
                   repository: ReturnRepository,
                   config: Optional[MonteCarloConfig] = None) -> MonteCarloResults:
    """Single synchronous entry point for the API layer."""
    return MonteCarloSimulator(repository, config).run(request)
