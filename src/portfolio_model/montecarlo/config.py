# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Configuration for Monte Carlo simulations."""

from dataclasses import dataclass

# ===== WORKER POOL =====
WORKERS = 8  # Default number of simulation worker threads
BATCH_SIZE = 10_000  # Paths per simulation job

# ===== PORTFOLIO =====
INITIAL_PORTFOLIO_VALUE = 100.0  # Baseline value every path starts from
WEIGHT_TOLERANCE = 1e-6  # Allowed deviation of summed weights from 1.0


@dataclass
class MonteCarloConfig:
    """Configuration for the simulation engine.

    Attributes:
        workers: Upper bound on worker threads. Default 8.
        batch_size: Number of paths per job. Default 10,000.
        initial_value: Starting value of every simulated path. Default 100.
        stream_per_batch: If True, each job draws from a random stream keyed
            by its job index so results do not depend on the pool size.
            If False, each worker keeps one stream keyed by its worker index.
    """
    workers: int = WORKERS
    batch_size: int = BATCH_SIZE
    initial_value: float = INITIAL_PORTFOLIO_VALUE
    stream_per_batch: bool = True

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.initial_value <= 0:
            raise ValueError("initial_value must be positive")
