# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Statistical resources shared by every simulation worker.

This module turns aligned historical return series into the immutable
summary the samplers need: means, standard deviations, the covariance
matrix and its Cholesky factor, plus the correlation matrix and its factor
when returns follow a Student's-t copula. It is computed once per run and
never per path.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging

import numpy as np

from .errors import DimensionError, FactorizationError
from .request import DistributionType

logger = logging.getLogger(__name__)


def _freeze(array: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if array is not None:
        array.setflags(write=False)
    return array


def _as_numeric(values, name: str) -> np.ndarray:
    """Coerce integer or floating point array-likes to a float array."""
    array = np.asarray(values)
    if not (np.issubdtype(array.dtype, np.integer) or np.issubdtype(array.dtype, np.floating)):
        raise TypeError(f"{name} must hold integer or floating point values, got {array.dtype}")
    return array.astype(float)


@dataclass(frozen=True)
class StatisticalResources:
    """Read-only statistics of one simulation run.

    Attributes:
        covariance: NxN sample covariance of per-period log returns
        cholesky_cov: Lower triangular L with L @ L.T == covariance
        mean_returns: Mean per-period log return of each asset
        std_dev: Sample standard deviation of each asset
        distribution: Distribution the workers sample from
        degrees_of_freedom: Student's-t degrees of freedom, None for normal
        correlation: NxN correlation matrix (Student's-t only)
        cholesky_corr: Lower triangular factor of ``correlation`` (Student's-t only)
    """
    covariance: np.ndarray
    cholesky_cov: np.ndarray
    mean_returns: np.ndarray
    std_dev: np.ndarray
    distribution: DistributionType = DistributionType.NORMAL
    degrees_of_freedom: Optional[float] = None
    correlation: Optional[np.ndarray] = None
    cholesky_corr: Optional[np.ndarray] = None

    def __post_init__(self):
        for array in (self.covariance, self.cholesky_cov, self.mean_returns,
                      self.std_dev, self.correlation, self.cholesky_corr):
            _freeze(array)

    @property
    def n_assets(self) -> int:
        return len(self.mean_returns)


def get_statistical_resources(returns: Sequence[Sequence[float]],
                              distribution: DistributionType = DistributionType.NORMAL,
                              degrees_of_freedom: Optional[float] = None,
                              period_scale: float = 1.0) -> StatisticalResources:
    """Build the shared statistics from aligned return series.

    Args:
        returns: One series per asset, all of equal length, in the asset
            order the simulation uses for its weights
        distribution: Distribution the workers will sample from
        degrees_of_freedom: Required for the Student's-t distribution
        period_scale: Number of history periods in one simulated period.
            Means and covariances scale linearly, deviations with the root.

    Returns:
        StatisticalResources for the run

    Raises:
        DimensionError: If the series are ragged or empty
        FactorizationError: If there are fewer than two observations or a
            matrix is not positive definite
    """
    data = _as_numeric(returns, "returns") if _is_rectangular(returns) else None
    if data is None or data.ndim != 2 or data.shape[0] == 0:
        raise DimensionError("returns must be a non-empty list of equal length series")
    if data.shape[1] < 2:
        raise FactorizationError(
            f"at least two observations per asset are required, got {data.shape[1]}"
        )
    if distribution is DistributionType.STUDENT_T and (degrees_of_freedom is None or degrees_of_freedom <= 0):
        raise ValueError("degrees_of_freedom must be positive for the Student's-t distribution")
    if period_scale <= 0:
        raise ValueError("period_scale must be positive")

    covariance = covariance_matrix(data) * period_scale
    cholesky_cov = cholesky_factor(covariance, name="covariance matrix")

    mean_returns = data.mean(axis=1) * period_scale
    std_dev = data.std(axis=1, ddof=1) * np.sqrt(period_scale)

    correlation = cholesky_corr = None
    if distribution is DistributionType.STUDENT_T:
        correlation = correlation_matrix(covariance, std_dev)
        cholesky_corr = cholesky_factor(correlation, name="correlation matrix")

    logger.debug("built statistics for %d assets over %d observations",
                 data.shape[0], data.shape[1])

    return StatisticalResources(
        covariance=covariance,
        cholesky_cov=cholesky_cov,
        mean_returns=mean_returns,
        std_dev=std_dev,
        distribution=distribution,
        degrees_of_freedom=degrees_of_freedom if distribution is DistributionType.STUDENT_T else None,
        correlation=correlation,
        cholesky_corr=cholesky_corr,
    )


def _is_rectangular(returns) -> bool:
    if isinstance(returns, np.ndarray):
        return True
    if any(np.ndim(series) != 1 for series in returns):
        return False
    lengths = {len(series) for series in returns}
    return len(lengths) <= 1


def covariance_matrix(returns) -> np.ndarray:
    """Sample covariance (ddof=1) between the rows of ``returns``."""
    data = _as_numeric(returns, "returns")
    return np.atleast_2d(np.cov(data, ddof=1))


def correlation_matrix(covariance, sigma) -> np.ndarray:
    """corr[i][j] = cov[i][j] / (sigma[i] * sigma[j])"""
    covariance = _as_numeric(covariance, "covariance")
    sigma = _as_numeric(sigma, "sigma")
    if covariance.shape != (len(sigma), len(sigma)):
        raise DimensionError(
            f"covariance shape {covariance.shape} doesn't match {len(sigma)} deviations"
        )
    return covariance / np.outer(sigma, sigma)


def cholesky_factor(matrix, name: str = "matrix") -> np.ndarray:
    """Lower triangular Cholesky factor of a symmetric positive definite matrix.

    Raises:
        FactorizationError: If the matrix is not positive definite
    """
    matrix = _as_numeric(matrix, name)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DimensionError(f"{name} must be square, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise FactorizationError(f"{name} contains NaN or infinite values")
    try:
        return np.linalg.cholesky(matrix)
    except np.linalg.LinAlgError as e:
        raise FactorizationError(f"{name} is not positive definite") from e


def dot_product(weights, values):
    """Weighted sum over the last axis of ``values``.

    Accepts integer or floating point inputs. ``values`` may carry leading
    axes (paths, periods, ...); the result drops the asset axis.

    Raises:
        DimensionError: If the weight and value lengths differ
    """
    weights = _as_numeric(weights, "weights")
    values = _as_numeric(values, "values")
    if weights.ndim != 1 or values.ndim == 0 or values.shape[-1] != weights.shape[0]:
        raise DimensionError(
            f"vector lengths are not equal: {weights.shape[0] if weights.ndim else 0} weights, "
            f"values of shape {values.shape}"
        )
    return values @ weights
