# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Exceptions raised while preparing or running a simulation."""


class SimulationError(Exception):
    """Base class for every failure of a simulation run."""


class ValidationError(SimulationError, ValueError):
    """The request is structurally unsound (weights, duplicate ids, ...)."""


class AlignmentError(SimulationError, ValueError):
    """Historical series do not share first date, last date and length."""


class FactorizationError(SimulationError, ValueError):
    """A covariance or correlation matrix has no real Cholesky factor."""


class DimensionError(SimulationError, ValueError):
    """Two vectors or matrices that must line up have different sizes."""


class SimulationCancelled(SimulationError):
    """The run was cancelled before all jobs were processed."""
