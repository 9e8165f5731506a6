# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Exceptions raised by the endowment Monte Carlo kernel.

Configuration problems are reported once, before any trial runs. Numeric
edge cases inside a trial (zero totals, zero-volatility ratios, empty
percentile inputs) are resolved locally and never raised.
"""


class EndowmentModelError(Exception):
    """Base class for all kernel errors."""


class InvalidInput(EndowmentModelError, ValueError):
    """Raised for structurally invalid inputs or options.

    Examples: non-positive trial count or horizon, portfolio weights that
    don't sum to 100, negative grant targets, malformed shock ranges.
    """


class InvalidCovariance(EndowmentModelError, ValueError):
    """Raised when a correlation/covariance matrix can't be used.

    Always raised for non-square, asymmetric or non-finite matrices. Only
    raised for non-positive-semi-definite matrices in strict mode.
    """


class SimulationCancelled(EndowmentModelError):
    """Raised when a cooperative cancellation check stops a run."""

    def __init__(self, completed_trials: int, total_trials: int):
        self.completed_trials = completed_trials
        self.total_trials = total_trials
        super().__init__(
            f"Simulation cancelled after {completed_trials}/{total_trials} trials"
        )
