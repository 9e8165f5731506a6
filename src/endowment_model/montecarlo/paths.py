# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Representative paths and spending cut distributions.

Helpers for picking a single trial to chart out of an ensemble, and for
describing how sharply spending falls in the worst year of each trial.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import math
import numpy as np


def pointwise_median(matrix) -> np.ndarray:
    """Per-year median of a [trial][year] matrix (upper middle value for even counts).

    The result is generally not a path any single trial followed.
    """
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    if matrix.size == 0:
        return np.array([])
    ordered = np.sort(matrix, axis=0)
    return ordered[len(ordered) // 2].copy()


def nearest_to_pointwise_median(matrix) -> Tuple[int, np.ndarray]:
    """Trial with the smallest mean squared distance to the pointwise median.

    Returns:
        (index, path); (-1, empty array) for an empty matrix
    """
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    if matrix.size == 0:
        return -1, np.array([])
    median = pointwise_median(matrix)
    distances = np.mean((matrix - median) ** 2, axis=1)
    index = int(np.argmin(distances))
    return index, matrix[index].copy()


def medoid_by_final_value(matrix) -> Tuple[int, np.ndarray]:
    """Trial whose final value minimizes the sum of squared differences to all others."""
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    if matrix.size == 0:
        return -1, np.array([])
    finals = matrix[:, -1]
    scores = ((finals[:, None] - finals[None, :]) ** 2).sum(axis=1)
    index = int(np.argmin(scores))
    return index, matrix[index].copy()


def worst_spending_cuts(spending, values=None) -> List[float]:
    """Worst year-over-year change of every trial, in percent (negative is a cut).

    Uses a trial's spending series, or its value series when spending is
    missing or of a different length. Years with a zero or non-finite starting
    amount are skipped; trials without a usable year are omitted.
    """
    spending = _rows(spending)
    values = _rows(values)
    trials = max(len(spending), len(values))

    cuts = []
    for i in range(trials):
        if i < len(spending) and (not len(values) or spending.shape[1] == values.shape[1]):
            series = spending[i]
        elif i < len(values):
            series = values[i]
        else:
            continue
        worst: Optional[float] = None
        for a, b in zip(series[:-1], series[1:]):
            if not math.isfinite(a) or not math.isfinite(b) or a == 0:
                continue
            change = (b - a) / abs(a)
            if worst is None or change < worst:
                worst = change
        if worst is not None:
            # Halves round up
            cuts.append(math.floor(worst * 10000.0 + 0.5) / 100.0)
    return cuts


@dataclass(frozen=True)
class WorstCutSummary:
    count: int
    p10: Optional[float] = None
    p25: Optional[float] = None
    p50: Optional[float] = None
    p75: Optional[float] = None
    p90: Optional[float] = None


def summarize_worst_cuts(cuts) -> WorstCutSummary:
    """Distribution of worst cuts read at sorted[floor(n * q)]."""
    ordered = sorted(float(c) for c in cuts)
    n = len(ordered)
    if n == 0:
        return WorstCutSummary(count=0)
    at = {q: ordered[min(int(math.floor(n * q)), n - 1)] for q in (0.10, 0.25, 0.50, 0.75, 0.90)}
    return WorstCutSummary(count=n, p10=at[0.10], p25=at[0.25], p50=at[0.50],
                           p75=at[0.75], p90=at[0.90])


def _rows(matrix) -> np.ndarray:
    if matrix is None:
        return np.empty((0, 0))
    matrix = np.asarray(matrix, dtype=float)
    if matrix.size == 0:
        return np.empty((0, 0))
    return np.atleast_2d(matrix)
