# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Cholesky factorization of asset class correlation structures.

The factor L (lower triangular, L @ L^T ~= A) turns independent standard
normals into correlated ones. In lenient mode a matrix that is not positive
semi-definite is clamped to the nearest usable factor instead of failing; in
strict mode the same condition raises InvalidCovariance.
"""

import logging
import math
import numpy as np

from .exceptions import InvalidCovariance
from .market_assumptions import validate_correlation_matrix

logger = logging.getLogger(__name__)

# Negative pivots smaller than this are treated as rounding noise, even in strict mode
PIVOT_TOLERANCE = 1e-10


def cholesky(matrix, strict: bool = False) -> np.ndarray:
    """Factor a symmetric matrix into a lower-triangular L.

    Args:
        matrix: NxN symmetric correlation or covariance matrix
        strict: If True, raise instead of clamping a negative pivot

    Returns:
        NxN lower triangular numpy array

    Raises:
        InvalidCovariance: If the matrix is not square/symmetric/finite, or
            (strict mode only) not positive semi-definite
    """
    a = validate_correlation_matrix(matrix)
    n = a.shape[0]
    factor = np.zeros((n, n))
    clamped = []

    for i in range(n):
        for j in range(i + 1):
            total = 0.0
            for k in range(j):
                total += factor[i, k] * factor[j, k]

            if i == j:
                pivot = a[i, i] - total
                if pivot < 0:
                    if strict and pivot < -PIVOT_TOLERANCE:
                        raise InvalidCovariance(
                            f"Matrix is not positive semi-definite "
                            f"(pivot {pivot:.3g} at row {i})"
                        )
                    if pivot < -PIVOT_TOLERANCE:
                        clamped.append(i)
                factor[i, j] = math.sqrt(max(pivot, 0.0))
            elif factor[j, j] == 0:
                # Dependent column contributes nothing
                factor[i, j] = 0.0
            else:
                factor[i, j] = (a[i, j] - total) / factor[j, j]

    if clamped:
        logger.warning(
            "Correlation matrix is not positive semi-definite; clamped pivots at rows %s. "
            "Simulated correlations will differ from the requested structure.",
            clamped,
        )

    return factor


def covariance_from_correlation(correlation, sds) -> np.ndarray:
    """Compute covariance matrix from correlation and volatilities.

    Cov = diag(sigma) @ Corr @ diag(sigma)
    """
    corr = validate_correlation_matrix(correlation)
    vol_diag = np.diag(np.asarray(sds, dtype=float))
    return vol_diag @ corr @ vol_diag
