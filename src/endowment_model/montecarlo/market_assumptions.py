# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Market assumptions for endowment asset classes.

This module contains the immutable asset class catalog and the MarketAssumptions
class which holds return, volatility, correlation and CPI assumptions. The order
of the catalog fixes the dimension ordering of the correlation matrix, the
portfolio weight vector and every return vector produced by the kernel.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple
import numpy as np

from .exceptions import InvalidCovariance, InvalidInput


@dataclass(frozen=True)
class AssetClass:
    """Return and volatility assumptions for a single asset class.

    Attributes:
        key: Asset class identifier (e.g., "publicEquity")
        label: Human readable name
        mean: Annual expected return as decimal (e.g., 0.08 for 8%)
        sd: Annual standard deviation as decimal (e.g., 0.15 for 15%)
    """
    key: str
    label: str
    mean: float
    sd: float

    def __post_init__(self):
        if not self.key:
            raise InvalidInput("Asset class key cannot be empty")
        if self.sd < 0:
            raise InvalidInput(f"Volatility cannot be negative: {self.sd}")


DEFAULT_ASSET_CLASSES: Tuple[AssetClass, ...] = (
    AssetClass("publicEquity", "Public Equity", 0.08, 0.15),
    AssetClass("privateEquity", "Private Equity", 0.12, 0.22),
    AssetClass("publicFixedIncome", "Public Fixed Income", 0.03, 0.04),
    AssetClass("privateCredit", "Private Credit", 0.07, 0.10),
    AssetClass("realAssets", "Real Assets", 0.05, 0.09),
    AssetClass("diversifying", "Diversifying Strategies", 0.05, 0.08),
    AssetClass("cashShortTerm", "Cash/Short-Term", 0.015, 0.005),
)

# Order: publicEquity, privateEquity, publicFixedIncome, privateCredit,
#        realAssets, diversifying, cashShortTerm
DEFAULT_CORRELATION_MATRIX: Tuple[Tuple[float, ...], ...] = (
    (1.00, 0.75, 0.20, 0.25, 0.30, 0.25, 0.05),  # Public Equity
    (0.75, 1.00, 0.15, 0.40, 0.35, 0.20, 0.05),  # Private Equity
    (0.20, 0.15, 1.00, 0.30, 0.10, 0.10, 0.05),  # Public Fixed Income
    (0.25, 0.40, 0.30, 1.00, 0.15, 0.10, 0.05),  # Private Credit
    (0.30, 0.35, 0.10, 0.15, 1.00, 0.20, 0.05),  # Real Assets
    (0.25, 0.20, 0.10, 0.10, 0.20, 1.00, 0.05),  # Diversifying
    (0.05, 0.05, 0.05, 0.05, 0.05, 0.05, 1.00),  # Cash/Short-Term
)

CPI_MEAN = 0.025
CPI_STD = 0.005
CPI_FLOOR = -0.02


class MarketAssumptions:
    """Asset class catalog, correlation structure and CPI baseline.

    Instances are treated as immutable: the catalog is stored as a tuple and
    the correlation matrix is copied and marked read-only.

    Example:
        >>> market = MarketAssumptions.create_default()
        >>> market.keys
        ('publicEquity', 'privateEquity', ...)
        >>> market.get_returns_vector()
        array([0.08 , 0.12 , ...])
    """

    def __init__(self,
                 asset_classes: Sequence[AssetClass],
                 correlation_matrix,
                 cpi_mean: float = CPI_MEAN,
                 cpi_std: float = CPI_STD,
                 cpi_floor: float = CPI_FLOOR):
        """Initialize market assumptions.

        Args:
            asset_classes: Ordered asset class catalog
            correlation_matrix: NxN correlation matrix in catalog order
            cpi_mean: Baseline annual CPI mean
            cpi_std: Annual CPI standard deviation
            cpi_floor: Lowest CPI value a yearly draw may take

        Raises:
            InvalidInput: If the catalog is empty or has duplicate keys
            InvalidCovariance: If the matrix doesn't match the catalog
        """
        self.asset_classes: Tuple[AssetClass, ...] = tuple(asset_classes)
        self.correlation_matrix = np.array(correlation_matrix, dtype=float)
        self.correlation_matrix.setflags(write=False)
        self.cpi_mean = float(cpi_mean)
        self.cpi_std = float(cpi_std)
        self.cpi_floor = float(cpi_floor)
        self._validate()
        self._index: Dict[str, int] = {
            asset.key: i for i, asset in enumerate(self.asset_classes)
        }

    def _validate(self):
        """Validate that all inputs are consistent."""
        n = len(self.asset_classes)
        if n == 0:
            raise InvalidInput("Market assumptions need at least one asset class")

        keys = [asset.key for asset in self.asset_classes]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise InvalidInput(f"Duplicate asset class keys: {duplicates}")

        validate_correlation_matrix(self.correlation_matrix, n)

        if self.cpi_std < 0:
            raise InvalidInput(f"CPI volatility cannot be negative: {self.cpi_std}")

    @property
    def keys(self) -> Tuple[str, ...]:
        """Asset class keys in catalog order."""
        return tuple(asset.key for asset in self.asset_classes)

    def __len__(self) -> int:
        return len(self.asset_classes)

    def __contains__(self, key: str) -> bool:
        return key in self._index

    def index_of(self, key: str) -> int:
        """Get the dimension index of an asset class.

        Raises:
            InvalidInput: If the key is not in the catalog
        """
        try:
            return self._index[key]
        except KeyError:
            raise InvalidInput(
                f"Unknown asset class '{key}'. Available: {list(self.keys)}"
            ) from None

    def get_returns_vector(self) -> np.ndarray:
        """Get expected returns as numpy array in catalog order."""
        return np.array([asset.mean for asset in self.asset_classes])

    def get_volatilities_vector(self) -> np.ndarray:
        """Get volatilities as numpy array in catalog order."""
        return np.array([asset.sd for asset in self.asset_classes])

    def weights_vector(self, weights_pct: Mapping[str, float]) -> np.ndarray:
        """Convert a percent weight mapping to a decimal vector in catalog order.

        Asset classes missing from the mapping get a zero weight. Unknown keys
        raise InvalidInput.
        """
        vector = np.zeros(len(self.asset_classes))
        for key, pct in weights_pct.items():
            vector[self.index_of(key)] = float(pct) / 100.0
        return vector

    def with_correlation(self, correlation_matrix) -> 'MarketAssumptions':
        """Return a copy of these assumptions using another correlation matrix."""
        return MarketAssumptions(self.asset_classes, correlation_matrix,
                                 self.cpi_mean, self.cpi_std, self.cpi_floor)

    @classmethod
    def create_default(cls) -> 'MarketAssumptions':
        """Create default market assumptions for the seven endowment asset classes."""
        return cls(DEFAULT_ASSET_CLASSES, DEFAULT_CORRELATION_MATRIX)

    @classmethod
    def single_asset(cls, key: str, mean: float, sd: float,
                     label: Optional[str] = None) -> 'MarketAssumptions':
        """Create assumptions with a single asset class and unit correlation."""
        return cls((AssetClass(key, label or key, mean, sd),), [[1.0]])

    def __repr__(self) -> str:
        return f"MarketAssumptions(asset_classes={list(self.keys)})"


def validate_correlation_matrix(matrix, n: Optional[int] = None) -> np.ndarray:
    """Check that a matrix is square, finite and symmetric.

    Args:
        matrix: Candidate correlation or covariance matrix
        n: Expected dimension, if known

    Returns:
        The matrix as a float numpy array

    Raises:
        InvalidCovariance: If any structural check fails
    """
    try:
        arr = np.array(matrix, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidCovariance(f"Correlation matrix is not numeric: {e}") from e

    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise InvalidCovariance(f"Correlation matrix must be square, got shape {arr.shape}")

    if n is not None and arr.shape != (n, n):
        raise InvalidCovariance(
            f"Correlation matrix shape {arr.shape} doesn't match {n} asset classes"
        )

    if not np.all(np.isfinite(arr)):
        raise InvalidCovariance("Correlation matrix contains non-finite values")

    if not np.allclose(arr, arr.T):
        raise InvalidCovariance("Correlation matrix must be symmetric")

    return arr
