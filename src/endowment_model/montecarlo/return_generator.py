# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Correlated return generator for endowment asset classes.

This module generates one vector of correlated annual asset class returns per
simulated year using the Cholesky factor of the correlation matrix, applies
stress-test equity shocks, and draws the year's CPI rate.
"""

from typing import Optional
import numpy as np

from .config import EngineOptions
from .covariance import cholesky
from .exceptions import InvalidInput
from .market_assumptions import MarketAssumptions
from .variates import VariateGenerator


class AssetReturnModel:
    """Generates correlated yearly returns and CPI draws.

    Transforms correlated standard normals to asset returns using each asset
    class's mean and volatility (catalog defaults, replaced by any overrides):
    R_i = mu_i + sigma_i * z_i.

    Example:
        >>> model = AssetReturnModel(MarketAssumptions.create_default(), EngineOptions(seed=1))
        >>> gen = VariateGenerator(seed=1)
        >>> cpi = model.draw_cpi(gen, year=1)
        >>> returns = model.draw_returns(gen, year=1)
    """

    def __init__(self,
                 market: MarketAssumptions,
                 options: Optional[EngineOptions] = None):
        """Initialize the return model.

        Args:
            market: Asset class catalog, correlation matrix and CPI baseline
            options: Engine options supplying overrides, stress tests and an
                optional replacement correlation matrix

        Raises:
            InvalidInput: If an override or shock names an unknown asset class
            InvalidCovariance: If the correlation matrix is unusable
        """
        self.market = market
        self.options = options or EngineOptions()

        if self.options.correlation_matrix is not None:
            self.market = market.with_correlation(self.options.correlation_matrix)

        self.means = self.market.get_returns_vector()
        self.sds = self.market.get_volatilities_vector()
        for key, override in self.options.asset_overrides.items():
            i = self.market.index_of(key)
            if override.mean is not None:
                self.means[i] = override.mean
            if override.sd is not None:
                self.sds[i] = override.sd

        for shock in self.options.stress.equity_shocks:
            if shock.asset_key is not None and shock.asset_key not in self.market:
                raise InvalidInput(f"Equity shock targets unknown asset class '{shock.asset_key}'")

        # L such that L @ L^T = correlation_matrix
        self.factor = cholesky(self.market.correlation_matrix,
                               strict=self.options.strict_covariance)

    @property
    def num_assets(self) -> int:
        return len(self.market)

    def draw_cpi(self, gen: VariateGenerator, year: int) -> float:
        """Draw the CPI rate for a 1-based simulated year.

        The mean is the baseline plus every CPI shift covering the year; the
        draw is floored at the market's CPI floor.
        """
        cpi_mean = self.market.cpi_mean + self.options.stress.cpi_delta(year)
        return max(self.market.cpi_floor, gen.normal(cpi_mean, self.market.cpi_std))

    def draw_base_returns(self, gen: VariateGenerator) -> np.ndarray:
        """Draw one year of unshocked correlated returns in catalog order."""
        correlated_z = gen.correlated_normals(self.factor)
        return self.means + correlated_z * self.sds

    def apply_shocks(self, returns: np.ndarray, year: int) -> np.ndarray:
        """Compound any equity shocks targeted at a 1-based year onto the returns."""
        adjusted = np.array(returns, dtype=float)
        for shock in self.options.stress.shocks_for(year):
            i = 0 if shock.asset_key is None else self.market.index_of(shock.asset_key)
            adjusted[i] = (1.0 + adjusted[i]) * (1.0 + shock.pct / 100.0) - 1.0
        return adjusted

    def draw_returns(self, gen: VariateGenerator, year: int) -> np.ndarray:
        """Generate one year of correlated, shocked returns for all asset classes.

        Returns:
            numpy array of annual returns in catalog order, as decimals.
        """
        return self.apply_shocks(self.draw_base_returns(gen), year)
