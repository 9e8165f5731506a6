# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Benchmark and corpus reference paths.

The benchmark is an alternative investable hurdle subjected to the same
spending and investment expense drag as the real portfolio. The corpus is a
pure inflation yardstick that is never spent down. Both consume the trial's
CPI draw for the year.
"""

from typing import Optional
import numpy as np

from .config import (
    AssetClassBenchmark,
    Benchmark,
    BlendedBenchmark,
    CorpusOptions,
    CpiPlusBenchmark,
    FixedBenchmark,
)
from .exceptions import InvalidInput
from .inputs import SimulationInputs
from .market_assumptions import MarketAssumptions


class BenchmarkPath:
    """Resolves a benchmark variant against the asset catalog and evolves its value."""

    def __init__(self,
                 benchmark: Benchmark,
                 market: MarketAssumptions,
                 inputs: SimulationInputs):
        """Initialize the benchmark path.

        Raises:
            InvalidInput: If an asset class benchmark names an unknown asset
        """
        self.benchmark = benchmark
        self.inputs = inputs
        self.drag = inputs.spending_fraction + inputs.investment_expense_fraction
        self._asset_index: Optional[int] = None
        self._blend: Optional[np.ndarray] = None

        if isinstance(benchmark, AssetClassBenchmark):
            self._asset_index = market.index_of(benchmark.asset_key)
        elif isinstance(benchmark, BlendedBenchmark):
            blend = np.zeros(len(market))
            for key, weight in benchmark.weights.items():
                # Keys outside the catalog contribute nothing
                if key in market and weight:
                    blend[market.index_of(key)] = weight
            total = float(blend.sum())
            # A blend with no usable weight earns nothing
            self._blend = blend / total if total > 0 else blend
        elif not isinstance(benchmark, (CpiPlusBenchmark, FixedBenchmark)):
            raise InvalidInput(f"Unknown benchmark: {benchmark!r}")

    def growth_rate(self, returns: np.ndarray, cpi: float) -> float:
        """Benchmark return for the year."""
        benchmark = self.benchmark
        if isinstance(benchmark, CpiPlusBenchmark):
            return cpi + benchmark.spread
        if isinstance(benchmark, FixedBenchmark):
            return benchmark.rate
        if isinstance(benchmark, AssetClassBenchmark):
            return float(returns[self._asset_index])
        return float(np.dot(self._blend, returns))

    def step(self, value: float, returns: np.ndarray, cpi: float) -> float:
        """Grow the benchmark for one year and subtract its spending drag."""
        grown = value * (1.0 + self.growth_rate(returns, cpi))
        return max(0.0, grown - self.drag * grown)


class CorpusPath:
    """Inflation-only reference value."""

    def __init__(self, options: CorpusOptions, inputs: SimulationInputs):
        self.enabled = options.enabled
        self.initial_value = (options.initial_value if options.initial_value is not None
                              else inputs.initial_capital)

    @staticmethod
    def step(value: float, cpi: float) -> float:
        return value * (1.0 + cpi)
