# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation module for endowment projections.

This module provides correlated multi-asset return generation, per-trial
portfolio evolution under spending, rebalancing and stress policies, benchmark
and corpus reference paths, and ensemble risk analytics.
"""

from .exceptions import EndowmentModelError, InvalidInput, InvalidCovariance, SimulationCancelled
from .config import (
    EngineOptions,
    Smoothing,
    NoBand,
    FixedBand,
    CpiLinkedBand,
    SpendingPolicyOptions,
    RebalanceFrequency,
    RebalanceOptions,
    AssetOverride,
    EquityShock,
    CpiShift,
    StressOptions,
    CpiPlusBenchmark,
    FixedBenchmark,
    AssetClassBenchmark,
    BlendedBenchmark,
    CorpusOptions,
)
from .inputs import SimulationInputs
from .market_assumptions import MarketAssumptions, AssetClass
from .covariance import cholesky
from .variates import VariateGenerator, spawn_trial_generators
from .return_generator import AssetReturnModel
from .portfolio import PortfolioEngine
from .reference_paths import BenchmarkPath, CorpusPath
from .simulator import MonteCarloSimulator, simulate, run_analysis
from .results import SimulationOutputs
from .analytics import AnalyticsSummary, summarize
from .paths import (
    pointwise_median,
    nearest_to_pointwise_median,
    medoid_by_final_value,
    worst_spending_cuts,
    summarize_worst_cuts,
)

__all__ = [
    # Errors
    'EndowmentModelError', 'InvalidInput', 'InvalidCovariance', 'SimulationCancelled',
    # Configuration
    'EngineOptions', 'Smoothing', 'NoBand', 'FixedBand', 'CpiLinkedBand',
    'SpendingPolicyOptions', 'RebalanceFrequency', 'RebalanceOptions',
    'AssetOverride', 'EquityShock', 'CpiShift', 'StressOptions',
    'CpiPlusBenchmark', 'FixedBenchmark', 'AssetClassBenchmark', 'BlendedBenchmark',
    'CorpusOptions', 'SimulationInputs',
    # Market
    'MarketAssumptions', 'AssetClass', 'cholesky',
    'VariateGenerator', 'spawn_trial_generators', 'AssetReturnModel',
    # Simulation
    'PortfolioEngine', 'BenchmarkPath', 'CorpusPath',
    'MonteCarloSimulator', 'simulate', 'run_analysis', 'SimulationOutputs',
    # Analytics
    'AnalyticsSummary', 'summarize',
    # Representative paths
    'pointwise_median', 'nearest_to_pointwise_median', 'medoid_by_final_value',
    'worst_spending_cuts', 'summarize_worst_cuts',
]
