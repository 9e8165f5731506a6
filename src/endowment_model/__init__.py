# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Endowment Monte Carlo Engine

Projects the value of an endowment under yearly spending, operating expenses
and grants with correlated stochastic asset class returns, then summarizes the
ensemble into risk and performance statistics.

Example usage:
    from endowment_model import SimulationInputs, EngineOptions, simulate, summarize

    inputs = SimulationInputs(initial_capital=100_000_000, spending_rate=5,
                              investment_expense_rate=0.5,
                              portfolio_weights={'publicEquity': 60, 'publicFixedIncome': 40})
    outputs = simulate(inputs, EngineOptions(trials=2000, years=20, seed=7))
    summary = summarize(outputs, inputs)
    df = outputs.get_percentile_df('values')
"""

import logging

# Monte Carlo Simulation
from .montecarlo import (
    EndowmentModelError,
    InvalidInput,
    InvalidCovariance,
    SimulationCancelled,
    EngineOptions,
    SimulationInputs,
    MarketAssumptions,
    MonteCarloSimulator,
    SimulationOutputs,
    AnalyticsSummary,
    simulate,
    summarize,
    run_analysis,
)

# Version
from .__meta__ import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    'EndowmentModelError', 'InvalidInput', 'InvalidCovariance', 'SimulationCancelled',
    # Configuration
    'EngineOptions', 'SimulationInputs', 'MarketAssumptions',
    # Simulation
    'MonteCarloSimulator', 'SimulationOutputs', 'simulate', 'run_analysis',
    # Analytics
    'AnalyticsSummary', 'summarize',
    # Version
    '__version__',
]
