# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Portfolio evolution for a single trial.

Each year the engine works out the spending policy amount, operating expense
and grants, applies the year's asset returns to every sleeve, removes the
outflow proportionally, and rebalances to target weights when the rebalancing
trigger fires. Returns are applied before the outflow is removed.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import math
import numpy as np

from .config import EngineOptions, RebalanceFrequency, Smoothing
from .inputs import SimulationInputs


@dataclass
class TrialState:
    """Mutable per-trial state. Created fresh for every trial and never shared.

    Attributes:
        sleeves: Dollar value per asset class in catalog order
        end_values: End-of-year totals, oldest first
        last_spend: Previous year's spending policy amount (None before year 1)
        last_operating_expense: Previous year's operating expense
    """
    sleeves: np.ndarray
    end_values: List[float] = field(default_factory=list)
    last_spend: Optional[float] = None
    last_operating_expense: Optional[float] = None

    @property
    def total(self) -> float:
        return float(self.sleeves.sum())


@dataclass(frozen=True)
class YearRecord:
    """Cash flows and results of one simulated year."""
    end_value: float
    operating_expense: float
    grant: float
    spending_policy: float
    investment_expense: float
    total_spending: float
    portfolio_return: float


class PortfolioEngine:
    """Applies the yearly cash-flow, return and rebalancing policy to a trial.

    Example:
        >>> engine = PortfolioEngine(inputs, options, market.weights_vector(inputs.portfolio_weights))
        >>> state = engine.new_trial()
        >>> record = engine.step(state, 0, returns, cpi)
    """

    def __init__(self,
                 inputs: SimulationInputs,
                 options: EngineOptions,
                 target_weights: np.ndarray):
        """Initialize the engine.

        Args:
            inputs: Endowment inputs
            options: Spending and rebalancing options
            target_weights: Decimal target weights in catalog order
        """
        self.inputs = inputs
        self.spending = options.spending_policy
        self.rebalancing = options.rebalancing
        self.target_weights = np.asarray(target_weights, dtype=float)

    def new_trial(self) -> TrialState:
        return TrialState(sleeves=self.target_weights * self.inputs.initial_capital)

    def spending_base(self, state: TrialState, begin_value: float) -> float:
        """Begin-of-year value, or the trailing average of recent year-end values."""
        smoothing = self.spending.smoothing
        if smoothing is Smoothing.NONE or not state.end_values:
            return begin_value
        window = state.end_values[-smoothing.window:]
        return sum(window) / len(window)

    def spending_amount(self, state: TrialState, base: float, cpi: float) -> float:
        amount = self.inputs.spending_fraction * base
        if state.last_spend is None:
            return amount

        floor, cap = self.spending.band.bounds(cpi)
        if math.isfinite(floor):
            amount = max(amount, state.last_spend * (1.0 + floor))
        if math.isfinite(cap):
            amount = min(amount, state.last_spend * (1.0 + cap))
        return amount

    def operating_expense(self, state: TrialState, year_index: int, cpi: float) -> float:
        if year_index == 0 or state.last_operating_expense is None:
            return float(self.inputs.initial_operating_expense)
        return state.last_operating_expense * (1.0 + cpi)

    def grant_amount(self, year_index: int, spend: float, operating_expense: float) -> float:
        """Policy grant topped up to the year's grant target."""
        if year_index == 0:
            policy_grant = float(self.inputs.initial_grant)
        else:
            policy_grant = max(0.0, spend - operating_expense)
        top_up = max(0.0, self.inputs.grant_target(year_index) - policy_grant)
        return policy_grant + top_up

    def needs_rebalance(self, sleeves: np.ndarray) -> bool:
        if self.rebalancing.frequency is RebalanceFrequency.ANNUAL:
            return True
        band = self.rebalancing.band
        if band <= 0:
            return False
        total = float(sleeves.sum())
        if total <= 0:
            return False
        weights = sleeves / total
        return bool(np.any(np.abs(weights - self.target_weights) > band))

    def step(self,
             state: TrialState,
             year_index: int,
             returns: np.ndarray,
             cpi: float) -> YearRecord:
        """Advance a trial by one year.

        Args:
            state: Trial state, updated in place
            year_index: 0-based simulated year
            returns: The year's (shocked) asset class returns in catalog order
            cpi: The year's CPI draw

        Returns:
            YearRecord for the year
        """
        begin_value = state.total

        base = self.spending_base(state, begin_value)
        spend = self.spending_amount(state, base, cpi)
        operating_expense = self.operating_expense(state, year_index, cpi)
        grant = self.grant_amount(year_index, spend, operating_expense)

        investment_expense = self.inputs.investment_expense_fraction * begin_value
        # Operating expense and grants are paid out of the spending policy amount
        outflow = spend + investment_expense
        total_spending = operating_expense + grant + investment_expense

        sleeves = np.maximum(state.sleeves * (1.0 + returns), 0.0)

        post_return_total = float(sleeves.sum())
        ratio = outflow / post_return_total if post_return_total > 0 else 0.0
        if ratio > 0:
            sleeves = np.maximum(sleeves * (1.0 - ratio), 0.0)

        if self.needs_rebalance(sleeves):
            sleeves = self.target_weights * float(sleeves.sum())

        state.sleeves = sleeves
        end_value = state.total
        state.end_values.append(end_value)
        state.last_spend = spend
        state.last_operating_expense = operating_expense

        return YearRecord(
            end_value=end_value,
            operating_expense=operating_expense,
            grant=grant,
            spending_policy=spend,
            investment_expense=investment_expense,
            total_spending=total_spending,
            portfolio_return=float(np.dot(self.target_weights, returns)),
        )
