# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Per-run endowment inputs."""

import math
import numbers
from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence

from .exceptions import InvalidInput

# Weights are entered in percent and may carry rounding from a UI
WEIGHT_SUM_TOLERANCE = 0.01


@dataclass(frozen=True)
class SimulationInputs:
    """Endowment being projected.

    Attributes:
        initial_capital: Starting portfolio value. Must be positive.
        spending_rate: Spending policy rate in percent of the spending base.
        investment_expense_rate: Investment expense in percent of begin-of-year value.
        initial_operating_expense: Operating expense paid in the first year.
        initial_grant: Grant paid in the first year.
        portfolio_weights: Asset class key -> target weight in percent. Must sum to 100.
        grant_targets: Minimum grant per year. Years past the end are treated as zero.
    """
    initial_capital: float
    spending_rate: float = 0.0
    investment_expense_rate: float = 0.0
    initial_operating_expense: float = 0.0
    initial_grant: float = 0.0
    portfolio_weights: Mapping[str, float] = field(default_factory=dict)
    grant_targets: Sequence[float] = ()

    def __post_init__(self):
        object.__setattr__(self, 'portfolio_weights', dict(self.portfolio_weights))
        for year, target in enumerate(self.grant_targets, start=1):
            if not _finite(target) or target < 0:
                raise InvalidInput(f"Grant target for year {year} must be non-negative, got {target!r}")
        object.__setattr__(self, 'grant_targets', tuple(float(g) for g in self.grant_targets))

        if not _finite(self.initial_capital) or self.initial_capital <= 0:
            raise InvalidInput(f"initial_capital must be positive, got {self.initial_capital}")

        for name in ('spending_rate', 'investment_expense_rate',
                     'initial_operating_expense', 'initial_grant'):
            value = getattr(self, name)
            if not _finite(value) or value < 0:
                raise InvalidInput(f"{name} must be a non-negative number, got {value}")

        if not self.portfolio_weights:
            raise InvalidInput("portfolio_weights cannot be empty")

        for key, weight in self.portfolio_weights.items():
            if not _finite(weight) or weight < 0:
                raise InvalidInput(f"Weight for '{key}' must be non-negative, got {weight}")

        total = self.weights_total
        if abs(total - 100.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidInput(f"Portfolio weights must sum to 100, got {total}")

    @property
    def weights_total(self) -> float:
        return float(sum(self.portfolio_weights.values()))

    def grant_target(self, year_index: int) -> float:
        """Grant target for a 0-based year index (0 when not specified)."""
        if 0 <= year_index < len(self.grant_targets):
            return self.grant_targets[year_index]
        return 0.0

    @property
    def spending_fraction(self) -> float:
        return self.spending_rate / 100.0

    @property
    def investment_expense_fraction(self) -> float:
        return self.investment_expense_rate / 100.0

    def to_dict(self) -> Dict[str, object]:
        return {
            'initial_capital': self.initial_capital,
            'spending_rate': self.spending_rate,
            'investment_expense_rate': self.investment_expense_rate,
            'initial_operating_expense': self.initial_operating_expense,
            'initial_grant': self.initial_grant,
            'portfolio_weights': dict(self.portfolio_weights),
            'grant_targets': list(self.grant_targets),
        }


def _finite(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)
