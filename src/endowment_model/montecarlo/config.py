# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Configuration for endowment Monte Carlo simulations.

Every option is enumerated here with its default stated once. Policy axes that
used to be selected by "type" strings are closed sets of variants: Smoothing
for the spending base, NoBand/FixedBand/CpiLinkedBand for the year-over-year
spending band, and the *Benchmark classes for the benchmark path.
"""

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple, Union

from .exceptions import InvalidInput

DEFAULT_TRIALS = 5000
DEFAULT_YEARS = 10
DEFAULT_BENCHMARK_SPREAD = 0.06


class Smoothing(Enum):
    """Spending base: begin-of-year value or a trailing average of year-end values."""
    NONE = 0
    TRAILING_3 = 3
    TRAILING_5 = 5

    @property
    def window(self) -> int:
        return self.value


@dataclass(frozen=True)
class NoBand:
    """Spending follows the policy rate with no year-over-year limits."""

    def bounds(self, cpi: float) -> Tuple[float, float]:
        return -math.inf, math.inf


@dataclass(frozen=True)
class FixedBand:
    """Explicit year-over-year floor/cap on spending changes, as fractions.

    Either bound may be None, meaning unbounded on that side.
    """
    floor: Optional[float] = None
    cap: Optional[float] = None

    def __post_init__(self):
        for name in ('floor', 'cap'):
            value = getattr(self, name)
            if value is not None and (not _is_number(value) or value <= -1):
                raise InvalidInput(f"Spending {name} must be a fraction above -1, got {value}")
        if self.floor is not None and self.cap is not None and self.floor > self.cap:
            raise InvalidInput(f"Spending floor {self.floor} is above cap {self.cap}")

    def bounds(self, cpi: float) -> Tuple[float, float]:
        floor = -math.inf if self.floor is None else self.floor
        cap = math.inf if self.cap is None else self.cap
        return floor, cap


@dataclass(frozen=True)
class CpiLinkedBand:
    """Spending changes exactly with the year's CPI draw (floor = cap = CPI)."""

    def bounds(self, cpi: float) -> Tuple[float, float]:
        return cpi, cpi


SpendingBand = Union[NoBand, FixedBand, CpiLinkedBand]


@dataclass(frozen=True)
class SpendingPolicyOptions:
    smoothing: Smoothing = Smoothing.NONE
    band: SpendingBand = field(default_factory=NoBand)

    def __post_init__(self):
        if not isinstance(self.smoothing, Smoothing):
            raise InvalidInput(f"Unknown spending smoothing: {self.smoothing!r}")
        if not isinstance(self.band, (NoBand, FixedBand, CpiLinkedBand)):
            raise InvalidInput(f"Unknown spending band: {self.band!r}")


class RebalanceFrequency(Enum):
    ANNUAL = 'annual'
    NEVER = 'never'


@dataclass(frozen=True)
class RebalanceOptions:
    """Rebalancing trigger.

    Attributes:
        band_pct: Rebalance when any sleeve weight deviates from target by more
            than this many percentage points. 0 disables the band trigger.
        frequency: ANNUAL rebalances every year regardless of the band.
    """
    band_pct: float = 0.0
    frequency: RebalanceFrequency = RebalanceFrequency.ANNUAL

    def __post_init__(self):
        if not _is_number(self.band_pct) or self.band_pct < 0:
            raise InvalidInput(f"Rebalance band must be non-negative, got {self.band_pct}")
        if not isinstance(self.frequency, RebalanceFrequency):
            raise InvalidInput(f"Unknown rebalance frequency: {self.frequency!r}")

    @property
    def band(self) -> float:
        return self.band_pct / 100.0


@dataclass(frozen=True)
class AssetOverride:
    """Replacement mean and/or volatility for one asset class."""
    mean: Optional[float] = None
    sd: Optional[float] = None

    def __post_init__(self):
        if self.mean is not None and not _is_number(self.mean):
            raise InvalidInput(f"Override mean must be a finite number, got {self.mean}")
        if self.sd is not None and (not _is_number(self.sd) or self.sd < 0):
            raise InvalidInput(f"Override volatility must be non-negative, got {self.sd}")


@dataclass(frozen=True)
class EquityShock:
    """One-off return shock.

    Attributes:
        pct: Shock in percent, compounded onto (1 + return). -50 halves the sleeve.
        year: 1-based simulated year the shock hits.
        asset_key: Asset class to shock. None means the first catalog asset.
    """
    pct: float
    year: int
    asset_key: Optional[str] = None

    def __post_init__(self):
        if not _is_number(self.pct) or self.pct <= -100:
            raise InvalidInput(f"Equity shock must be above -100%, got {self.pct}")
        if not _is_int(self.year) or self.year < 1:
            raise InvalidInput(f"Equity shock year must be a positive integer, got {self.year}")


@dataclass(frozen=True)
class CpiShift:
    """Shift of the CPI mean, in percentage points, over an inclusive 1-based year range."""
    delta_pct: float
    start: int
    end: int

    def __post_init__(self):
        if not _is_number(self.delta_pct):
            raise InvalidInput(f"CPI shift must be a finite number, got {self.delta_pct}")
        if not _is_int(self.start) or not _is_int(self.end) or self.start < 1 or self.end < self.start:
            raise InvalidInput(f"Invalid CPI shift year range: {self.start}-{self.end}")

    def covers(self, year: int) -> bool:
        return self.start <= year <= self.end


@dataclass(frozen=True)
class StressOptions:
    equity_shocks: Sequence[EquityShock] = ()
    cpi_shifts: Sequence[CpiShift] = ()

    def __post_init__(self):
        object.__setattr__(self, 'equity_shocks', tuple(self.equity_shocks))
        object.__setattr__(self, 'cpi_shifts', tuple(self.cpi_shifts))
        for shock in self.equity_shocks:
            if not isinstance(shock, EquityShock):
                raise InvalidInput(f"Expected EquityShock, got {shock!r}")
        for shift in self.cpi_shifts:
            if not isinstance(shift, CpiShift):
                raise InvalidInput(f"Expected CpiShift, got {shift!r}")

    def cpi_delta(self, year: int) -> float:
        """Total CPI mean shift (as a fraction) active in a 1-based year."""
        return sum(shift.delta_pct / 100.0 for shift in self.cpi_shifts if shift.covers(year))

    def shocks_for(self, year: int) -> Tuple[EquityShock, ...]:
        return tuple(shock for shock in self.equity_shocks if shock.year == year)


@dataclass(frozen=True)
class CpiPlusBenchmark:
    """Benchmark growing at the year's CPI plus a fixed spread."""
    spread: float = DEFAULT_BENCHMARK_SPREAD
    label: str = 'CPI + spread'


@dataclass(frozen=True)
class FixedBenchmark:
    """Benchmark growing at a fixed annual rate."""
    rate: float = DEFAULT_BENCHMARK_SPREAD
    label: str = 'Fixed rate'


@dataclass(frozen=True)
class AssetClassBenchmark:
    """Benchmark tracking one asset class's (shocked) return."""
    asset_key: str
    label: str = 'Asset class'


@dataclass(frozen=True)
class BlendedBenchmark:
    """Benchmark tracking a weighted blend of asset class returns.

    Weights are in percent and renormalized when they don't sum to 100.
    """
    weights: Mapping[str, float]
    label: str = 'Blended'

    def __post_init__(self):
        object.__setattr__(self, 'weights', dict(self.weights))
        for key, weight in self.weights.items():
            if not _is_number(weight) or weight < 0:
                raise InvalidInput(f"Benchmark weight for '{key}' must be non-negative, got {weight}")


Benchmark = Union[CpiPlusBenchmark, FixedBenchmark, AssetClassBenchmark, BlendedBenchmark]


@dataclass(frozen=True)
class CorpusOptions:
    """Inflation-only reference path.

    Attributes:
        enabled: Whether the corpus path is produced.
        initial_value: Starting corpus value. None starts at the initial capital.
    """
    enabled: bool = True
    initial_value: Optional[float] = None

    def __post_init__(self):
        if self.initial_value is not None and (not _is_number(self.initial_value) or self.initial_value < 0):
            raise InvalidInput(f"Corpus initial value must be non-negative, got {self.initial_value}")


@dataclass(frozen=True)
class EngineOptions:
    """Configuration for one Monte Carlo run.

    Attributes:
        trials: Number of independent trials. Default 5000.
        years: Projection horizon in years. Default 10.
        seed: Optional seed for reproducible results. Default None.
        start_year: Optional calendar year of the first simulated year, used to
            label DataFrame views.
        max_workers: Worker processes for trials. 1 runs serially.
        spending_policy: Spending base smoothing and year-over-year band.
        rebalancing: Rebalancing trigger.
        asset_overrides: Asset class key -> mean/volatility override.
        stress: Equity shocks and CPI shifts.
        benchmark: Benchmark variant, or None to disable the benchmark path.
        corpus: Corpus path toggle and starting value.
        correlation_matrix: Correlation matrix in catalog order. None uses the
            market assumptions' matrix.
        strict_covariance: Raise InvalidCovariance for non-PSD matrices instead
            of clamping.
    """
    trials: int = DEFAULT_TRIALS
    years: int = DEFAULT_YEARS
    seed: Optional[int] = None
    start_year: Optional[int] = None
    max_workers: int = 1
    spending_policy: SpendingPolicyOptions = field(default_factory=SpendingPolicyOptions)
    rebalancing: RebalanceOptions = field(default_factory=RebalanceOptions)
    asset_overrides: Mapping[str, AssetOverride] = field(default_factory=dict)
    stress: StressOptions = field(default_factory=StressOptions)
    benchmark: Optional[Benchmark] = field(default_factory=CpiPlusBenchmark)
    corpus: CorpusOptions = field(default_factory=CorpusOptions)
    correlation_matrix: Optional[Sequence[Sequence[float]]] = None
    strict_covariance: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'asset_overrides', dict(self.asset_overrides))

        if not _is_int(self.trials) or self.trials < 1:
            raise InvalidInput(f"trials must be at least 1, got {self.trials}")
        if not _is_int(self.years) or self.years < 1:
            raise InvalidInput(f"years must be at least 1, got {self.years}")
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            raise InvalidInput(f"seed must be a non-negative integer, got {self.seed}")
        if self.start_year is not None and not _is_int(self.start_year):
            raise InvalidInput(f"start_year must be an integer, got {self.start_year}")
        if not _is_int(self.max_workers) or self.max_workers < 1:
            raise InvalidInput(f"max_workers must be at least 1, got {self.max_workers}")
        for key, override in self.asset_overrides.items():
            if not isinstance(override, AssetOverride):
                raise InvalidInput(f"Override for '{key}' must be an AssetOverride, got {override!r}")
        if self.benchmark is not None and not isinstance(
                self.benchmark, (CpiPlusBenchmark, FixedBenchmark, AssetClassBenchmark, BlendedBenchmark)):
            raise InvalidInput(f"Unknown benchmark: {self.benchmark!r}")

    @property
    def benchmark_enabled(self) -> bool:
        return self.benchmark is not None

    def year_labels(self) -> list:
        """Calendar labels for each simulated year (1-based when no start_year)."""
        first = self.start_year if self.start_year is not None else 1
        return list(range(first, first + self.years))


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
