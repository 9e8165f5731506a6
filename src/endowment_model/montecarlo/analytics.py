# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Ensemble risk and performance analytics.

Everything here is a pure function of completed simulation matrices. Percentiles
use the nearest-rank rule ``sorted[floor(p / 100 * (n - 1))]`` without
interpolation so reports match across implementations. Degenerate inputs
(empty arrays, zero volatility, no downside) give NaN or 0 and are excluded
from cross-trial statistics rather than raised.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple
import math
import numpy as np

if TYPE_CHECKING:
    from .inputs import SimulationInputs
    from .results import SimulationOutputs

DEFAULT_RISK_FREE_RATE = 0.02
DEFAULT_TARGET_RETURN = 0.02
SUMMARY_PERCENTILES: Tuple[int, ...] = (10, 25, 50, 75, 90)
SUSTAINABILITY_FRACTION = 0.5
# Volatility at or below this is rounding noise from a constant series
VOLATILITY_TOLERANCE = 1e-12


def percentile(values, p: float) -> float:
    """Nearest-rank percentile (p in 0-100). NaN for an empty input."""
    arr = np.sort(np.asarray(values, dtype=float).ravel())
    n = len(arr)
    if n == 0:
        return math.nan
    idx = int(math.floor((p / 100.0) * (n - 1)))
    idx = min(max(idx, 0), n - 1)
    return float(arr[idx])


def percentiles_by_year(matrix, percentiles: Sequence[float] = SUMMARY_PERCENTILES) -> Dict[float, List[float]]:
    """Per-year nearest-rank percentiles of a [trial][year] matrix."""
    matrix = np.asarray(matrix, dtype=float)
    if matrix.size == 0:
        return {p: [] for p in percentiles}
    return {
        p: [percentile(matrix[:, year], p) for year in range(matrix.shape[1])]
        for p in percentiles
    }


def cvar(values, alpha: float) -> float:
    """Conditional value at risk: mean of the worst floor(n * alpha) values.

    Returns 0 when the tail is empty.
    """
    arr = np.sort(np.asarray(values, dtype=float).ravel())
    cutoff = int(math.floor(len(arr) * alpha))
    if cutoff <= 0:
        return 0.0
    return float(np.mean(arr[:cutoff]))


def annualized_return(returns) -> float:
    """Geometric mean of (1 + r) minus 1. NaN for empty or sign-flipping series."""
    arr = np.asarray(returns, dtype=float)
    if len(arr) == 0:
        return math.nan
    growth = float(np.prod(1.0 + arr))
    if not math.isfinite(growth) or growth < 0:
        return math.nan
    return growth ** (1.0 / len(arr)) - 1.0


def annualized_volatility(returns) -> float:
    """Sample standard deviation of yearly returns. NaN with fewer than two years."""
    arr = np.asarray(returns, dtype=float)
    if len(arr) < 2:
        return math.nan
    return float(np.std(arr, ddof=1))


def sharpe_ratio(returns, risk_free_rate: float = DEFAULT_RISK_FREE_RATE) -> float:
    """(annualized return - risk free rate) / annualized volatility.

    NaN when the volatility is zero (within VOLATILITY_TOLERANCE) or not finite.
    """
    ann_return = annualized_return(returns)
    vol = annualized_volatility(returns)
    if not math.isfinite(ann_return) or not math.isfinite(vol) or vol <= VOLATILITY_TOLERANCE:
        return math.nan
    return (ann_return - risk_free_rate) / vol


def downside_deviation(returns, target: float = DEFAULT_TARGET_RETURN) -> float:
    """Root mean square of the shortfalls below target (0 if there are none)."""
    excess = np.asarray(returns, dtype=float) - target
    shortfalls = excess[excess < 0]
    if len(shortfalls) == 0:
        return 0.0
    return float(np.sqrt(np.mean(shortfalls ** 2)))


def sortino_ratio(returns, target: float = DEFAULT_TARGET_RETURN) -> float:
    """(mean return - target) / downside deviation. NaN with no downside."""
    arr = np.asarray(returns, dtype=float)
    if len(arr) == 0:
        return math.nan
    dd = downside_deviation(arr, target)
    if dd == 0 or not math.isfinite(dd):
        return math.nan
    return float(np.mean(arr) - target) / dd


def probability_of_loss(values, initial_capital: float) -> float:
    """Fraction of trials whose final value is below the initial capital."""
    finals = _final_column(values)
    if len(finals) == 0:
        return math.nan
    return float(np.mean(finals < initial_capital))


@dataclass(frozen=True)
class DrawdownStatistics:
    """Peak-to-trough statistics across all trials.

    Attributes:
        max_drawdown: Largest (peak - value) / peak seen in any trial
        max_drawdown_year: 1-based year of the largest drawdown (0 if none)
        avg_drawdown: Mean of every below-peak observation across trials
        avg_recovery_time: Mean years from an episode's trough to a new peak
    """
    max_drawdown: float = 0.0
    max_drawdown_year: int = 0
    avg_drawdown: float = 0.0
    avg_recovery_time: float = 0.0


def drawdown_statistics(values, initial_capital: float) -> DrawdownStatistics:
    """Drawdown statistics of value paths. The running peak starts at the initial capital."""
    matrix = np.atleast_2d(np.asarray(values, dtype=float))
    max_drawdown = 0.0
    max_drawdown_year = 0
    total_drawdown = 0.0
    drawdown_count = 0
    recoveries: List[int] = []

    for path in matrix:
        peak = float(initial_capital)
        trough_year: Optional[int] = None
        trough_value = math.inf

        for year, value in enumerate(path):
            if value > peak:
                if trough_year is not None:
                    recoveries.append(year - trough_year)
                    trough_year = None
                    trough_value = math.inf
                peak = float(value)
            elif value < peak and peak > 0:
                if value < trough_value:
                    trough_value = float(value)
                    trough_year = year
                drawdown = (peak - value) / peak
                total_drawdown += drawdown
                drawdown_count += 1
                if drawdown > max_drawdown:
                    max_drawdown = float(drawdown)
                    max_drawdown_year = year + 1

    return DrawdownStatistics(
        max_drawdown=max_drawdown,
        max_drawdown_year=max_drawdown_year,
        avg_drawdown=total_drawdown / drawdown_count if drawdown_count else 0.0,
        avg_recovery_time=float(np.mean(recoveries)) if recoveries else 0.0,
    )


def sustainability_horizon(values, initial_capital: float,
                           fraction: float = SUSTAINABILITY_FRACTION) -> float:
    """Mean 1-based year at which value first falls below fraction * initial capital.

    Trials that never cross are excluded. Returns horizon + 1 when no trial crosses.
    """
    matrix = np.atleast_2d(np.asarray(values, dtype=float))
    threshold = initial_capital * fraction
    crossing_years = []
    for path in matrix:
        below = np.flatnonzero(path < threshold)
        if len(below):
            crossing_years.append(int(below[0]) + 1)
    if not crossing_years:
        return float(matrix.shape[1] + 1)
    return float(np.mean(crossing_years))


@dataclass(frozen=True)
class MetricBand:
    """Nearest-rank percentile band of a per-trial metric (non-finite values excluded)."""
    p10: float = math.nan
    p25: float = math.nan
    median: float = math.nan
    p75: float = math.nan
    p90: float = math.nan
    count: int = 0

    @classmethod
    def from_values(cls, values) -> 'MetricBand':
        arr = np.asarray(values, dtype=float)
        arr = arr[np.isfinite(arr)]
        if len(arr) == 0:
            return cls()
        return cls(
            p10=percentile(arr, 10),
            p25=percentile(arr, 25),
            median=percentile(arr, 50),
            p75=percentile(arr, 75),
            p90=percentile(arr, 90),
            count=len(arr),
        )


def per_trial_metric(matrix, metric, *args) -> np.ndarray:
    """Apply a series metric to every trial row."""
    return np.array([metric(row, *args) for row in np.atleast_2d(np.asarray(matrix, dtype=float))])


def tail_risk(values, quantiles: Sequence[float] = (0.01, 0.05, 0.10)) -> Dict[float, float]:
    """Final values at the worst quantiles, read as sorted[floor(n * q)]."""
    finals = np.sort(_final_column(values))
    out = {}
    for q in quantiles:
        if len(finals) == 0:
            out[q] = 0.0
            continue
        idx = min(int(math.floor(len(finals) * q)), len(finals) - 1)
        out[q] = float(finals[idx])
    return out


def probability_beat_benchmark(values, benchmarks) -> Optional[float]:
    """Fraction of trials whose final value exceeds the benchmark's final value.

    None when the benchmark path is disabled.
    """
    finals = _final_column(values)
    bench = _final_column(benchmarks)
    if len(finals) == 0 or len(bench) != len(finals) or not np.all(np.isfinite(bench)):
        return None
    return float(np.mean(finals > bench))


@dataclass(frozen=True)
class SafeSpending:
    """Spending level sustained in 80% of trials."""
    amount: float
    rate_pct: float


def safe_spending(spending_policy, initial_capital: float, confidence: float = 0.8) -> Optional[SafeSpending]:
    """Percentile (1 - confidence) of per-trial minimum spending amounts."""
    matrix = np.atleast_2d(np.asarray(spending_policy, dtype=float))
    if matrix.size == 0 or initial_capital <= 0:
        return None
    amount = percentile(matrix.min(axis=1), (1.0 - confidence) * 100.0)
    rate_pct = amount / initial_capital * 100.0 if math.isfinite(amount) and amount >= 0 else 0.0
    return SafeSpending(amount=amount, rate_pct=rate_pct)


def success_by_year(values, grant_targets: Sequence[float]) -> List[float]:
    """Per-year fraction of trials whose value covers that year's grant target.

    Without targets every year counts as fully successful.
    """
    matrix = np.atleast_2d(np.asarray(values, dtype=float))
    years = matrix.shape[1]
    if not grant_targets:
        return [1.0] * years
    out = []
    for year in range(min(years, len(grant_targets))):
        out.append(float(np.mean(matrix[:, year] >= grant_targets[year])))
    return out


def inflation_adjusted_preservation(values, initial_capital: float,
                                    inflation_rate: float = 0.03) -> float:
    """Fraction of trials whose final value keeps up with a fixed inflation rate."""
    matrix = np.atleast_2d(np.asarray(values, dtype=float))
    if matrix.size == 0:
        return math.nan
    threshold = initial_capital * (1.0 + inflation_rate) ** matrix.shape[1]
    return float(np.mean(matrix[:, -1] >= threshold))


@dataclass(frozen=True)
class AnalyticsSummary:
    """Risk and performance summary of a completed run."""
    final_value_percentiles: Dict[int, float]
    mean_final_value: float
    cvar_95: float
    cvar_99: float
    annualized_return: MetricBand
    annualized_volatility: MetricBand
    sharpe: MetricBand
    sortino: MetricBand
    principal_loss_probability: float
    drawdown: DrawdownStatistics
    sustainability_horizon: float
    calmar: float
    tail_risk: Dict[float, float] = field(default_factory=dict)
    beat_benchmark_probability: Optional[float] = None
    safe_spending_80: Optional[SafeSpending] = None
    success_by_year: List[float] = field(default_factory=list)

    @property
    def median_cagr(self) -> float:
        return self.annualized_return.median

    @property
    def max_drawdown(self) -> float:
        return self.drawdown.max_drawdown


def summarize(outputs: 'SimulationOutputs',
              inputs: 'SimulationInputs',
              risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
              target_return: float = DEFAULT_TARGET_RETURN) -> AnalyticsSummary:
    """Compute the full analytics summary of a completed run.

    Args:
        outputs: Fully populated simulation outputs
        inputs: Inputs the run was made with
        risk_free_rate: Rate subtracted in Sharpe ratios
        target_return: Minimum acceptable return for Sortino ratios
    """
    initial = inputs.initial_capital
    finals = outputs.final_values
    returns = outputs.portfolio_returns

    ann_return = MetricBand.from_values(per_trial_metric(returns, annualized_return))
    drawdown = drawdown_statistics(outputs.values, initial)
    calmar = ann_return.median / drawdown.max_drawdown if drawdown.max_drawdown > 0 else 0.0

    return AnalyticsSummary(
        final_value_percentiles={p: percentile(finals, p) for p in SUMMARY_PERCENTILES},
        mean_final_value=float(np.mean(finals)),
        cvar_95=cvar(finals, 0.05),
        cvar_99=cvar(finals, 0.01),
        annualized_return=ann_return,
        annualized_volatility=MetricBand.from_values(per_trial_metric(returns, annualized_volatility)),
        sharpe=MetricBand.from_values(per_trial_metric(returns, sharpe_ratio, risk_free_rate)),
        sortino=MetricBand.from_values(per_trial_metric(returns, sortino_ratio, target_return)),
        principal_loss_probability=probability_of_loss(outputs.values, initial),
        drawdown=drawdown,
        sustainability_horizon=sustainability_horizon(outputs.values, initial),
        calmar=calmar if math.isfinite(calmar) else 0.0,
        tail_risk=tail_risk(outputs.values),
        beat_benchmark_probability=probability_beat_benchmark(outputs.values, outputs.benchmarks),
        safe_spending_80=safe_spending(outputs.spending_policy, initial),
        success_by_year=success_by_year(outputs.values, inputs.grant_targets),
    )


def _final_column(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 1:
        return arr
    if arr.size == 0:
        return np.array([])
    return arr[:, -1]
