# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation orchestrator.

This module provides the MonteCarloSimulator class which validates a run's
inputs, evolves every trial with its own random sub-stream, and assembles the
per-trial paths into SimulationOutputs.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import math
import numpy as np

from .analytics import AnalyticsSummary, summarize
from .config import EngineOptions
from .exceptions import SimulationCancelled
from .inputs import SimulationInputs
from .market_assumptions import MarketAssumptions
from .portfolio import PortfolioEngine
from .reference_paths import BenchmarkPath, CorpusPath
from .results import SimulationOutputs
from .return_generator import AssetReturnModel
from .variates import run_entropy, trial_generator

logger = logging.getLogger(__name__)


@dataclass
class TrialPath:
    """Yearly series of a single trial, in output series order."""
    values: List[float] = field(default_factory=list)
    operating_expenses: List[float] = field(default_factory=list)
    grants: List[float] = field(default_factory=list)
    spending_policy: List[float] = field(default_factory=list)
    investment_expenses: List[float] = field(default_factory=list)
    total_spending: List[float] = field(default_factory=list)
    portfolio_returns: List[float] = field(default_factory=list)
    benchmarks: List[float] = field(default_factory=list)
    corpus: List[float] = field(default_factory=list)
    cpi_rates: List[float] = field(default_factory=list)
    cpi_index: List[float] = field(default_factory=list)


class MonteCarloSimulator:
    """Runs independent trials of an endowment projection.

    The workflow:
    1. Validate inputs, options and the correlation structure
    2. Resolve the run's root entropy from the seed
    3. For each trial draw CPI, then correlated shocked returns, every year
    4. Evolve the portfolio, benchmark and corpus with the same draws
    5. Stack the trial paths into [trial][year] matrices

    Each trial's random stream depends only on the seed and its index, so
    results are the same whether trials run serially or across processes.

    Example:
        >>> simulator = MonteCarloSimulator(options=EngineOptions(trials=500, seed=42))
        >>> outputs = simulator.run(inputs)
        >>> outputs.final_values.mean()
    """

    def __init__(self,
                 market: Optional[MarketAssumptions] = None,
                 options: Optional[EngineOptions] = None):
        """Initialize the simulator.

        Args:
            market: Asset class catalog and CPI baseline. If None, uses the
                default seven asset class assumptions.
            options: Engine options. If None, uses defaults.

        Raises:
            InvalidInput: If overrides or shocks reference unknown asset classes
            InvalidCovariance: If the correlation matrix is unusable
        """
        self.market = market or MarketAssumptions.create_default()
        self.options = options or EngineOptions()
        self.return_model = AssetReturnModel(self.market, self.options)

    def prepare(self, inputs: SimulationInputs) -> Tuple[PortfolioEngine, Optional[BenchmarkPath], CorpusPath]:
        """Resolve the per-run components. Raises InvalidInput for unusable inputs."""
        target_weights = self.return_model.market.weights_vector(inputs.portfolio_weights)
        engine = PortfolioEngine(inputs, self.options, target_weights)
        benchmark = None
        if self.options.benchmark is not None:
            benchmark = BenchmarkPath(self.options.benchmark, self.return_model.market, inputs)
        corpus = CorpusPath(self.options.corpus, inputs)
        return engine, benchmark, corpus

    def run(self,
            inputs: SimulationInputs,
            should_cancel: Optional[Callable[[], bool]] = None) -> SimulationOutputs:
        """Run the full simulation.

        Args:
            inputs: Endowment inputs
            should_cancel: Optional callable polled between trials; returning
                True stops the run

        Returns:
            SimulationOutputs with one row per trial

        Raises:
            SimulationCancelled: If should_cancel returned True
        """
        components = self.prepare(inputs)
        entropy = run_entropy(self.options.seed)
        trials = self.options.trials

        logger.debug("Starting %d trials over %d years (workers=%d)",
                     trials, self.options.years, self.options.max_workers)

        if self.options.max_workers > 1 and trials > 1:
            paths = self._run_parallel(inputs, entropy, should_cancel)
        else:
            paths = []
            for trial_index in range(trials):
                if should_cancel is not None and should_cancel():
                    raise SimulationCancelled(trial_index, trials)
                paths.append(self._simulate_trial(components, entropy, trial_index))

        outputs = self._assemble(paths)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Finished %d trials, median final value %.2f",
                         trials, float(np.median(outputs.final_values)))
        return outputs

    def run_trial(self, inputs: SimulationInputs, trial_index: int) -> TrialPath:
        """Run one trial of a seeded run in isolation.

        Gives the same path as row trial_index of run() with the same seed.
        """
        return self._simulate_trial(self.prepare(inputs), run_entropy(self.options.seed), trial_index)

    def run_trials(self, inputs: SimulationInputs, entropy: int,
                   trial_indices: Sequence[int]) -> List[TrialPath]:
        components = self.prepare(inputs)
        return [self._simulate_trial(components, entropy, i) for i in trial_indices]

    def _simulate_trial(self, components, entropy: int, trial_index: int) -> TrialPath:
        engine, benchmark, corpus = components
        gen = trial_generator(entropy, trial_index)
        state = engine.new_trial()
        path = TrialPath()

        benchmark_value = engine.inputs.initial_capital
        corpus_value = corpus.initial_value
        cpi_index = 1.0

        for year_index in range(self.options.years):
            year = year_index + 1
            # CPI is drawn before the asset normals every year
            cpi = self.return_model.draw_cpi(gen, year)
            returns = self.return_model.draw_returns(gen, year)

            record = engine.step(state, year_index, returns, cpi)
            path.values.append(record.end_value)
            path.operating_expenses.append(record.operating_expense)
            path.grants.append(record.grant)
            path.spending_policy.append(record.spending_policy)
            path.investment_expenses.append(record.investment_expense)
            path.total_spending.append(record.total_spending)
            path.portfolio_returns.append(record.portfolio_return)

            if benchmark is not None:
                benchmark_value = benchmark.step(benchmark_value, returns, cpi)
                path.benchmarks.append(benchmark_value)
            else:
                path.benchmarks.append(math.nan)

            if corpus.enabled:
                corpus_value = corpus.step(corpus_value, cpi)
                path.corpus.append(corpus_value)
            else:
                path.corpus.append(math.nan)

            cpi_index *= 1.0 + cpi
            path.cpi_rates.append(cpi)
            path.cpi_index.append(cpi_index)

        return path

    def _run_parallel(self, inputs: SimulationInputs, entropy: int,
                      should_cancel: Optional[Callable[[], bool]]) -> List[TrialPath]:
        trials = self.options.trials
        workers = min(self.options.max_workers, trials)
        batches = _chunk(range(trials), max(1, math.ceil(trials / (workers * 4))))
        logger.debug("Dispatching %d batches to %d worker processes", len(batches), workers)

        paths: List[TrialPath] = []
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_run_trial_batch, (self.market, self.options, inputs, entropy, batch))
                       for batch in batches]
            for future in futures:
                if should_cancel is not None and should_cancel():
                    pool.shutdown(wait=True, cancel_futures=True)
                    raise SimulationCancelled(len(paths), trials)
                paths.extend(future.result())
        return paths

    def _assemble(self, paths: List[TrialPath]) -> SimulationOutputs:
        series = {
            name: np.array([getattr(path, name) for path in paths], dtype=float)
            for name in SimulationOutputs.series_names()
        }
        return SimulationOutputs(year_labels=self.options.year_labels(), **series)


def _run_trial_batch(args) -> List[TrialPath]:
    """Process pool entry point: run a batch of trial indices."""
    market, options, inputs, entropy, batch = args
    return MonteCarloSimulator(market, options).run_trials(inputs, entropy, batch)


def _chunk(items, size: int) -> List[List[int]]:
    items = list(items)
    return [items[i:i + size] for i in range(0, len(items), size)]


def simulate(inputs: SimulationInputs,
             options: Optional[EngineOptions] = None,
             market: Optional[MarketAssumptions] = None,
             should_cancel: Optional[Callable[[], bool]] = None) -> SimulationOutputs:
    """Run a Monte Carlo projection of an endowment.

    Example:
        >>> inputs = SimulationInputs(initial_capital=1_000_000, spending_rate=5,
        ...                           portfolio_weights={'publicEquity': 60, 'publicFixedIncome': 40})
        >>> outputs = simulate(inputs, EngineOptions(trials=1000, seed=7))
    """
    return MonteCarloSimulator(market, options).run(inputs, should_cancel=should_cancel)


def run_analysis(inputs: SimulationInputs,
                 options: Optional[EngineOptions] = None,
                 market: Optional[MarketAssumptions] = None) -> Tuple[SimulationOutputs, AnalyticsSummary]:
    """Simulate and summarize in one call."""
    outputs = simulate(inputs, options, market)
    return outputs, summarize(outputs, inputs)
