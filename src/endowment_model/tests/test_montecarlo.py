# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for Monte Carlo simulation building blocks.
"""

import math
import unittest
import numpy as np

from ..montecarlo.config import (
    AssetClassBenchmark,
    AssetOverride,
    BlendedBenchmark,
    CorpusOptions,
    CpiLinkedBand,
    CpiPlusBenchmark,
    CpiShift,
    EngineOptions,
    EquityShock,
    FixedBand,
    FixedBenchmark,
    RebalanceFrequency,
    RebalanceOptions,
    Smoothing,
    SpendingPolicyOptions,
    StressOptions,
)
from ..montecarlo.covariance import cholesky, covariance_from_correlation
from ..montecarlo.exceptions import InvalidCovariance, InvalidInput
from ..montecarlo.inputs import SimulationInputs
from ..montecarlo.market_assumptions import AssetClass, MarketAssumptions
from ..montecarlo.portfolio import PortfolioEngine
from ..montecarlo.reference_paths import BenchmarkPath, CorpusPath
from ..montecarlo.return_generator import AssetReturnModel
from ..montecarlo.variates import VariateGenerator, apply_factor, spawn_trial_generators


def two_asset_market(mean_a=0.0, sd_a=0.0, mean_b=0.0, sd_b=0.0, rho=0.0):
    return MarketAssumptions(
        (AssetClass("a", "A", mean_a, sd_a), AssetClass("b", "B", mean_b, sd_b)),
        [[1.0, rho], [rho, 1.0]],
    )


class TestEngineOptions(unittest.TestCase):
    """Tests for EngineOptions."""

    def test_default_values(self):
        """Test default configuration values."""
        options = EngineOptions()
        self.assertEqual(options.trials, 5000)
        self.assertEqual(options.years, 10)
        self.assertIsNone(options.seed)
        self.assertEqual(options.max_workers, 1)
        self.assertIs(options.spending_policy.smoothing, Smoothing.NONE)
        self.assertIs(options.rebalancing.frequency, RebalanceFrequency.ANNUAL)
        self.assertIsInstance(options.benchmark, CpiPlusBenchmark)
        self.assertEqual(options.benchmark.spread, 0.06)
        self.assertTrue(options.corpus.enabled)

    def test_invalid_counts(self):
        """Test that non-positive trial and year counts raise errors."""
        with self.assertRaises(InvalidInput):
            EngineOptions(trials=0)
        with self.assertRaises(InvalidInput):
            EngineOptions(years=-1)
        with self.assertRaises(InvalidInput):
            EngineOptions(max_workers=0)
        with self.assertRaises(InvalidInput):
            EngineOptions(seed=-5)

    def test_invalid_input_is_value_error(self):
        """Test that InvalidInput can be caught as ValueError."""
        with self.assertRaises(ValueError):
            EngineOptions(trials=0)

    def test_year_labels(self):
        """Test year labels with and without a start year."""
        self.assertEqual(EngineOptions(years=3).year_labels(), [1, 2, 3])
        self.assertEqual(EngineOptions(years=3, start_year=2025).year_labels(), [2025, 2026, 2027])

    def test_disabled_benchmark(self):
        """Test that a None benchmark disables it and a bad type raises."""
        self.assertFalse(EngineOptions(benchmark=None).benchmark_enabled)
        with self.assertRaises(InvalidInput):
            EngineOptions(benchmark="cpi_plus")

    def test_override_type_checked(self):
        """Test that asset overrides must be AssetOverride instances."""
        with self.assertRaises(InvalidInput):
            EngineOptions(asset_overrides={"publicEquity": {"mean": 0.1}})

    def test_fixed_band_validation(self):
        """Test FixedBand bounds validation."""
        with self.assertRaises(InvalidInput):
            FixedBand(floor=0.05, cap=0.01)
        with self.assertRaises(InvalidInput):
            FixedBand(floor=-1.5)
        self.assertEqual(FixedBand().bounds(0.02), (-math.inf, math.inf))

    def test_shock_validation(self):
        """Test that malformed equity shocks and CPI shifts raise errors."""
        with self.assertRaises(InvalidInput):
            EquityShock(pct=-100, year=1)
        with self.assertRaises(InvalidInput):
            EquityShock(pct=-20, year=0)
        with self.assertRaises(InvalidInput):
            CpiShift(delta_pct=1, start=5, end=3)

    def test_stress_cpi_delta(self):
        """Test that overlapping CPI shifts add up."""
        stress = StressOptions(cpi_shifts=[CpiShift(1.0, 1, 3), CpiShift(0.5, 3, 4)])
        self.assertAlmostEqual(stress.cpi_delta(1), 0.01)
        self.assertAlmostEqual(stress.cpi_delta(3), 0.015)
        self.assertAlmostEqual(stress.cpi_delta(5), 0.0)


class TestSimulationInputs(unittest.TestCase):
    """Tests for SimulationInputs."""

    def test_valid_inputs(self):
        """Test derived values of valid inputs."""
        inputs = SimulationInputs(initial_capital=1_000_000, spending_rate=5,
                                  portfolio_weights={"publicEquity": 60, "publicFixedIncome": 40},
                                  grant_targets=[10, 20])
        self.assertEqual(inputs.spending_fraction, 0.05)
        self.assertEqual(inputs.grant_target(1), 20.0)
        self.assertEqual(inputs.grant_target(5), 0.0)
        self.assertEqual(inputs.to_dict()["grant_targets"], [10.0, 20.0])

    def test_malformed_grant_targets_raise_invalid_input(self):
        """Test that non-numeric or non-finite grant targets raise InvalidInput."""
        for targets in (["x"], [10, None], [math.nan], [math.inf]):
            with self.assertRaises(InvalidInput):
                SimulationInputs(initial_capital=100, portfolio_weights={"a": 100},
                                 grant_targets=targets)

    def test_weights_must_sum_to_100(self):
        """Test that weights not summing to 100 raise InvalidInput."""
        with self.assertRaises(InvalidInput):
            SimulationInputs(initial_capital=100, portfolio_weights={"publicEquity": 99})

    def test_weights_tolerate_rounding(self):
        """Test that weights within rounding of 100 are accepted."""
        inputs = SimulationInputs(initial_capital=100,
                                  portfolio_weights={"a": 33.333, "b": 33.333, "c": 33.333})
        self.assertAlmostEqual(inputs.weights_total, 99.999)

    def test_invalid_values(self):
        """Test that invalid capital, rates, weights and grants raise errors."""
        with self.assertRaises(InvalidInput):
            SimulationInputs(initial_capital=0, portfolio_weights={"a": 100})
        with self.assertRaises(InvalidInput):
            SimulationInputs(initial_capital=100, spending_rate=-1, portfolio_weights={"a": 100})
        with self.assertRaises(InvalidInput):
            SimulationInputs(initial_capital=100, portfolio_weights={})
        with self.assertRaises(InvalidInput):
            SimulationInputs(initial_capital=100, portfolio_weights={"a": 100}, grant_targets=[5, -1])


class TestMarketAssumptions(unittest.TestCase):
    """Tests for MarketAssumptions."""

    def test_create_default(self):
        """Test creating default market assumptions."""
        market = MarketAssumptions.create_default()
        self.assertEqual(len(market), 7)
        self.assertEqual(market.keys[0], "publicEquity")
        self.assertEqual(market.correlation_matrix.shape, (7, 7))
        self.assertEqual(market.get_returns_vector()[1], 0.12)
        self.assertEqual(market.get_volatilities_vector()[6], 0.005)
        self.assertEqual(market.cpi_mean, 0.025)

    def test_weights_vector(self):
        """Test mapping weight percentages onto catalog order."""
        market = MarketAssumptions.create_default()
        weights = market.weights_vector({"publicEquity": 60, "cashShortTerm": 40})
        np.testing.assert_allclose(weights, [0.6, 0, 0, 0, 0, 0, 0.4])
        with self.assertRaises(InvalidInput):
            market.weights_vector({"hedgeFunds": 100})

    def test_invalid_correlation_matrix_shape(self):
        """Test that a wrong-sized correlation matrix raises error."""
        with self.assertRaises(InvalidCovariance):
            MarketAssumptions.create_default().with_correlation(np.eye(3))

    def test_asymmetric_correlation_matrix_raises(self):
        """Test that asymmetric correlation matrix raises error."""
        with self.assertRaises(InvalidCovariance):
            two_asset_market().with_correlation([[1.0, 0.5], [0.3, 1.0]])

    def test_duplicate_keys_raise(self):
        """Test that duplicate asset class keys raise error."""
        with self.assertRaises(InvalidInput):
            MarketAssumptions((AssetClass("a", "A", 0, 0), AssetClass("a", "A2", 0, 0)), np.eye(2))


class TestCholesky(unittest.TestCase):
    """Tests for the Cholesky factorization."""

    def test_identity(self):
        """Test that the identity factors to itself."""
        np.testing.assert_array_equal(cholesky(np.eye(4)), np.eye(4))

    def test_reconstructs_default_matrix(self):
        """Test that L @ L.T rebuilds the default correlation matrix."""
        market = MarketAssumptions.create_default()
        factor = cholesky(market.correlation_matrix)
        np.testing.assert_allclose(factor @ factor.T, market.correlation_matrix, atol=1e-12)
        self.assertTrue(np.allclose(factor, np.tril(factor)))

    def test_covariance_matrix(self):
        """Test building and factoring a covariance matrix."""
        cov = covariance_from_correlation([[1.0, 0.5], [0.5, 1.0]], [0.1, 0.2])
        np.testing.assert_allclose(cov, [[0.01, 0.01], [0.01, 0.04]])
        factor = cholesky(cov)
        np.testing.assert_allclose(factor @ factor.T, cov, atol=1e-15)

    def test_non_psd_strict_raises(self):
        """Test that strict mode rejects a non-PSD matrix."""
        bad = [[1.0, 0.9, 0.9], [0.9, 1.0, -0.9], [0.9, -0.9, 1.0]]
        with self.assertRaises(InvalidCovariance):
            cholesky(bad, strict=True)

    def test_non_psd_lenient_clamps_and_warns(self):
        """Test that lenient mode clamps the pivot and logs a warning."""
        bad = [[1.0, 0.9, 0.9], [0.9, 1.0, -0.9], [0.9, -0.9, 1.0]]
        with self.assertLogs("endowment_model.montecarlo.covariance", level="WARNING"):
            factor = cholesky(bad)
        self.assertTrue(np.all(np.isfinite(factor)))
        self.assertEqual(factor[2, 2], 0.0)

    def test_singular_matrix(self):
        """Perfectly correlated assets give a zero pivot, not an error."""
        factor = cholesky([[1.0, 1.0], [1.0, 1.0]], strict=True)
        np.testing.assert_allclose(factor, [[1.0, 0.0], [1.0, 0.0]])

    def test_structural_errors(self):
        """Test that non-square or non-finite matrices raise error."""
        with self.assertRaises(InvalidCovariance):
            cholesky([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        with self.assertRaises(InvalidCovariance):
            cholesky([[1.0, math.nan], [math.nan, 1.0]])


class TestVariateGenerator(unittest.TestCase):
    """Tests for VariateGenerator."""

    def test_seed_reproducibility(self):
        """Test that the same seed gives the same draws."""
        a = VariateGenerator(seed=42)
        b = VariateGenerator(seed=42)
        self.assertEqual([a.standard_normal() for _ in range(10)],
                         [b.standard_normal() for _ in range(10)])

    def test_different_seeds(self):
        """Test that different seeds give different draws."""
        self.assertNotEqual(VariateGenerator(seed=1).standard_normal(),
                            VariateGenerator(seed=2).standard_normal())

    def test_normal_moments(self):
        """Test the mean and spread of many standard normals."""
        gen = VariateGenerator(seed=123)
        draws = np.array(gen.standard_normals(20000))
        self.assertAlmostEqual(draws.mean(), 0.0, delta=0.05)
        self.assertAlmostEqual(draws.std(), 1.0, delta=0.05)

    def test_normal_scaling(self):
        """Test that normal() scales a standard normal."""
        z = VariateGenerator(seed=9).standard_normal()
        self.assertAlmostEqual(VariateGenerator(seed=9).normal(0.05, 0.2), z * 0.2 + 0.05)

    def test_uniform_open_interval(self):
        """Test that uniforms fall strictly inside (0, 1)."""
        gen = VariateGenerator(seed=3)
        for _ in range(1000):
            u = gen.uniform()
            self.assertTrue(0.0 < u < 1.0)

    def test_apply_factor_reads_lower_triangle(self):
        """Test that the upper triangle of the factor is ignored."""
        factor = np.array([[1.0, 99.0], [0.5, 2.0]])
        np.testing.assert_allclose(apply_factor(factor, [1.0, 1.0]), [1.0, 2.5])

    def test_trial_streams_independent_of_count(self):
        """A trial's stream depends only on the seed and its index."""
        few = spawn_trial_generators(7, 2)
        many = spawn_trial_generators(7, 10)
        self.assertEqual(few[1].standard_normal(), many[1].standard_normal())
        self.assertNotEqual(many[0].standard_normal(), many[2].standard_normal())


class TestAssetReturnModel(unittest.TestCase):
    """Tests for AssetReturnModel."""

    def test_zero_volatility_returns_means(self):
        """Test that zero volatility returns the means."""
        model = AssetReturnModel(two_asset_market(0.03, 0.0, 0.07, 0.0))
        returns = model.draw_returns(VariateGenerator(seed=1), year=1)
        np.testing.assert_allclose(returns, [0.03, 0.07])

    def test_overrides(self):
        """Test that overrides replace catalog means and volatilities."""
        options = EngineOptions(asset_overrides={"b": AssetOverride(mean=0.10, sd=0.0)})
        model = AssetReturnModel(two_asset_market(0.0, 0.0, 0.07, 0.2), options)
        self.assertEqual(model.means[1], 0.10)
        self.assertEqual(model.sds[1], 0.0)

    def test_unknown_override_raises(self):
        """Test that an override for an unknown asset raises error."""
        options = EngineOptions(asset_overrides={"zzz": AssetOverride(mean=0.1)})
        with self.assertRaises(InvalidInput):
            AssetReturnModel(two_asset_market(), options)

    def test_unknown_shock_asset_raises(self):
        """Test that a shock on an unknown asset raises error."""
        options = EngineOptions(stress=StressOptions(equity_shocks=[EquityShock(-20, 1, "zzz")]))
        with self.assertRaises(InvalidInput):
            AssetReturnModel(two_asset_market(), options)

    def test_equity_shock_applied_only_in_its_year(self):
        """Test that a shock only hits its target asset in its year."""
        market = MarketAssumptions.create_default()
        options = EngineOptions(stress=StressOptions(equity_shocks=[EquityShock(pct=-50, year=3)]))
        model = AssetReturnModel(market, options)

        base = model.draw_base_returns(VariateGenerator(seed=5))
        shocked = model.draw_returns(VariateGenerator(seed=5), year=3)
        self.assertAlmostEqual(shocked[0], (1 + base[0]) * 0.5 - 1)
        np.testing.assert_array_equal(shocked[1:], base[1:])

        unshocked = model.draw_returns(VariateGenerator(seed=5), year=2)
        np.testing.assert_array_equal(unshocked, base)

    def test_shocks_compound(self):
        """Test that shocks in the same year compound."""
        shocks = [EquityShock(-50, 1, "b"), EquityShock(-50, 1, "b")]
        model = AssetReturnModel(two_asset_market(0.0, 0.0, 0.0, 0.0),
                                 EngineOptions(stress=StressOptions(equity_shocks=shocks)))
        returns = model.draw_returns(VariateGenerator(seed=1), year=1)
        np.testing.assert_allclose(returns, [0.0, -0.75])

    def test_cpi_floor_and_shift(self):
        """Test that shifted CPI is floored."""
        market = MarketAssumptions.create_default()
        options = EngineOptions(stress=StressOptions(cpi_shifts=[CpiShift(-50, 1, 2)]))
        model = AssetReturnModel(market, options)
        gen = VariateGenerator(seed=11)
        self.assertEqual(model.draw_cpi(gen, 1), market.cpi_floor)
        self.assertGreater(model.draw_cpi(gen, 3), market.cpi_floor)

    def test_replacement_correlation_matrix(self):
        """Test that a replacement correlation matrix is factored."""
        market = two_asset_market(0.0, 0.1, 0.0, 0.1, rho=0.5)
        model = AssetReturnModel(market, EngineOptions(correlation_matrix=np.eye(2)))
        np.testing.assert_array_equal(model.factor, np.eye(2))


class TestPortfolioEngine(unittest.TestCase):
    """Tests for PortfolioEngine."""

    def make_engine(self, spending_policy=None, rebalancing=None, **input_kwargs):
        input_kwargs.setdefault("initial_capital", 1000.0)
        input_kwargs.setdefault("portfolio_weights", {"a": 50, "b": 50})
        inputs = SimulationInputs(**input_kwargs)
        options = EngineOptions(spending_policy=spending_policy or SpendingPolicyOptions(),
                                rebalancing=rebalancing or RebalanceOptions())
        return PortfolioEngine(inputs, options, np.array([0.5, 0.5]))

    def test_annual_rebalance_restores_weights(self):
        """Test that annual rebalancing restores target weights."""
        engine = self.make_engine()
        state = engine.new_trial()
        record = engine.step(state, 0, np.array([0.1, -0.1]), 0.02)
        np.testing.assert_allclose(state.sleeves, [500.0, 500.0])
        self.assertAlmostEqual(record.end_value, 1000.0)
        self.assertAlmostEqual(record.portfolio_return, 0.0)

    def test_annual_rebalance_conserves_weights_over_many_years(self):
        """Test weights over twenty rebalanced years."""
        market = MarketAssumptions.create_default()
        weights = market.weights_vector({"publicEquity": 60, "privateCredit": 25, "cashShortTerm": 15})
        inputs = SimulationInputs(initial_capital=1e6, spending_rate=4,
                                  portfolio_weights={"publicEquity": 60, "privateCredit": 25,
                                                     "cashShortTerm": 15})
        engine = PortfolioEngine(inputs, EngineOptions(), weights)
        model = AssetReturnModel(market)
        gen = VariateGenerator(seed=2)
        state = engine.new_trial()
        for year_index in range(20):
            engine.step(state, year_index, model.draw_returns(gen, year_index + 1), 0.02)
            if state.total > 0:
                np.testing.assert_allclose(state.sleeves / state.total, weights, atol=1e-12)

    def test_never_rebalance_lets_weights_drift(self):
        """Test that sleeves drift without rebalancing."""
        engine = self.make_engine(rebalancing=RebalanceOptions(frequency=RebalanceFrequency.NEVER))
        state = engine.new_trial()
        engine.step(state, 0, np.array([0.1, -0.1]), 0.02)
        np.testing.assert_allclose(state.sleeves, [550.0, 450.0])

    def test_band_rebalance(self):
        """Test that drift past the band triggers a rebalance."""
        rebalancing = RebalanceOptions(band_pct=4, frequency=RebalanceFrequency.NEVER)
        engine = self.make_engine(rebalancing=rebalancing)
        state = engine.new_trial()
        engine.step(state, 0, np.array([0.1, -0.1]), 0.02)
        np.testing.assert_allclose(state.sleeves, [500.0, 500.0])

    def test_outflow_removed_after_returns(self):
        """Test that spending and fees leave after returns."""
        engine = self.make_engine(spending_rate=5, investment_expense_rate=1)
        state = engine.new_trial()
        record = engine.step(state, 0, np.array([0.1, 0.1]), 0.02)
        self.assertAlmostEqual(record.spending_policy, 50.0)
        self.assertAlmostEqual(record.investment_expense, 10.0)
        self.assertAlmostEqual(record.end_value, 1100.0 - 60.0)

    def test_outflow_larger_than_value_floors_at_zero(self):
        """Test that an exhausted portfolio stays at zero."""
        engine = self.make_engine(spending_rate=100, investment_expense_rate=50)
        state = engine.new_trial()
        record = engine.step(state, 0, np.array([-0.5, -0.5]), 0.02)
        self.assertEqual(record.end_value, 0.0)
        record = engine.step(state, 1, np.array([0.2, 0.2]), 0.02)
        self.assertEqual(record.end_value, 0.0)

    def test_trailing_smoothing_base(self):
        """Test the trailing three-year spending base."""
        engine = self.make_engine(spending_policy=SpendingPolicyOptions(smoothing=Smoothing.TRAILING_3))
        state = engine.new_trial()
        self.assertEqual(engine.spending_base(state, 1000.0), 1000.0)
        state.end_values.extend([100.0, 200.0, 300.0, 400.0])
        self.assertEqual(engine.spending_base(state, 1000.0), 300.0)

    def test_fixed_band_clamps_after_first_year(self):
        """Test fixed band clamping of year-over-year spending."""
        band = FixedBand(floor=-0.02, cap=0.05)
        engine = self.make_engine(spending_policy=SpendingPolicyOptions(band=band), spending_rate=5)
        state = engine.new_trial()
        self.assertEqual(engine.spending_amount(state, 1000.0, 0.02), 50.0)
        state.last_spend = 100.0
        self.assertAlmostEqual(engine.spending_amount(state, 1000.0, 0.02), 98.0)
        self.assertAlmostEqual(engine.spending_amount(state, 4000.0, 0.02), 105.0)

    def test_cpi_linked_band(self):
        """Test that a CPI-linked band floors spending at inflation."""
        engine = self.make_engine(spending_policy=SpendingPolicyOptions(band=CpiLinkedBand()),
                                  spending_rate=5)
        state = engine.new_trial()
        state.last_spend = 100.0
        self.assertAlmostEqual(engine.spending_amount(state, 10.0, 0.03), 103.0)

    def test_operating_expense_and_grants(self):
        """Test operating expense growth and grant top-ups."""
        engine = self.make_engine(spending_rate=5, initial_operating_expense=10,
                                  initial_grant=15, grant_targets=[20, 100])
        state = engine.new_trial()
        first = engine.step(state, 0, np.array([0.0, 0.0]), 0.02)
        self.assertEqual(first.operating_expense, 10.0)
        self.assertEqual(first.grant, 20.0)
        self.assertAlmostEqual(first.total_spending, 10.0 + 20.0 + 0.0)

        second = engine.step(state, 1, np.array([0.0, 0.0]), 0.02)
        self.assertAlmostEqual(second.operating_expense, 10.2)
        # Policy grant (spend - opex) is topped up to the target
        self.assertAlmostEqual(second.grant, 100.0)


class TestReferencePaths(unittest.TestCase):
    """Tests for BenchmarkPath and CorpusPath."""

    def setUp(self):
        self.market = two_asset_market()
        self.inputs = SimulationInputs(initial_capital=100.0, spending_rate=5,
                                       investment_expense_rate=1,
                                       portfolio_weights={"a": 100})

    def test_cpi_plus_with_drag(self):
        """Test CPI plus spread growth less spending drag."""
        path = BenchmarkPath(CpiPlusBenchmark(spread=0.06), self.market, self.inputs)
        self.assertAlmostEqual(path.step(100.0, np.array([0.0, 0.0]), 0.02), 108.0 * 0.94)

    def test_fixed_rate(self):
        """Test a fixed-rate benchmark."""
        path = BenchmarkPath(FixedBenchmark(rate=0.04), self.market, self.inputs)
        self.assertAlmostEqual(path.growth_rate(np.array([0.5, 0.5]), 0.02), 0.04)

    def test_asset_class(self):
        """Test a single asset class benchmark."""
        path = BenchmarkPath(AssetClassBenchmark("b"), self.market, self.inputs)
        self.assertAlmostEqual(path.growth_rate(np.array([0.01, 0.09]), 0.02), 0.09)
        with self.assertRaises(InvalidInput):
            BenchmarkPath(AssetClassBenchmark("zzz"), self.market, self.inputs)

    def test_blend_renormalizes_and_ignores_unknown(self):
        """Test that a blend skips unknown keys and renormalizes."""
        blend = BlendedBenchmark({"a": 30, "b": 10, "zzz": 60})
        path = BenchmarkPath(blend, self.market, self.inputs)
        self.assertAlmostEqual(path.growth_rate(np.array([0.04, 0.08]), 0.02), 0.05)

    def test_blend_without_usable_weight_earns_nothing(self):
        """Test that a blend with no catalog weight grows by zero, not CPI plus spread."""
        path = BenchmarkPath(BlendedBenchmark({"zzz": 100, "a": 0}), self.market, self.inputs)
        self.assertEqual(path.growth_rate(np.array([0.5, 0.5]), 0.02), 0.0)
        self.assertAlmostEqual(path.step(100.0, np.array([0.5, 0.5]), 0.02), 94.0)

    def test_benchmark_floors_at_zero(self):
        """Test that the benchmark cannot go negative."""
        path = BenchmarkPath(FixedBenchmark(rate=-2.0), self.market, self.inputs)
        self.assertEqual(path.step(100.0, np.array([0.0, 0.0]), 0.02), 0.0)

    def test_corpus(self):
        """Test that the corpus grows with CPI only."""
        corpus = CorpusPath(CorpusOptions(), self.inputs)
        self.assertEqual(corpus.initial_value, 100.0)
        self.assertAlmostEqual(corpus.step(100.0, 0.03), 103.0)
        self.assertEqual(CorpusPath(CorpusOptions(initial_value=50), self.inputs).initial_value, 50)


if __name__ == '__main__':
    unittest.main()
