# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation outputs.

This module provides the SimulationOutputs record: one (trials x years) matrix
per reported series, plus views for per-year percentile bands and a long-format
DataFrame.
"""

from dataclasses import dataclass, fields
from typing import Dict, List, Optional
import numpy as np
import pandas as pd

from .analytics import percentile, percentiles_by_year


@dataclass(frozen=True)
class SimulationOutputs:
    """Per-trial, per-year series of a completed run.

    Every attribute is a read-only float matrix indexed [trial][year]. Disabled
    benchmark or corpus paths are filled with NaN.

    Example:
        >>> outputs = simulate(inputs, EngineOptions(trials=1000, seed=7))
        >>> outputs.final_values.mean()
        >>> outputs.get_percentile_df('values')
    """
    values: np.ndarray
    operating_expenses: np.ndarray
    grants: np.ndarray
    spending_policy: np.ndarray
    investment_expenses: np.ndarray
    total_spending: np.ndarray
    portfolio_returns: np.ndarray
    benchmarks: np.ndarray
    corpus: np.ndarray
    cpi_rates: np.ndarray
    cpi_index: np.ndarray
    year_labels: Optional[List[int]] = None

    # Percentile bands reported for per-year views
    PERCENTILES = {
        "P10": 10,
        "P25": 25,
        "Median": 50,
        "P75": 75,
        "P90": 90,
    }

    def __post_init__(self):
        shape = np.shape(self.values)
        for name in self.series_names():
            matrix = np.array(getattr(self, name), dtype=float)
            if matrix.shape != shape:
                raise ValueError(f"Series '{name}' has shape {matrix.shape}, expected {shape}")
            matrix.setflags(write=False)
            object.__setattr__(self, name, matrix)
        if self.year_labels is None:
            object.__setattr__(self, 'year_labels', list(range(1, shape[1] + 1)))

    @classmethod
    def series_names(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.name != 'year_labels']

    @property
    def num_trials(self) -> int:
        return self.values.shape[0]

    @property
    def num_years(self) -> int:
        return self.values.shape[1]

    @property
    def final_values(self) -> np.ndarray:
        """Final year portfolio value of every trial."""
        return self.values[:, -1]

    def series(self, name: str) -> np.ndarray:
        """Get a series matrix by name.

        Raises:
            ValueError: If the name is not a reported series
        """
        if name not in self.series_names():
            raise ValueError(f"Series '{name}' not found. Available: {self.series_names()}")
        return getattr(self, name)

    def get_percentile_data(self, name: str = 'values') -> Dict[str, List[float]]:
        """Get percentile bands for a series across years.

        Returns:
            Dict mapping band names to lists of values (one per year)
        """
        bands = percentiles_by_year(self.series(name), tuple(self.PERCENTILES.values()))
        return {label: bands[p] for label, p in self.PERCENTILES.items()}

    def get_percentile_df(self, name: str = 'values') -> pd.DataFrame:
        """Get percentile bands as a DataFrame with years as index."""
        df = pd.DataFrame(self.get_percentile_data(name))
        df['Year'] = self.year_labels
        return df.set_index('Year')

    def get_statistics(self, name: str = 'values', year_idx: int = -1) -> Dict[str, float]:
        """Get summary statistics of a series for one year.

        Args:
            name: Series to analyze
            year_idx: Year index (-1 for final year, 0 for first year)
        """
        values = self.series(name)[:, year_idx]
        values = values[np.isfinite(values)]
        if len(values) == 0:
            return {}

        stats = {
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
        }
        for label, p in (('p10', 10), ('p25', 25), ('p50', 50), ('p75', 75), ('p90', 90)):
            stats[label] = percentile(values, p)
        return stats

    def to_dataframe(self) -> pd.DataFrame:
        """Long-format view with one row per trial and year."""
        trials, years = self.values.shape
        data = {
            'trial': np.repeat(np.arange(trials), years),
            'year': np.tile(np.asarray(self.year_labels), trials),
        }
        for name in self.series_names():
            data[name] = getattr(self, name).reshape(-1)
        return pd.DataFrame(data)

    def __repr__(self) -> str:
        return (f"SimulationOutputs(num_trials={self.num_trials}, "
                f"num_years={self.num_years})")
