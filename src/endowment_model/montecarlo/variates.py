# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Seedable random variate generation.

A VariateGenerator wraps an explicit numpy bit generator and produces standard
normal variates with the Box-Muller transform. Seeded generators use the
counter-based Philox bit generator so a seed reproduces the same stream on any
platform. Each trial of a run gets its own sub-stream derived from the run's
SeedSequence, which keeps results independent of how trials are scheduled.
"""

import math
from typing import List, Optional
import numpy as np


class VariateGenerator:
    """Explicit random source for the kernel.

    Example:
        >>> gen = VariateGenerator(seed=42)
        >>> z = gen.standard_normal()
        >>> x = gen.correlated_normals(np.eye(3))
    """

    def __init__(self,
                 seed: Optional[int] = None,
                 seed_sequence: Optional[np.random.SeedSequence] = None):
        """Initialize the generator.

        Args:
            seed: Integer seed for a reproducible Philox stream
            seed_sequence: SeedSequence for a reproducible Philox stream;
                takes precedence over seed

        With neither argument the platform default generator is used and the
        stream is not reproducible.
        """
        if seed_sequence is not None:
            self._rng = np.random.Generator(np.random.Philox(seed_sequence))
        elif seed is not None:
            self._rng = np.random.Generator(np.random.Philox(seed))
        else:
            self._rng = np.random.default_rng()

    def uniform(self) -> float:
        """Draw a uniform variate on the open interval (0, 1)."""
        u = 0.0
        while u == 0.0:
            u = float(self._rng.random())
        return u

    def standard_normal(self) -> float:
        """Draw a standard normal variate (Box-Muller, cosine branch)."""
        u = self.uniform()
        v = self.uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def normal(self, mean: float = 0.0, sd: float = 1.0) -> float:
        """Draw a normal variate with the given mean and standard deviation."""
        return self.standard_normal() * sd + mean

    def standard_normals(self, n: int) -> List[float]:
        """Draw n independent standard normal variates."""
        return [self.standard_normal() for _ in range(n)]

    def correlated_normals(self, factor: np.ndarray) -> np.ndarray:
        """Draw correlated standard normals x = L @ z.

        Args:
            factor: Lower triangular Cholesky factor L

        Returns:
            numpy array of length len(factor)
        """
        n = len(factor)
        z = self.standard_normals(n)
        return apply_factor(factor, z)


def apply_factor(factor: np.ndarray, z) -> np.ndarray:
    """Multiply a lower triangular factor by a vector of independent normals.

    Only the lower triangle is read and terms are summed in column order, so
    the result doesn't depend on the linear algebra backend.
    """
    n = len(factor)
    x = np.zeros(n)
    for i in range(n):
        total = 0.0
        for k in range(i + 1):
            total += factor[i][k] * z[k]
        x[i] = total
    return x


def run_entropy(seed: Optional[int]) -> int:
    """Resolve the root entropy of a run.

    A seeded run uses the seed itself. An unseeded run draws fresh entropy once
    so that every trial of the run still shares a single root sequence.
    """
    if seed is not None:
        return int(seed)
    return int(np.random.SeedSequence().entropy)


def trial_generator(entropy: int, trial_index: int) -> VariateGenerator:
    """Build the generator of one trial.

    The SeedSequence is identical to child ``trial_index`` of
    ``SeedSequence(entropy).spawn(...)``, so a trial's stream depends only on
    the run entropy and its own index.
    """
    seq = np.random.SeedSequence(entropy, spawn_key=(trial_index,))
    return VariateGenerator(seed_sequence=seq)


def spawn_trial_generators(seed: Optional[int], trials: int) -> List[VariateGenerator]:
    """Create one independent generator per trial."""
    entropy = run_entropy(seed)
    return [trial_generator(entropy, i) for i in range(trials)]
