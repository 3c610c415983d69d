"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: reusable objects or setup logic shared across multiple test files.
- **Pytest hooks**: project-wide customizations of pytest behavior.

Notes
-----
- Contributors should install the package in editable mode
  (`pip install -e ".[test]"`) so that imports are resolved consistently in
  local dev and CI environments.
- Keep this file focused on test setup. Do not add application logic here.
"""

import jax.numpy as jnp
import jax.random as jr
import pytest

from invreg import TrainingSet, fourier_features, grid_support


def make_sine_training_set(n: int, noise: float, seed: int = 0) -> TrainingSet:
    """z = sin(2π w) + N(0, noise²) at n uniform positions in [0, 1)."""
    key_w, key_z = jr.split(jr.PRNGKey(seed))
    w = jr.uniform(key_w, (n,))
    z = jnp.sin(2 * jnp.pi * w) + noise * jr.normal(key_z, (n,))
    return TrainingSet.from_arrays(w, z)


@pytest.fixture
def sine_training_set():
    """50 noisy samples of a sine cycle."""
    return make_sine_training_set(50, noise=0.1)


@pytest.fixture
def fourier_map():
    """[1, sin(2πw), cos(2πw)] on [0, 1]."""
    return fourier_features(n_harmonics=1, period=1.0)


@pytest.fixture
def unit_support():
    """100 evenly spaced candidates in [0, 1]."""
    return grid_support(0.0, 1.0, 100)


@pytest.fixture
def sine_beta():
    """Coefficients of z = sin(2πw) under the Fourier map."""
    return jnp.array([0.0, 1.0, 0.0])
