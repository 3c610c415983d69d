"""
rng.py
------

Random number utilities for invreg.

Standardizes PRNG handling so that every Monte-Carlo run is reproducible
from a single integer seed.

Key assignment
--------------
A run seeded with ``seed`` uses

    key                      = PRNGKey(seed)
    key_params, key_weights  = split(key)
    weight key of draw s     = split(key_weights, S)[s]

``key_params`` drives all parameter draws; the per-draw weight keys are
independent, so no two draws share Gamma prior weights.

Examples
--------
>>> from invreg.utils.rng import seed, split
>>> key = seed(0)
>>> k1, k2 = split(key)
"""

from __future__ import annotations

import jax
import jax.random as jr


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2):
    """
    Split a PRNG key into multiple independent keys.

    Parameters
    ----------
    key : jax.Array
        RNG key to split.
    num : int, default=2
        Number of new keys to return.

    Returns
    -------
    jax.Array
        Independent new PRNG keys, leading dimension ``num``.
    """
    return jr.split(key, num=num)


def draw_keys(seed_value: int, n_draws: int) -> tuple[jax.Array, jax.Array]:
    """
    Derive the keys of a Monte-Carlo run.

    Parameters
    ----------
    seed_value : int
        Run seed.
    n_draws : int
        Number of Monte-Carlo draws S.

    Returns
    -------
    key_params : jax.Array
        Single key for the parameter posterior sampler.
    weight_keys : jax.Array, shape (n_draws, 2)
        One independent key per draw for the posterior weighting step.
    """
    key_params, key_weights = split(seed(seed_value))
    return key_params, split(key_weights, n_draws)
