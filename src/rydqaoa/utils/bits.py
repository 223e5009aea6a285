"""Bitmask helpers for occupation configurations.

A configuration of ``n`` sites is an int64 code whose bit ``k`` is the
occupation of site ``k`` (1 = Rydberg/excited, 0 = ground).
"""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

from typing import Sequence

import jax
import jax.numpy as jnp

__all__ = [
    "config_codes",
    "flip",
    "independent_set_violations",
    "occupancy_to_sign",
    "occupations",
    "readbit",
    "site_masks",
]

CODE_DTYPE = jnp.int64
MAX_SITES = 62


def site_masks(n_sites: int) -> jax.Array:
    """Return ``1 << k`` for every site ``k``."""
    if not 0 <= n_sites <= MAX_SITES:
        raise ValueError(f"n_sites must be in [0, {MAX_SITES}], got {n_sites}.")
    return jnp.left_shift(
        jnp.asarray(1, dtype=CODE_DTYPE), jnp.arange(n_sites, dtype=CODE_DTYPE)
    )


def readbit(configs: jax.Array, site: int | jax.Array) -> jax.Array:
    """Occupation (0/1) of ``site`` for each configuration."""
    configs = jnp.asarray(configs, dtype=CODE_DTYPE)
    return jnp.bitwise_and(
        jnp.right_shift(configs, jnp.asarray(site, dtype=CODE_DTYPE)), 1
    )


def flip(configs: jax.Array, mask: int | jax.Array) -> jax.Array:
    """Flip the bits selected by ``mask``."""
    configs = jnp.asarray(configs, dtype=CODE_DTYPE)
    return jnp.bitwise_xor(configs, jnp.asarray(mask, dtype=CODE_DTYPE))


def occupations(configs: jax.Array, n_sites: int) -> jax.Array:
    """Expand codes into a ``(len(configs), n_sites)`` 0/1 matrix."""
    configs = jnp.asarray(configs, dtype=CODE_DTYPE).reshape(-1)
    sites = jnp.arange(n_sites, dtype=CODE_DTYPE)
    return readbit(configs[:, None], sites[None, :]).astype(jnp.int32)


def config_codes(occupancies: jax.Array) -> jax.Array:
    """Pack 0/1 rows back into configuration codes."""
    occupancies = jnp.asarray(occupancies, dtype=CODE_DTYPE)
    n_sites = occupancies.shape[-1]
    return jnp.sum(occupancies * site_masks(n_sites), axis=-1)


def occupancy_to_sign(occupancies: jax.Array) -> jax.Array:
    """sigma^z eigenvalue of each site: +1 for ground (0), -1 for excited (1)."""
    return (1 - 2 * jnp.asarray(occupancies)).astype(jnp.int32)


def independent_set_violations(
    configs: jax.Array, edges: Sequence[tuple[int, int]]
) -> jax.Array:
    """Flag configurations that occupy both endpoints of any edge."""
    configs = jnp.asarray(configs, dtype=CODE_DTYPE).reshape(-1)
    if len(edges) == 0:
        return jnp.zeros(configs.shape, dtype=jnp.bool_)
    u, v = (jnp.asarray(side, dtype=CODE_DTYPE) for side in zip(*edges))
    both = readbit(configs[:, None], u[None, :]) & readbit(configs[:, None], v[None, :])
    return jnp.any(both == 1, axis=-1)
