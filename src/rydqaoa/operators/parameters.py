"""Scalar-or-per-site Hamiltonian parameters."""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

from typing import Sequence, TypeAlias

import jax
import jax.numpy as jnp

__all__ = [
    "ParameterType",
    "getscalarmaybe",
    "is_zero",
    "site_values",
]

# A single value shared by every site, or one value per site.
ParameterType: TypeAlias = float | int | jax.Array | Sequence[float]


def site_values(value: ParameterType, n_sites: int) -> jax.Array:
    """Return ``value`` as a float64 array of shape ``(n_sites,)``."""
    arr = jnp.asarray(value, dtype=jnp.float64)
    if arr.ndim == 0:
        return jnp.full((n_sites,), arr, dtype=jnp.float64)
    if arr.shape != (n_sites,):
        raise ValueError(
            f"Per-site parameter must have shape ({n_sites},), got {arr.shape}."
        )
    return arr


def getscalarmaybe(value: ParameterType, k: int) -> jax.Array:
    """Value of the parameter at site ``k``."""
    arr = jnp.asarray(value, dtype=jnp.float64)
    if arr.ndim == 0:
        return arr
    return arr[k]


def is_zero(value: ParameterType) -> bool:
    return not bool(jnp.any(jnp.asarray(value) != 0))
