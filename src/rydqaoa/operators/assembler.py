"""Sparse Rydberg Hamiltonian assembly in the blockade subspace.

Matrix index i is the position of configuration ``lhs`` in the subspace.

* detuning: ``H[i, i] = sum_k (+Delta_k if site k empty else -Delta_k)``
* drive: for each site k, ``rhs = lhs ^ (1 << k)``; if ``rhs`` is in the
  subspace at index j, ``H[i, j] = Omega_k exp(+i phi_k)`` when site k is
  empty in ``lhs`` and ``Omega_k exp(-i phi_k)`` when it is occupied.

Flipping a bit is an involution, so (i, j) and (j, i) are both filled with
conjugate values and the assembled matrix is Hermitian without a separate
symmetrization pass.
"""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import logging
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax.experimental import sparse as jsparse
from plum import dispatch

from rydqaoa.operators.parameters import ParameterType, is_zero, site_values
from rydqaoa.operators.rydberg import AbstractRydbergHamiltonian
from rydqaoa.space import GraphLike, Subspace, as_subspace
from rydqaoa.utils.bits import flip, occupancy_to_sign, occupations, readbit, site_masks

logger = logging.getLogger(__name__)

__all__ = [
    "DrivePattern",
    "HamiltonianBuffer",
    "drive_pattern",
    "drive_values",
    "sigma_x_term",
    "sigma_z_term",
    "to_matrix",
    "to_matrix_",
]


class HamiltonianBuffer:
    """Reusable sparse matrix buffer of fixed dimension.

    ``assign`` has element-assignment semantics: writing an existing (row, col)
    replaces the stored value. ``clear`` drops every stored entry, zero or not.
    """

    def __init__(self, dim: int, dtype=jnp.complex128):
        self.dim = int(dim)
        self.dtype = jnp.dtype(dtype)
        self.clear()

    @property
    def nse(self) -> int:
        """Number of stored entries."""
        return int(self.data.shape[0])

    def clear(self) -> None:
        self.rows = jnp.zeros((0,), dtype=jnp.int32)
        self.cols = jnp.zeros((0,), dtype=jnp.int32)
        self.data = jnp.zeros((0,), dtype=self.dtype)

    def _keys(self, rows: jax.Array, cols: jax.Array) -> jax.Array:
        return rows.astype(jnp.int64) * self.dim + cols.astype(jnp.int64)

    def assign(self, rows: jax.Array, cols: jax.Array, values: jax.Array) -> None:
        rows = jnp.asarray(rows, dtype=jnp.int32).reshape(-1)
        cols = jnp.asarray(cols, dtype=jnp.int32).reshape(-1)
        values = jnp.broadcast_to(jnp.asarray(values, dtype=self.dtype), rows.shape)
        if self.nse and rows.shape[0]:
            new_keys = jnp.sort(self._keys(rows, cols))
            old_keys = self._keys(self.rows, self.cols)
            pos = jnp.searchsorted(new_keys, old_keys)
            pos = jnp.clip(pos, 0, new_keys.shape[0] - 1)
            keep = new_keys[pos] != old_keys
            self.rows = self.rows[keep]
            self.cols = self.cols[keep]
            self.data = self.data[keep]
        self.rows = jnp.concatenate([self.rows, rows])
        self.cols = jnp.concatenate([self.cols, cols])
        self.data = jnp.concatenate([self.data, values])

    def tobcoo(self) -> jsparse.BCOO:
        indices = jnp.stack([self.rows, self.cols], axis=1)
        return jsparse.BCOO((self.data, indices), shape=(self.dim, self.dim))

    def todense(self) -> jax.Array:
        return self.tobcoo().todense()


class DrivePattern(NamedTuple):
    """Allowed single-site flips of a subspace, in row-major (row, site) order."""

    rows: jax.Array
    cols: jax.Array
    sites: jax.Array
    raising: jax.Array


def drive_pattern(subspace: Subspace) -> DrivePattern:
    """Tabulate every blockade-allowed single-site flip of ``subspace``.

    Depends only on the subspace, so it can be computed once and reused for
    any number of (Omega, phi) fills.
    """
    n, m = subspace.n_sites, subspace.dim
    sites = jnp.arange(n, dtype=jnp.int32)
    lhs = subspace.configs[:, None]
    rhs = flip(lhs, site_masks(n)[None, :])
    cols, found = subspace.index(rhs)
    rows = jnp.broadcast_to(jnp.arange(m, dtype=jnp.int32)[:, None], (m, n))
    raising = readbit(lhs, sites[None, :]) == 0
    return DrivePattern(
        rows=rows[found],
        cols=cols[found],
        sites=jnp.broadcast_to(sites[None, :], (m, n))[found],
        raising=raising[found],
    )


def drive_values(
    pattern: DrivePattern, Omega: ParameterType, phi: ParameterType, n_sites: int
) -> jax.Array:
    omega = site_values(Omega, n_sites)[pattern.sites]
    phase = site_values(phi, n_sites)[pattern.sites]
    sign = jnp.where(pattern.raising, 1.0, -1.0)
    return omega * jnp.exp(1j * sign * phase)


def sigma_x_term(
    subspace: Subspace, Omega: ParameterType, phi: ParameterType
) -> tuple[jax.Array, jax.Array, jax.Array]:
    """Drive term ``sum_k Omega_k (e^{i phi_k}|0><1| + e^{-i phi_k}|1><0|)_k``.

    Returns:
        ``(rows, cols, values)`` of the nonzero entries.
    """
    pattern = drive_pattern(subspace)
    return pattern.rows, pattern.cols, drive_values(pattern, Omega, phi, subspace.n_sites)


def sigma_z_term(subspace: Subspace, Delta: ParameterType) -> jax.Array:
    """Diagonal of the detuning term ``sum_k Delta_k sigma^z_k``."""
    signs = occupancy_to_sign(occupations(subspace.configs, subspace.n_sites))
    delta = site_values(Delta, subspace.n_sites)
    return (signs.astype(jnp.float64) @ delta).astype(jnp.complex128)


def to_matrix_(
    dst: HamiltonianBuffer,
    subspace: Subspace,
    Omega: ParameterType,
    phi: ParameterType,
    Delta: ParameterType | None = None,
    *,
    pattern: DrivePattern | None = None,
) -> HamiltonianBuffer:
    """Fill ``dst`` in place; the detuning term is skipped when ``Delta`` is None.

    ``pattern`` may be a precomputed :func:`drive_pattern` of ``subspace``.
    """
    if dst.dim != subspace.dim:
        raise ValueError(
            f"Buffer dimension {dst.dim} does not match subspace dimension {subspace.dim}."
        )
    if Delta is not None:
        diag = jnp.arange(subspace.dim, dtype=jnp.int32)
        dst.assign(diag, diag, sigma_z_term(subspace, Delta))
    if pattern is None:
        pattern = drive_pattern(subspace)
    dst.assign(
        pattern.rows,
        pattern.cols,
        drive_values(pattern, Omega, phi, subspace.n_sites),
    )
    return dst


@dispatch
def to_matrix(target: Subspace | GraphLike, Omega, phi, Delta=None) -> jsparse.BCOO:
    """Rydberg Hamiltonian in the blockade subspace of ``target``.

    Args:
        target: Interaction graph or an already built subspace.
        Omega: Rabi amplitude, scalar or per-site.
        phi: Drive phase, scalar or per-site.
        Delta: Detuning, scalar or per-site; omitted for a pure drive.

    Returns:
        Hermitian ``BCOO`` matrix of shape ``(m, m)``, ``m = len(subspace)``.
    """
    space = as_subspace(target)
    dst = HamiltonianBuffer(space.dim)
    to_matrix_(dst, space, Omega, phi, Delta)
    logger.debug("to_matrix: dim=%d nse=%d", dst.dim, dst.nse)
    return dst.tobcoo()


@to_matrix.dispatch
def to_matrix(
    h: AbstractRydbergHamiltonian, target: Subspace | GraphLike
) -> jsparse.BCOO:
    Delta = h.effective_Delta()
    return to_matrix(
        target,
        h.effective_Omega(),
        h.effective_phi(),
        None if is_zero(Delta) else Delta,
    )
