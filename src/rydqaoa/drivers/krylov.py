"""Krylov-subspace approximation of ``exp(t A) b``.

The workspace has a fixed shape ``(dim, k)``. ``arnoldi`` is jitted on that
shape, so a sequence of operators with the same dimension and sparsity reuses
one compiled kernel, while the basis itself is rebuilt for every operator.
"""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import functools
import logging
from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
import jax.scipy as jsp

logger = logging.getLogger(__name__)

__all__ = [
    "KrylovConvergenceError",
    "KrylovSubspace",
    "arnoldi",
    "check_convergence",
    "expmv",
    "expv",
    "krylov_subspace",
]


class KrylovConvergenceError(RuntimeError):
    """The Krylov basis is too small for the requested exponential action."""


@jax.tree_util.register_pytree_node_class
@dataclass(frozen=True, eq=False)
class KrylovSubspace:
    """Orthonormal basis ``V`` and projected matrix ``H`` with ``A V_k = V H``."""

    V: jax.Array
    H: jax.Array
    beta: jax.Array

    @property
    def dim(self) -> int:
        return self.V.shape[0]

    @property
    def m(self) -> int:
        return self.H.shape[1]

    def tree_flatten(self):
        return (self.V, self.H, self.beta), ()

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        del aux_data
        V, H, beta = children
        return cls(V=V, H=H, beta=beta)


def krylov_subspace(dim: int, m: int, dtype=jnp.complex128) -> KrylovSubspace:
    """Allocate a zeroed workspace with ``m = min(m, dim)`` basis vectors."""
    m = max(1, min(int(m), int(dim)))
    return KrylovSubspace(
        V=jnp.zeros((dim, m + 1), dtype=dtype),
        H=jnp.zeros((m + 1, m), dtype=dtype),
        beta=jnp.zeros((), dtype=jnp.real(jnp.zeros((), dtype=dtype)).dtype),
    )


@functools.partial(jax.jit, static_argnames=("ishermitian",))
def arnoldi(
    ks: KrylovSubspace,
    A: Any,
    b: jax.Array,
    *,
    ishermitian: bool = False,
    breakdown_tol: float = 1e-12,
) -> KrylovSubspace:
    """Build the Krylov basis of ``A`` started at ``b``.

    Classical Gram-Schmidt with one re-orthogonalization pass. A happy
    breakdown zeroes the remaining basis vectors, which decouples them from
    the projected matrix and keeps the result exact.

    Args:
        ks: Workspace providing the shapes; its contents are not read.
        A: Any operator supporting ``A @ v`` (dense array or ``BCOO``).
        b: Start vector.
        ishermitian: Keep only the tridiagonal band of ``H`` (Lanczos).
        breakdown_tol: Relative norm below which the iteration has converged.
    """
    m = ks.m
    V = jnp.zeros_like(ks.V)
    H = jnp.zeros_like(ks.H)
    b = jnp.asarray(b, dtype=V.dtype)
    beta = jnp.linalg.norm(b)
    V = V.at[:, 0].set(b / jnp.where(beta > 0, beta, 1.0))

    def body(j, carry):
        V, H, scale = carry
        w = A @ V[:, j]
        h = V.conj().T @ w
        w = w - V @ h
        h2 = V.conj().T @ w
        w = w - V @ h2
        h = h + h2
        norm = jnp.linalg.norm(w)
        scale = jnp.maximum(scale, jnp.linalg.norm(h))
        alive = norm > breakdown_tol * jnp.maximum(scale, 1.0)
        norm = jnp.where(alive, norm, 0.0)
        H = H.at[:, j].set(h)
        H = H.at[j + 1, j].set(norm)
        V = V.at[:, j + 1].set(jnp.where(alive, w / jnp.where(alive, norm, 1.0), 0.0))
        return V, H, scale

    V, H, _ = jax.lax.fori_loop(0, m, body, (V, H, jnp.zeros((), dtype=beta.dtype)))
    if ishermitian:
        H = jnp.triu(jnp.tril(H, 1), -1)
    return KrylovSubspace(V=V, H=H, beta=beta)


@jax.jit
def expv(t: complex | jax.Array, ks: KrylovSubspace) -> tuple[jax.Array, jax.Array]:
    """Apply ``exp(t A)`` to the start vector of a built workspace.

    Returns:
        ``(y, err)`` where ``err`` is the a-posteriori estimate
        ``beta |h_{m+1,m} [exp(t H_m)]_{m,1}|``.
    """
    m = ks.m
    t = jnp.asarray(t, dtype=ks.H.dtype)
    E = jsp.linalg.expm(t * ks.H[:m, :])
    y = ks.beta * (ks.V[:, :m] @ E[:, 0])
    err = ks.beta * jnp.abs(ks.H[m, m - 1] * E[m - 1, 0])
    return y, err


def expmv(
    t: complex,
    A: Any,
    b: jax.Array,
    *,
    krylov_dim: int = 30,
    ishermitian: bool = True,
    tol: float = 1e-8,
    ks: KrylovSubspace | None = None,
) -> jax.Array:
    """``exp(t A) b`` through a Krylov basis of at most ``krylov_dim`` vectors.

    Raises:
        KrylovConvergenceError: if the error estimate exceeds ``tol``.
    """
    b = jnp.asarray(b)
    if ks is None:
        ks = krylov_subspace(b.shape[0], krylov_dim)
    ks = arnoldi(ks, A, b, ishermitian=ishermitian)
    y, err = expv(t, ks)
    check_convergence(err, tol, ks.m)
    return y


def check_convergence(err: jax.Array | float, tol: float, m: int) -> float:
    """Raise :class:`KrylovConvergenceError` if ``err > tol``; return ``err``."""
    err = float(err)
    if err > tol:
        raise KrylovConvergenceError(
            f"Krylov error estimate {err:.3e} exceeds tol={tol:.1e} "
            f"with m={m}; increase krylov_dim or shorten the step."
        )
    return err
