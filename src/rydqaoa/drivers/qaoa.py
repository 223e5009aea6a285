"""Time evolution under sequences of Rydberg Hamiltonians.

A QAOA sequence applies ``exp(-i t_j H_j)`` for j = 0, 1, ... in order. All
Hamiltonians share the blockade subspace, so one matrix buffer, one drive
pattern and one Krylov workspace serve the whole sequence.
"""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import logging
import math
from typing import Sequence

import jax
import jax.numpy as jnp
from jax.experimental import sparse as jsparse
from tqdm.auto import tqdm

from rydqaoa.drivers.krylov import (
    arnoldi,
    check_convergence,
    expmv,
    expv,
    krylov_subspace,
)
from rydqaoa.operators.assembler import (
    HamiltonianBuffer,
    drive_pattern,
    to_matrix,
    to_matrix_,
)
from rydqaoa.operators.parameters import is_zero
from rydqaoa.operators.rydberg import AbstractRydbergHamiltonian
from rydqaoa.space import GraphLike, Subspace

logger = logging.getLogger(__name__)

__all__ = [
    "QAOAWorkspace",
    "evaluate_qaoa",
    "timestep",
]


def _as_state(state: jax.Array, dim: int) -> jax.Array:
    state = jnp.asarray(state, dtype=jnp.complex128)
    if state.shape != (dim,):
        raise ValueError(
            f"State has shape {state.shape}, expected ({dim},) for the subspace."
        )
    return state


def timestep(
    state: jax.Array,
    hamiltonian: AbstractRydbergHamiltonian,
    graph: GraphLike | Subspace,
    t: float,
    dt: float | None = None,
    *,
    krylov_dim: int = 30,
    tol: float = 1e-8,
) -> jax.Array:
    """Evolve ``state`` by ``exp(-i t H)`` with H built from ``graph``.

    Args:
        state: Amplitudes over the blockade subspace of ``graph``.
        hamiltonian: Any Rydberg parameterization.
        graph: Interaction graph, or its prebuilt subspace.
        t: Evolution time.
        dt: Largest Krylov substep; ``None`` evolves in one step.
        krylov_dim: Maximal Krylov basis size.
        tol: Error tolerance per substep.

    Returns:
        The evolved state.
    """
    H = to_matrix(hamiltonian, graph)
    state = _as_state(state, H.shape[0])
    if dt is None:
        n_sub = 1
    elif dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}.")
    else:
        n_sub = max(1, math.ceil(abs(t) / dt))
    ks = krylov_subspace(H.shape[0], krylov_dim)
    for _ in range(n_sub):
        state = expmv(-1j * t / n_sub, H, state, ks=ks, tol=tol)
    return state


class QAOAWorkspace:
    """Scratch pair of one QAOA run: the matrix buffer and the Krylov workspace.

    The drive pattern is computed once from the subspace; each layer only
    recomputes entry values. ``clear`` must run between layers so no entry of
    one layer survives into the next.
    """

    def __init__(self, subspace: Subspace, *, krylov_dim: int = 30):
        self.subspace = subspace
        self.buffer = HamiltonianBuffer(subspace.dim)
        self.pattern = drive_pattern(subspace)
        self.krylov = krylov_subspace(subspace.dim, krylov_dim)

    def fill(self, hamiltonian: AbstractRydbergHamiltonian) -> jsparse.BCOO:
        Delta = hamiltonian.effective_Delta()
        to_matrix_(
            self.buffer,
            self.subspace,
            hamiltonian.effective_Omega(),
            hamiltonian.effective_phi(),
            None if is_zero(Delta) else Delta,
            pattern=self.pattern,
        )
        return self.buffer.tobcoo()

    def step(
        self,
        state: jax.Array,
        hamiltonian: AbstractRydbergHamiltonian,
        t: float,
        *,
        tol: float = 1e-8,
    ) -> tuple[jax.Array, float]:
        """Apply one layer; returns the new state and the Krylov error estimate."""
        H = self.fill(hamiltonian)
        self.krylov = arnoldi(self.krylov, H, state, ishermitian=True)
        state, err = expv(-1j * t, self.krylov)
        err = check_convergence(err, tol, self.krylov.m)
        self.clear()
        return state, err

    def clear(self) -> None:
        self.buffer.clear()


def evaluate_qaoa(
    state: jax.Array,
    hamiltonians: Sequence[AbstractRydbergHamiltonian],
    n: int,
    subspace: Subspace | jax.Array,
    durations: Sequence[float],
    *,
    krylov_dim: int = 30,
    tol: float = 1e-8,
    show_progress: bool = False,
) -> jax.Array:
    """Evaluate a QAOA sequence.

    Returns ``prod_j exp(-i durations[j] H_j) state``, the layer with index 0
    applied first. The detuning term of a layer is included only when its
    effective Delta is nonzero; for :class:`SimpleRydberg` layers the matrix
    is the pure drive term.

    Args:
        state: Initial amplitudes over ``subspace``.
        hamiltonians: One parameterization per layer.
        n: Number of sites.
        subspace: Blockade subspace, or its sorted configuration codes.
        durations: One evolution time per layer.
        krylov_dim: Maximal Krylov basis size, capped at the subspace dimension.
        tol: Error tolerance per layer.
        show_progress: Display a progress bar over layers.
    """
    hamiltonians = list(hamiltonians)
    durations = list(durations)
    if len(hamiltonians) != len(durations):
        raise ValueError(
            f"Got {len(hamiltonians)} hamiltonians but {len(durations)} durations."
        )
    if not isinstance(subspace, Subspace):
        subspace = Subspace(configs=subspace, n_sites=n)
        if bool(jnp.any(jnp.diff(subspace.configs) <= 0)):
            raise ValueError("Subspace codes must be strictly ascending.")
    if subspace.n_sites != n:
        raise ValueError(f"Subspace has {subspace.n_sites} sites, expected {n}.")
    state = _as_state(state, subspace.dim)

    workspace = QAOAWorkspace(subspace, krylov_dim=krylov_dim)
    logger.info(
        "evaluate_qaoa: layers=%d dim=%d krylov_dim=%d",
        len(hamiltonians),
        subspace.dim,
        workspace.krylov.m,
    )
    layers = tqdm(
        zip(hamiltonians, durations),
        total=len(hamiltonians),
        disable=not show_progress,
        unit="layer",
    )
    for layer, (h, t) in enumerate(layers):
        state, err = workspace.step(state, h, t, tol=tol)
        logger.debug("Layer %d | t = %.6f | krylov_err = %.2e", layer, float(t), err)
    return state
