"""QAOA on a Rydberg chain in the blockade subspace.

Alternates global drive phases on an open chain and reports the weight of
the maximum independent set configurations in the final state.
"""

from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import logging

import jax.numpy as jnp
import netket as nk

from rydqaoa import SimpleRydberg, evaluate_qaoa, subspace

logger = logging.getLogger(__name__)


def mis_weight(state, space) -> float:
    """Probability of the configurations with the largest occupation."""
    popcount = jnp.asarray([bin(code).count("1") for code in space])
    mask = popcount == jnp.max(popcount)
    return float(jnp.sum(jnp.abs(state[mask]) ** 2))


def main(length: int = 8, n_layers: int = 6, seed_phi: float = 0.35):
    graph = nk.graph.Chain(length=length, pbc=False)
    space = subspace(graph)
    logger.info("Chain of %d sites, blockade subspace dim=%d", length, space.dim)

    phis = [seed_phi * (-1) ** layer * (layer + 1) for layer in range(n_layers)]
    hamiltonians = [SimpleRydberg(phi) for phi in phis]
    durations = [0.4 + 0.1 * layer for layer in range(n_layers)]

    state = jnp.zeros((space.dim,), dtype=jnp.complex128).at[0].set(1.0)
    state = evaluate_qaoa(state, hamiltonians, length, space, durations, show_progress=True)
    logger.info("norm = %.12f", float(jnp.linalg.norm(state)))
    logger.info("MIS weight = %.6f", mis_weight(state, space))
    return state


if __name__ == "__main__":
    main()
