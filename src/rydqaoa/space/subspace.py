"""Blockade subspace construction.

The blockade subspace of an interaction graph is the set of configurations
whose occupied sites form an independent set. Every independent set is a
subset of some maximal independent set, so the subspace is the union of the
power sets of the maximal independent sets. Sorting that union fixes the
row/column index of each configuration in the restricted Hamiltonian.
"""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

import jax
import jax.numpy as jnp
from plum import dispatch

from rydqaoa.space.graphs import GraphLike, maximal_independent_sets, n_sites
from rydqaoa.utils.bits import CODE_DTYPE, site_masks

logger = logging.getLogger(__name__)

__all__ = [
    "Subspace",
    "as_subspace",
    "subspace",
]


@jax.tree_util.register_pytree_node_class
@dataclass(frozen=True, eq=False)
class Subspace:
    """Sorted, deduplicated configuration codes of a blockade subspace.

    The position of a code in ``configs`` is its matrix index.
    """

    configs: jax.Array
    n_sites: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "configs", jnp.asarray(self.configs, dtype=CODE_DTYPE))

    @property
    def dim(self) -> int:
        return int(self.configs.shape[0])

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[int]:
        return iter(int(code) for code in self.configs.tolist())

    def __contains__(self, code: int) -> bool:
        _, found = self.index(code)
        return bool(found)

    def index(self, codes: int | jax.Array) -> tuple[jax.Array, jax.Array]:
        """Binary-search ``codes``.

        Returns:
            ``(indices, found)``; ``indices`` is only meaningful where
            ``found`` is True.
        """
        codes = jnp.asarray(codes, dtype=CODE_DTYPE)
        pos = jnp.searchsorted(self.configs, codes)
        pos = jnp.clip(pos, 0, self.dim - 1)
        found = self.configs[pos] == codes
        return pos.astype(jnp.int32), found

    def tree_flatten(self):
        return (self.configs,), (self.n_sites,)

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        (configs,) = children
        (n,) = aux_data
        return cls(configs=configs, n_sites=n)


def _subset_codes(sites: tuple[int, ...]) -> jax.Array:
    """All configurations whose occupied sites are a subset of ``sites``."""
    size = len(sites)
    counters = jnp.arange(2**size, dtype=CODE_DTYPE)
    bits = jnp.bitwise_and(
        jnp.right_shift(counters[:, None], jnp.arange(size, dtype=CODE_DTYPE)[None, :]),
        1,
    )
    shifts = jnp.asarray(sites, dtype=CODE_DTYPE).reshape(1, size)
    return jnp.sum(jnp.left_shift(bits, shifts), axis=1)


@dispatch
def subspace(n: int, independent_sets: object) -> Subspace:
    """Build the subspace spanned by subsets of the given independent sets.

    Args:
        n: Number of sites.
        independent_sets: Iterable of site-index collections. For the result
            to be the full blockade subspace these must be *maximal*
            independent sets. An empty family counts as the empty set only.

    Returns:
        The sorted, deduplicated :class:`Subspace`.
    """
    site_masks(n)  # validates n
    families = [tuple(sorted({int(site) for site in each})) for each in independent_sets]
    if not families:
        families = [()]
    chunks = []
    for sites in families:
        if sites and (sites[0] < 0 or sites[-1] >= n):
            raise ValueError(f"Independent set {sites} out of bounds for n={n}.")
        chunks.append(_subset_codes(sites))
    codes = jnp.unique(jnp.concatenate(chunks))
    logger.debug("subspace: n=%d n_sets=%d dim=%d", n, len(families), codes.shape[0])
    return Subspace(configs=codes, n_sites=n)


@subspace.dispatch
def subspace(
    graph: GraphLike,
    *,
    finder: Callable[[GraphLike], Iterable] = maximal_independent_sets,
) -> Subspace:
    """Blockade subspace of ``graph``; ``finder`` supplies its maximal independent sets."""
    return subspace(n_sites(graph), finder(graph))


@dispatch
def as_subspace(target: Subspace) -> Subspace:
    return target


@as_subspace.dispatch
def as_subspace(target: GraphLike) -> Subspace:
    return subspace(target)
