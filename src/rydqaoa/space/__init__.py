"""Interaction graphs and blockade subspaces."""
from __future__ import annotations

from rydqaoa.space.graphs import (
    GraphLike,
    maximal_independent_sets,
    n_sites,
    to_igraph,
)
from rydqaoa.space.subspace import Subspace, as_subspace, subspace

__all__ = [
    "GraphLike",
    "Subspace",
    "as_subspace",
    "maximal_independent_sets",
    "n_sites",
    "subspace",
    "to_igraph",
]
