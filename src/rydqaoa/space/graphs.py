"""Interaction-graph adapters and maximal independent set search."""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import logging

import igraph
import netket as nk
from plum import dispatch

logger = logging.getLogger(__name__)

__all__ = [
    "GraphLike",
    "maximal_independent_sets",
    "n_sites",
    "to_igraph",
]

GraphLike = igraph.Graph | nk.graph.AbstractGraph


@dispatch
def to_igraph(graph: object) -> igraph.Graph:
    raise NotImplementedError(f"Unsupported graph type: {type(graph)!r}")


@to_igraph.dispatch
def to_igraph(graph: igraph.Graph) -> igraph.Graph:
    """Validate an interaction graph: undirected, no self-loops, no multi-edges."""
    if graph.is_directed():
        raise ValueError("Interaction graph must be undirected.")
    if not graph.is_simple():
        raise ValueError("Interaction graph must be simple (no self-loops or multi-edges).")
    return graph


@to_igraph.dispatch
def to_igraph(graph: nk.graph.AbstractGraph) -> igraph.Graph:
    edges = [(int(u), int(v)) for u, v in graph.edges()]
    return to_igraph(igraph.Graph(n=graph.n_nodes, edges=edges))


@dispatch
def n_sites(graph: igraph.Graph) -> int:
    return graph.vcount()


@n_sites.dispatch
def n_sites(graph: nk.graph.AbstractGraph) -> int:
    return graph.n_nodes


def maximal_independent_sets(graph: GraphLike) -> list[tuple[int, ...]]:
    """Maximal independent sets of ``graph``.

    A clique of the complement graph is an independent set of the original
    graph, so the maximal cliques of the complement are exactly the maximal
    independent sets. Any other finder with the same signature can be passed
    to :func:`rydqaoa.space.subspace` instead.

    Args:
        graph: netket or igraph interaction graph; an edge is a blockade
            constraint between its endpoints.

    Returns:
        List of sorted site-index tuples.
    """
    g = to_igraph(graph)
    cliques = g.complementer(loops=False).maximal_cliques()
    logger.debug(
        "maximal_independent_sets: n_sites=%d n_edges=%d n_sets=%d",
        g.vcount(),
        g.ecount(),
        len(cliques),
    )
    return [tuple(sorted(int(site) for site in clique)) for clique in cliques]
