"""Blockade subspace construction tests."""
from __future__ import annotations

import unittest

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import igraph
import jax.numpy as jnp
import netket as nk

from rydqaoa.space import (
    Subspace,
    maximal_independent_sets,
    n_sites,
    subspace,
)
from rydqaoa.utils import independent_set_violations


def _brute_force(n: int, edges) -> list[int]:
    codes = jnp.arange(2**n)
    ok = ~independent_set_violations(codes, edges)
    return codes[ok].tolist()


class SubspaceTest(unittest.TestCase):
    def test_edgeless_graph_is_full_space(self) -> None:
        for n in range(1, 5):
            space = subspace(igraph.Graph(n=n))
            self.assertEqual(space.configs.tolist(), list(range(2**n)))

    def test_single_blockade_edge(self) -> None:
        for graph in (igraph.Graph(n=2, edges=[(0, 1)]), nk.graph.Graph(edges=[(0, 1)])):
            space = subspace(graph)
            self.assertEqual(space.configs.tolist(), [0, 1, 2])
            self.assertEqual(space.dim, 3)
            self.assertNotIn(3, space)
            self.assertIn(2, space)

    def test_chain_matches_filter(self) -> None:
        graph = nk.graph.Chain(length=5, pbc=False)
        space = subspace(graph)
        edges = [tuple(e) for e in graph.edges()]
        self.assertEqual(space.configs.tolist(), _brute_force(5, edges))
        # Independent sets of a 5-site path: Fibonacci number F(7).
        self.assertEqual(len(space), 13)

    def test_grid_matches_filter(self) -> None:
        graph = nk.graph.Grid(extent=[3, 3], pbc=False)
        space = subspace(graph)
        edges = [tuple(e) for e in graph.edges()]
        self.assertEqual(space.configs.tolist(), _brute_force(9, edges))
        self.assertFalse(bool(jnp.any(independent_set_violations(space.configs, edges))))

    def test_complete_graph_single_excitations(self) -> None:
        space = subspace(igraph.Graph.Full(3))
        self.assertEqual(space.configs.tolist(), [0, 1, 2, 4])

    def test_sorted_and_unique(self) -> None:
        space = subspace(nk.graph.Chain(length=6, pbc=True))
        diffs = jnp.diff(space.configs)
        self.assertTrue(bool(jnp.all(diffs > 0)))

    def test_explicit_independent_sets(self) -> None:
        space = subspace(3, [{0, 2}, {1}])
        self.assertEqual(list(space), [0, 1, 2, 4, 5])
        self.assertEqual(space.n_sites, 3)

    def test_zero_sites(self) -> None:
        space = subspace(0, [])
        self.assertEqual(space.configs.tolist(), [0])

    def test_out_of_bounds_set(self) -> None:
        with self.assertRaises(ValueError):
            subspace(2, [(0, 2)])

    def test_custom_finder(self) -> None:
        graph = igraph.Graph(n=2, edges=[(0, 1)])
        calls = []

        def finder(g):
            calls.append(g)
            return [(0,), (1,)]

        space = subspace(graph, finder=finder)
        self.assertEqual(space.configs.tolist(), [0, 1, 2])
        self.assertEqual(len(calls), 1)

    def test_malformed_graphs(self) -> None:
        with self.assertRaises(ValueError):
            maximal_independent_sets(igraph.Graph(n=2, edges=[(0, 0), (0, 1)]))
        with self.assertRaises(ValueError):
            maximal_independent_sets(igraph.Graph(n=2, edges=[(0, 1), (0, 1)]))
        with self.assertRaises(ValueError):
            maximal_independent_sets(igraph.Graph(n=2, edges=[(0, 1)], directed=True))

    def test_maximal_independent_sets_of_path(self) -> None:
        sets = maximal_independent_sets(nk.graph.Chain(length=3, pbc=False))
        self.assertEqual(sorted(sets), [(0, 2), (1,)])
        self.assertEqual(n_sites(nk.graph.Chain(length=3, pbc=False)), 3)

    def test_index_lookup(self) -> None:
        space = Subspace(configs=jnp.asarray([0, 1, 2, 4, 5]), n_sites=3)
        idx, found = space.index(jnp.asarray([4, 3, 5, 7]))
        self.assertEqual(found.tolist(), [True, False, True, False])
        self.assertEqual(int(idx[0]), 3)
        self.assertEqual(int(idx[2]), 4)


if __name__ == "__main__":
    unittest.main()
