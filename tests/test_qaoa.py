"""QAOA sequence evaluation against direct time steps and dense propagators."""
from __future__ import annotations

import unittest

import numpy as np

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import jax
import jax.numpy as jnp
import netket as nk

from rydqaoa.drivers import (
    KrylovConvergenceError,
    QAOAWorkspace,
    evaluate_qaoa,
    timestep,
)
from rydqaoa.operators import RydbergHamiltonian, SimpleRydberg, to_matrix
from rydqaoa.space import subspace


def _ground_state(dim: int) -> jax.Array:
    return jnp.zeros((dim,), dtype=jnp.complex128).at[0].set(1.0)


def _dense_sequence(state, hamiltonians, space, durations) -> jax.Array:
    for h, t in zip(hamiltonians, durations):
        H = to_matrix(h, space).todense()
        state = jax.scipy.linalg.expm(-1j * t * H) @ state
    return state


class QAOATest(unittest.TestCase):
    ATOL = 1e-9

    def setUp(self) -> None:
        self.graph = nk.graph.Chain(length=4, pbc=False)
        self.space = subspace(self.graph)
        self.state = _ground_state(self.space.dim)

    def test_single_layer_matches_timestep(self) -> None:
        h = SimpleRydberg(0.3)
        qaoa = evaluate_qaoa(self.state, [h], 4, self.space, [0.8])
        direct = timestep(self.state, h, self.graph, 0.8)
        self.assertLess(float(jnp.linalg.norm(qaoa - direct)), self.ATOL)

    def test_sequence_matches_dense_propagators(self) -> None:
        hs = [SimpleRydberg(phi) for phi in (0.0, 1.1, -0.4)]
        ts = [0.5, 0.9, 1.3]
        result = evaluate_qaoa(self.state, hs, 4, self.space, ts)
        expected = _dense_sequence(self.state, hs, self.space, ts)
        self.assertLess(float(jnp.linalg.norm(result - expected)), self.ATOL)
        self.assertAlmostEqual(float(jnp.linalg.norm(result)), 1.0, places=10)

    def test_order_matters(self) -> None:
        # One free site: the |0> amplitude after layers (phi1, t1), (phi2, t2)
        # is cos t1 cos t2 - sin t1 sin t2 exp(i (phi2 - phi1)).
        space = subspace(1, [(0,)])
        state = _ground_state(2)
        h1, h2 = SimpleRydberg(0.0), SimpleRydberg(1.2)
        t1, t2 = 0.7, 1.3
        forward = evaluate_qaoa(state, [h1, h2], 1, space, [t1, t2])
        backward = evaluate_qaoa(state, [h2, h1], 1, space, [t2, t1])
        expected = np.cos(t1) * np.cos(t2) - np.sin(t1) * np.sin(t2) * np.exp(1.2j)
        self.assertAlmostEqual(complex(forward[0]), expected, places=10)
        self.assertGreater(float(jnp.linalg.norm(forward - backward)), 0.5)

    def test_detuning_layers_included(self) -> None:
        h = RydbergHamiltonian(C=1.0, Omega=[1.0, 0.8, 1.2, 0.9], phi=0.2, Delta=0.6)
        qaoa = evaluate_qaoa(self.state, [h], 4, self.space, [0.7])
        direct = timestep(self.state, h, self.space, 0.7)
        self.assertLess(float(jnp.linalg.norm(qaoa - direct)), self.ATOL)

    def test_timestep_substeps(self) -> None:
        h = RydbergHamiltonian(C=1.0, Omega=1.0, phi=0.5, Delta=-0.3)
        single = timestep(self.state, h, self.graph, 1.5)
        split = timestep(self.state, h, self.graph, 1.5, dt=0.4)
        self.assertLess(float(jnp.linalg.norm(single - split)), self.ATOL)
        with self.assertRaises(ValueError):
            timestep(self.state, h, self.graph, 1.5, dt=0.0)

    def test_raw_codes_subspace(self) -> None:
        hs = [SimpleRydberg(0.2), SimpleRydberg(0.9)]
        ts = [0.4, 0.6]
        a = evaluate_qaoa(self.state, hs, 4, self.space, ts)
        b = evaluate_qaoa(self.state, hs, 4, self.space.configs, ts)
        self.assertLess(float(jnp.linalg.norm(a - b)), 1e-14)
        with self.assertRaises(ValueError):
            evaluate_qaoa(self.state, hs, 4, self.space.configs[::-1], ts)

    def test_workspace_cleared_between_layers(self) -> None:
        workspace = QAOAWorkspace(self.space)
        state, err = workspace.step(self.state, SimpleRydberg(0.1), 0.3)
        self.assertEqual(workspace.buffer.nse, 0)
        self.assertLess(err, 1e-8)
        self.assertEqual(workspace.krylov.m, self.space.dim)
        self.assertEqual(state.shape, (self.space.dim,))

    def test_input_validation(self) -> None:
        hs = [SimpleRydberg(0.1), SimpleRydberg(0.2)]
        with self.assertRaises(ValueError):
            evaluate_qaoa(self.state, hs, 4, self.space, [0.1])
        with self.assertRaises(ValueError):
            evaluate_qaoa(self.state[:-1], hs, 4, self.space, [0.1, 0.2])
        with self.assertRaises(ValueError):
            evaluate_qaoa(self.state, hs, 5, self.space, [0.1, 0.2])
        with self.assertRaises(ValueError):
            timestep(self.state[:-1], hs[0], self.graph, 0.1)

    def test_krylov_failure_propagates(self) -> None:
        graph = nk.graph.Chain(length=8, pbc=False)
        space = subspace(graph)
        with self.assertRaises(KrylovConvergenceError):
            evaluate_qaoa(
                _ground_state(space.dim),
                [SimpleRydberg(0.0)],
                8,
                space,
                [20.0],
                krylov_dim=2,
            )


if __name__ == "__main__":
    unittest.main()
