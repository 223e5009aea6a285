"""Rydberg Hamiltonian parameterizations.

H = sum_k Omega_k (e^{i phi_k} |0><1|_k + e^{-i phi_k} |1><0|_k) + sum_k Delta_k sigma^z_k

restricted to the blockade subspace. The assembler only reads the effective
parameters below, so new variants need no assembler changes.
"""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

import abc
from dataclasses import dataclass

import jax
import jax.numpy as jnp

from rydqaoa.operators.parameters import ParameterType

__all__ = [
    "AbstractRydbergHamiltonian",
    "RydbergHamiltonian",
    "SimpleRydberg",
]


class AbstractRydbergHamiltonian(abc.ABC):
    """Capability interface consumed by the Hamiltonian assembler."""

    @abc.abstractmethod
    def effective_Omega(self) -> ParameterType:
        """Rabi amplitude, scalar or per-site."""

    @abc.abstractmethod
    def effective_phi(self) -> ParameterType:
        """Drive phase, scalar or per-site."""

    @abc.abstractmethod
    def effective_Delta(self) -> ParameterType:
        """Detuning, scalar or per-site."""


@jax.tree_util.register_pytree_node_class
@dataclass(frozen=True, eq=False)
class SimpleRydberg(AbstractRydbergHamiltonian):
    """Reduced model with one global phase; Omega = 1 and Delta = 0."""

    phi: jax.Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "phi", jnp.asarray(self.phi, dtype=jnp.float64))

    def effective_Omega(self) -> jax.Array:
        return jnp.ones((), dtype=self.phi.dtype)

    def effective_phi(self) -> jax.Array:
        return self.phi

    def effective_Delta(self) -> jax.Array:
        return jnp.zeros((), dtype=self.phi.dtype)

    def tree_flatten(self):
        return (self.phi,), ()

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        del aux_data
        (phi,) = children
        return cls(phi=phi)


@jax.tree_util.register_pytree_node_class
@dataclass(frozen=True, eq=False)
class RydbergHamiltonian(AbstractRydbergHamiltonian):
    """General model; each of Omega, phi, Delta is scalar or per-site.

    ``C`` is the interaction coefficient kept for energy-scale normalization.
    It does not enter the blockade-subspace matrix.
    """

    C: jax.Array
    Omega: jax.Array
    phi: jax.Array
    Delta: jax.Array

    def __post_init__(self) -> None:
        for name in ("C", "Omega", "phi", "Delta"):
            object.__setattr__(
                self, name, jnp.asarray(getattr(self, name), dtype=jnp.float64)
            )

    def effective_Omega(self) -> jax.Array:
        return self.Omega

    def effective_phi(self) -> jax.Array:
        return self.phi

    def effective_Delta(self) -> jax.Array:
        return self.Delta

    def tree_flatten(self):
        return (self.C, self.Omega, self.phi, self.Delta), ()

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        del aux_data
        C, Omega, phi, Delta = children
        return cls(C=C, Omega=Omega, phi=phi, Delta=Delta)
