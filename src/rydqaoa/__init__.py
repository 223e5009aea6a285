"""Rydberg-atom Hamiltonians in the blockade subspace and QAOA time evolution."""
from __future__ import annotations

from rydqaoa import config  # noqa: F401 - JAX config must be imported first

from rydqaoa.drivers import (
    KrylovConvergenceError,
    QAOAWorkspace,
    evaluate_qaoa,
    timestep,
)
from rydqaoa.operators import (
    AbstractRydbergHamiltonian,
    RydbergHamiltonian,
    SimpleRydberg,
    to_matrix,
    to_matrix_,
)
from rydqaoa.space import Subspace, maximal_independent_sets, subspace

__version__ = "0.1.0"

__all__ = [
    "AbstractRydbergHamiltonian",
    "KrylovConvergenceError",
    "QAOAWorkspace",
    "RydbergHamiltonian",
    "SimpleRydberg",
    "Subspace",
    "evaluate_qaoa",
    "maximal_independent_sets",
    "subspace",
    "timestep",
    "to_matrix",
    "to_matrix_",
]
