"""Krylov time stepping and QAOA sequence evaluation."""
from __future__ import annotations

from rydqaoa.drivers.krylov import (
    KrylovConvergenceError,
    KrylovSubspace,
    arnoldi,
    check_convergence,
    expmv,
    expv,
    krylov_subspace,
)
from rydqaoa.drivers.qaoa import QAOAWorkspace, evaluate_qaoa, timestep

__all__ = [
    "KrylovConvergenceError",
    "KrylovSubspace",
    "QAOAWorkspace",
    "arnoldi",
    "check_convergence",
    "evaluate_qaoa",
    "expmv",
    "expv",
    "krylov_subspace",
    "timestep",
]
