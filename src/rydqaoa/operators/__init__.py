"""Rydberg Hamiltonian parameterizations and sparse assembly."""
from __future__ import annotations

from rydqaoa.operators.assembler import (
    DrivePattern,
    HamiltonianBuffer,
    drive_pattern,
    drive_values,
    sigma_x_term,
    sigma_z_term,
    to_matrix,
    to_matrix_,
)
from rydqaoa.operators.parameters import (
    ParameterType,
    getscalarmaybe,
    is_zero,
    site_values,
)
from rydqaoa.operators.rydberg import (
    AbstractRydbergHamiltonian,
    RydbergHamiltonian,
    SimpleRydberg,
)

__all__ = [
    "AbstractRydbergHamiltonian",
    "DrivePattern",
    "HamiltonianBuffer",
    "ParameterType",
    "RydbergHamiltonian",
    "SimpleRydberg",
    "drive_pattern",
    "drive_values",
    "getscalarmaybe",
    "is_zero",
    "sigma_x_term",
    "sigma_z_term",
    "site_values",
    "to_matrix",
    "to_matrix_",
]
