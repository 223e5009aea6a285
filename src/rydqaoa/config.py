"""JAX and logging configuration.

Import before any other JAX module: configuration codes are int64 and
Hamiltonian entries complex128, both of which need ``jax_enable_x64``.
"""
from __future__ import annotations

import logging
import os

from jax import config

config.update("jax_enable_x64", True)


def setup_logging() -> None:
    """Set the root log level from ``RYDQAOA_LOG_LEVEL`` (default WARNING).

    DEBUG adds subspace sizes and per-layer Krylov errors, INFO the QAOA run
    summary.
    """
    level_name = os.environ.get("RYDQAOA_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(name)s - %(levelname)s - %(message)s",
    )


setup_logging()
