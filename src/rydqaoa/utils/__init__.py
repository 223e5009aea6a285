"""Utility helpers for configuration bitmasks."""
from __future__ import annotations

from rydqaoa.utils.bits import (
    config_codes,
    flip,
    independent_set_violations,
    occupancy_to_sign,
    occupations,
    readbit,
    site_masks,
)

__all__ = [
    "config_codes",
    "flip",
    "independent_set_violations",
    "occupancy_to_sign",
    "occupations",
    "readbit",
    "site_masks",
]
