"""Precision and logging setup."""
from __future__ import annotations

import logging
import os
import unittest
from unittest import mock

from rydqaoa import config

import jax.numpy as jnp


class ConfigTest(unittest.TestCase):
    def test_x64_enabled(self) -> None:
        self.assertEqual(jnp.asarray(1).dtype, jnp.int64)
        self.assertEqual(jnp.asarray(1.0).dtype, jnp.float64)

    def test_log_level_from_environment(self) -> None:
        with mock.patch.dict(os.environ, {"RYDQAOA_LOG_LEVEL": "debug"}):
            with mock.patch("logging.basicConfig") as basic:
                config.setup_logging()
        self.assertEqual(basic.call_args.kwargs["level"], logging.DEBUG)

    def test_unknown_level_falls_back_to_warning(self) -> None:
        with mock.patch.dict(os.environ, {"RYDQAOA_LOG_LEVEL": "loud"}):
            with mock.patch("logging.basicConfig") as basic:
                config.setup_logging()
        self.assertEqual(basic.call_args.kwargs["level"], logging.WARNING)


if __name__ == "__main__":
    unittest.main()
