#!/usr/bin/env python3
# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.
"""Tests for perftop package initialization."""

import logging
import unittest

import perftop


class TestPackageInit(unittest.TestCase):
    """Tests for perftop package init."""

    def test_version_is_string(self):
        """Ensure the package exposes a non-empty version string."""
        self.assertTrue(hasattr(perftop, "__version__"))
        self.assertIsInstance(perftop.__version__, str)
        self.assertTrue(perftop.__version__)

    def test_library_logger_has_null_handler(self):
        handlers = logging.getLogger("perftop").handlers
        self.assertTrue(any(isinstance(handler, logging.NullHandler) for handler in handlers))


if __name__ == "__main__":
    unittest.main()
