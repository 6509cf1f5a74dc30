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
"""
Unit tests for the CPU type registry
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from perftop.cpu_types import CpuType, CpuTypeRegistry, parse_cpu_types  # noqa: E402


def _selected_ids(registry):
    return [cpu_type.type_id for cpu_type in registry.selected()]


class TestCpuTypeRegistry(unittest.TestCase):
    """Registry bookkeeping"""

    def test_keeps_registration_order(self):
        registry = CpuTypeRegistry([CpuType("IFL", 4), CpuType("CP", 2)])
        self.assertEqual([cpu_type.type_id for cpu_type in registry], ["IFL", "CP"])
        self.assertEqual(len(registry), 2)

    def test_duplicate_rejected(self):
        registry = CpuTypeRegistry([CpuType("IFL")])
        with self.assertRaises(ValueError):
            registry.add(CpuType("IFL", 3))

    def test_unknown_type(self):
        with self.assertRaises(KeyError):
            CpuTypeRegistry().get("ZIIP")

    def test_select_and_deselect(self):
        registry = parse_cpu_types("IFL:4,CP:2")
        registry.deselect("IFL")
        self.assertEqual(_selected_ids(registry), ["CP"])
        self.assertFalse(registry.is_selected(registry.get("IFL")))
        registry.select("IFL")
        self.assertEqual(_selected_ids(registry), ["IFL", "CP"])

    def test_cycle_selection(self):
        registry = parse_cpu_types("IFL:4,CP:2,ZIIP:1")
        seen = []
        for _ in range(5):
            registry.cycle_selection()
            seen.append(_selected_ids(registry))
        self.assertEqual(
            seen,
            [["IFL"], ["CP"], ["ZIIP"], ["IFL", "CP", "ZIIP"], ["IFL"]],
        )

    def test_cycle_from_partial_selection_returns_to_all(self):
        registry = parse_cpu_types("IFL,CP,ZIIP")
        registry.deselect("ZIIP")
        registry.cycle_selection()
        self.assertEqual(_selected_ids(registry), ["IFL", "CP", "ZIIP"])

    def test_cycle_empty_registry(self):
        registry = CpuTypeRegistry()
        registry.cycle_selection()
        self.assertEqual(registry.selected(), [])


class TestParseCpuTypes(unittest.TestCase):
    """Parsing of CPU type lists"""

    def test_counts_and_defaults(self):
        registry = parse_cpu_types(" IFL:4 , CP ")
        self.assertEqual(registry.get("IFL").cpu_count, 4)
        self.assertEqual(registry.get("CP").cpu_count, 0)
        self.assertTrue(all(cpu_type.selected for cpu_type in registry))

    def test_empty_string(self):
        self.assertEqual(len(parse_cpu_types("")), 0)
        self.assertEqual(len(parse_cpu_types(" , ")), 0)

    def test_invalid_entries(self):
        for spec in (":4", "IFL:x", "IFL:-1", "IFL:1,IFL:2"):
            with self.subTest(spec=spec):
                with self.assertRaises(ValueError):
                    parse_cpu_types(spec)


if __name__ == "__main__":
    unittest.main()
