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
CPU type registry for perftop.

Hypervisors group their CPUs by type (IFL, CP, ...). The registry keeps
every known type together with its CPU count and whether the user selected
it for display.
"""

import logging
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class CpuType:
    """One CPU type with its CPU count and selection state."""

    def __init__(self, type_id: str, cpu_count: int = 0, selected: bool = True) -> None:
        self.type_id = type_id
        self.cpu_count = cpu_count
        self.selected = selected

    def __repr__(self) -> str:
        return f"CpuType({self.type_id!r}, cpu_count={self.cpu_count}, selected={self.selected})"


class CpuTypeRegistry:
    """Ordered collection of CPU types."""

    def __init__(self, cpu_types: Optional[List[CpuType]] = None) -> None:
        self._types: Dict[str, CpuType] = {}
        for cpu_type in cpu_types or []:
            self.add(cpu_type)

    def __iter__(self) -> Iterator[CpuType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def add(self, cpu_type: CpuType) -> None:
        if cpu_type.type_id in self._types:
            raise ValueError(f"Duplicate CPU type '{cpu_type.type_id}'.")
        self._types[cpu_type.type_id] = cpu_type

    def get(self, type_id: str) -> CpuType:
        try:
            return self._types[type_id]
        except KeyError as exc:
            raise KeyError(f"Unknown CPU type '{type_id}'") from exc

    @staticmethod
    def is_selected(cpu_type: CpuType) -> bool:
        return cpu_type.selected

    def selected(self) -> List[CpuType]:
        """Return the selected CPU types in registration order."""
        return [cpu_type for cpu_type in self if self.is_selected(cpu_type)]

    def select(self, type_id: str) -> None:
        self.get(type_id).selected = True

    def deselect(self, type_id: str) -> None:
        self.get(type_id).selected = False

    def cycle_selection(self) -> None:
        """
        Advance the selection: all types -> first type only -> second type
        only -> ... -> all types again.
        """
        types = list(self)
        if not types:
            return
        selected = [cpu_type for cpu_type in types if cpu_type.selected]
        if len(selected) == len(types):
            next_index = 0
        elif len(selected) == 1:
            next_index = types.index(selected[0]) + 1
        else:
            next_index = len(types)
        for index, cpu_type in enumerate(types):
            cpu_type.selected = next_index >= len(types) or index == next_index
        logger.debug("CPU type selection: %s", [cpu_type.type_id for cpu_type in self.selected()])


def parse_cpu_types(spec: str) -> CpuTypeRegistry:
    """
    Parse a CPU type list like "IFL:4,CP:2" into a registry.

    A type without a count ("IFL") gets count 0. Every parsed type starts
    selected.

    Raises:
        ValueError: On empty ids, non-integer or negative counts, duplicates
    """
    registry = CpuTypeRegistry()
    for raw_entry in spec.split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        type_id, _, raw_count = entry.partition(":")
        type_id = type_id.strip()
        if not type_id:
            raise ValueError(f"Invalid CPU type entry '{entry}': missing type id.")
        count = 0
        if raw_count.strip():
            try:
                count = int(raw_count)
            except ValueError as exc:
                raise ValueError(f"Invalid CPU count in '{entry}': expected an integer.") from exc
            if count < 0:
                raise ValueError(f"Invalid CPU count in '{entry}': must not be negative.")
        registry.add(CpuType(type_id, count))
    return registry
