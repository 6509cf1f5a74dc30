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
Structured (JSON) output for perftop batch mode.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from perftop.cpu_types import CpuTypeRegistry


class StructuredOutput:
    """
    Builder for nested key/value objects.

    Pairs are added to the innermost open object. Objects are opened with
    obj_start() and closed with obj_end().
    """

    def __init__(self) -> None:
        self._root: Dict[str, Any] = {}
        self._stack: List[Dict[str, Any]] = [self._root]

    def obj_start(self, name: str) -> None:
        obj: Dict[str, Any] = {}
        self._stack[-1][name] = obj
        self._stack.append(obj)

    def obj_end(self) -> None:
        if len(self._stack) == 1:
            raise ValueError("obj_end() called without a matching obj_start().")
        self._stack.pop()

    def pair(self, key: str, value: Any) -> None:
        self._stack[-1][key] = value

    @property
    def depth(self) -> int:
        """Number of currently open objects below the root."""
        return len(self._stack) - 1

    def to_dict(self) -> Dict[str, Any]:
        return self._root

    def dumps(self) -> str:
        return json.dumps(self._root)


def fmt_time(out: StructuredOutput, now: Optional[datetime] = None) -> None:
    """Add the current local time as UNIX epoch and as formatted string."""
    if now is None:
        now = datetime.now()
    local_now = now if now.tzinfo is not None else now.astimezone()
    out.pair("time_epoch", int(now.timestamp()))
    out.pair("time", local_now.strftime("%Y-%m-%d %H:%M:%S%z"))


def fmt_cpu_types(out: StructuredOutput, registry: CpuTypeRegistry) -> None:
    """Add a "cputypes" object mapping lower-cased CPU type ids to CPU counts."""
    out.obj_start("cputypes")
    for cpu_type in registry:
        out.pair(cpu_type.type_id.lower(), cpu_type.cpu_count)
    out.obj_end()
