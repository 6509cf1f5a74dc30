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
Headline rendering for perftop.

The headline is the first screen row: time of day, system name, the
selected CPU types and a help hint at the right edge.
"""

from datetime import datetime
from typing import Optional

from perftop.attributes import AttributeStack
from perftop.cpu_types import CpuTypeRegistry
from perftop.screen import ScreenBuffer

HELP_ICON_WIDTH = 6  # len("?=help")


def format_time_of_day(now: Optional[datetime] = None) -> str:
    """Format local time as HH:MM:SS."""
    if now is None:
        now = datetime.now()
    return now.strftime("%H:%M:%S")


def print_time(screen: ScreenBuffer, now: Optional[datetime] = None) -> None:
    screen.write(format_time_of_day(now))


def print_help_icon(screen: ScreenBuffer, attrs: AttributeStack) -> None:
    """Print "?=help" flush against the right edge of the current row."""
    screen.seek_back(HELP_ICON_WIDTH)
    with attrs.underline():
        screen.write("?")
    screen.write("=help")


def print_head(
    screen: ScreenBuffer,
    attrs: AttributeStack,
    registry: CpuTypeRegistry,
    system_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Print the headline and move the cursor to the next row.

    Args:
        screen: Output screen, cursor at the start of the headline row
        attrs: Attribute stack used for bold/underline
        registry: CPU types; only selected types are listed
        system_name: Optional system name printed in bold
        now: Time to display, defaults to the current local time
    """
    print_time(screen, now)
    screen.write(" ")
    if system_name:
        with attrs.bold():
            screen.write(system_name)
        screen.write(" ")
    screen.write("cpu-")
    with attrs.underline():
        screen.write("t")
    screen.write(": ")
    for cpu_type in registry:
        if not registry.is_selected(cpu_type):
            continue
        screen.write(f"{cpu_type.type_id}({cpu_type.cpu_count}) ")
    print_help_icon(screen, attrs)
    screen.newline()
