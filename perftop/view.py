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
Row list view for perftop.

A frame consists of the headline, an underlined column header and as many
rows of the virtual row list as fit below them. The scrollbar sits in the
rightmost column next to the rows.
"""

from datetime import datetime
from typing import Optional, Sequence, Tuple

from perftop.attributes import AttributeStack
from perftop.cpu_types import CpuTypeRegistry
from perftop.headline import print_head
from perftop.screen import ScreenBuffer
from perftop.scrollbar import ScrollbarGeometry, print_scroll_bar
from perftop.ui_render import strip_ansi

COLUMN_HEADER_ROW = 1
ROWS_RESERVED_TOP = 2  # headline + column header
ROWS_RESERVED_BOTTOM = 0
SCROLLBAR_WIDTH = 1


def compute_scroll_bounds(
    total_rows: int,
    screen_rows: int,
    rows_reserved_top: int = ROWS_RESERVED_TOP,
    rows_reserved_bottom: int = ROWS_RESERVED_BOTTOM,
) -> Tuple[int, int]:
    """
    Compute the scroll limits for a row list.

    Returns:
        Tuple of (max_offset, visible_rows)
    """
    visible_rows = max(0, screen_rows - rows_reserved_top - rows_reserved_bottom)
    max_offset = max(0, total_rows - visible_rows)
    return max_offset, visible_rows


def clamp_offset(offset: int, max_offset: int) -> int:
    return min(max(0, offset), max_offset)


def render_frame(
    screen: ScreenBuffer,
    attrs: AttributeStack,
    rows: Sequence[str],
    row_start: int,
    registry: CpuTypeRegistry,
    header: str = "",
    system_name: Optional[str] = None,
    now: Optional[datetime] = None,
    with_scrollbar: bool = True,
) -> Optional[ScrollbarGeometry]:
    """
    Draw a complete frame into the screen buffer.

    Args:
        screen: Target screen, cleared before drawing
        attrs: Attribute stack shared by all renderers
        rows: Virtual row list
        row_start: Requested scroll offset, clamped to the valid range
        registry: CPU types for the headline
        header: Column header text
        system_name: Optional system name for the headline
        now: Time shown in the headline
        with_scrollbar: Draw the scrollbar column

    Returns:
        The scrollbar geometry, or None when no scrollbar was drawn
    """
    screen.clear()
    print_head(screen, attrs, registry, system_name, now)

    text_width = max(0, screen.columns - SCROLLBAR_WIDTH) if with_scrollbar else screen.columns
    with attrs.underline():
        screen.write_at(COLUMN_HEADER_ROW, 0, header[:text_width].ljust(text_width))

    max_offset, visible_rows = compute_scroll_bounds(len(rows), screen.rows)
    row_start = clamp_offset(row_start, max_offset)
    for index, row in enumerate(rows[row_start : row_start + visible_rows]):
        screen.write_at(ROWS_RESERVED_TOP + index, 0, strip_ansi(row)[:text_width])

    if not with_scrollbar:
        return None
    return print_scroll_bar(
        screen,
        attrs,
        len(rows),
        row_start,
        ROWS_RESERVED_TOP,
        ROWS_RESERVED_BOTTOM,
        can_scroll_up=row_start > 0,
        can_scroll_down=row_start < max_offset,
        with_border=True,
    )
