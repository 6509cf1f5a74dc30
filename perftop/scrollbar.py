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
Vertical scrollbar for perftop.

The scrollbar maps a virtual list of arbitrary length onto the rows the
screen has left for it. It occupies the rightmost screen column and consists
of an up arrow, a down arrow and a proportionally sized thumb in between.
"""

from typing import NamedTuple

from perftop.attributes import AttributeStack
from perftop.screen import ScreenBuffer

UP_ARROW_GLYPH = "^"
DOWN_ARROW_GLYPH = "v"
THUMB_GLYPH = "#"
BLANK_GLYPH = " "

UP_ARROW_ROWS = 1
DOWN_ARROW_ROWS = 1
ARROW_ROWS = UP_ARROW_ROWS + DOWN_ARROW_ROWS


class ScrollbarGeometry(NamedTuple):
    """Scrollbar layout for one render call. Thumb rows are relative to the track."""

    row_count_virtual: int
    row_start: int
    rows_reserved_top: int
    rows_reserved_bottom: int
    row_count_displayed: int
    scale_virtual_to_physical: float
    scale_to_thumb: float
    thumb_length: int
    thumb_start: int


def round_half_up(value: float) -> int:
    """Round by adding one half and truncating toward zero."""
    return int(value + 0.5)


def compute_scrollbar_geometry(
    row_count_virtual: int,
    row_start: int,
    rows_reserved_top: int,
    rows_reserved_bottom: int,
    viewport_rows: int,
) -> ScrollbarGeometry:
    """
    Compute scrollbar geometry for a virtual list.

    Args:
        row_count_virtual: Total number of rows in the virtual list
        row_start: Index of the first virtual row shown on screen
        rows_reserved_top: Screen rows above the scroll region
        rows_reserved_bottom: Screen rows below the scroll region
        viewport_rows: Total number of screen rows

    Returns:
        ScrollbarGeometry. When row_count_displayed <= 0 there is no room for
        a scrollbar and the scale and thumb fields are zero.
    """
    row_count_displayed = min(row_count_virtual, viewport_rows - rows_reserved_top - rows_reserved_bottom)
    if row_count_displayed <= 0:
        return ScrollbarGeometry(
            row_count_virtual,
            row_start,
            rows_reserved_top,
            rows_reserved_bottom,
            row_count_displayed,
            0.0,
            0.0,
            0,
            0,
        )

    scale_virtual_to_physical = row_count_displayed / row_count_virtual
    scale_to_thumb = (row_count_displayed - ARROW_ROWS) / row_count_displayed
    thumb_length = max(round_half_up(row_count_displayed * scale_virtual_to_physical * scale_to_thumb), 1)
    thumb_start = round_half_up(row_start * scale_virtual_to_physical * scale_to_thumb)

    # Pin the thumb against the down arrow instead of running past the track
    if row_count_displayed - ARROW_ROWS - thumb_start < thumb_length:
        thumb_start = row_count_displayed - ARROW_ROWS - thumb_length

    return ScrollbarGeometry(
        row_count_virtual,
        row_start,
        rows_reserved_top,
        rows_reserved_bottom,
        row_count_displayed,
        scale_virtual_to_physical,
        scale_to_thumb,
        thumb_length,
        thumb_start,
    )


def _print_arrow(screen: ScreenBuffer, attrs: AttributeStack, row: int, col: int, glyph: str, highlight: bool) -> None:
    with attrs.underline():
        if highlight:
            with attrs.bold():
                screen.write_at(row, col, glyph)
        else:
            screen.write_at(row, col, glyph)


def print_scroll_bar(
    screen: ScreenBuffer,
    attrs: AttributeStack,
    row_count_virtual: int,
    row_start: int,
    rows_reserved_top: int,
    rows_reserved_bottom: int,
    can_scroll_up: bool,
    can_scroll_down: bool,
    with_border: bool,
) -> ScrollbarGeometry:
    """
    Draw the scrollbar into the rightmost column of the screen.

    The up and down arrows are bold when the list can scroll in their
    direction. The attribute stack is left exactly as it was found.

    Returns:
        The geometry used for drawing.
    """
    geometry = compute_scrollbar_geometry(
        row_count_virtual,
        row_start,
        rows_reserved_top,
        rows_reserved_bottom,
        screen.rows,
    )
    displayed = geometry.row_count_displayed
    if displayed <= 0:
        return geometry

    col = screen.columns - 1
    top = rows_reserved_top
    with attrs.reverse():
        if with_border:
            with attrs.underline():
                screen.write_at(top - 1, col, BLANK_GLYPH)
            screen.write_at(displayed + top, col, BLANK_GLYPH)

        _print_arrow(screen, attrs, top, col, UP_ARROW_GLYPH, can_scroll_up)
        if displayed == 1:
            return geometry

        _print_arrow(screen, attrs, displayed - 1 + top, col, DOWN_ARROW_GLYPH, can_scroll_down)
        if displayed == 2:
            return geometry

        track_rows = displayed - ARROW_ROWS
        for index in range(track_rows):
            screen.write_at(index + top + UP_ARROW_ROWS, col, BLANK_GLYPH)
        with attrs.underline():
            screen.write_at(track_rows + top, col, BLANK_GLYPH)

        last_track_row = track_rows - 1
        with attrs.bold():
            for index in range(geometry.thumb_length):
                row = index + geometry.thumb_start
                if row == last_track_row:
                    with attrs.underline():
                        screen.write_at(row + top + UP_ARROW_ROWS, col, THUMB_GLYPH)
                else:
                    screen.write_at(row + top + UP_ARROW_ROWS, col, THUMB_GLYPH)
    return geometry
