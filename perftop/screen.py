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
In-memory screen buffer for perftop.

The buffer is the output device every renderer writes to: a grid of cells,
each holding one glyph plus the set of display attributes (bold, underline,
reverse) that were active when the glyph was written. Frames are turned into
ANSI-decorated lines by render_lines() and pushed to the terminal by
line diffing in perftop.ui_render.
"""

from typing import FrozenSet, List, Set, Tuple

from perftop.ui_render import ANSI_RESET

ATTRIBUTE_NAMES = ("bold", "underline", "reverse")
SGR_CODES = {
    "bold": "\x1b[1m",
    "underline": "\x1b[4m",
    "reverse": "\x1b[7m",
}

Cell = Tuple[str, FrozenSet[str]]

_EMPTY_ATTRS: FrozenSet[str] = frozenset()
BLANK_CELL: Cell = (" ", _EMPTY_ATTRS)


def validate_attribute(name: str) -> str:
    """Return the attribute name if it is known, raise ValueError otherwise."""
    if name not in ATTRIBUTE_NAMES:
        raise ValueError(f"Unknown display attribute '{name}'. Use one of: {', '.join(ATTRIBUTE_NAMES)}.")
    return name


def sgr_for_attributes(attrs: FrozenSet[str]) -> str:
    """Build the SGR sequence that switches on every attribute in attrs."""
    return "".join(SGR_CODES[name] for name in ATTRIBUTE_NAMES if name in attrs)


class ScreenBuffer:
    """
    Fixed-size grid of attributed cells with a write cursor.

    Writes outside the grid are clipped silently, the same way a curses
    window drops glyphs past its edge.
    """

    def __init__(self, rows: int, columns: int) -> None:
        if rows < 0 or columns < 0:
            raise ValueError(f"Screen dimensions must be non-negative, got {rows}x{columns}.")
        self.rows = rows
        self.columns = columns
        self.cursor_row = 0
        self.cursor_col = 0
        self._active: Set[str] = set()
        self._cells: List[List[Cell]] = []
        self.clear()

    def resize(self, rows: int, columns: int) -> None:
        """Change the screen dimensions. The content is cleared."""
        if rows < 0 or columns < 0:
            raise ValueError(f"Screen dimensions must be non-negative, got {rows}x{columns}.")
        self.rows = rows
        self.columns = columns
        self.clear()

    def clear(self) -> None:
        """Blank every cell and move the cursor home. Active attributes are kept."""
        self._cells = [[BLANK_CELL] * self.columns for _ in range(self.rows)]
        self.cursor_row = 0
        self.cursor_col = 0

    @property
    def active_attributes(self) -> FrozenSet[str]:
        return frozenset(self._active)

    def attr_on(self, name: str) -> None:
        self._active.add(validate_attribute(name))

    def attr_off(self, name: str) -> None:
        self._active.discard(validate_attribute(name))

    def write(self, text: str) -> None:
        """Write text at the cursor and advance the cursor past it."""
        attrs = frozenset(self._active)
        for char in text:
            if 0 <= self.cursor_row < self.rows and 0 <= self.cursor_col < self.columns:
                self._cells[self.cursor_row][self.cursor_col] = (char, attrs)
            self.cursor_col += 1

    def write_at(self, row: int, col: int, text: str) -> None:
        """Move the cursor to (row, col) and write text there."""
        self.cursor_row = row
        self.cursor_col = col
        self.write(text)

    def seek_back(self, columns: int) -> None:
        """Place the cursor the given number of columns before the right edge."""
        self.cursor_col = max(0, self.columns - columns)

    def newline(self) -> None:
        self.cursor_row += 1
        self.cursor_col = 0

    def cell(self, row: int, col: int) -> Cell:
        """Return the (glyph, attributes) pair stored at row, col."""
        return self._cells[row][col]

    def text_lines(self) -> List[str]:
        """Return the buffer content as plain text, one string per row."""
        return ["".join(char for char, _ in row) for row in self._cells]

    def render_lines(self) -> List[str]:
        """
        Return the buffer content as ANSI-decorated lines.

        Attribute changes between neighbouring cells are emitted as a reset
        followed by the SGR codes of the new attribute set, and every line
        that ends with attributes switched on is closed with a reset.
        """
        lines = []
        for row in self._cells:
            chunks = []
            current = _EMPTY_ATTRS
            for char, attrs in row:
                if attrs != current:
                    if current:
                        chunks.append(ANSI_RESET)
                    chunks.append(sgr_for_attributes(attrs))
                    current = attrs
                chunks.append(char)
            if current:
                chunks.append(ANSI_RESET)
            lines.append("".join(chunks))
        return lines
