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
Keyboard input handling for perftop using the readchar library.

This module provides functions for reading keyboard input and mapping
escape sequences to the navigation keys used for scrolling the row list.
"""

import contextlib
import select
import sys
import termios
import tty
from typing import Generator, Optional

import readchar
import readchar.key

_ARROW_NAMES = {
    "A": "arrow_up",
    "B": "arrow_down",
    "C": "arrow_right",
    "D": "arrow_left",
}
_TILDE_KEY_NAMES = {
    "5": "page_up",
    "6": "page_down",
}


@contextlib.contextmanager
def terminal_cbreak_mode(fd: Optional[int] = None) -> Generator[bool, None, None]:
    """Context manager that puts a terminal into cbreak mode and restores it on exit.

    Keys are delivered one at a time without echo while output processing
    stays intact. The previous settings are restored even when SIGINT
    interrupts the caller.

    Args:
        fd: Terminal file descriptor to configure.  Defaults to ``sys.stdin.fileno()``.

    Yields:
        True if the terminal was switched, False if fd is not a terminal.
    """
    if fd is None:
        fd = sys.stdin.fileno()
    try:
        old_settings = termios.tcgetattr(fd)
    except termios.error:
        # Pipe or redirected file
        yield False
        return
    try:
        tty.setcbreak(fd)
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def parse_escape_sequence(seq: str) -> Optional[str]:
    """
    Parse an ANSI escape sequence to identify navigation keys.

    Args:
        seq: The escape sequence string (without the leading ESC)

    Returns:
        'arrow_up', 'arrow_down', 'arrow_left', 'arrow_right', 'page_up' or
        'page_down', or None if the sequence is not recognized
    """
    if not seq or seq[0] not in ("[", "O"):
        return None
    if seq[-1] in _ARROW_NAMES:
        return _ARROW_NAMES[seq[-1]]
    if seq[0] == "[" and seq[-1] == "~":
        return _TILDE_KEY_NAMES.get(seq[1:-1].split(";")[0])
    return None


def _map_readchar_key(key_value: str) -> str:
    """
    Map readchar key constants to perftop key names.

    Args:
        key_value: The key string returned by readchar.readkey()

    Returns:
        Navigation key name, or the original key value for other keys
    """
    key_map = {
        readchar.key.UP: "arrow_up",
        readchar.key.DOWN: "arrow_down",
        readchar.key.LEFT: "arrow_left",
        readchar.key.RIGHT: "arrow_right",
        readchar.key.PAGE_UP: "page_up",
        readchar.key.PAGE_DOWN: "page_down",
    }
    if key_value in key_map:
        return key_map[key_value]

    # readchar returns full escape sequences like "\x1b[1;5A" for modified keys
    if key_value and key_value[0] == "\x1b" and len(key_value) > 1:
        parsed = parse_escape_sequence(key_value[1:])
        if parsed:
            return parsed

    return key_value


def read_key() -> Optional[str]:
    """
    Read a key from stdin without blocking.

    Returns navigation key names for arrow and page keys, the character for
    normal keys, or None if no input is available.
    """
    if not sys.stdin.isatty():
        return None

    ready, _, _ = select.select([sys.stdin], [], [], 0)
    if not ready:
        return None

    return _map_readchar_key(readchar.readkey())
