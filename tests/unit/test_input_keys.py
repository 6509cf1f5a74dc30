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
Unit tests for input_keys module - keyboard input handling.

Tests cover escape sequence parsing for arrow and page keys, the mapping of
readchar key constants, non-blocking reads and the cbreak mode context
manager on a real pseudo-terminal.
"""

import os
import pty
import sys
import termios
import unittest
from typing import Any
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

import readchar  # noqa: E402

from perftop.input_keys import (  # noqa: E402, isort: skip
    _map_readchar_key,
    parse_escape_sequence,
    read_key,
    terminal_cbreak_mode,
)


class TestParseEscapeSequence(unittest.TestCase):
    """Test escape sequence parsing."""

    def test_standard_arrow_keys(self) -> None:
        self.assertEqual(parse_escape_sequence("[A"), "arrow_up")
        self.assertEqual(parse_escape_sequence("[B"), "arrow_down")
        self.assertEqual(parse_escape_sequence("[C"), "arrow_right")
        self.assertEqual(parse_escape_sequence("[D"), "arrow_left")

    def test_application_cursor_mode(self) -> None:
        self.assertEqual(parse_escape_sequence("OA"), "arrow_up")
        self.assertEqual(parse_escape_sequence("OB"), "arrow_down")

    def test_modified_arrow_keys(self) -> None:
        """Ctrl and Shift modified arrows map to the plain arrow."""
        self.assertEqual(parse_escape_sequence("[1;5A"), "arrow_up")
        self.assertEqual(parse_escape_sequence("[1;2B"), "arrow_down")

    def test_page_keys(self) -> None:
        self.assertEqual(parse_escape_sequence("[5~"), "page_up")
        self.assertEqual(parse_escape_sequence("[6~"), "page_down")
        self.assertEqual(parse_escape_sequence("[5;5~"), "page_up")

    def test_other_tilde_keys_return_none(self) -> None:
        self.assertIsNone(parse_escape_sequence("[2~"))
        self.assertIsNone(parse_escape_sequence("[3~"))
        self.assertIsNone(parse_escape_sequence("[200~"))

    def test_empty_sequence(self) -> None:
        self.assertIsNone(parse_escape_sequence(""))

    def test_unknown_sequence(self) -> None:
        self.assertIsNone(parse_escape_sequence("[Z"))
        self.assertIsNone(parse_escape_sequence("X"))
        self.assertIsNone(parse_escape_sequence("["))
        self.assertIsNone(parse_escape_sequence("[H"))

    def test_leading_char_not_bracket_or_o(self) -> None:
        self.assertIsNone(parse_escape_sequence("xA"))


class TestMapReadcharKey(unittest.TestCase):
    """Test _map_readchar_key mapping of readchar constants."""

    def test_readchar_arrow_constants(self) -> None:
        self.assertEqual(_map_readchar_key(readchar.key.UP), "arrow_up")
        self.assertEqual(_map_readchar_key(readchar.key.DOWN), "arrow_down")
        self.assertEqual(_map_readchar_key(readchar.key.LEFT), "arrow_left")
        self.assertEqual(_map_readchar_key(readchar.key.RIGHT), "arrow_right")

    def test_readchar_page_constants(self) -> None:
        self.assertEqual(_map_readchar_key(readchar.key.PAGE_UP), "page_up")
        self.assertEqual(_map_readchar_key(readchar.key.PAGE_DOWN), "page_down")

    def test_application_cursor_escape_fallback(self) -> None:
        self.assertEqual(_map_readchar_key("\x1bOA"), "arrow_up")

    def test_modified_ctrl_down_fallback(self) -> None:
        self.assertEqual(_map_readchar_key("\x1b[1;5B"), "arrow_down")

    def test_unknown_sequence_returned_as_is(self) -> None:
        self.assertEqual(_map_readchar_key("\x1b[12;40R"), "\x1b[12;40R")

    def test_lone_esc_returned_as_is(self) -> None:
        self.assertEqual(_map_readchar_key("\x1b"), "\x1b")

    def test_regular_character_passthrough(self) -> None:
        for char in ("q", "t", "g", "G", " "):
            self.assertEqual(_map_readchar_key(char), char)

    def test_empty_string_passthrough(self) -> None:
        self.assertEqual(_map_readchar_key(""), "")


class TestReadKey(unittest.TestCase):
    """Test non-blocking read_key."""

    @patch("perftop.input_keys.sys.stdin")
    def test_not_tty(self, mock_stdin: Any) -> None:
        mock_stdin.isatty.return_value = False
        self.assertIsNone(read_key())

    @patch("perftop.input_keys.readchar.readkey")
    @patch("perftop.input_keys.select.select")
    @patch("perftop.input_keys.sys.stdin")
    def test_no_input_available(self, mock_stdin: Any, mock_select: Any, mock_readkey: Any) -> None:
        mock_stdin.isatty.return_value = True
        mock_select.return_value = ([], [], [])
        self.assertIsNone(read_key())
        mock_readkey.assert_not_called()
        self.assertEqual(mock_select.call_args.args[3], 0)

    @patch("perftop.input_keys.readchar.readkey")
    @patch("perftop.input_keys.select.select")
    @patch("perftop.input_keys.sys.stdin")
    def test_arrow_key(self, mock_stdin: Any, mock_select: Any, mock_readkey: Any) -> None:
        mock_stdin.isatty.return_value = True
        mock_select.return_value = ([mock_stdin], [], [])
        mock_readkey.return_value = readchar.key.DOWN
        self.assertEqual(read_key(), "arrow_down")

    @patch("perftop.input_keys.readchar.readkey")
    @patch("perftop.input_keys.select.select")
    @patch("perftop.input_keys.sys.stdin")
    def test_page_down_sequence(self, mock_stdin: Any, mock_select: Any, mock_readkey: Any) -> None:
        mock_stdin.isatty.return_value = True
        mock_select.return_value = ([mock_stdin], [], [])
        mock_readkey.return_value = "\x1b[6~"
        self.assertEqual(read_key(), "page_down")

    @patch("perftop.input_keys.readchar.readkey")
    @patch("perftop.input_keys.select.select")
    @patch("perftop.input_keys.sys.stdin")
    def test_normal_character(self, mock_stdin: Any, mock_select: Any, mock_readkey: Any) -> None:
        mock_stdin.isatty.return_value = True
        mock_select.return_value = ([mock_stdin], [], [])
        mock_readkey.return_value = "q"
        self.assertEqual(read_key(), "q")

    @patch("perftop.input_keys.readchar.readkey")
    @patch("perftop.input_keys.select.select")
    @patch("perftop.input_keys.sys.stdin")
    def test_keyboard_interrupt_propagates(self, mock_stdin: Any, mock_select: Any, mock_readkey: Any) -> None:
        mock_stdin.isatty.return_value = True
        mock_select.return_value = ([mock_stdin], [], [])
        mock_readkey.side_effect = KeyboardInterrupt
        with self.assertRaises(KeyboardInterrupt):
            read_key()

    @patch("perftop.input_keys.select.select")
    @patch("perftop.input_keys.sys.stdin")
    def test_os_error_from_select_propagates(self, mock_stdin: Any, mock_select: Any) -> None:
        mock_stdin.isatty.return_value = True
        mock_select.side_effect = OSError("bad fd")
        with self.assertRaises(OSError):
            read_key()


class TestTerminalCbreakMode(unittest.TestCase):
    """Tests for the terminal_cbreak_mode context manager using a PTY."""

    def setUp(self) -> None:
        self.master_fd, self.slave_fd = pty.openpty()

    def tearDown(self) -> None:
        for fd in (self.master_fd, self.slave_fd):
            try:
                os.close(fd)
            except OSError:
                pass

    def test_non_tty_fd_yields_false(self) -> None:
        r_fd, w_fd = os.pipe()
        try:
            with terminal_cbreak_mode(r_fd) as switched:
                self.assertFalse(switched)
        finally:
            os.close(r_fd)
            os.close(w_fd)

    def test_echo_and_canonical_mode_disabled(self) -> None:
        with terminal_cbreak_mode(self.slave_fd) as switched:
            self.assertTrue(switched)
            lflag = termios.tcgetattr(self.slave_fd)[3]
            self.assertFalse(lflag & termios.ECHO)
            self.assertFalse(lflag & termios.ICANON)

    def test_output_processing_kept(self) -> None:
        original_oflag = termios.tcgetattr(self.slave_fd)[1]
        with terminal_cbreak_mode(self.slave_fd):
            self.assertEqual(termios.tcgetattr(self.slave_fd)[1], original_oflag)

    def test_settings_restored_after_normal_exit(self) -> None:
        original = termios.tcgetattr(self.slave_fd)
        with terminal_cbreak_mode(self.slave_fd):
            pass
        self.assertEqual(termios.tcgetattr(self.slave_fd), original)

    def test_settings_restored_after_exception(self) -> None:
        original = termios.tcgetattr(self.slave_fd)
        with self.assertRaises(RuntimeError):
            with terminal_cbreak_mode(self.slave_fd):
                raise RuntimeError("simulated error inside cbreak block")
        self.assertEqual(termios.tcgetattr(self.slave_fd), original)

    def test_settings_restored_after_keyboard_interrupt(self) -> None:
        original = termios.tcgetattr(self.slave_fd)
        with self.assertRaises(KeyboardInterrupt):
            with terminal_cbreak_mode(self.slave_fd):
                raise KeyboardInterrupt
        self.assertEqual(termios.tcgetattr(self.slave_fd), original)

    def test_default_fd_uses_stdin(self) -> None:
        with patch("perftop.input_keys.sys.stdin") as mock_stdin:
            mock_stdin.fileno.return_value = self.slave_fd
            with terminal_cbreak_mode() as switched:
                self.assertTrue(switched)
        mock_stdin.fileno.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
