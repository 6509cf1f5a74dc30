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
Nested display attribute handling for perftop.

Renderers switch bold, underline and reverse on and off in nested fashion
(bold inside underline inside reverse). Each attribute carries a reference
count so that only the outermost on/off pair reaches the output device.
"""

import contextlib
import logging
from typing import Dict, Generator, Protocol

from perftop.screen import ATTRIBUTE_NAMES, validate_attribute

logger = logging.getLogger(__name__)


class AttributeDevice(Protocol):
    """Protocol for output devices that can switch display attributes."""

    def attr_on(self, name: str) -> None: ...

    def attr_off(self, name: str) -> None: ...


class AttributeStack:
    """
    Reference-counted bold/underline/reverse state.

    The device is only touched when a counter moves from 0 to 1 or from 1
    to 0. In batch mode the counters are maintained but the device is never
    called, so nesting stays balanced when output goes to a pipe.
    """

    def __init__(self, device: AttributeDevice, batch_mode: bool = False) -> None:
        """
        Initialize the attribute stack.

        Args:
            device: Output device receiving attr_on/attr_off calls
            batch_mode: Suppress all device calls when True
        """
        self.device = device
        self.batch_mode = batch_mode
        self._counts: Dict[str, int] = {name: 0 for name in ATTRIBUTE_NAMES}

    def count(self, name: str) -> int:
        """Return the number of outstanding enable calls for an attribute."""
        return self._counts[validate_attribute(name)]

    def is_active(self, name: str) -> bool:
        return self.count(name) > 0

    def enable(self, name: str) -> None:
        count = self.count(name)
        if count == 0 and not self.batch_mode:
            self.device.attr_on(name)
        self._counts[name] = count + 1

    def disable(self, name: str) -> None:
        count = self.count(name)
        if count == 0:
            logger.warning("Display attribute '%s' disabled more often than enabled; ignoring.", name)
            return
        self._counts[name] = count - 1
        if count == 1 and not self.batch_mode:
            self.device.attr_off(name)

    @contextlib.contextmanager
    def scoped(self, name: str) -> Generator[None, None, None]:
        """Context manager enabling an attribute for the duration of the block."""
        self.enable(name)
        try:
            yield
        finally:
            self.disable(name)

    def bold_on(self) -> None:
        self.enable("bold")

    def bold_off(self) -> None:
        self.disable("bold")

    def underline_on(self) -> None:
        self.enable("underline")

    def underline_off(self) -> None:
        self.disable("underline")

    def reverse_on(self) -> None:
        self.enable("reverse")

    def reverse_off(self) -> None:
        self.disable("reverse")

    def bold(self) -> contextlib.AbstractContextManager:
        return self.scoped("bold")

    def underline(self) -> contextlib.AbstractContextManager:
        return self.scoped("underline")

    def reverse(self) -> contextlib.AbstractContextManager:
        return self.scoped("reverse")
