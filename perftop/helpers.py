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
Numeric and string helpers for perftop.

This module provides the SMT utilization formula, EBCDIC conversion,
string trimming, mount table lookup and TOD clock conversion.
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_SMT_FACTOR = 1.3
DEFAULT_MOUNTS_PATH = "/proc/mounts"
EBCDIC_CODEC = "cp037"  # EBCDIC-US
EXT_TOD_SIZE = 16
ASCII_WHITESPACE = " \t\n\v\f\r"

_U64_MASK = (1 << 64) - 1
_MOUNT_ESCAPE_RE = re.compile(r"\\([0-7]{3})")


class MountTableError(OSError):
    """Raised when the mount table cannot be read."""


def calculate_smt_util(
    core_us: int,
    thread_us: int,
    mgm_us: int,
    threads_per_core: int,
    smt_factor: float = DEFAULT_SMT_FACTOR,
) -> int:
    """
    Calculate real SMT utilization.

    Args:
        core_us: Core utilization in microseconds
        thread_us: Thread utilization in microseconds
        mgm_us: Management utilization in microseconds
        threads_per_core: SMT thread count per core
        smt_factor: Scaling factor applied to the multithreading share

    Returns:
        Adjusted utilization in microseconds, never negative
    """
    component1 = threads_per_core * core_us - thread_us
    if threads_per_core > 1:
        component1 = int(component1 / smt_factor)
    component2 = thread_us - core_us
    return max(component1 + component2 + mgm_us, 0)


def ebcdic_to_ascii(data: bytes) -> str:
    """Convert an EBCDIC-US byte string to text."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"ebcdic_to_ascii() expects bytes, got {type(data).__name__}")
    return bytes(data).decode(EBCDIC_CODEC)


def strstrip(text: str) -> str:
    """Remove trailing and leading ASCII whitespace."""
    return text.strip(ASCII_WHITESPACE)


def _unescape_mount_field(field: str) -> str:
    return _MOUNT_ESCAPE_RE.sub(lambda match: chr(int(match.group(1), 8)), field)


def mount_point_get(fs_type: str, mounts_path: str = DEFAULT_MOUNTS_PATH) -> Optional[str]:
    """
    Get the mount point of the first file system of type fs_type.

    Args:
        fs_type: File system type, e.g. "debugfs"
        mounts_path: Mount table in fstab format

    Returns:
        Mount directory, or None if no file system of that type is mounted

    Raises:
        MountTableError: If the mount table cannot be read
    """
    try:
        with open(mounts_path, "r", encoding="utf-8") as fh:
            for line in fh:
                fields = line.split()
                if len(fields) < 3:
                    continue
                if fields[2] == fs_type:
                    return _unescape_mount_field(fields[1])
    except OSError as exc:
        raise MountTableError(f'Could not find "{fs_type}" mount point: {exc}') from exc
    logger.debug("No '%s' file system found in '%s'.", fs_type, mounts_path)
    return None


def ext_tod_to_us(tod_ext: bytes) -> int:
    """
    Convert an extended TOD clock value to microseconds.

    Args:
        tod_ext: At least 16 bytes, two big-endian 64 bit words

    Returns:
        Microseconds since the TOD epoch
    """
    if len(tod_ext) < EXT_TOD_SIZE:
        raise ValueError(f"Extended TOD value needs {EXT_TOD_SIZE} bytes, got {len(tod_ext)}.")
    tod1 = int.from_bytes(tod_ext[0:8], "big")
    tod2 = int.from_bytes(tod_ext[8:16], "big")
    us = ((tod1 << 8) & _U64_MASK) | (tod2 >> 58)
    return us >> 12
