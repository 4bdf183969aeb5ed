"""
expression/validators.py

Pure checks for the arguments of host / port / portrange primitives.

Every check takes a keyword ``strict`` flag. Strict mode (the default)
accepts only the documented tokens and the real port bound. Permissive
mode keeps the legacy behaviour of older filter generators, where any
direction or protocol string passed and ports were only checked for
being all digits.

Usage:
    is_valid_ip("192.168.0.2")            # True
    is_valid_direction("src")             # True
    is_valid_port_number("70000")         # False
    is_valid_port_number("70000", strict=False)  # True
"""

from __future__ import annotations

import ipaddress
import re
from typing import Any

VALID_DIRECTIONS: frozenset[str] = frozenset({"src", "dst", ""})
VALID_PROTOCOLS: frozenset[str] = frozenset({"tcp", "udp", ""})

MIN_PORT = 0
MAX_PORT = 65535

_PORT_RE = re.compile(r"[0-9]+")

# Default int/str conversion limit since Python 3.11, applied on every version
_MAX_PORT_DIGITS = 4300


def is_valid_ip(value: Any) -> bool:
    """True for an IPv4 or IPv6 address literal (no prefix length, no zone)."""
    if not isinstance(value, str):
        return False
    try:
        addr = ipaddress.ip_address(value)
    except ValueError:
        return False
    # fe80::1%eth0 parses, but a zone is not part of an address literal
    return getattr(addr, "scope_id", None) is None


def is_valid_direction(value: Any, *, strict: bool = True) -> bool:
    if not isinstance(value, str):
        return False
    if not strict:
        return True
    return value in VALID_DIRECTIONS


def is_valid_protocol(value: Any, *, strict: bool = True) -> bool:
    if not isinstance(value, str):
        return False
    if not strict:
        return True
    return value in VALID_PROTOCOLS


def port_to_int(value: int | str) -> int:
    """
    Integer value of a port made of decimal digits, leading zeros ignored.

    Raises ValueError when the digits exceed the interpreter's int
    conversion limit.
    """
    return int(str(value).lstrip("0") or "0")


def is_valid_port_number(value: Any, *, strict: bool = True) -> bool:
    """
    True when ``value`` is made of decimal digits only and, in strict
    mode, lies within 0–65535.

    Accepts ints and strings. Booleans are rejected even though they are
    ints to Python.
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return False
    try:
        digits = str(value)
    except ValueError:
        # int too large to render as decimal
        return False
    if not _PORT_RE.fullmatch(digits):
        return False
    if strict:
        if len(digits.lstrip("0")) > len(str(MAX_PORT)):
            return False
        return MIN_PORT <= port_to_int(digits) <= MAX_PORT
    if len(digits.lstrip("0")) > _MAX_PORT_DIGITS:
        return False
    try:
        port_to_int(digits)
    except ValueError:
        return False
    return True
