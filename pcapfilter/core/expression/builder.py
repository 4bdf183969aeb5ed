"""
expression/builder.py

FilterExpression — fluent builder for pcap-filter expressions made of
host, port and portrange primitives.

The builder keeps two pieces of state:
  - a buffer holding the expression currently under construction
  - a stack of finished expressions, in the order they were pushed

Primitives and operators append to the buffer. end() copies the buffer
onto the stack. group() parenthesises the buffer, optionally prefixes an
operator, pushes the result and starts a fresh buffer. serialize() joins
the stack into the final filter string.

Usage:
    expr = FilterExpression()
    expr.init()
    pcap_filter = (
        expr.begin()
            .host("192.168.0.2")
            .concate()
            .port(5060)
            .end()
            .serialize()
    )
    # "host 192.168.0.2 and port 5060"

Not thread-safe: use one builder per filter being assembled.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from ..config import settings
from ..metrics import METRICS
from .errors import FilterArgumentError, FilterStateError
from .validators import (
    is_valid_direction,
    is_valid_ip,
    is_valid_port_number,
    is_valid_protocol,
    port_to_int,
)

logger = logging.getLogger(__name__)

# Every spelling group() understands, mapped to the operator keyword
_GROUP_OPERATORS: dict[str, str] = {
    "concate": "and",
    "and": "and",
    "&&": "and",
    "alternate": "or",
    "or": "or",
    "||": "or",
    "negate": "not",
    "not": "not",
    "!": "not",
}

# A leading binary operator has no left operand once serialised
_BINARY_OPERATORS = ("and", "or")


def _primitive(*parts: str) -> str:
    """Join the non-empty parts of a primitive with single spaces."""
    return " ".join(part for part in parts if part)


class FilterExpression:
    """
    Stateful pcap-filter expression builder.

    Every mutating method returns ``self`` so calls can be chained.

    Args:
        strict:         Enforce the documented direction / protocol tokens
                        and the 0–65535 port bound. None → settings.STRICT_VALIDATION
        ordered_ranges: Reject port ranges whose start is above their end.
                        None → settings.ENFORCE_PORTRANGE_ORDER
    """

    def __init__(
        self,
        strict: bool | None = None,
        ordered_ranges: bool | None = None,
    ) -> None:
        self.strict = settings.STRICT_VALIDATION if strict is None else strict
        self.ordered_ranges = (
            settings.ENFORCE_PORTRANGE_ORDER if ordered_ranges is None else ordered_ranges
        )
        self._buffer: str = ""
        self._stack: list[str] = []
        # stack indexes whose entry starts with an operator added by group()
        self._prefixed: set[int] = set()

        if not self.strict:
            logger.warning(
                "Permissive validation enabled: direction, protocol and port "
                "bounds are not checked"
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> FilterExpression:
        """Reset both the stack and the buffer."""
        self._stack = []
        self._prefixed = set()
        self._buffer = ""
        return self

    def begin(self) -> FilterExpression:
        """Start a new expression, discarding anything not yet pushed."""
        self._buffer = ""
        return self

    def end(self) -> FilterExpression:
        """
        Push a copy of the buffer onto the stack.

        The buffer itself is left as is; call begin() before building the
        next expression or the same text will be pushed again.
        """
        self._push()
        return self

    checkpoint = end

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def host(self, ip: str, direction: str = "") -> FilterExpression:
        """Append ``[src|dst] host <ip>``."""
        self._check_direction(direction)
        if not is_valid_ip(ip):
            self._reject("ip", ip, f"{ip} is not a valid ip")

        self._append(_primitive(direction, "host", ip))
        return self

    def port(
        self,
        port: int | str,
        direction: str = "",
        protocol: str = "",
    ) -> FilterExpression:
        """Append ``[tcp|udp] [src|dst] port <port>``."""
        self._check_direction(direction)
        self._check_protocol(protocol)
        if not is_valid_port_number(port, strict=self.strict):
            self._reject("port", port, f"{port} doesn't look like a valid port number")

        self._append(_primitive(protocol, direction, "port", f"{port_to_int(port):d}"))
        return self

    def port_range(
        self,
        start_port: int | str,
        end_port: int | str,
        direction: str = "",
        protocol: str = "",
    ) -> FilterExpression:
        """
        Append ``[tcp|udp] [src|dst] portrange <start>-<end>``.

        The order of the bounds is only checked when ``ordered_ranges`` is on.
        """
        self._check_direction(direction)
        self._check_protocol(protocol)
        pair = f"{start_port}-{end_port}"
        if not (
            is_valid_port_number(start_port, strict=self.strict)
            and is_valid_port_number(end_port, strict=self.strict)
        ):
            self._reject(
                "port range", (start_port, end_port),
                f"{pair} doesn't look like a valid port range",
            )

        start, end = port_to_int(start_port), port_to_int(end_port)
        if self.ordered_ranges and start > end:
            self._reject(
                "port range", (start_port, end_port),
                f"{pair} starts above its end port",
            )

        self._append(_primitive(protocol, direction, "portrange", f"{start:d}-{end:d}"))
        return self

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def concate(self) -> FilterExpression:
        """Append the ``and`` operator."""
        return self._operator("and")

    def alternate(self) -> FilterExpression:
        """Append the ``or`` operator."""
        return self._operator("or")

    def negate(self) -> FilterExpression:
        """Append the ``not`` operator."""
        return self._operator("not")

    def group(self, operator: str | None = None) -> FilterExpression:
        """
        Parenthesise the buffer and push it, then start a new buffer.

        ``operator`` may be any spelling of and / or / not
        (concate, and, &&, alternate, or, ||, negate, not, !); it is placed
        in front of the group. Anything else means no operator.

        Raises:
            FilterStateError: the buffer is empty
        """
        content = self._buffer.strip()
        if not content:
            METRICS.state_errors.inc()
            raise FilterStateError("expression is empty")

        keyword = _GROUP_OPERATORS.get(operator) if isinstance(operator, str) else None
        if operator is not None and keyword is None:
            logger.debug("Unknown group operator %r, grouping without one", operator)

        grouped = f"({content})"
        if keyword:
            grouped = f" {keyword} {grouped}"
        self._buffer = grouped

        self.end()
        if keyword:
            self._prefixed.add(len(self._stack) - 1)
        self.begin()
        METRICS.groups_closed.inc()
        logger.debug("Grouped expression %r", grouped)
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def serialize(self) -> str:
        """
        Return the stacked expressions as one filter string.

        Entries are trimmed and joined by single spaces. An ``and`` / ``or``
        that group() put in front of the first entry is dropped. The stack
        is not modified.
        """
        parts = [entry.strip() for entry in self._stack]
        if parts and 0 in self._prefixed:
            head, _, rest = parts[0].partition(" ")
            if head in _BINARY_OPERATORS:
                parts[0] = rest.strip()
        return " ".join(parts).strip()

    def get_stack(self) -> tuple[str, ...]:
        """Finished expressions in the order they were pushed."""
        return tuple(self._stack)

    def peek(self) -> str:
        """The expression currently under construction."""
        return self._buffer

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return (
            f"FilterExpression(buffer={self._buffer!r} "
            f"stack={len(self._stack)} strict={self.strict})"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _append(self, text: str) -> None:
        self._buffer += text
        METRICS.primitives_emitted.inc()
        logger.debug("Appended primitive %r", text)

    def _operator(self, keyword: str) -> FilterExpression:
        self._buffer += f" {keyword} "
        METRICS.operators_emitted.inc()
        return self

    def _push(self) -> None:
        if not self._buffer.strip():
            METRICS.state_errors.inc()
            raise FilterStateError("Expression empty, not stacking")
        self._stack.append(self._buffer)
        METRICS.checkpoints.inc()
        logger.debug("Stacked expression %r (depth=%d)", self._buffer, len(self._stack))

    def _check_direction(self, direction: Any) -> None:
        if not is_valid_direction(direction, strict=self.strict):
            self._reject(
                "direction", direction,
                f"invalid packet direction {direction!r}, must be 'src', 'dst' or none (any)",
            )

    def _check_protocol(self, protocol: Any) -> None:
        if not is_valid_protocol(protocol, strict=self.strict):
            self._reject(
                "protocol", protocol,
                f"invalid protocol {protocol!r}, must be 'tcp', 'udp' or none (any)",
            )

    def _reject(self, kind: str, value: Any, message: str) -> NoReturn:
        METRICS.argument_errors.inc()
        logger.warning("Rejected %s %r", kind, value)
        raise FilterArgumentError(kind, value, message)
