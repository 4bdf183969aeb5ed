"""
command/tcpdump.py

TcpdumpCommand assembles capture options and a filter expression into a
single tcpdump invocation. Nothing is executed here; callers get either a
shell-safe string (compile) or an argv list (as_args).

Usage:
    cmd = TcpdumpCommand()
    cmd.init({"-s": 0, "-A": None})
    line = (
        cmd.set_interface("eth0")
           .set_output_file("/tmp/192.168.0.3.pcap")
           .set_file_size(100)
           .set_expr_filter("host 192.168.0.2 and port 5060")
           .compile()
    )
    # "tcpdump -s 0 -A -i eth0 -C 100 -w /tmp/192.168.0.3.pcap 'host 192.168.0.2 and port 5060'"
"""

from __future__ import annotations

import logging
import shlex
from typing import Mapping

from ..config import settings
from ..expression import FilterExpression
from ..metrics import METRICS
from .models import CaptureOptions, FlagValue

logger = logging.getLogger(__name__)


class TcpdumpCommand:
    """
    Fluent tcpdump command-line assembler.

    Args:
        binary: tcpdump executable name or path. None → settings.TCPDUMP_BIN
    """

    def __init__(self, binary: str | None = None) -> None:
        self.binary = binary or settings.TCPDUMP_BIN
        self.options = CaptureOptions()

    def init(self, flags: Mapping[str, FlagValue] | None = None) -> TcpdumpCommand:
        """Drop every option and start over with ``flags``."""
        self.options = CaptureOptions(flags=dict(flags or {}))
        return self

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_flag(self, name: str, value: FlagValue = None) -> TcpdumpCommand:
        self.options.flags = {**self.options.flags, name: value}
        return self

    def set_interface(self, interface: str) -> TcpdumpCommand:
        self.options.interface = interface
        return self

    def set_output_file(self, path: str) -> TcpdumpCommand:
        self.options.output_file = path
        return self

    def set_file_size(self, size: int | str) -> TcpdumpCommand:
        self.options.file_size = size
        return self

    def set_packet_count(self, count: int | str) -> TcpdumpCommand:
        self.options.packet_count = count
        return self

    def set_snaplen(self, snaplen: int | str) -> TcpdumpCommand:
        self.options.snaplen = snaplen
        return self

    def set_expr_filter(self, expr: str | FilterExpression) -> TcpdumpCommand:
        """Use ``expr`` as the capture filter; builders are serialised now."""
        if isinstance(expr, FilterExpression):
            expr = expr.serialize()
        self.options.expr_filter = expr
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def as_args(self) -> list[str]:
        """The command as an argv list, binary first."""
        opts = self.options
        args = [self.binary]

        # a named option wins over a raw flag for the same switch
        named = {
            "-i": opts.interface,
            "-s": opts.snaplen,
            "-c": opts.packet_count,
            "-C": opts.file_size,
            "-w": opts.output_file,
        }
        for name, value in opts.flags.items():
            if named.get(name) is not None:
                logger.debug("Raw flag %s overridden by named option", name)
                continue
            args.append(name)
            if value is not None:
                args.append(str(value))

        if opts.interface is not None:
            args += ["-i", opts.interface]
        if opts.snaplen is not None:
            args += ["-s", str(opts.snaplen)]
        if opts.packet_count is not None:
            args += ["-c", str(opts.packet_count)]
        if opts.file_size is not None:
            args += ["-C", str(opts.file_size)]
        if opts.output_file is not None:
            args += ["-w", opts.output_file]
        if opts.expr_filter:
            args.append(opts.expr_filter)
        return args

    def compile(self) -> str:
        """The command as one shell-safe string."""
        line = shlex.join(self.as_args())
        METRICS.commands_compiled.inc()
        logger.debug("Compiled command: %s", line)
        return line

    def __str__(self) -> str:
        return self.compile()
