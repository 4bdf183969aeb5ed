from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Sequence

from pydantic import ValidationError

from .command import TcpdumpCommand
from .config import settings
from .expression import FilterExpression, FilterExpressionError

logger = logging.getLogger("pcapfilter.main")


def _parse_range(value: str) -> tuple[str, str]:
    start, sep, end = value.partition("-")
    if not sep or not start or not end:
        raise argparse.ArgumentTypeError(f"expected START-END, got {value!r}")
    return start, end


def build_filter(args: argparse.Namespace) -> FilterExpression:
    """
    Build one expression out of every primitive given on the command line,
    joined with ``--join``.
    """
    expr = FilterExpression(strict=not args.permissive)
    expr.init()
    expr.begin()
    join = expr.concate if args.join == "and" else expr.alternate
    proto = args.proto or ""

    calls = (
        [(expr.host, (ip, "")) for ip in args.host]
        + [(expr.host, (ip, "src")) for ip in args.src_host]
        + [(expr.host, (ip, "dst")) for ip in args.dst_host]
        + [(expr.port, (p, "", proto)) for p in args.port]
        + [(expr.port, (p, "src", proto)) for p in args.src_port]
        + [(expr.port, (p, "dst", proto)) for p in args.dst_port]
        + [(expr.port_range, (start, end, "", proto)) for start, end in args.portrange]
    )
    for i, (emit, emit_args) in enumerate(calls):
        if i:
            join()
        emit(*emit_args)

    if calls:
        expr.end()
    return expr


def build_command(args: argparse.Namespace, expr: FilterExpression) -> TcpdumpCommand:
    cmd = TcpdumpCommand()
    cmd.init()
    cmd.set_interface(args.iface).set_snaplen(args.snaplen)
    if args.count is not None:
        cmd.set_packet_count(args.count)
    if args.file_size is not None:
        cmd.set_file_size(args.file_size)
    if args.write:
        cmd.set_output_file(args.write)
    return cmd.set_expr_filter(expr)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pcapfilter",
        description="Build a pcap-filter expression and the tcpdump command that uses it",
    )
    parser.add_argument("--iface", default=settings.INTERFACE)
    parser.add_argument("--host", action="append", default=[], metavar="IP")
    parser.add_argument("--src-host", action="append", default=[], metavar="IP")
    parser.add_argument("--dst-host", action="append", default=[], metavar="IP")
    parser.add_argument("--port", action="append", default=[])
    parser.add_argument("--src-port", action="append", default=[])
    parser.add_argument("--dst-port", action="append", default=[])
    parser.add_argument(
        "--portrange", action="append", default=[], type=_parse_range, metavar="START-END",
    )
    parser.add_argument("--proto", choices=["tcp", "udp"], default=None)
    parser.add_argument("--join", choices=["and", "or"], default="and")
    parser.add_argument("--write", "-w", default=None, metavar="FILE")
    parser.add_argument("--file-size", "-C", default=None, type=int)
    parser.add_argument("--count", "-c", default=None, type=int)
    parser.add_argument("--snaplen", "-s", default=settings.SNAPLEN, type=int)
    parser.add_argument("--permissive", action="store_true", default=not settings.STRICT_VALIDATION)
    parser.add_argument("--filter-only", action="store_true")
    parser.add_argument(
        "--log-level", default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> NoReturn:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        expr = build_filter(args)
        output = expr.serialize() if args.filter_only else build_command(args, expr).compile()
    except (FilterExpressionError, ValidationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Filter: %r", expr.serialize())
    print(output)
    sys.exit(0)


if __name__ == "__main__":
    main()
