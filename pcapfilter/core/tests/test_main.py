"""
tests/test_main.py

Tests for main.py — command-line entry point.
"""

from __future__ import annotations

import pytest

from pcapfilter.core.main import _parse_args, build_filter, main


def _run(capsys, *argv: str) -> tuple[int, str, str]:
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    out, err = capsys.readouterr()
    return exc_info.value.code, out.strip(), err


class TestBuildFilter:

    def test_no_primitives_gives_empty_filter(self):
        expr = build_filter(_parse_args([]))
        assert expr.serialize() == ""
        assert expr.get_stack() == ()

    def test_primitives_joined_with_and(self):
        args = _parse_args(["--host", "192.168.0.2", "--port", "5060"])
        assert build_filter(args).serialize() == "host 192.168.0.2 and port 5060"

    def test_join_or_with_directions_and_protocol(self):
        args = _parse_args([
            "--src-host", "10.0.0.1", "--dst-port", "53", "--proto", "udp", "--join", "or",
        ])
        assert build_filter(args).serialize() == "src host 10.0.0.1 or udp dst port 53"

    def test_portrange(self):
        args = _parse_args(["--portrange", "6000-6010", "--proto", "tcp"])
        assert build_filter(args).serialize() == "tcp portrange 6000-6010"


class TestMain:

    def test_prints_command(self, capsys):
        code, out, _ = _run(
            capsys,
            "--iface", "eth0", "--host", "192.168.0.2", "--port", "5060",
            "-w", "/tmp/192.168.0.3.pcap", "-C", "100",
        )
        assert code == 0
        assert out == (
            "tcpdump -i eth0 -s 0 -C 100 -w /tmp/192.168.0.3.pcap "
            "'host 192.168.0.2 and port 5060'"
        )

    def test_filter_only(self, capsys):
        code, out, _ = _run(capsys, "--filter-only", "--dst-host", "::1", "--port", "22")
        assert code == 0
        assert out == "dst host ::1 and port 22"

    def test_invalid_ip_exits_with_error(self, capsys):
        code, out, err = _run(capsys, "--host", "999.1.1.1")
        assert code == 1
        assert out == ""
        assert "ERROR:" in err
        assert "999.1.1.1" in err

    def test_invalid_port_exits_with_error(self, capsys):
        code, _, err = _run(capsys, "--port", "70000")
        assert code == 1
        assert "70000" in err

    def test_permissive_allows_large_port(self, capsys):
        code, out, _ = _run(capsys, "--permissive", "--filter-only", "--port", "70000")
        assert code == 0
        assert out == "port 70000"

    def test_bad_file_size_exits_with_error(self, capsys):
        code, _, err = _run(capsys, "--port", "80", "-C", "0")
        assert code == 1
        assert "ERROR:" in err

    def test_malformed_portrange_rejected_by_argparse(self, capsys):
        code, _, _ = _run(capsys, "--portrange", "6000")
        assert code == 2

    def test_huge_port_exits_with_error(self, capsys):
        code, out, err = _run(capsys, "--filter-only", "--port", "1" * 5000)
        assert code == 1
        assert out == ""
        assert "ERROR:" in err
