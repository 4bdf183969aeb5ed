"""
tests/test_config.py

Tests for config.py — Pydantic Settings validation and defaults.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pcapfilter.core.config import Settings


class TestSettingsDefaults:

    def test_strict_validation_on(self):
        s = Settings()
        assert s.STRICT_VALIDATION is True

    def test_range_order_not_enforced(self):
        s = Settings()
        assert s.ENFORCE_PORTRANGE_ORDER is False

    def test_default_binary(self):
        s = Settings()
        assert s.TCPDUMP_BIN == "tcpdump"

    def test_default_interface(self):
        s = Settings()
        assert s.INTERFACE == "eth0"

    def test_default_snaplen(self):
        s = Settings()
        assert s.SNAPLEN == 0

    def test_default_log_level(self):
        s = Settings()
        assert s.LOG_LEVEL == "INFO"


class TestSettingsOverrides:

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("INTERFACE", "wlan0")
        monkeypatch.setenv("TCPDUMP_BIN", "/usr/sbin/tcpdump")
        monkeypatch.setenv("SNAPLEN", "96")
        s = Settings()
        assert s.INTERFACE == "wlan0"
        assert s.TCPDUMP_BIN == "/usr/sbin/tcpdump"
        assert s.SNAPLEN == 96

    def test_permissive_override(self, monkeypatch):
        monkeypatch.setenv("STRICT_VALIDATION", "false")
        monkeypatch.setenv("ENFORCE_PORTRANGE_ORDER", "1")
        s = Settings()
        assert s.STRICT_VALIDATION is False
        assert s.ENFORCE_PORTRANGE_ORDER is True

    def test_case_insensitive_names(self, monkeypatch):
        monkeypatch.setenv("interface", "lo")
        assert Settings().INTERFACE == "lo"

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        assert Settings().LOG_LEVEL == "DEBUG"


class TestSettingsValidation:

    def test_negative_snaplen(self, monkeypatch):
        monkeypatch.setenv("SNAPLEN", "-1")
        with pytest.raises(ValidationError):
            Settings()

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings()
