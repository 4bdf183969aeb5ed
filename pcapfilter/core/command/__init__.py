"""
command/__init__.py

Public API for the command sub-package.
"""

from .models import CaptureOptions
from .tcpdump import TcpdumpCommand

__all__ = ["CaptureOptions", "TcpdumpCommand"]
