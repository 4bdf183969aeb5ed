"""
command/models.py

Pydantic model holding every option the tcpdump command assembler knows.

Assignments are validated, so a setter on TcpdumpCommand fails straight
away with a pydantic ValidationError instead of producing a bad command.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

FlagValue = Union[str, int, None]


class CaptureOptions(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    flags: dict[str, FlagValue] = Field(default_factory=dict)
    """Raw flags in insertion order, e.g. {'-A': None, '-n': None}."""

    interface: Optional[str] = None
    """-i  capture interface"""

    output_file: Optional[str] = None
    """-w  write raw packets to this file"""

    file_size: Optional[int] = Field(default=None, ge=1)
    """-C  rotate the output file every N million bytes"""

    packet_count: Optional[int] = Field(default=None, ge=1)
    """-c  exit after N packets"""

    snaplen: Optional[int] = Field(default=None, ge=0)
    """-s  bytes captured per packet, 0 = whole packet"""

    expr_filter: str = ""
    """pcap-filter expression passed as the final argument"""

    @field_validator("flags")
    @classmethod
    def check_flag_names(cls, v: dict[str, FlagValue]) -> dict[str, FlagValue]:
        for name in v:
            if not name.startswith("-") or len(name) < 2 or any(c.isspace() for c in name):
                raise ValueError(f"malformed flag {name!r}, expected e.g. '-A' or '--immediate-mode'")
        return v

    @field_validator("interface", "output_file")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("expr_filter")
    @classmethod
    def single_line(cls, v: str) -> str:
        v = v.strip()
        if "\n" in v or "\r" in v:
            raise ValueError("filter expression must be a single line")
        return v
