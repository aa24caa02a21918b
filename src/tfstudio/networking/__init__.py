"""Networking helpers (CIDR math)."""

from tfstudio.networking.cidr import (
    ParsedCidr,
    cidr_contains,
    cidrs_overlap,
    format_ip,
    is_valid_cidr,
    next_available_cidr,
    parse_cidr,
)

__all__ = [
    "ParsedCidr",
    "cidr_contains",
    "cidrs_overlap",
    "format_ip",
    "is_valid_cidr",
    "next_available_cidr",
    "parse_cidr",
]
