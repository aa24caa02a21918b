"""IPv4 CIDR arithmetic on 32-bit unsigned integers.

All helpers are pure. Malformed input never raises: parsing returns ``None``
and the predicates return ``False``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_CIDR_RE = re.compile(r"([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})/([0-9]{1,2})")

_ALL_ONES = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class ParsedCidr:
    """Network address (big-endian packed) and prefix length."""

    ip: int
    prefix: int


def parse_cidr(cidr: str) -> ParsedCidr | None:
    """Parse ``"a.b.c.d/n"``; return ``None`` if the format or a range is invalid."""
    match = _CIDR_RE.fullmatch(cidr)
    if match is None:
        return None

    *octets, prefix = (int(g) for g in match.groups())
    if any(o > 255 for o in octets) or prefix > 32:
        return None

    ip = (octets[0] << 24) | (octets[1] << 16) | (octets[2] << 8) | octets[3]
    return ParsedCidr(ip=ip, prefix=prefix)


def format_ip(ip: int) -> str:
    """Dotted-quad rendering of a 32-bit address."""
    return f"{(ip >> 24) & 0xFF}.{(ip >> 16) & 0xFF}.{(ip >> 8) & 0xFF}.{ip & 0xFF}"


def prefix_to_mask(prefix: int) -> int:
    if prefix == 0:
        return 0
    return (_ALL_ONES << (32 - prefix)) & _ALL_ONES


def is_valid_cidr(cidr: str) -> bool:
    return parse_cidr(cidr) is not None


def _overlaps(a: ParsedCidr, b: ParsedCidr) -> bool:
    # Compare on the shorter prefix, i.e. the larger of the two networks.
    mask = prefix_to_mask(min(a.prefix, b.prefix))
    return (a.ip & mask) == (b.ip & mask)


def cidrs_overlap(a: str, b: str) -> bool:
    """True if the two blocks share at least one address."""
    pa = parse_cidr(a)
    pb = parse_cidr(b)
    if pa is None or pb is None:
        return False
    return _overlaps(pa, pb)


def cidr_contains(parent: str, child: str) -> bool:
    """True if *child* lies entirely inside *parent*."""
    pp = parse_cidr(parent)
    pc = parse_cidr(child)
    if pp is None or pc is None:
        return False

    if pc.prefix < pp.prefix:
        return False

    mask = prefix_to_mask(pp.prefix)
    return (pc.ip & mask) == (pp.ip & mask)


def next_available_cidr(
    parent_cidr: str,
    used_cidrs: Iterable[str],
    subnet_prefix: int = 24,
) -> str | None:
    """Return the first aligned ``/subnet_prefix`` block in *parent_cidr* that is free.

    Candidates overlapping any used block (of any size) are skipped. Returns
    ``None`` when the parent is exhausted, unparsable, or *subnet_prefix* is not
    strictly longer than the parent prefix.
    """
    parent = parse_cidr(parent_cidr)
    if parent is None:
        return None
    if subnet_prefix <= parent.prefix or subnet_prefix > 32:
        return None

    used = [p for p in (parse_cidr(u) for u in used_cidrs) if p is not None]

    parent_mask = prefix_to_mask(parent.prefix)
    network = parent.ip & parent_mask
    broadcast = network | (~parent_mask & _ALL_ONES)
    step = 1 << (32 - subnet_prefix)

    for candidate in range(network, broadcast - step + 2, step):
        block = ParsedCidr(ip=candidate, prefix=subnet_prefix)
        if not any(_overlaps(block, u) for u in used):
            return f"{format_ip(candidate)}/{subnet_prefix}"

    return None
