from __future__ import annotations

import ipaddress
from typing import List, Tuple

# Only /24 blocks are expanded; everything else yields no targets.
SUPPORTED_PREFIXES = (24,)


def expand_network(spec: str) -> List[str]:
    """
    Expands "a.b.c.d/24" into the 254 host addresses a.b.c.1 .. a.b.c.254,
    in ascending order. The host bits of the input are ignored.

    Unrecognised or malformed specifications return an empty list.
    """
    spec = (spec or "").strip()
    if "/" not in spec:
        return []

    try:
        net = ipaddress.IPv4Network(spec, strict=False)
    except ValueError:
        return []

    if net.prefixlen not in SUPPORTED_PREFIXES:
        return []

    # hosts() skips network + broadcast
    return [str(ip) for ip in net.hosts()]


def address_key(address: str) -> Tuple[int, ...]:
    """
    Numeric sort key for a dotted quad: "10.0.0.2" < "10.0.0.10".
    Non-numeric octets sort as 0.
    """
    key = []
    for part in address.split("."):
        try:
            key.append(int(part))
        except ValueError:
            key.append(0)
    return tuple(key)


def is_valid_target(target: str) -> bool:
    """Non-empty, and encodable as a host name (no empty or >63 char labels)."""
    target = (target or "").strip()
    if not target:
        return False
    try:
        target.encode("idna")
    except UnicodeError:
        return False
    return True
