from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from .models import HostOutcome, PortOutcome
from .targets import address_key


def sort_ports(ports: Iterable[PortOutcome]) -> List[PortOutcome]:
    return sorted(ports, key=lambda p: p.port)


def sort_hosts(hosts: Iterable[HostOutcome]) -> List[HostOutcome]:
    """
    Orders hosts by numeric address and each host's ports by number.
    Collection order out of the scheduler is arbitrary; this is the only
    ordering callers may rely on.
    """
    ordered = sorted(hosts, key=lambda h: address_key(h.address))
    return [replace(h, ports=tuple(sort_ports(h.ports))) for h in ordered]
