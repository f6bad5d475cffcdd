"""
Scan tuning knobs.

Two probe profiles share the same shape and differ only in their constants:

- FAST:      1s connect, 500ms banner read, 512 byte buffer, 40 char banner
- THOROUGH:  3s connect, 2s banner read, 1024 byte buffer, 50 char banner

ScanConfig groups the concurrency caps and batch sizes of every operation.
The defaults are the values the scanner has always shipped with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

DEFAULT_LIVENESS_PORTS = (80, 443, 22, 21, 23, 25, 53, 135, 139, 445)


@dataclass(frozen=True)
class ProbeProfile:
    name: str
    connect_timeout: float
    read_timeout: float
    buffer_size: int
    banner_max_len: int
    http_request: str

    def http_stimulus(self, host: str) -> bytes:
        return self.http_request.format(host=host).encode()


FAST = ProbeProfile(
    name="fast",
    connect_timeout=1.0,
    read_timeout=0.5,
    buffer_size=512,
    banner_max_len=40,
    http_request="GET / HTTP/1.1\r\nHost: {host}\r\nConnection: close\r\n\r\n",
)

THOROUGH = ProbeProfile(
    name="thorough",
    connect_timeout=3.0,
    read_timeout=2.0,
    buffer_size=1024,
    banner_max_len=50,
    http_request="GET / HTTP/1.0\r\n\r\n",
)

PROFILES = {p.name: p for p in (FAST, THOROUGH)}


@dataclass(frozen=True)
class ScanConfig:
    # Liveness race
    liveness_ports: Tuple[int, ...] = DEFAULT_LIVENESS_PORTS
    liveness_attempt_timeout: float = 0.1
    liveness_timeout: float = 0.2

    # Ping sweep
    sweep_concurrency: int = 500
    sweep_batch_size: int = 254

    # Single host port scan
    port_concurrency: int = 5000
    port_batch_size: int = 1000
    port_profile: ProbeProfile = field(default=THOROUGH)

    # Combined discovery (hosts outer, ports inner)
    host_concurrency: int = 100
    host_batch_size: int = 50
    host_port_concurrency: int = 50
    host_port_batch_size: int = 1000
    discover_profile: ProbeProfile = field(default=FAST)

    # Single check and monitor
    check_profile: ProbeProfile = field(default=THOROUGH)
    monitor_interval: float = 30.0

    def __post_init__(self):
        if not self.liveness_ports:
            raise ValueError("liveness_ports must not be empty")
        if self.liveness_attempt_timeout <= 0:
            raise ValueError("liveness_attempt_timeout must be > 0")
        if self.liveness_timeout <= self.liveness_attempt_timeout:
            raise ValueError("liveness_timeout must be larger than liveness_attempt_timeout")
        for name in (
            "sweep_concurrency",
            "sweep_batch_size",
            "port_concurrency",
            "port_batch_size",
            "host_concurrency",
            "host_batch_size",
            "host_port_concurrency",
            "host_port_batch_size",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.monitor_interval <= 0:
            raise ValueError("monitor_interval must be > 0")
