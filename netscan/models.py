from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


# Read-only after import; probes share it across threads without locking.
SERVICES: Mapping[int, str] = MappingProxyType({
    21: "FTP",
    22: "SSH",
    23: "Telnet",
    25: "SMTP",
    53: "DNS",
    80: "HTTP",
    110: "POP3",
    135: "RPC",
    139: "NetBIOS",
    143: "IMAP",
    443: "HTTPS",
    445: "SMB",
    993: "IMAPS",
    995: "POP3S",
    1433: "MSSQL",
    3306: "MySQL",
    3389: "RDP",
    5432: "PostgreSQL",
    5900: "VNC",
    6379: "Redis",
    8080: "HTTP-Alt",
    9200: "Elasticsearch",
})


def service_name(port: int) -> Optional[str]:
    return SERVICES.get(port)


@dataclass(frozen=True)
class PortOutcome:
    port: int
    open: bool
    service: Optional[str] = None
    banner: Optional[str] = None

    def __post_init__(self):
        if not self.open and (self.service is not None or self.banner is not None):
            raise ValueError("closed port cannot carry service or banner")

    @classmethod
    def closed(cls, port: int) -> "PortOutcome":
        return cls(port=port, open=False)


@dataclass(frozen=True)
class HostOutcome:
    address: str
    alive: bool
    ports: Tuple[PortOutcome, ...] = ()
    latency_s: float = 0.0

    @property
    def latency_ms(self) -> float:
        return self.latency_s * 1000.0
