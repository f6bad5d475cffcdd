from __future__ import annotations

import csv
import json
import os
from datetime import datetime
from typing import Any, Dict, List, Sequence, Union

from .models import HostOutcome, PortOutcome

UNKNOWN_SERVICE = "Unknown"


def format_port(p: PortOutcome) -> str:
    row = f"Port {p.port:<5d} {p.service or UNKNOWN_SERVICE:<12}"
    if p.banner:
        row += f" - {p.banner}"
    return row


def print_sweep(hosts: Sequence[HostOutcome]) -> None:
    print(f"Found {len(hosts)} live hosts")
    for h in hosts:
        print(f"[+] {h.address:<15} ({h.latency_ms:.2f}ms)")


def print_ports(target: str, ports: Sequence[PortOutcome]) -> None:
    print(f"Found {len(ports)} open ports on {target}")
    for p in ports:
        print(f"[+] {format_port(p)}")


def print_discovery(hosts: Sequence[HostOutcome]) -> None:
    print(f"Found {len(hosts)} live hosts")
    for h in hosts:
        print(f"{h.address}")
        if h.ports:
            for p in h.ports:
                print(f"   [+] {format_port(p)}")
        else:
            print("   Host alive but no open ports found in scanned range")
        print()


def _port_dict(p: PortOutcome) -> Dict[str, Any]:
    return {"port": p.port, "open": p.open, "service": p.service, "banner": p.banner}


def _host_dict(h: HostOutcome) -> Dict[str, Any]:
    return {
        "address": h.address,
        "alive": h.alive,
        "latency_ms": round(h.latency_ms, 2),
        "ports": [_port_dict(p) for p in h.ports],
    }


def _rows(results: Sequence[Union[HostOutcome, PortOutcome]], target: str) -> List[List[Any]]:
    rows: List[List[Any]] = []
    for r in results:
        if isinstance(r, HostOutcome):
            if not r.ports:
                rows.append([r.address, "", "", "", round(r.latency_ms, 2)])
            for p in r.ports:
                rows.append([r.address, p.port, p.service or "", p.banner or "", round(r.latency_ms, 2)])
        else:
            rows.append([target, r.port, r.service or "", r.banner or "", ""])
    return rows


def save_results(
    results: Sequence[Union[HostOutcome, PortOutcome]],
    fmt: str,
    out_dir: str = "SCANS",
    target: str = "",
) -> str:
    os.makedirs(out_dir, exist_ok=True)
    ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    path = os.path.join(out_dir, f"{ts}_netscan.{fmt}")

    if fmt == "json":
        payload = [
            _host_dict(r) if isinstance(r, HostOutcome) else {"target": target, **_port_dict(r)}
            for r in results
        ]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

    elif fmt == "csv":
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["address", "port", "service", "banner", "latency_ms"])
            w.writerows(_rows(results, target))

    else:
        raise ValueError(f"Unsupported format: {fmt}")

    return path
