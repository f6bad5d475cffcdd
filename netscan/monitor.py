from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from .scanner import Scanner

logger = logging.getLogger(__name__)


def check_hosts(scanner: Scanner, hosts: Sequence[str], ports: Sequence[int]) -> Dict[str, List[int]]:
    """Checks every host:port in turn; returns host -> open ports."""
    status: Dict[str, List[int]] = {}
    for host in hosts:
        host = host.strip()
        if not host:
            continue

        open_ports = [p for p in ports if scanner.check(host, p).open]
        status[host] = open_ports

        if open_ports:
            print(f"[+] {host}: UP - Ports: {open_ports}")
        else:
            print(f"[-] {host}: DOWN or filtered")
    return status


def monitor(
    scanner: Scanner,
    hosts: Sequence[str],
    ports: Sequence[int],
    interval: Optional[float] = None,
    cycles: Optional[int] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> List[Dict[str, List[int]]]:
    """
    Initial check, then one more every `interval` seconds.
    Runs forever unless `cycles` is given.
    """
    interval = interval if interval is not None else scanner.config.monitor_interval
    sleep = sleep or time.sleep
    print(f"[*] Monitoring {len(hosts)} hosts on {len(ports)} ports every {interval:g}s (Ctrl+C to stop)")

    history: List[Dict[str, List[int]]] = []
    while cycles is None or len(history) < cycles:
        if history:
            sleep(interval)
            print(f"\n[*] {time.strftime('%H:%M:%S')} - Checking status...")
        status = check_hosts(scanner, hosts, ports)
        logger.debug("Monitor cycle %d: %s", len(history) + 1, status)
        history.append(status)
    return history
