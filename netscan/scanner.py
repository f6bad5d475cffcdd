from __future__ import annotations

import logging
import socket
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, Tuple

from .aggregate import sort_hosts, sort_ports
from .banner import grab_banner
from .config import ProbeProfile, ScanConfig
from .logger import log_event
from .models import HostOutcome, PortOutcome, service_name
from .scheduler import BatchScheduler
from .targets import expand_network, is_valid_target

logger = logging.getLogger(__name__)

# Same call shape as socket.create_connection(address, timeout)
Connector = Callable[[Tuple[str, int], float], socket.socket]

# Malformed host names fail IDNA encoding with UnicodeError, not OSError
CONNECT_ERRORS = (OSError, UnicodeError)


class Scanner:
    """
    TCP connect scanner.

    sweep()      live hosts of a /24
    scan_ports() open ports of one host
    discover()   live hosts of a /24 plus their open ports
    check()      one host:port, used by the monitor
    """

    def __init__(self, config: Optional[ScanConfig] = None, connect: Optional[Connector] = None):
        self.config = config or ScanConfig()
        self._connect = connect or socket.create_connection

    # -- probes --------------------------------------------------------

    def _knock(self, address: str, port: int, timeout: float) -> bool:
        try:
            sock = self._connect((address, port), timeout)
        except CONNECT_ERRORS:
            return False
        sock.close()
        return True

    def is_alive(self, address: str) -> bool:
        """
        Races a connect to every liveness port; the first success wins.

        This is TCP reachability, not ICMP echo: a host that answers on none
        of the liveness ports is reported dead.
        """
        cfg = self.config
        deadline = time.monotonic() + cfg.liveness_timeout

        pool = ThreadPoolExecutor(max_workers=len(cfg.liveness_ports), thread_name_prefix="liveness")
        try:
            pending = {
                pool.submit(self._knock, address, port, cfg.liveness_attempt_timeout)
                for port in cfg.liveness_ports
            }
        finally:
            # Losers are abandoned, not cancelled; each ends at its own timeout
            pool.shutdown(wait=False)

        while pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            done, pending = wait(pending, timeout=remaining, return_when=FIRST_COMPLETED)
            if any(fut.result() for fut in done):
                return True
        return False

    def probe_port(self, address: str, port: int, profile: ProbeProfile) -> PortOutcome:
        try:
            sock = self._connect((address, port), profile.connect_timeout)
        except CONNECT_ERRORS as e:
            logger.debug("%s:%d closed (%s)", address, port, e)
            return PortOutcome.closed(port)

        try:
            banner = grab_banner(sock, port, profile, host=address)
        finally:
            sock.close()

        return PortOutcome(
            port=port,
            open=True,
            service=service_name(port),
            banner=banner or None,
        )

    def check(self, host: str, port: int) -> PortOutcome:
        host = (host or "").strip()
        if not is_valid_target(host):
            logger.warning("Invalid host %r", host)
            return PortOutcome.closed(port)
        return self.probe_port(host, port, self.config.check_profile)

    # -- scans ---------------------------------------------------------

    def _sweep_one(self, address: str) -> Optional[HostOutcome]:
        start = time.perf_counter()
        if not self.is_alive(address):
            return None
        return HostOutcome(address=address, alive=True, latency_s=time.perf_counter() - start)

    def sweep(self, network: str) -> List[HostOutcome]:
        addresses = expand_network(network)
        if not addresses:
            logger.warning("No targets in network %r", network)
            return []

        cfg = self.config
        log_event(logger, "scan_start", {"scan": "sweep", "network": network, "targets": len(addresses)})
        start = time.perf_counter()

        scheduler = BatchScheduler(cfg.sweep_concurrency, cfg.sweep_batch_size, name="sweep")
        hosts = sort_hosts(scheduler.run(addresses, self._sweep_one))

        log_event(logger, "scan_complete", {
            "scan": "sweep",
            "network": network,
            "found": len(hosts),
            "scanned": len(addresses),
            "elapsed_s": round(time.perf_counter() - start, 4),
        })
        return hosts

    def _open_ports(
        self,
        address: str,
        ports: Sequence[int],
        profile: ProbeProfile,
        scheduler: BatchScheduler,
    ) -> List[PortOutcome]:
        def probe(port: int) -> Optional[PortOutcome]:
            outcome = self.probe_port(address, port, profile)
            return outcome if outcome.open else None

        return sort_ports(scheduler.run(ports, probe))

    def scan_ports(
        self,
        target: str,
        ports: Sequence[int],
        profile: Optional[ProbeProfile] = None,
    ) -> List[PortOutcome]:
        target = (target or "").strip()
        if not is_valid_target(target) or not ports:
            logger.warning("Nothing to scan (target=%r, %d ports)", target, len(ports or ()))
            return []

        cfg = self.config
        profile = profile or cfg.port_profile
        log_event(logger, "scan_start", {
            "scan": "ports",
            "target": target,
            "ports": len(ports),
            "profile": profile.name,
        })
        start = time.perf_counter()

        scheduler = BatchScheduler(cfg.port_concurrency, cfg.port_batch_size, name="ports")
        results = self._open_ports(target, ports, profile, scheduler)

        log_event(logger, "scan_complete", {
            "scan": "ports",
            "target": target,
            "open": len(results),
            "elapsed_s": round(time.perf_counter() - start, 4),
        })
        return results

    def _discover_one(
        self,
        address: str,
        ports: Sequence[int],
        profile: ProbeProfile,
    ) -> Optional[HostOutcome]:
        start = time.perf_counter()
        if not self.is_alive(address):
            return None
        latency = time.perf_counter() - start

        cfg = self.config
        inner = BatchScheduler(
            cfg.host_port_concurrency,
            cfg.host_port_batch_size,
            name=f"ports:{address}",
            progress_level=logging.DEBUG,
        )
        # Wait for the whole port sweep before reporting the host
        open_ports = self._open_ports(address, ports, profile, inner)
        return HostOutcome(address=address, alive=True, ports=tuple(open_ports), latency_s=latency)

    def discover(
        self,
        network: str,
        ports: Sequence[int],
        profile: Optional[ProbeProfile] = None,
    ) -> List[HostOutcome]:
        """
        Liveness first, then a port scan of every live host. Live hosts with
        no open ports are kept with an empty port tuple.
        """
        addresses = expand_network(network)
        if not addresses:
            logger.warning("No targets in network %r", network)
            return []
        if not ports:
            logger.warning("No ports to scan; reporting live hosts only")

        cfg = self.config
        profile = profile or cfg.discover_profile
        ports = list(ports or ())
        log_event(logger, "scan_start", {
            "scan": "discover",
            "network": network,
            "targets": len(addresses),
            "ports": len(ports),
            "profile": profile.name,
        })
        start = time.perf_counter()

        scheduler = BatchScheduler(cfg.host_concurrency, cfg.host_batch_size, name="discover")
        hosts = sort_hosts(scheduler.run(addresses, lambda a: self._discover_one(a, ports, profile)))

        log_event(logger, "scan_complete", {
            "scan": "discover",
            "network": network,
            "found": len(hosts),
            "scanned": len(addresses),
            "elapsed_s": round(time.perf_counter() - start, 4),
        })
        return hosts
