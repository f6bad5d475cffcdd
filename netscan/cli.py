from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from .config import PROFILES, ScanConfig
from .logger import setup_logging
from .monitor import monitor
from .output import print_discovery, print_ports, print_sweep, save_results
from .ports import parse_ports
from .scanner import Scanner


def _add_save_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--format", choices=["json", "csv"], help="Save results to file")
    p.add_argument("--out-dir", default="SCANS", help="Output directory for saved files")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Network discovery & port scanner")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--log-file", help="Also write log records to this file")
    sub = p.add_subparsers(dest="command", required=True)

    sweep = sub.add_parser("sweep", help="Discover live hosts")
    sweep.add_argument("network", help="Network, e.g. 192.168.1.0/24")
    sweep.add_argument("--concurrency", type=int, help="Hosts probed at once (default: 500)")
    _add_save_args(sweep)

    scan = sub.add_parser("scan", help="Port scan a single host")
    scan.add_argument("target", help="Target IP or hostname")
    scan.add_argument("ports", help="Port spec: 1-1000 or 80,443,22 or mixed")
    scan.add_argument("--profile", choices=sorted(PROFILES), default="thorough")
    scan.add_argument("--concurrency", type=int, help="Ports probed at once (default: 5000)")
    _add_save_args(scan)

    discover = sub.add_parser("discover", help="Discover live hosts and scan their ports")
    discover.add_argument("network", help="Network, e.g. 192.168.1.0/24")
    discover.add_argument("ports", help="Port spec, e.g. 22,80,443")
    discover.add_argument("--profile", choices=sorted(PROFILES), default="fast")
    discover.add_argument("--host-concurrency", type=int, help="Hosts scanned at once (default: 100)")
    discover.add_argument("--port-concurrency", type=int, help="Ports per host at once (default: 50)")
    _add_save_args(discover)

    mon = sub.add_parser("monitor", help="Watch hosts/ports on a timer")
    mon.add_argument("hosts", help="Comma-separated hosts")
    mon.add_argument("ports", help="Port spec")
    mon.add_argument("--interval", type=float, default=30.0, help="Seconds between checks (default: 30)")
    mon.add_argument("--cycles", type=int, help="Stop after this many checks")
    return p


def build_config(args: argparse.Namespace) -> ScanConfig:
    overrides = {}
    if args.command == "sweep" and args.concurrency is not None:
        overrides["sweep_concurrency"] = args.concurrency
    if args.command == "scan" and args.concurrency is not None:
        overrides["port_concurrency"] = args.concurrency
    if args.command == "discover":
        if args.host_concurrency is not None:
            overrides["host_concurrency"] = args.host_concurrency
        if args.port_concurrency is not None:
            overrides["host_port_concurrency"] = args.port_concurrency
    if args.command == "monitor":
        overrides["monitor_interval"] = args.interval
    return replace(ScanConfig(), **overrides)


def run(args: argparse.Namespace) -> int:
    try:
        config = build_config(args)
    except ValueError as e:
        raise SystemExit(str(e))

    scanner = Scanner(config)
    results = None
    target = ""

    if args.command == "sweep":
        results = scanner.sweep(args.network)
        print_sweep(results)

    elif args.command == "scan":
        target = args.target
        ports = parse_ports(args.ports)
        print(f"[*] Scanning {target} for {len(ports)} ports...")
        results = scanner.scan_ports(target, ports, PROFILES[args.profile])
        print_ports(target, results)

    elif args.command == "discover":
        ports = parse_ports(args.ports)
        results = scanner.discover(args.network, ports, PROFILES[args.profile])
        print_discovery(results)

    elif args.command == "monitor":
        hosts = [h.strip() for h in args.hosts.split(",") if h.strip()]
        monitor(scanner, hosts, parse_ports(args.ports), cycles=args.cycles)

    if results is not None and getattr(args, "format", None):
        path = save_results(results, fmt=args.format, out_dir=args.out_dir, target=target)
        print(f"Saved results to {path}")

    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        return run(args)
    except KeyboardInterrupt:
        print("\n[!] Scan interrupted by user")
        return 130
