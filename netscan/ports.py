from __future__ import annotations

import logging
from typing import List, Optional, Set

logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535


def _parse_int(s: str) -> Optional[int]:
    s = s.strip()
    if not s.isdigit():
        return None
    return int(s)


def parse_ports(spec: str) -> List[int]:
    """
    Parses a port specification string into a list of ports.
    Supports:
    - Single ports: "80"
    - Ranges: "1-1024"
    - Comma-separated: "22,80,443"
    - Mixed: "1-1024,8080,9000-9005"

    Malformed or out-of-range pieces are skipped; a spec with nothing
    usable gives an empty list.
    """
    spec = (spec or "").strip()
    if not spec:
        return []

    ports: Set[int] = set()
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start_s, end_s = part.split("-", 1)
            start = _parse_int(start_s)
            end = _parse_int(end_s)
            if start is None or end is None or start > end:
                logger.debug("Skipping invalid port range %r", part)
                continue
            start = max(start, MIN_PORT)
            end = min(end, MAX_PORT)
            ports.update(range(start, end + 1))
        else:
            p = _parse_int(part)
            if p is None or p < MIN_PORT or p > MAX_PORT:
                logger.debug("Skipping invalid port %r", part)
                continue
            ports.add(p)

    # De-dupe, keep sorted
    return sorted(ports)
