from __future__ import annotations

import logging
import re
import socket
from typing import Optional

from .config import ProbeProfile, THOROUGH

logger = logging.getLogger(__name__)

HTTP_PORTS = frozenset({80, 8080})
# Raw bytes off a TLS port are useless without a handshake.
SKIP_PORTS = frozenset({443})

TRUNCATION_MARKER = "..."

_PRINTABLE = re.compile(r"[^\x09\x0a\x0d\x20-\x7e]")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def clean_banner(raw: bytes, max_len: int) -> str:
    """
    Decode, drop non-printables, turn every line break into a single space,
    trim, and cut to max_len chars (plus TRUNCATION_MARKER when cut).
    """
    s = raw.decode(errors="ignore")
    s = _PRINTABLE.sub("", s)
    s = _LINE_BREAK.sub(" ", s)
    s = s.strip()
    if len(s) > max_len:
        return s[:max_len] + TRUNCATION_MARKER
    return s


def stimulus_for(port: int, profile: ProbeProfile, host: str = "") -> Optional[bytes]:
    if port in HTTP_PORTS:
        return profile.http_stimulus(host)
    # FTP/SSH/SMTP and everything unlisted talk first, if at all
    return None


def grab_banner(
    sock: socket.socket,
    port: int,
    profile: ProbeProfile = THOROUGH,
    host: str = "",
) -> str:
    """
    Called only after connect() succeeds.
    Returns the cleaned banner, or "" when nothing usable came back.
    """
    if port in SKIP_PORTS:
        return ""

    try:
        sock.settimeout(profile.read_timeout)
        payload = stimulus_for(port, profile, host)
        if payload:
            sock.sendall(payload)
        data = sock.recv(profile.buffer_size)
    except OSError as e:
        logger.debug("No banner from port %d: %s", port, e)
        return ""

    if not data:
        return ""
    return clean_banner(data, profile.banner_max_len)
