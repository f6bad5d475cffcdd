import socket
import threading
import time
from typing import Dict, List, Optional, Tuple, Union

import pytest

from netscan.config import ScanConfig

Reply = Union[bytes, Exception]


class FakeConnection:
    """Stands in for a connected socket; records every call."""

    def __init__(self, address: Tuple[str, int], reply: Reply = b""):
        self.address = address
        self.reply = reply
        self.calls: List[tuple] = []
        self.sent = b""
        self.closed = False

    def settimeout(self, timeout):
        self.calls.append(("settimeout", timeout))

    def sendall(self, data: bytes):
        self.calls.append(("sendall", data))
        self.sent += data

    def recv(self, n: int) -> bytes:
        self.calls.append(("recv", n))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply[:n]

    def close(self):
        self.closed = True


class FakeNetwork:
    """
    Callable with the socket.create_connection signature.
    Only registered (host, port) pairs accept; everything else is refused.
    """

    def __init__(self):
        self.listeners: Dict[Tuple[str, int], Reply] = {}
        self.delays: Dict[Tuple[str, int], float] = {}
        self.attempts: List[Tuple[str, int]] = []
        self.connections: List[FakeConnection] = []
        self._lock = threading.Lock()

    def listen(self, host: str, port: int, reply: Reply = b"", delay: float = 0.0):
        self.listeners[(host, port)] = reply
        if delay:
            self.delays[(host, port)] = delay
        return self

    def __call__(self, address, timeout: Optional[float] = None):
        address = tuple(address)
        with self._lock:
            self.attempts.append(address)
        delay = self.delays.get(address)
        if delay:
            time.sleep(delay)
        if address not in self.listeners:
            raise ConnectionRefusedError(111, "Connection refused")
        conn = FakeConnection(address, self.listeners[address])
        with self._lock:
            self.connections.append(conn)
        return conn


@pytest.fixture
def fake_net():
    return FakeNetwork()


@pytest.fixture
def test_config():
    # Smaller pools than the defaults; generous race timeout for slow CI boxes
    return ScanConfig(
        liveness_attempt_timeout=0.1,
        liveness_timeout=1.0,
        sweep_concurrency=32,
        port_concurrency=64,
        host_concurrency=16,
        host_batch_size=50,
        host_port_concurrency=8,
    )


@pytest.fixture
def free_port():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture
def http_server():
    """Loopback listener that records one request and answers like a web server."""
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(5)
    received: List[bytes] = []

    def serve():
        try:
            conn, _ = srv.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(2.0)
            try:
                received.append(conn.recv(1024))
                conn.sendall(b"HTTP/1.0 200 OK\r\nServer: loopback\r\n\r\n<html></html>")
            except OSError:
                pass

    t = threading.Thread(target=serve, daemon=True)
    t.start()
    yield srv.getsockname()[1], received
    srv.close()
    t.join(timeout=2.0)


@pytest.fixture
def ssh_server():
    """paramiko SSH server on loopback; it sends its version line on connect."""
    paramiko = pytest.importorskip("paramiko")
    host_key = paramiko.RSAKey.generate(2048)

    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(5)
    transports = []

    def serve():
        try:
            client, _ = srv.accept()
        except OSError:
            return
        transport = paramiko.Transport(client)
        transport.add_server_key(host_key)
        transport.local_version = "SSH-2.0-netscan_test"
        transports.append(transport)
        try:
            transport.start_server(server=paramiko.ServerInterface())
        except Exception:
            # client hangs up after reading the banner
            pass

    t = threading.Thread(target=serve, daemon=True)
    t.start()
    yield srv.getsockname()[1]
    srv.close()
    for transport in transports:
        transport.close()
