import pytest

from netscan.config import FAST, PROFILES, THOROUGH, ScanConfig


def test_profile_constants():
    assert (FAST.connect_timeout, FAST.read_timeout, FAST.buffer_size, FAST.banner_max_len) == (1.0, 0.5, 512, 40)
    assert (THOROUGH.connect_timeout, THOROUGH.read_timeout, THOROUGH.buffer_size, THOROUGH.banner_max_len) == (
        3.0, 2.0, 1024, 50,
    )
    assert PROFILES == {"fast": FAST, "thorough": THOROUGH}


def test_http_stimulus():
    assert THOROUGH.http_stimulus("10.0.0.1") == b"GET / HTTP/1.0\r\n\r\n"
    fast = FAST.http_stimulus("10.0.0.1")
    assert fast.startswith(b"GET / HTTP/1.1\r\n")
    assert b"Host: 10.0.0.1\r\n" in fast
    assert fast.endswith(b"\r\n\r\n")


def test_defaults():
    cfg = ScanConfig()
    assert cfg.liveness_ports == (80, 443, 22, 21, 23, 25, 53, 135, 139, 445)
    assert cfg.liveness_timeout > cfg.liveness_attempt_timeout
    assert (cfg.sweep_concurrency, cfg.sweep_batch_size) == (500, 254)
    assert (cfg.port_concurrency, cfg.port_batch_size) == (5000, 1000)
    assert (cfg.host_concurrency, cfg.host_batch_size, cfg.host_port_concurrency) == (100, 50, 50)
    assert cfg.port_profile is THOROUGH
    assert cfg.discover_profile is FAST
    assert cfg.check_profile is THOROUGH


def test_outer_timeout_must_exceed_attempt_timeout():
    with pytest.raises(ValueError):
        ScanConfig(liveness_attempt_timeout=0.2, liveness_timeout=0.2)


@pytest.mark.parametrize("field", ["sweep_concurrency", "port_batch_size", "host_port_concurrency"])
def test_caps_must_be_positive(field):
    with pytest.raises(ValueError):
        ScanConfig(**{field: 0})
