import pytest

from netscan.targets import address_key, expand_network, is_valid_target


@pytest.mark.parametrize("spec", ["192.168.1.0/24", "10.20.30.0/24", "203.0.113.0/24"])
def test_expand_24_gives_254_ascending_hosts(spec):
    base = spec.split("/")[0].rsplit(".", 1)[0]
    ips = expand_network(spec)

    assert len(ips) == 254
    assert [int(ip.rsplit(".", 1)[1]) for ip in ips] == list(range(1, 255))
    assert all(ip.rsplit(".", 1)[0] == base for ip in ips)


def test_expand_ignores_host_bits():
    ips = expand_network("192.168.1.77/24")
    assert ips[0] == "192.168.1.1"
    assert ips[-1] == "192.168.1.254"


def test_expand_is_restartable():
    assert expand_network("10.0.0.0/24") == expand_network("10.0.0.0/24")


@pytest.mark.parametrize("spec", [
    "",
    "garbage",
    "garbage/24",
    "192.168.1.0",
    "192.168.1.0/16",
    "192.168.1.0/25",
    "192.168.1.0/32",
    "300.1.1.0/24",
    "10.0.0/24",
    None,
])
def test_expand_other_shapes_are_empty(spec):
    assert expand_network(spec) == []


def test_address_key_orders_numerically():
    addrs = ["10.0.0.10", "10.0.1.1", "10.0.0.9", "10.0.0.2", "9.255.255.255"]
    assert sorted(addrs, key=address_key) == [
        "9.255.255.255",
        "10.0.0.2",
        "10.0.0.9",
        "10.0.0.10",
        "10.0.1.1",
    ]


def test_address_key_higher_octet_wins():
    assert address_key("1.2.3.10") < address_key("1.2.4.1")
    assert address_key("1.2.3.9") < address_key("1.2.3.10")


@pytest.mark.parametrize("target", ["10.0.0.1", "example.com", " host-1.lan "])
def test_valid_targets(target):
    assert is_valid_target(target)


@pytest.mark.parametrize("target", ["", "  ", None, "x..y", "a" * 64 + ".example"])
def test_invalid_targets(target):
    assert not is_valid_target(target)
