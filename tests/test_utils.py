import socket

import psutil
import pytest

from simpdiscovery.utils import (
    InterfaceAddress,
    get_broadcast_addresses,
    get_ipv4_addresses,
    interface_address_from_psutil,
    resolve_host_broadcast_address,
)


def make_psutil_address(address, netmask, broadcast=None, ptp=None):
    """
    Builds a psutil interface address entry by modifying a real one, so tests do not depend on where
    psutil defines its named tuples.
    """
    template = next(
        addr for addrs in psutil.net_if_addrs().values() for addr in addrs
    )
    return template._replace(
        family=socket.AF_INET,
        address=address,
        netmask=netmask,
        broadcast=broadcast,
        ptp=ptp,
    )


def make_address(address, broadcast, interface="eth0", netmask="255.255.255.0"):
    return InterfaceAddress(
        interface=interface, address=address, netmask=netmask, broadcast=broadcast
    )


def test_get_ipv4_addresses():
    ipv4_addresses = get_ipv4_addresses()
    assert len(ipv4_addresses) > 0
    assert all(isinstance(entry, InterfaceAddress) for entry in ipv4_addresses)


def test_get_broadcast_addresses():
    broadcast_addresses = get_broadcast_addresses()
    assert len(broadcast_addresses) > 0
    assert all(entry.broadcast is not None for entry in broadcast_addresses)


def test_get_broadcast_addresses_filters():
    addresses = [
        make_address("192.168.1.2", "192.168.1.255"),
        make_address("10.8.0.2", None, interface="tun0"),
    ]
    assert get_broadcast_addresses(addresses) == [addresses[0]]


@pytest.mark.parametrize(
    "address, netmask, expected_broadcast",
    [
        ("192.168.1.2", "255.255.255.0", "192.168.1.255"),
        ("192.168.1.2", "255.255.0.0", "192.168.255.255"),
        ("10.1.2.3", "255.0.0.0", "10.255.255.255"),
        ("127.0.0.1", "255.0.0.0", "127.255.255.255"),
    ],
)
def test_computed_broadcast_address(address, netmask, expected_broadcast):
    entry = interface_address_from_psutil("lo", make_psutil_address(address, netmask))
    assert entry == InterfaceAddress(
        interface="lo", address=address, netmask=netmask, broadcast=expected_broadcast
    )


def test_reported_broadcast_address_kept():
    addr = make_psutil_address("192.168.1.2", "255.255.255.0", broadcast="192.168.1.127")
    assert interface_address_from_psutil("eth0", addr).broadcast == "192.168.1.127"


def test_point_to_point_has_no_broadcast():
    addr = make_psutil_address("10.8.0.2", "255.255.255.255", ptp="10.8.0.1")
    assert interface_address_from_psutil("tun0", addr).broadcast is None


def test_interface_address_str():
    entry = make_address("192.168.1.2", "192.168.1.255")
    assert str(entry) == "eth0: 192.168.1.2 (broadcast 192.168.1.255)"


def test_resolve_address():
    addresses = [
        make_address("192.168.1.2", "192.168.1.255"),
        make_address("10.0.0.5", "10.255.255.255", netmask="255.0.0.0"),
    ]
    entry = resolve_host_broadcast_address("10.0.0.5", addresses)
    assert entry is addresses[1]


def test_resolve_address_not_local():
    addresses = [make_address("192.168.1.2", "192.168.1.255")]
    assert resolve_host_broadcast_address("192.168.1.3", addresses) is None


def test_resolve_address_without_broadcast():
    addresses = [make_address("10.8.0.2", None, interface="tun0")]
    assert resolve_host_broadcast_address("10.8.0.2", addresses) is None


def test_resolve_loopback():
    """
    Tests that the loopback interface resolves, with a broadcast address computed from its netmask.
    """
    entry = resolve_host_broadcast_address("127.0.0.1")
    assert entry is not None
    assert entry.address == "127.0.0.1"
    assert entry.broadcast is not None


@pytest.mark.timeout(10)
def test_resolve_invalid_address():
    addr = resolve_host_broadcast_address("blah")
    assert addr is None
