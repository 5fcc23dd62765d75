"""
Module for finding the broadcast addresses beacons can be sent to from the local network interfaces.
"""

import ipaddress
import socket
from typing import List, NamedTuple, Optional

import psutil


class InterfaceAddress(NamedTuple):
    """
    An IPv4 address of a local network interface, with the broadcast address of its network if it has one.
    """

    interface: str
    address: str
    netmask: Optional[str]
    broadcast: Optional[str]

    def __str__(self):
        return f"{self.interface}: {self.address} (broadcast {self.broadcast})"


def interface_address_from_psutil(interface: str, addr) -> InterfaceAddress:
    """
    Converts an entry from :func:`psutil.net_if_addrs` into an :class:`InterfaceAddress`.

    Some platforms do not report broadcast addresses, e.g. for the loopback interface, so the broadcast
    address is computed from the netmask when missing. Point to point links have no broadcast address.
    """
    broadcast = addr.broadcast
    if broadcast is None and addr.ptp is None and addr.netmask is not None:
        network = ipaddress.IPv4Network(f"{addr.address}/{addr.netmask}", strict=False)
        broadcast = str(network.broadcast_address)
    return InterfaceAddress(
        interface=interface,
        address=addr.address,
        netmask=addr.netmask,
        broadcast=broadcast,
    )


def get_ipv4_addresses() -> List[InterfaceAddress]:
    """
    Gets the IPv4 addresses of all the network interfaces that are up.
    """
    interface_stats = psutil.net_if_stats()
    return [
        interface_address_from_psutil(interface, addr)
        for interface, addrs in psutil.net_if_addrs().items()
        if interface in interface_stats and interface_stats[interface].isup
        for addr in addrs
        if addr.family == socket.AF_INET
    ]


def get_broadcast_addresses(
    ipv4_addrs: Optional[List[InterfaceAddress]] = None,
) -> List[InterfaceAddress]:
    """
    Gets the interface addresses a :class:`BeaconSender` can target with a subnet directed broadcast.

    :param ipv4_addrs: Addresses to filter, defaults to those of :func:`get_ipv4_addresses`.
    """
    if ipv4_addrs is None:
        ipv4_addrs = get_ipv4_addresses()
    return [entry for entry in ipv4_addrs if entry.broadcast is not None]


def resolve_host_broadcast_address(
    host: str,
    ipv4_addrs: Optional[List[InterfaceAddress]] = None,
) -> Optional[InterfaceAddress]:
    """
    Finds the broadcast capable interface address for the given host name or address.

    :param host: Host name or IPv4 address of one of the local interfaces.
    :param ipv4_addrs: Addresses to search, defaults to those of :func:`get_ipv4_addresses`.
    :return: The matching interface address, or ``None`` if the host cannot be resolved or is not
        a local broadcast capable interface.
    """
    try:
        address = socket.gethostbyname(host)
    except socket.error:
        return None
    for entry in get_broadcast_addresses(ipv4_addrs):
        if entry.address == address:
            return entry
    return None
