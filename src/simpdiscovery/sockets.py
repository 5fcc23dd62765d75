"""
Module providing the socket setup shared by beacon senders and listeners.
"""

import socket
from socket import AF_INET, SOCK_DGRAM, SOL_SOCKET, SO_BROADCAST, SO_REUSEADDR

BROADCAST_ADDRESS = "255.255.255.255"
IP_ADDRESS_ANY = "0.0.0.0"
# Largest payload an IPv4 UDP datagram can carry.
MAXIMUM_MESSAGE_SIZE = 65507

DEFAULT_BEACON_PORT = 34254
DEFAULT_BEACON_CONTENT = "BeaconTestService"


class BeaconSetupError(OSError):
    """
    Raised when a beacon socket cannot be created, configured or bound.
    """


class BeaconTransmissionError(OSError):
    """
    Raised when the operating system refuses to send a beacon.
    """


def configure_broadcast_socket() -> socket.socket:
    """
    Sets up an IPv4 UDP socket that is allowed to send to broadcast addresses.

    :return: A socket.
    :raises BeaconSetupError: If the socket could not be created or configured.
    """
    try:
        s = socket.socket(AF_INET, SOCK_DGRAM)
    except OSError as e:
        raise BeaconSetupError(f"Could not create broadcast socket: {e}") from e
    try:
        s.setsockopt(SOL_SOCKET, SO_BROADCAST, 1)
    except OSError as e:
        s.close()
        raise BeaconSetupError(f"Could not enable broadcast: {e}") from e
    return s


def configure_reusable_socket() -> socket.socket:
    """
    Sets up an IPv4 UDP socket for listening with a reusable address, so that several
    listeners on the same host can receive broadcasts on the same port.

    :return: A socket.
    :raises BeaconSetupError: If the socket could not be created or configured.
    """
    try:
        s = socket.socket(AF_INET, SOCK_DGRAM)
    except OSError as e:
        raise BeaconSetupError(f"Could not create listening socket: {e}") from e
    try:
        s.setsockopt(SOL_SOCKET, SO_REUSEADDR, 1)
        # not available on windows
        if hasattr(socket, "SO_REUSEPORT"):
            s.setsockopt(SOL_SOCKET, socket.SO_REUSEPORT, 1)
    except OSError as e:
        s.close()
        raise BeaconSetupError(f"Could not make socket reusable: {e}") from e
    return s


def bind_socket(s: socket.socket, address: str, port: int):
    """
    Binds the given socket, closing it if binding fails.

    :param s: Socket to bind.
    :param address: Local address to bind to.
    :param port: Local port to bind to, 0 for any free port.
    :raises BeaconSetupError: If the socket could not be bound.
    """
    try:
        s.bind((address, port))
    except (OSError, OverflowError) as e:
        s.close()
        raise BeaconSetupError(f"Could not bind socket to {address}:{port}: {e}") from e
