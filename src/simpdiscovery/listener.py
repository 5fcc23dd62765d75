"""
Module providing the beacon listener, which blocks until a beacon with the expected content is received.
"""

import logging
import select
import time
from typing import NamedTuple, Optional, Tuple

from simpdiscovery.sockets import (
    IP_ADDRESS_ANY,
    MAXIMUM_MESSAGE_SIZE,
    bind_socket,
    configure_reusable_socket,
)


class Beacon(NamedTuple):
    """
    A beacon received by a :class:`BeaconListener`.
    """

    message: str
    source_address: Tuple[str, int]

    @property
    def source_ip(self) -> str:
        return self.source_address[0]

    def __str__(self):
        host, port = self.source_address
        return f"'{self.message}' from {host}:{port}"


class BeaconListener:
    """
    Listens for beacons broadcast to a port.

    :param port: Port to listen on. Use 0 to listen on any free port, see :attr:`port`.
    :param address: Local address to bind to, defaults to all interfaces.
    :raises BeaconSetupError: If the listening socket cannot be set up.
    """

    def __init__(self, port: int, address: Optional[str] = None):
        if address is None:
            address = IP_ADDRESS_ANY
        self.logger = logging.getLogger(__name__)
        self.address = address
        self._socket = configure_reusable_socket()
        bind_socket(self._socket, address, port)
        self.logger.info(f"Listening for beacons on {address}:{self.port}")

    @property
    def port(self) -> int:
        return self._socket.getsockname()[1]

    def _check_for_messages(self, timeout: Optional[float]) -> bool:
        socket_list = [self._socket]
        readable, _, exceptional = select.select(socket_list, [], socket_list, timeout)
        if len(exceptional) > 0:
            raise ConnectionError("Exception on socket while checking for messages.")
        return len(readable) > 0

    def _receive_beacon(self) -> Optional[Beacon]:
        (payload, address) = self._socket.recvfrom(MAXIMUM_MESSAGE_SIZE)
        try:
            message = payload.decode()
        except UnicodeDecodeError:
            self.logger.debug(f"Discarding undecodable datagram from {address}")
            return None
        return Beacon(message=message, source_address=address)

    def _receive_until(self, deadline: Optional[float], expected_content=None):
        while True:
            if deadline is None:
                remaining = None
            else:
                remaining = max(deadline - time.monotonic(), 0)
            if not self._check_for_messages(timeout=remaining):
                # select only returns empty handed once the remaining time is used up
                return None
            beacon = self._receive_beacon()
            if beacon is not None:
                if expected_content is None or beacon.message == expected_content:
                    self.logger.info(f"Beacon {beacon} received")
                    return beacon
                self.logger.debug(f"Ignoring non-matching beacon {beacon}")
            if remaining == 0:
                return None

    def wait(
        self, expected_content: str, timeout: Optional[float] = None
    ) -> Optional[Beacon]:
        """
        Wait for a beacon whose content is exactly `expected_content`, blocking.

        :param expected_content: Content of the beacon to wait for.
        :param timeout: Maximum time, in seconds, to wait for in total. ``None`` waits forever.
        :return: The matching beacon, or ``None`` if none arrived before the timeout.

        Beacons with other content, and datagrams that are not valid UTF-8, are discarded
        without resetting the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        return self._receive_until(deadline, expected_content=expected_content)

    def receive(self, timeout: Optional[float] = None) -> Optional[Beacon]:
        """
        Wait for the next beacon, whatever its content, blocking.

        :param timeout: Maximum time, in seconds, to wait for. ``None`` waits forever.
        :return: The beacon received, or ``None`` if none arrived before the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        return self._receive_until(deadline)

    def close(self):
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def listen_for_beacon(port: int, timeout: Optional[float] = None) -> Optional[Beacon]:
    """
    Listen on the given port for a single beacon of any content.

    :param port: Port to listen on.
    :param timeout: Maximum time, in seconds, to wait for. ``None`` waits forever.
    :return: The first beacon received, or ``None`` if none arrived before the timeout.
    """
    with BeaconListener(port) as listener:
        return listener.receive(timeout=timeout)
