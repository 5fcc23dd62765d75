"""
Module providing the beacon sender, which broadcasts a fixed piece of content over UDP.
"""

import logging
import threading
from typing import Optional

from simpdiscovery.cancellation import CancellationToken
from simpdiscovery.sockets import (
    BROADCAST_ADDRESS,
    IP_ADDRESS_ANY,
    MAXIMUM_MESSAGE_SIZE,
    BeaconSetupError,
    BeaconTransmissionError,
    bind_socket,
    configure_broadcast_socket,
)

DEFAULT_SEND_PERIOD = 1.0


class BeaconSender:
    """
    Broadcasts beacons containing a fixed content string to a port on the local network.

    :param content: The content of every beacon sent. It cannot be changed afterwards.
    :param port: The port listeners are waiting on.
    :param broadcast_address: Address to send beacons to. Defaults to the limited broadcast
        address ``255.255.255.255``; a subnet directed broadcast address such as ``192.168.1.255``
        restricts beacons to a single interface.
    :raises BeaconSetupError: If the port is out of range or the broadcasting socket cannot be set up.
    :raises ValueError: If the encoded content does not fit in a single datagram.
    """

    def __init__(
        self, content: str, port: int, broadcast_address: Optional[str] = None
    ):
        if broadcast_address is None:
            broadcast_address = BROADCAST_ADDRESS
        if not 0 <= port <= 65535:
            raise BeaconSetupError(f"Invalid beacon port: {port}")
        payload = content.encode()
        if len(payload) > MAXIMUM_MESSAGE_SIZE:
            raise ValueError(
                f"Beacon content exceeds the maximum message size of {MAXIMUM_MESSAGE_SIZE}"
            )
        self.logger = logging.getLogger(__name__)
        self._content = content
        self._payload = payload
        self._destination = (broadcast_address, port)
        self._broadcast_thread: Optional[threading.Thread] = None
        self._cancellation: Optional[CancellationToken] = None

        self._socket = configure_broadcast_socket()
        bind_socket(self._socket, IP_ADDRESS_ANY, 0)
        self.logger.info(
            f"Beacon socket bound to {self._socket.getsockname()}, broadcast mode on"
        )

    @property
    def content(self) -> str:
        return self._content

    @property
    def broadcast_address(self) -> str:
        return self._destination[0]

    @property
    def port(self) -> int:
        return self._destination[1]

    @property
    def broadcasting(self):
        return self._broadcast_thread is not None

    def send_one(self) -> int:
        """
        Send a single beacon.

        :return: The number of bytes handed to the operating system.
        :raises BeaconTransmissionError: If the beacon could not be sent.
        """
        self.logger.debug(f"Sending beacon to {self._destination}")
        try:
            return self._socket.sendto(self._payload, self._destination)
        except OSError as e:
            raise BeaconTransmissionError(
                f"Failed to send beacon to {self._destination}: {e}"
            ) from e

    def send_forever(
        self,
        period: float = DEFAULT_SEND_PERIOD,
        cancellation: Optional[CancellationToken] = None,
        raise_on_error: bool = False,
    ):
        """
        Send a beacon immediately and then every `period` seconds, blocking until cancelled.

        :param period: Time in seconds between beacons.
        :param cancellation: Token that stops the loop when cancelled. Without one, the loop only ends
            if sending fails with `raise_on_error` set.
        :param raise_on_error: If `True`, a failed send ends the loop by raising. Otherwise the failure
            is logged and sending carries on at the next period.
        """
        if cancellation is None:
            cancellation = CancellationToken()
        while not cancellation.is_cancelled:
            try:
                self.send_one()
            except BeaconTransmissionError as e:
                if raise_on_error:
                    raise
                self.logger.warning(f"{e}, will retry in {period}s")
            cancellation.wait(period)

    def start(self, period: float = DEFAULT_SEND_PERIOD):
        """
        Start sending beacons every `period` seconds on a background thread.
        """
        if self._broadcast_thread is not None:
            raise RuntimeError("Beacon sender already broadcasting!")
        self._cancellation = CancellationToken()
        self._cancellation.subscribe_cancellation(
            lambda: self.logger.info(f"Stopped broadcasting beacons to {self._destination}")
        )
        self._broadcast_thread = threading.Thread(
            target=self.send_forever,
            kwargs={"period": period, "cancellation": self._cancellation},
            daemon=True,
        )
        self._broadcast_thread.start()

    def stop(self):
        """
        Stop the background thread started with :meth:`start`, if there is one.
        """
        if self.broadcasting:
            self._cancellation.cancel()
            self._broadcast_thread.join()
            self._broadcast_thread = None
            self._cancellation = None

    def close(self):
        self.stop()
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"BeaconSender({self._content!r} -> {self.broadcast_address}:{self.port})"
