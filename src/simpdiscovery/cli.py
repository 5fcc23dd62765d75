"""
Command line interfaces for announcing and listening for beacons.

If the module is installed with pip, run with:

.. code:: bash

    simpdiscovery-announce "My Service"
    simpdiscovery-listen "My Service" --timeout 10
    simpdiscovery-announce-and-wait

"""

import argparse
import logging
import sys
import textwrap
from typing import Optional

from simpdiscovery.cancellation import suppress_keyboard_interrupt_as_cancellation
from simpdiscovery.listener import BeaconListener
from simpdiscovery.sender import BeaconSender, DEFAULT_SEND_PERIOD
from simpdiscovery.sockets import DEFAULT_BEACON_CONTENT, DEFAULT_BEACON_PORT
from simpdiscovery.utils import get_broadcast_addresses, resolve_host_broadcast_address


def _create_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=textwrap.dedent(description))
    parser.add_argument(
        "content",
        nargs="?",
        default=DEFAULT_BEACON_CONTENT,
        help=f"Content of the beacon (default: {DEFAULT_BEACON_CONTENT!r}).",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DEFAULT_BEACON_PORT,
        help=f"Port to broadcast beacons on (default: {DEFAULT_BEACON_PORT}).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    parser.add_argument("-vv", "--debug", action="store_true", default=False)
    return parser


def _add_sender_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--period",
        type=float,
        default=DEFAULT_SEND_PERIOD,
        help="Time in seconds between beacons.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--broadcast-address",
        default=None,
        help="Address to send beacons to, e.g. 192.168.1.255 (default: 255.255.255.255).",
    )
    target.add_argument(
        "--interface",
        dest="interface_host",
        metavar="HOST",
        nargs="?",
        const="",
        default=None,
        help="Only broadcast on the network of the local interface with this address. "
        "Without an address, list the interfaces that can be broadcast on and exit.",
    )


def handle_announce_arguments(args=None) -> argparse.Namespace:
    """
    Parse the arguments of the announce command.

    :return: The namespace of arguments read from the command line.
    """
    parser = _create_parser(
        """\
    Broadcast a beacon periodically until interrupted.
    """
    )
    _add_sender_arguments(parser)
    return parser.parse_args(args)


def handle_listen_arguments(args=None) -> argparse.Namespace:
    """
    Parse the arguments of the listen command.

    :return: The namespace of arguments read from the command line.
    """
    parser = _create_parser(
        """\
    Wait for a beacon with the given content, and print where it came from.
    """
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds (default: wait forever).",
    )
    return parser.parse_args(args)


def handle_announce_and_wait_arguments(args=None) -> argparse.Namespace:
    """
    Parse the arguments of the announce-and-wait command.

    :return: The namespace of arguments read from the command line.
    """
    parser = _create_parser(
        """\
    Broadcast a beacon in the background and wait to hear it, to check that beacons
    can make the round trip on this machine.
    """
    )
    _add_sender_arguments(parser)
    return parser.parse_args(args)


def configure_logging(arguments: argparse.Namespace):
    level = logging.WARNING
    if arguments.verbose:
        level = logging.INFO
    if arguments.debug:
        level = logging.DEBUG
    logging.basicConfig(level=level)
    logging.captureWarnings(True)


def wants_interface_list(arguments: argparse.Namespace) -> bool:
    return arguments.interface_host == ""


def print_broadcast_addresses():
    """
    Print the local interfaces beacons can be broadcast on, for use with `--interface`.
    """
    addresses = get_broadcast_addresses()
    if not addresses:
        print("No broadcast capable interfaces found.")
    for entry in addresses:
        print(entry)


def resolve_broadcast_address(arguments: argparse.Namespace) -> Optional[str]:
    """
    Works out which address beacons should be sent to from the command line arguments.

    :raises ValueError: If an interface was requested that has no broadcast address.
    """
    if arguments.interface_host is None:
        return arguments.broadcast_address
    entry = resolve_host_broadcast_address(arguments.interface_host)
    if entry is None:
        raise ValueError(
            f"No broadcast capable interface found with address {arguments.interface_host}"
        )
    return entry.broadcast


def announce(args=None):
    """
    Entry point for the announce command.
    """
    arguments = handle_announce_arguments(args)
    configure_logging(arguments)
    if wants_interface_list(arguments):
        print_broadcast_addresses()
        return
    broadcast_address = resolve_broadcast_address(arguments)

    with BeaconSender(
        arguments.content, arguments.port, broadcast_address=broadcast_address
    ) as sender:
        print(f"Announcing {sender}, press Ctrl-C to stop")
        with suppress_keyboard_interrupt_as_cancellation() as cancellation:
            sender.send_forever(period=arguments.period, cancellation=cancellation)
        print("Closing due to keyboard interrupt.")


def listen(args=None):
    """
    Entry point for the listen command.
    """
    arguments = handle_listen_arguments(args)
    configure_logging(arguments)

    print(f"Waiting for a beacon from service: '{arguments.content}'")
    with BeaconListener(arguments.port) as listener:
        beacon = listener.wait(arguments.content, timeout=arguments.timeout)
    if beacon is None:
        print(f"No beacon received within {arguments.timeout}s")
        sys.exit(1)
    print(f"Beacon {beacon}")


def announce_and_wait(args=None):
    """
    Entry point for the announce-and-wait command.
    """
    arguments = handle_announce_and_wait_arguments(args)
    configure_logging(arguments)
    if wants_interface_list(arguments):
        print_broadcast_addresses()
        return
    broadcast_address = resolve_broadcast_address(arguments)

    with BeaconListener(arguments.port) as listener:
        with BeaconSender(
            arguments.content, arguments.port, broadcast_address=broadcast_address
        ) as sender:
            sender.start(period=arguments.period)
            beacon = listener.wait(arguments.content)
    print(f"Beacon with message '{beacon.message}' received from IP: {beacon.source_ip}")
