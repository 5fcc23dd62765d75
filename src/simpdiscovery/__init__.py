"""
Module providing simple service discovery on a LAN with UDP broadcast beacons.

A beacon is a single IPv4 UDP datagram broadcast to an agreed port. Its entire payload is the beacon
content encoded with UTF-8: there is no header, length prefix or version field, and the content is
opaque to this library. Any meta-data, such as the address or name of a service, is up to the
caller to encode.

The :class:`BeaconSender` class broadcasts a fixed content string, once or periodically, and the
:class:`BeaconListener` class blocks until a beacon with the expected content arrives, returning the
:class:`Beacon` along with the address it was sent from.

.. code::

    with BeaconSender("My Service", port=34254) as sender:
        sender.start(period=1.0)
        ...

    with BeaconListener(port=34254) as listener:
        beacon = listener.wait("My Service", timeout=5.0)
        if beacon is not None:
            print(beacon.source_ip)

"""

from simpdiscovery.cancellation import CancellationToken
from simpdiscovery.listener import Beacon, BeaconListener, listen_for_beacon
from simpdiscovery.sender import BeaconSender
from simpdiscovery.sockets import BeaconSetupError, BeaconTransmissionError

__version__ = "1.0.0"
