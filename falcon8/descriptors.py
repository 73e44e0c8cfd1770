import logging
import typing

import usb.util
from usb.core import USBError

from .errors import DeviceUnavailableException


class Endpoint:
    def __init__(self, config: int, interface: int, setting: int, address: int):
        self.config, self.interface, self.setting, self.address = config, interface, setting, address

    def __eq__(self, other):
        if not isinstance(other, Endpoint):
            return NotImplemented
        return (self.config, self.interface, self.setting, self.address) == \
               (other.config, other.interface, other.setting, other.address)

    def __hash__(self):
        return hash((self.config, self.interface, self.setting, self.address))

    def __repr__(self):
        return 'Endpoint(config=%d, interface=%d, setting=%d, address=0x%02x)' % (
            self.config, self.interface, self.setting, self.address)


def direction(ep: Endpoint):
    if usb.util.endpoint_direction(ep.address) == usb.util.ENDPOINT_IN:
        return 'in'
    return 'out'


def config_descriptor(session):
    # Only the first configuration is ever looked at
    try:
        return session.dev[0]
    except (USBError, IndexError) as e:
        raise DeviceUnavailableException('No configuration descriptor on %s: %s' %
                                         (session, e)) from e


def find_endpoints(session) -> typing.List[Endpoint]:
    cfg = config_descriptor(session)
    rc = []

    # Configuration iterates every alternate setting of every interface in declared order
    for intf in cfg:
        for ep in intf:
            rc.append(Endpoint(cfg.bConfigurationValue, intf.bInterfaceNumber,
                               intf.bAlternateSetting, ep.bEndpointAddress))

    logging.debug('Endpoints of %s: %s' % (session, repr(rc)))
    return rc


def interface_numbers(session) -> typing.List[int]:
    rc = []
    for intf in config_descriptor(session):
        if intf.bInterfaceNumber not in rc:
            rc.append(intf.bInterfaceNumber)

    return rc
