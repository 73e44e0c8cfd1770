import logging
import typing

import usb.util
from usb.core import USBError

from .consts import NOT_FOUND


class DeviceInfo:
    def __init__(self, active_configuration: typing.Optional[int], language: typing.Optional[int],
                 manufacturer: str, product: str, serial_number: str):
        self.active_configuration = active_configuration
        self.language = language
        self.manufacturer = manufacturer
        self.product = product
        self.serial_number = serial_number

    def __repr__(self):
        return 'DeviceInfo(active_configuration=%s, language=%s, manufacturer=%s, product=%s, ' \
               'serial_number=%s)' % (self.active_configuration, self.language,
                                      repr(self.manufacturer), repr(self.product),
                                      repr(self.serial_number))

    def __str__(self):
        lines = ['Active configuration: %s' % self.active_configuration]
        if self.language is not None:
            lines.append('Language: 0x%04x' % self.language)
        lines += [
            'Manufacturer: %s' % self.manufacturer,
            'Product: %s' % self.product,
            'Serial Number: %s' % self.serial_number,
        ]
        return '\n'.join(lines)


def read_string(dev, index: int, langid: int) -> str:
    try:
        s = usb.util.get_string(dev, index, langid)
    except (USBError, ValueError) as e:
        logging.debug('String descriptor %d unreadable: %s' % (index, repr(e)))
        return NOT_FOUND

    return s if s else NOT_FOUND


def device_info(session) -> DeviceInfo:
    """Human readable identification of the device, never used on the report path."""
    dev = session.dev

    try:
        langids = usb.util.get_langids(dev)
    except USBError as e:
        logging.debug('No language ids on %s: %s' % (session, repr(e)))
        langids = ()

    if not langids:
        return DeviceInfo(session.active_configuration, None, NOT_FOUND, NOT_FOUND, NOT_FOUND)

    lang = langids[0]
    return DeviceInfo(session.active_configuration, lang,
                      read_string(dev, dev.iManufacturer, lang),
                      read_string(dev, dev.iProduct, lang),
                      read_string(dev, dev.iSerialNumber, lang))
