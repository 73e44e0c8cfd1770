import logging
from contextlib import contextmanager

import usb.util
from usb.core import USBError

from .errors import Falcon8Exception, translate


def claim(session, interface: int):
    try:
        usb.util.claim_interface(session.dev, interface)
    except USBError as e:
        raise translate(e, 'Claiming interface %d' % interface)

    logging.debug('Claimed interface %d' % interface)


def release(session, interface: int):
    try:
        usb.util.release_interface(session.dev, interface)
    except USBError as e:
        raise translate(e, 'Releasing interface %d' % interface)

    logging.debug('Released interface %d' % interface)


@contextmanager
def claimed(session, interface: int):
    claim(session, interface)
    try:
        yield interface
    except BaseException:
        try:
            release(session, interface)
        except Falcon8Exception:
            logging.exception('Interface %d left claimed' % interface)
        raise

    release(session, interface)
