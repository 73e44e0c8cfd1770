import logging
from contextlib import contextmanager
from enum import Enum

from usb.core import USBError

from .descriptors import Endpoint
from .errors import Falcon8Exception, translate


class BindingState(Enum):
    NOT_BOUND = 1
    BOUND_BY_OS = 2
    DETACHED_BY_US = 3


def kernel_driver_active(session, interface: int):
    try:
        return bool(session.dev.is_kernel_driver_active(interface))
    except (USBError, NotImplementedError) as e:
        # Not supported on every platform; nothing we could detach anyway
        logging.debug('Kernel driver query failed on interface %d: %s' % (interface, repr(e)))
        return False


def detach_interface(session, interface: int) -> BindingState:
    if not kernel_driver_active(session, interface):
        return BindingState.NOT_BOUND

    try:
        session.dev.detach_kernel_driver(interface)
    except USBError as e:
        raise translate(e, 'Detaching kernel driver from interface %d' % interface)

    logging.debug('Detached kernel driver from interface %d' % interface)
    return BindingState.DETACHED_BY_US


def reattach_interface(session, interface: int, prior: BindingState) -> BindingState:
    if prior != BindingState.DETACHED_BY_US:
        return prior

    try:
        session.dev.attach_kernel_driver(interface)
    except USBError as e:
        raise translate(e, 'Reattaching kernel driver to interface %d' % interface)

    logging.debug('Reattached kernel driver to interface %d' % interface)
    return BindingState.BOUND_BY_OS


def detach_if_bound(session, ep: Endpoint) -> BindingState:
    return detach_interface(session, ep.interface)


def reattach_if_needed(session, ep: Endpoint, prior: BindingState) -> BindingState:
    return reattach_interface(session, ep.interface, prior)


@contextmanager
def detached(session, interface: int):
    state = detach_interface(session, interface)
    try:
        yield state
    except BaseException:
        try:
            reattach_interface(session, interface, state)
        except Falcon8Exception:
            logging.exception('Kernel driver left detached from interface %d' % interface)
        raise

    reattach_interface(session, interface, state)
