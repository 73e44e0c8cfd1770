import errno
import typing

from usb.core import USBError


class Falcon8Exception(Exception):
    pass


class NotFoundException(Falcon8Exception):
    pass


class DeviceUnavailableException(Falcon8Exception):
    pass


class NoEndpointsException(Falcon8Exception):
    pass


class DriverException(Falcon8Exception):
    pass


class TransferException(Falcon8Exception):
    pass


class TimeoutException(TransferException):
    pass


class PermissionDeniedException(Falcon8Exception):
    pass


def translate(e: USBError, what: str,
              default: typing.Type[Falcon8Exception] = DriverException) -> Falcon8Exception:
    if e.errno in (errno.EACCES, errno.EPERM):
        cls = PermissionDeniedException
    elif e.errno == errno.ETIMEDOUT:
        cls = TimeoutException if issubclass(default, TransferException) else default
    else:
        cls = default

    rc = cls('%s failed: %s' % (what, e))
    rc.__cause__ = e
    return rc
