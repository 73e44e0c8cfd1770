import errno
import logging
import threading
import typing

import usb.core as ucore
import usb.util
from usb.backend import libusb1
from usb.core import USBError

from . import descriptors, info, report
from .consts import FALCON8, STRING_TIMEOUT, DeviceIdentity
from .errors import DeviceUnavailableException, DriverException, Falcon8Exception, \
    NotFoundException


class Session:
    def __init__(self, context: 'UsbContext', dev: ucore.Device):
        self.context = context
        self.dev = dev
        self.identity = DeviceIdentity(dev.idVendor, dev.idProduct)
        self.bus = getattr(dev, 'bus', None)
        self.address = getattr(dev, 'address', None)
        self.active_configuration: typing.Optional[int] = None
        self.closed = True
        self.lock = threading.Lock()

    def __repr__(self):
        return '<Session %s bus=%s address=%s>' % (self.identity, self.bus, self.address)

    def open(self):
        # pyusb opens the handle lazily; asking for the active configuration forces it
        try:
            cfg = self.dev.get_active_configuration()
        except USBError as e:
            # Raised by pyusb itself after the handle was opened
            if e.strerror != 'Configuration not set':
                raise
            logging.warning('%s is not configured' % self)
            cfg = None

        self.active_configuration = cfg.bConfigurationValue if cfg is not None else None
        self.dev.default_timeout = STRING_TIMEOUT
        self.closed = False

    def close(self):
        if self.closed:
            return

        self.closed = True
        usb.util.dispose_resources(self.dev)
        logging.debug('Closed %s' % self)

    def check_open(self):
        if self.closed:
            raise DeviceUnavailableException('%s is closed' % self)

    def find_endpoints(self):
        self.check_open()
        return descriptors.find_endpoints(self)

    def read_report(self, req: typing.Optional['report.ReportRequest'] = None) -> bytes:
        self.check_open()

        # claim/transfer/release on one interface must not interleave
        if not self.lock.acquire(blocking=False):
            raise DriverException('%s is busy with another report read' % self)
        try:
            return report.read_report(self, req)
        finally:
            self.lock.release()

    def info(self) -> 'info.DeviceInfo':
        self.check_open()
        return info.device_info(self)


class UsbContext:
    def __init__(self, backend=None):
        if backend is None:
            backend = libusb1.get_backend()
        if backend is None:
            raise Falcon8Exception('libusb-1.0 is not available')

        self.backend = backend
        self.sessions: typing.List[Session] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def devices(self):
        if self.backend is None:
            raise DeviceUnavailableException('USB context is closed')

        return ucore.find(find_all=True, backend=self.backend)

    def open_sessions(self, identity: DeviceIdentity = FALCON8) -> typing.List[Session]:
        rc = []
        skipped = 0

        for dev in self.devices():
            try:
                if (dev.idVendor, dev.idProduct) != identity:
                    continue
            except (USBError, AttributeError) as e:
                logging.debug('Skipping device without a descriptor: %s' % repr(e))
                continue

            s = Session(self, dev)
            try:
                s.open()
            except USBError as e:
                skipped += 1
                if e.errno in (errno.EACCES, errno.EPERM):
                    logging.warning('No permission to open %s, check udev rules' % s)
                else:
                    logging.debug('Failed to open %s: %s' % (s, repr(e)))
                usb.util.dispose_resources(dev)
                continue

            logging.debug('Opened %s, active configuration %s' % (s, s.active_configuration))
            self.sessions.append(s)
            rc.append(s)

        if not rc:
            if skipped:
                raise NotFoundException('No usable %s device, %d matching device(s) failed to open' %
                                        (identity, skipped))
            raise NotFoundException('No %s device found' % str(identity))

        return rc

    def close(self):
        # Sessions hold handles derived from the backend, so they go first, newest first
        while self.sessions:
            self.sessions.pop().close()

        self.backend = None


def discover_sessions(context: UsbContext,
                      identity: DeviceIdentity = FALCON8) -> typing.List[Session]:
    """Open every attached device matching identity.

    The sessions belong to context and are closed with it.
    """
    return context.open_sessions(identity)
