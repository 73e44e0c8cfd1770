import logging
import typing
from binascii import hexlify
from contextlib import ExitStack

import usb.util
from usb.core import USBError

from .consts import REPORT_INDEX, REPORT_LENGTH, REPORT_REQUEST, REPORT_REQUEST_TYPE, \
    REPORT_VALUE, TRANSFER_TIMEOUT
from .descriptors import Endpoint, find_endpoints, interface_numbers
from .driver import detached
from .errors import NoEndpointsException, TransferException, translate
from .interface import claimed


class ReportRequest:
    """Where and how to fetch the report.

    The pad exposes a single interface, so the defaults pick the first endpoint of the first
    interface. `length` is the size of the buffer handed to the transfer and must cover the
    largest report the firmware may send.
    """

    def __init__(self,
                 length: int = REPORT_LENGTH,
                 timeout: int = TRANSFER_TIMEOUT,
                 interface_index: int = 0,
                 endpoint_index: int = 0,
                 request_type: int = REPORT_REQUEST_TYPE,
                 request: int = REPORT_REQUEST,
                 value: int = REPORT_VALUE,
                 index: int = REPORT_INDEX):
        if length <= 0:
            raise ValueError('Report length must be positive, got %d' % length)
        if interface_index < 0 or endpoint_index < 0:
            raise ValueError('Interface and endpoint indexes must not be negative')

        self.length = length
        self.timeout = timeout
        self.interface_index = interface_index
        self.endpoint_index = endpoint_index
        self.request_type = request_type
        self.request = request
        self.value = value
        self.index = index

    def __repr__(self):
        return 'ReportRequest(length=%d, timeout=%d, interface_index=%d, endpoint_index=%d, ' \
               'request_type=0x%02x, request=0x%02x, value=0x%04x, index=0x%04x)' % (
                   self.length, self.timeout, self.interface_index, self.endpoint_index,
                   self.request_type, self.request, self.value, self.index)


def target_endpoint(session, req: ReportRequest) -> Endpoint:
    endpoints = find_endpoints(session)
    if not endpoints:
        raise NoEndpointsException('%s exposes no endpoints' % session)
    if req.endpoint_index >= len(endpoints):
        raise NoEndpointsException('%s has %d endpoints, no endpoint #%d' %
                                   (session, len(endpoints), req.endpoint_index))

    return endpoints[req.endpoint_index]


def target_interface(session, req: ReportRequest) -> int:
    numbers = interface_numbers(session)
    if req.interface_index >= len(numbers):
        raise NoEndpointsException('%s has %d interfaces, no interface #%d' %
                                   (session, len(numbers), req.interface_index))

    return numbers[req.interface_index]


def addressed_interface(req: ReportRequest) -> typing.Optional[int]:
    # pyusb claims the interface a non-vendor interface request names in wIndex on its own
    if req.request_type & 0x03 != usb.util.CTRL_RECIPIENT_INTERFACE:
        return None
    if req.request_type & 0x60 == usb.util.CTRL_TYPE_VENDOR:
        return None

    return req.index & 0xff


def distinct(*numbers) -> typing.List[int]:
    rc = []
    for n in numbers:
        if n is not None and n not in rc:
            rc.append(n)

    return rc


def transfer(session, req: ReportRequest) -> bytes:
    buf = usb.util.create_buffer(req.length)

    try:
        # Reading into a buffer makes pyusb return the byte count instead of the data
        count = session.dev.ctrl_transfer(req.request_type, req.request, req.value, req.index, buf,
                                          timeout=req.timeout)
    except USBError as e:
        raise translate(e, 'Report transfer', TransferException)

    if count <= 0:
        raise TransferException('%s returned an empty report' % session)

    rsp = bytes(buf[:count])
    logging.debug('<report< %s' % hexlify(rsp).decode())
    return rsp


def read_report(session, req: typing.Optional[ReportRequest] = None) -> bytes:
    if req is None:
        req = ReportRequest()

    ep = target_endpoint(session, req)
    intf = target_interface(session, req)
    addressed = addressed_interface(req)
    logging.debug('Reading report from %s via %s, interface %d, addressed interface %s' %
                  (session, repr(ep), intf, addressed))

    # Claiming the addressed interface up front turns the implicit claim in ctrl_transfer into a
    # no-op, so every claim made for the read is released here
    with ExitStack() as stack:
        for i in distinct(ep.interface, intf, addressed):
            stack.enter_context(detached(session, i))
        for i in distinct(intf, addressed):
            stack.enter_context(claimed(session, i))

        return transfer(session, req)
