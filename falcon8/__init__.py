from .consts import FALCON8, DeviceIdentity
from .errors import Falcon8Exception, NotFoundException, DeviceUnavailableException, \
    NoEndpointsException, DriverException, TransferException, TimeoutException, \
    PermissionDeniedException
from .report import ReportRequest
from .usb import Session, UsbContext, discover_sessions
