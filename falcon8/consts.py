import typing


class DeviceIdentity(typing.NamedTuple):
    vendor_id: int
    product_id: int

    def __str__(self):
        return '%04x:%04x' % (self.vendor_id, self.product_id)


# Not runtime discoverable; override in the config file for other revisions of the pad.
VENDOR_ID = 0x04d9
PRODUCT_ID = 0xa0fd

FALCON8 = DeviceIdentity(VENDOR_ID, PRODUCT_ID)

# GET_REPORT, feature report 7, interface 2
REPORT_REQUEST_TYPE = 0xa1
REPORT_REQUEST = 0x01
REPORT_VALUE = 0x0307
REPORT_INDEX = 0x0002

# TODO confirm against the firmware docs, the pad has only been seen returning 64 byte reports
REPORT_LENGTH = 64

# milliseconds
TRANSFER_TIMEOUT = 1000
STRING_TIMEOUT = 1000

NOT_FOUND = 'Not Found'
