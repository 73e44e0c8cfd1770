import argparse
import logging
import sys
from binascii import hexlify

from . import config
from .descriptors import direction
from .errors import Falcon8Exception
from .usb import UsbContext, discover_sessions


def dump_endpoints(session):
    for ep in session.find_endpoints():
        print('  %s (%s)' % (repr(ep), direction(ep)))


def report_one(session, req, args):
    print('Device %s' % repr(session))
    if args.info:
        print(session.info())
    if args.endpoints:
        dump_endpoints(session)

    rsp = session.read_report(req)
    print('Report (%d bytes): %s' % (len(rsp), hexlify(rsp).decode()))


def run(args, context=None):
    cfg = config.load(args.config)
    cfg.update(vendor_id=args.vendor,
               product_id=args.product,
               report_length=args.length,
               timeout=args.timeout)
    logging.debug('Using %s' % repr(cfg))

    req = cfg.request()
    failed = 0

    with (context or UsbContext()) as ctx:
        for s in discover_sessions(ctx, cfg.identity()):
            try:
                report_one(s, req, args)
            except Falcon8Exception as e:
                print('Error: %s: %s' % (repr(s), e), file=sys.stderr)
                failed += 1

    return 1 if failed else 0


def parser():
    p = argparse.ArgumentParser(description='Read the status report of Falcon-8 devices')
    p.add_argument('-c', '--config', help='YAML config file')
    p.add_argument('--vendor', help='USB vendor id, e.g. 0x04d9')
    p.add_argument('--product', help='USB product id')
    p.add_argument('-l', '--length', help='Report buffer size in bytes')
    p.add_argument('-t', '--timeout', help='Transfer timeout in milliseconds')
    p.add_argument('-i', '--info', action='store_true', help='Print device strings')
    p.add_argument('-e', '--endpoints', action='store_true', help='Print the endpoint walk')
    p.add_argument('-v', '--verbose', action='store_true')
    return p


def main(argv=None, context=None):
    args = parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return run(args, context)
    except (Falcon8Exception, ValueError, OSError) as e:
        print('Error: %s' % e, file=sys.stderr)
        return 1
