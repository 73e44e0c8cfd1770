import logging
import os
import typing

import yaml

from .consts import FALCON8, REPORT_LENGTH, TRANSFER_TIMEOUT, DeviceIdentity
from .report import ReportRequest

default_config_path = '/etc/falcon8/falcon8.yaml'

defaults = {
    'vendor_id': FALCON8.vendor_id,
    'product_id': FALCON8.product_id,
    'report_length': REPORT_LENGTH,
    'timeout': TRANSFER_TIMEOUT,
    'interface_index': 0,
    'endpoint_index': 0,
}


def parse_int(key: str, v):
    if isinstance(v, bool):
        raise ValueError('%s: expected an integer, got %s' % (key, repr(v)))
    if isinstance(v, int):
        return v
    if isinstance(v, str):
        try:
            return int(v, 0)
        except ValueError:
            pass

    raise ValueError('%s: expected an integer, got %s' % (key, repr(v)))


class Config:
    def __init__(self, values: typing.Optional[typing.Mapping] = None):
        values = dict(values or {})

        unknown = sorted(set(values) - set(defaults))
        if unknown:
            raise ValueError('Unknown config keys: %s' % ', '.join(unknown))

        for k, v in defaults.items():
            setattr(self, k, parse_int(k, values.get(k, v)))

    def __repr__(self):
        return 'Config(%s)' % ', '.join('%s=%s' % (k, getattr(self, k)) for k in defaults)

    def identity(self) -> DeviceIdentity:
        return DeviceIdentity(self.vendor_id, self.product_id)

    def request(self) -> ReportRequest:
        return ReportRequest(length=self.report_length,
                             timeout=self.timeout,
                             interface_index=self.interface_index,
                             endpoint_index=self.endpoint_index)

    def update(self, **overrides):
        for k, v in overrides.items():
            if k not in defaults:
                raise ValueError('Unknown config key: %s' % k)
            if v is not None:
                setattr(self, k, parse_int(k, v))


def load(path: typing.Optional[str] = None) -> Config:
    explicit = path is not None or 'FALCON8_CONFIG' in os.environ
    if path is None:
        path = os.environ.get('FALCON8_CONFIG', default_config_path)

    if not os.path.exists(path):
        if explicit:
            raise FileNotFoundError('Config file %s does not exist' % path)
        return Config()

    with open(path, 'r') as f:
        values = yaml.safe_load(f)

    if values is None:
        values = {}
    if not isinstance(values, dict):
        raise ValueError('%s: expected a mapping at the top level' % path)

    logging.debug('Loaded config from %s' % path)
    return Config(values)
