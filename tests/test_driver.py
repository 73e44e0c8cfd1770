import errno
import unittest

from falcon8.descriptors import Endpoint
from falcon8.driver import BindingState, detach_if_bound, detached, reattach_if_needed
from falcon8.errors import DriverException, PermissionDeniedException

from fakes import FakeDevice, FakeSession, usb_error

EP = Endpoint(1, 0, 0, 0x81)


class TestDetachIfBound(unittest.TestCase):

    def test_bound_driver_is_detached(self):
        s = FakeSession()
        self.assertEqual(detach_if_bound(s, EP), BindingState.DETACHED_BY_US)
        self.assertFalse(s.dev.kernel_driver[0])
        self.assertEqual(s.dev.calls, [('detach', 0)])

    def test_no_driver(self):
        s = FakeSession(FakeDevice(kernel_driver={0: False}))
        self.assertEqual(detach_if_bound(s, EP), BindingState.NOT_BOUND)
        self.assertEqual(s.dev.calls, [])

    def test_query_failure_means_no_driver(self):
        s = FakeSession()
        s.dev.query_error = usb_error()
        self.assertEqual(detach_if_bound(s, EP), BindingState.NOT_BOUND)
        self.assertEqual(s.dev.calls, [])

    def test_query_not_implemented(self):
        s = FakeSession()
        s.dev.query_error = NotImplementedError()
        self.assertEqual(detach_if_bound(s, EP), BindingState.NOT_BOUND)

    def test_detach_failure_is_reported(self):
        s = FakeSession()
        s.dev.detach_error = usb_error(errno.ENODEV, 'No such device')
        with self.assertRaises(DriverException):
            detach_if_bound(s, EP)

    def test_detach_permission(self):
        s = FakeSession()
        s.dev.detach_error = usb_error(errno.EACCES, 'Access denied')
        with self.assertRaises(PermissionDeniedException):
            detach_if_bound(s, EP)


class TestReattachIfNeeded(unittest.TestCase):

    def test_round_trip_restores_binding(self):
        s = FakeSession()
        state = detach_if_bound(s, EP)
        self.assertEqual(reattach_if_needed(s, EP, state), BindingState.BOUND_BY_OS)
        self.assertTrue(s.dev.kernel_driver[0])

    def test_round_trip_without_driver(self):
        s = FakeSession(FakeDevice(kernel_driver={0: False}))
        state = detach_if_bound(s, EP)
        self.assertEqual(reattach_if_needed(s, EP, state), BindingState.NOT_BOUND)
        self.assertFalse(s.dev.kernel_driver[0])
        self.assertEqual(s.dev.calls, [])

    def test_noop_unless_detached_by_us(self):
        s = FakeSession()
        for state in (BindingState.NOT_BOUND, BindingState.BOUND_BY_OS):
            self.assertEqual(reattach_if_needed(s, EP, state), state)
        self.assertEqual(s.dev.calls, [])

    def test_reattach_failure_is_reported(self):
        s = FakeSession()
        s.dev.attach_error = usb_error(errno.ENODEV, 'No such device')
        with self.assertRaises(DriverException):
            reattach_if_needed(s, EP, BindingState.DETACHED_BY_US)


class TestDetached(unittest.TestCase):

    def test_reattaches_on_success(self):
        s = FakeSession()
        with detached(s, 0) as state:
            self.assertEqual(state, BindingState.DETACHED_BY_US)
            self.assertFalse(s.dev.kernel_driver[0])
        self.assertTrue(s.dev.kernel_driver[0])

    def test_reattaches_on_error(self):
        s = FakeSession()
        with self.assertRaises(RuntimeError):
            with detached(s, 0):
                raise RuntimeError('boom')
        self.assertTrue(s.dev.kernel_driver[0])

    def test_original_error_wins_over_reattach_failure(self):
        s = FakeSession()
        s.dev.attach_error = usb_error(errno.ENODEV, 'No such device')
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(RuntimeError):
                with detached(s, 0):
                    raise RuntimeError('boom')

    def test_reattach_failure_raised_when_alone(self):
        s = FakeSession()
        s.dev.attach_error = usb_error(errno.ENODEV, 'No such device')
        with self.assertRaises(DriverException):
            with detached(s, 0):
                pass
