import unittest
from unittest.mock import Mock, call

from hamcrest import assert_that, contains_exactly, empty, is_

from thermobridge.events import PVUpdate, SPUpdate, StatusChange, TelemetryEvent
from thermobridge.support.events import EventSource


class EventsTest(unittest.TestCase):

    def test_no_listeners(self):
        sut = EventSource()
        assert_that(sut.fire(1), is_(()))

    def test_manage_handlers(self):
        sut = EventSource()
        m1 = Mock()
        sut.add(m1)
        assert_that(sut.handlers(), is_((m1,)))

        sut.remove(m1)
        assert_that(sut.handlers(), is_(()))

        sut.remove(m1)
        assert_that(sut.handlers(), is_(()))

        sut += m1
        assert_that(sut.handlers(), is_((m1,)))

        sut -= m1
        assert_that(sut.handlers(), is_(()))

    def test_listeners_called_in_registration_order(self):
        sut = EventSource()
        calls = []
        sut += lambda e: calls.append(('first', e))
        sut += lambda e: calls.append(('second', e))
        sut.fire(1)
        sut.fire(2)
        assert_that(calls, is_([('first', 1), ('second', 1), ('first', 2), ('second', 2)]))

    def test_fire_all(self):
        sut = EventSource()
        l1 = Mock()
        sut += l1
        sut.fire_all([1, 2, 3])
        l1.assert_has_calls([call(1), call(2), call(3)])

    def test_typed_handlers_only_receive_their_type(self):
        sut = EventSource()
        pv = Mock()
        status = Mock()
        everything = Mock()
        sut.add(pv, PVUpdate)
        sut.add(status, StatusChange)
        sut.add(everything, TelemetryEvent)

        sut.fire(PVUpdate(1.5))
        sut.fire(SPUpdate(180))
        sut.fire(StatusChange("ok"))

        pv.assert_called_once_with(PVUpdate(1.5))
        status.assert_called_once_with(StatusChange("ok"))
        assert_that(everything.call_count, is_(3))

    def test_remove_typed_registration_only(self):
        sut = EventSource()
        handler = Mock()
        sut.add(handler, PVUpdate)
        sut.add(handler, SPUpdate)
        sut.remove(handler, PVUpdate)
        sut.fire(PVUpdate(1))
        sut.fire(SPUpdate(2))
        handler.assert_called_once_with(SPUpdate(2))

    def test_failing_handler_does_not_block_later_handlers(self):
        sut = EventSource()
        error = RuntimeError("observer failed")
        bad = Mock(side_effect=error)
        good = Mock()
        sut += bad
        sut += good

        failures = sut.fire("event")

        good.assert_called_once_with("event")
        assert_that(failures, contains_exactly((bad, error)))

    def test_handler_may_unsubscribe_while_firing(self):
        sut = EventSource()
        later = Mock()

        def once(event):
            sut.remove(once)

        sut += once
        sut += later
        assert_that(sut.fire(1), is_(empty()))
        later.assert_called_once_with(1)
        assert_that(sut.handlers(), is_((later,)))
