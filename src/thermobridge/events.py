"""
Telemetry events posted by the connection manager to its observers.

Observers register with the manager's EventSource, either for all events or for one
event type:

    manager.events.add(show_pv, PVUpdate)
    manager.events.add(show_status, StatusChange)

Events are delivered on the thread that produced them (the reader or simulation thread,
or the caller of open/close). Observers that update a user interface must marshal the
event onto their own thread.
"""
import time

from thermobridge.support.mixins import CommonEqualityMixin, StringerMixin


class TelemetryEvent(CommonEqualityMixin, StringerMixin):
    """ base class for telemetry events.
        The timestamp records when the event was created and is not compared for equality."""
    _equality_excludes = ('timestamp',)

    def __init__(self, timestamp=None):
        self.timestamp = time.time() if timestamp is None else timestamp


class PVUpdate(TelemetryEvent):
    """ A new process value (measured temperature). """

    def __init__(self, value: float, timestamp=None):
        super().__init__(timestamp)
        self.value = float(value)


class SPUpdate(TelemetryEvent):
    """ A new set point (target temperature). """

    def __init__(self, value: float, timestamp=None):
        super().__init__(timestamp)
        self.value = float(value)


class StatusChange(TelemetryEvent):
    """ Free text status, either from the device or from the connection lifecycle. """

    def __init__(self, text: str, timestamp=None):
        super().__init__(timestamp)
        self.text = text
