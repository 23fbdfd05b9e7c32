import logging

from serial import SerialTimeoutException

from thermobridge.events import StatusChange
from thermobridge.protocol.lines import LineBuffer
from thermobridge.protocol.telemetry import parse_line
from thermobridge.support.worker import BackgroundLoop

logger = logging.getLogger(__name__)


class ReaderSettings:
    """ tuning for the reader thread and its shutdown. Times are in seconds. """

    def __init__(self, close_timeout=0.5, backoff=0.2, max_pending=65536):
        self.close_timeout = close_timeout
        self.backoff = backoff
        self.max_pending = max_pending


class ReaderLoop(BackgroundLoop):
    """
    Reads from an open conduit on a background thread, splits the bytes into lines and
    posts the telemetry event for each line.

    A read that times out with no data is not an error. Any other read error is posted as a
    StatusChange and logged, and the loop waits `backoff` seconds before reading again. The
    loop never closes the conduit; it runs until stopped.

    :param conduit: the open conduit to read from. Owned by the caller.
    :param fire: called with each event, on the reader thread
    :param session_log: receives a record for each chunk read and each error
    """

    def __init__(self, conduit, fire, session_log, settings: ReaderSettings=None):
        super().__init__(name='thermobridge-reader')
        self.conduit = conduit
        self.fire = fire
        self.session_log = session_log
        self.settings = settings or ReaderSettings()
        self.buffer = LineBuffer(self.settings.max_pending)

    def loop(self):
        try:
            chunk = self.conduit.read()
        except SerialTimeoutException:
            return
        except Exception as e:
            if self.running():
                self.read_failed(e)
            return
        if chunk and self.running():
            self.received(chunk)

    def received(self, chunk: bytes):
        self.session_log.write("RX: %s" % chunk.decode('ascii', errors='replace'))
        for line in self.buffer.feed(chunk):
            event = parse_line(line.decode('ascii', errors='replace'))
            if event is not None:
                self.fire(event)

    def read_failed(self, e):
        logger.warning("serial read error: %s" % e)
        self.fire(StatusChange("Serial Read Error: %s" % e))
        self.session_log.write("ERR: %r" % e)
        self.stop_event.wait(self.settings.backoff)
