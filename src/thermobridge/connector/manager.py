"""
The connection manager owns the serial port and the workers that produce telemetry.

It is a state machine over ConnectionState:

    CLOSED --open(config)-------> OPEN
    CLOSED --start_simulation()-> SIMULATING
    OPEN / SIMULATING --close()-> CLOSED

Every transition is validated against the current state and serialized by one lock, so open
and close never interleave. Hardware and simulation never run together: each must be closed
before the other can start.

Closing is a two phase contract:

1. the worker is signalled to stop and close waits up to `close_timeout` for it to exit,
2. the port is released, whether or not the worker exited in phase 1.

When phase 1 times out, close() returns with the worker still winding down. It will exit after
its current read, without posting further events. Callers should treat close() as "stop
started", not as "stopped and joined".
"""
import logging
import threading

from serial import SerialException

from thermobridge.conduit.serial_conduit import PortConfig, open_serial_conduit, serial_ports
from thermobridge.connector.base import AlreadyOpenError, ConnectionState, HardwareMode, ModeConflictError, \
    NotConnectedError, PortUnavailableError, SimulatedMode
from thermobridge.connector.reader import ReaderLoop, ReaderSettings
from thermobridge.events import StatusChange
from thermobridge.session_log import NullSessionLog
from thermobridge.simulation import SimulationConfig, SimulationGenerator
from thermobridge.support.events import EventSource
from thermobridge.support.outcome import Outcome

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    :param session_log: the session log, shared by the workers. Closed by shutdown().
    :param events: the event source that observers register with
    :param conduit_factory: opens a conduit from a PortConfig
    :param reader_settings: timing for the reader thread and close
    :param simulation_config: the default simulation settings
    """

    def __init__(self, session_log=None, events: EventSource=None, conduit_factory=open_serial_conduit,
                 reader_settings: ReaderSettings=None, simulation_config: SimulationConfig=None):
        self.session_log = session_log if session_log is not None else NullSessionLog()
        self.events = events if events is not None else EventSource()
        self.conduit_factory = conduit_factory
        self.reader_settings = reader_settings or ReaderSettings()
        self.simulation_config = simulation_config or SimulationConfig()
        self._lock = threading.RLock()
        self._state = ConnectionState.CLOSED
        self._mode = None
        self._conduit = None
        self._worker = None
        self._shutdown = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def mode(self):
        """ the active HardwareMode or SimulatedMode, or None when closed """
        return self._mode

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.OPEN

    @staticmethod
    def ports():
        """ the serial port names available now, sorted """
        return serial_ports()

    def _log(self, message):
        return self.session_log.write(message)

    def _status(self, text):
        self.events.fire(StatusChange(text))

    def start(self, mode):
        """
        Starts the given mode from the closed state.
        :param mode: a HardwareMode or SimulatedMode
        :raises ModeConflictError: a mode is already active. Close it first.
        """
        if not isinstance(mode, (HardwareMode, SimulatedMode)):
            raise TypeError("unknown mode %r" % mode)
        with self._lock:
            if self._state is not ConnectionState.CLOSED:
                active = "Simulation running" if self._state is ConnectionState.SIMULATING else "Port open"
                self._status("%s: close it before starting another mode" % active)
                raise ModeConflictError("%s is active, close it before starting %s" % (self._mode, mode))
            if isinstance(mode, HardwareMode):
                self.open(mode.config)
            else:
                self.start_simulation(mode.config)

    def open(self, config: PortConfig):
        """
        Opens the serial port and starts reading from it.
        :raises AlreadyOpenError: the port is already open. Close it first.
        :raises ModeConflictError: simulation is running. Stop it first.
        :raises PortUnavailableError: the port could not be opened. The state stays CLOSED.
        """
        with self._lock:
            if self._state is ConnectionState.OPEN:
                self._status("Already open: %s" % self._mode.config.device)
                raise AlreadyOpenError("%s is already open, close it first" % self._mode.config.device)
            if self._state is ConnectionState.SIMULATING:
                self._status("Simulation running: stop it before opening %s" % config.device)
                raise ModeConflictError("stop the simulation before opening %s" % config.device)
            try:
                conduit = self.conduit_factory(config)
            except (SerialException, OSError, ValueError) as e:
                logger.warning("unable to open %s: %s" % (config.device, e))
                self._status("Port unavailable: %s: %s" % (config.device, e))
                self._log("OPEN FAILED %s: %s" % (config.device, e))
                raise PortUnavailableError("unable to open %s: %s" % (config.device, e)) from e
            self._conduit = conduit
            self._mode = HardwareMode(config)
            self._state = ConnectionState.OPEN
            self._status("Open: %s @ %d" % (config.device, config.baudrate))
            self._log("OPEN %s %d" % (config.device, config.baudrate))
            self._worker = ReaderLoop(conduit, self.events.fire, self.session_log, self.reader_settings)
            self._worker.start()

    def close(self):
        """
        Ends the active mode and returns to CLOSED. Closing when already closed does nothing
        but post the "Closed" status.

        The worker is given `close_timeout` seconds to stop; the port is released regardless.
        :return: True if the worker (if any) was seen to exit, False if the wait timed out.
        """
        with self._lock:
            joined = self._stop_worker()
            conduit, self._conduit = self._conduit, None
            if conduit is not None:
                try:
                    conduit.close()
                except (SerialException, OSError) as e:
                    logger.warning("error releasing port: %s" % e)
            was_simulating = self._state is ConnectionState.SIMULATING
            self._state = ConnectionState.CLOSED
            self._mode = None
            if was_simulating:
                self._status("Simulation stopped")
                self._log("SIMULATION STOPPED")
            else:
                self._status("Closed")
                self._log("CLOSED")
            return joined

    def _stop_worker(self):
        worker, self._worker = self._worker, None
        if worker is None:
            return True
        joined = worker.stop(self.reader_settings.close_timeout)
        if not joined:
            logger.warning("%s did not stop within %ss, releasing resources anyway" %
                           (worker.name, self.reader_settings.close_timeout))
        return joined

    def start_simulation(self, config: SimulationConfig=None):
        """
        Starts posting synthetic readings. Does nothing if the simulation is already running.
        :raises ModeConflictError: the hardware port is open. Close it first.
        """
        with self._lock:
            if self._state is ConnectionState.SIMULATING:
                return
            if self._state is ConnectionState.OPEN:
                self._status("Port open: close it before starting the simulation")
                raise ModeConflictError("close %s before starting the simulation" % self._mode.config.device)
            config = config or self.simulation_config
            self._mode = SimulatedMode(config)
            self._state = ConnectionState.SIMULATING
            self._status("Simulation started")
            self._log("SIMULATION STARTED")
            self._worker = SimulationGenerator(self.events.fire, self.session_log, config)
            self._worker.start()

    def stop_simulation(self):
        """
        Stops the simulation. Does nothing but post the "Simulation stopped" status if the
        simulation is not running.
        :raises ModeConflictError: the hardware port is open; use close()
        """
        with self._lock:
            if self._state is ConnectionState.OPEN:
                raise ModeConflictError("the hardware port is open, use close()")
            if self._state is ConnectionState.SIMULATING:
                return self.close()
            self._status("Simulation stopped")
            self._log("SIMULATION STOPPED")
            return True

    def write(self, text: str) -> Outcome:
        """
        Sends text to the device. In simulation the text is logged but not sent.
        Never raises; the result reports failure.
        """
        with self._lock:
            if self._state is ConnectionState.SIMULATING:
                self._log("[SIM WRITE] %s" % text)
                return Outcome.success()
            if self._state is ConnectionState.CLOSED:
                self._log("TXERR: not connected: %s" % text)
                return Outcome.failure(NotConnectedError("not connected"))
            try:
                self._conduit.write(text)
            except (SerialException, OSError, ValueError) as e:
                self._status("Write err: %s" % e)
                self._log("TXERR: %r" % e)
                return Outcome.failure(e)
            self._log("TX: %s" % text)
            return Outcome.success()

    def shutdown(self):
        """ closes any active mode, then the session log. Later calls do nothing. """
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            self.close()
            self.session_log.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
