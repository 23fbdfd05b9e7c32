from enum import Enum

from thermobridge.conduit.serial_conduit import PortConfig
from thermobridge.support.mixins import CommonEqualityMixin, StringerMixin


class ConnectorError(Exception):
    """ Indicates an error condition with a connection. """


class AlreadyOpenError(ConnectorError):
    """ Open was requested while the hardware connection is already open. """


class PortUnavailableError(ConnectorError):
    """ The serial port could not be acquired: it is missing, busy or access was denied. """


class ModeConflictError(ConnectorError):
    """ The requested mode cannot start while another mode is active. """


class NotConnectedError(ConnectorError):
    """ The operation needs an active connection. """


class ConnectionState(Enum):
    CLOSED = 'closed'
    OPEN = 'open'
    SIMULATING = 'simulating'


class Mode(CommonEqualityMixin, StringerMixin):
    """ The operating mode selected when the connection manager is started. """
    state = None

    def __init__(self, config):
        self.config = config


class HardwareMode(Mode):
    """ read telemetry from a serial port """
    state = ConnectionState.OPEN

    def __init__(self, config: PortConfig):
        super().__init__(config)


class SimulatedMode(Mode):
    """ synthesize telemetry without hardware """
    state = ConnectionState.SIMULATING

    def __init__(self, config=None):
        super().__init__(config)
