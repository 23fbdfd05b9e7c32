"""
Assembles a connection manager from configuration.
"""
import logging

from thermobridge.conduit.serial_conduit import PortConfig
from thermobridge.config.config import apply, load_config
from thermobridge.connector.manager import ConnectionManager
from thermobridge.connector.reader import ReaderSettings
from thermobridge.session_log import NullSessionLog, SessionLog
from thermobridge.simulation import SimulationConfig

logger = logging.getLogger(__name__)


class BridgeSettings:
    """ the configured settings, converted to the types the bridge uses """

    def __init__(self, conf):
        self.conf = conf
        self.port = PortConfig.from_section(conf['port'])
        self.reader = apply(ReaderSettings(), 'reader', conf)
        self.simulation = SimulationConfig.from_section(conf['simulation'])
        self.log_directory = conf['log']['directory']
        self.log_prefix = conf['log']['prefix']

    @classmethod
    def load(cls, **kwargs):
        """ loads and validates the layered configuration. See load_config() """
        return cls(load_config(**kwargs))


def open_session_log(settings: BridgeSettings):
    """
    Creates the session log file. If the file cannot be created the bridge still runs,
    without a session log.
    """
    try:
        return SessionLog.create(settings.log_directory, settings.log_prefix)
    except OSError as e:
        logger.error("unable to create session log in %s: %s" % (settings.log_directory, e))
        return NullSessionLog()


def build_manager(settings: BridgeSettings=None, session_log=None, **kwargs) -> ConnectionManager:
    """
    Creates a connection manager configured from the settings. The manager is closed;
    start it with open(settings.port) or start_simulation().
    """
    if settings is None:
        settings = BridgeSettings.load()
    if session_log is None:
        session_log = open_session_log(settings)
    return ConnectionManager(session_log=session_log, reader_settings=settings.reader,
                             simulation_config=settings.simulation, **kwargs)
