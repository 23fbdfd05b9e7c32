"""
Synthetic telemetry for working without a controller attached.

Each tick posts one PVUpdate and one SPUpdate. The process value follows a sine wave,

    pv(t) = base + amplitude * sin(t * phase_rate)

where t advances by the tick interval (in seconds) on every tick, and the set point is fixed.
"""
import logging
import math
from collections import namedtuple

from thermobridge.events import PVUpdate, SPUpdate
from thermobridge.support.worker import BackgroundLoop

logger = logging.getLogger(__name__)


_SimulationConfig = namedtuple('SimulationConfig', 'interval_ms base amplitude phase_rate set_point')


class SimulationConfig(_SimulationConfig):
    __slots__ = ()

    def __new__(cls, interval_ms=1000, base=20.0, amplitude=180.0, phase_rate=0.05, set_point=180.0):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive, got %s" % interval_ms)
        return super().__new__(cls, int(interval_ms), float(base), float(amplitude), float(phase_rate),
                               float(set_point))

    @classmethod
    def from_section(cls, section):
        """ builds a config from a validated [simulation] configuration section """
        return cls(**dict((k, section[k]) for k in cls._fields if k in section))

    @property
    def interval(self) -> float:
        """ the tick interval in seconds """
        return self.interval_ms / 1000.0


def simulated_pv(t, config: SimulationConfig):
    """
    >>> simulated_pv(0, SimulationConfig())
    20.0
    """
    return config.base + config.amplitude * math.sin(t * config.phase_rate)


def pv_bounds(config: SimulationConfig):
    """
    The range of the wave. Emitted readings are rounded to 2 places and then held within it.

    >>> pv_bounds(SimulationConfig())
    (-160.0, 200.0)
    """
    spread = abs(config.amplitude)
    return config.base - spread, config.base + spread


class SimulationGenerator(BackgroundLoop):
    """
    Posts synthetic readings every interval until stopped.

    Stopping is observed at the top of the next tick, so at most one more interval passes
    before emissions cease.

    :param fire: called with each event, on the simulation thread
    :param session_log: receives a record for each tick
    """

    def __init__(self, fire, session_log, config: SimulationConfig=None):
        super().__init__(name='thermobridge-simulation')
        self.fire = fire
        self.session_log = session_log
        self.config = config or SimulationConfig()
        self.t = 0.0
        self.ticks = 0

    def loop(self):
        self.tick()
        self.stop_event.wait(self.config.interval)

    def tick(self):
        """ emits one PV/SP pair and advances time by one interval """
        config = self.config
        low, high = pv_bounds(config)
        pv = min(max(round(simulated_pv(self.t, config), 2), low), high)
        self.fire(PVUpdate(pv))
        self.fire(SPUpdate(config.set_point))
        self.session_log.write("[SIM] PV=%s SP=%s" % (pv, config.set_point))
        self.t += config.interval
        self.ticks += 1
