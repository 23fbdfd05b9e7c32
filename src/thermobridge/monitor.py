"""
A console monitor for manual testing: prints telemetry from a port, or from the simulation.

    python -m thermobridge.monitor --list
    python -m thermobridge.monitor --port /dev/ttyUSB0 --baudrate 9600
    python -m thermobridge.monitor --simulate
"""
import argparse
import logging
import sys
import time

from thermobridge.connector.base import ConnectorError, HardwareMode, SimulatedMode
from thermobridge.connector.manager import ConnectionManager
from thermobridge.events import PVUpdate, SPUpdate, StatusChange
from thermobridge.facade import BridgeSettings, build_manager

logger = logging.getLogger(__name__)


def print_event(event, out=None):
    out = out or sys.stdout
    if isinstance(event, PVUpdate):
        out.write("PV %.1f\n" % event.value)
    elif isinstance(event, SPUpdate):
        out.write("SP %.1f\n" % event.value)
    elif isinstance(event, StatusChange):
        out.write("-- %s\n" % event.text)
    out.flush()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='thermobridge.monitor', description=__doc__.splitlines()[1])
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--port', help='serial port name or pyserial URL (default from configuration)')
    source.add_argument('--simulate', action='store_true', help='print synthetic readings')
    source.add_argument('--list', action='store_true', help='list the serial ports and exit')
    parser.add_argument('--baudrate', type=int, help='baud rate (default from configuration)')
    parser.add_argument('--duration', type=float, default=None, help='seconds to run (default: until ^C)')
    parser.add_argument('-v', '--verbose', action='store_true', help='log diagnostics to stderr')
    return parser.parse_args(argv)


def select_mode(args, settings: BridgeSettings):
    if args.simulate:
        return SimulatedMode(settings.simulation)
    overrides = {}
    if args.port:
        overrides['device'] = args.port
    if args.baudrate:
        overrides['baudrate'] = args.baudrate
    return HardwareMode(settings.port._replace(**overrides))


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, stream=sys.stderr)
    if args.list:
        for port in ConnectionManager.ports():
            print(port)
        return 0

    settings = BridgeSettings.load()
    with build_manager(settings) as manager:
        manager.events.add(print_event)
        try:
            manager.start(select_mode(args, settings))
        except ConnectorError as e:
            logger.debug("start failed", exc_info=True)
            print("unable to start: %s" % e, file=sys.stderr)
            return 1
        try:
            started = time.time()
            while args.duration is None or time.time() - started < args.duration:
                time.sleep(0.1)
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == '__main__':
    sys.exit(main())
