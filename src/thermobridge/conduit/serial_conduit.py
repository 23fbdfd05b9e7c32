"""
Implements a conduit over a serial port.
"""
import logging
from collections import namedtuple

import serial
from serial.tools import list_ports

logger = logging.getLogger(__name__)


_PortConfig = namedtuple('PortConfig', 'device baudrate parity bytesize stopbits timeout write_timeout')


class PortConfig(_PortConfig):
    """
    The settings used to open a serial port. Immutable.

    :param device: the port name (e.g. COM4, /dev/ttyUSB0) or a pyserial URL such as loop://
    :param timeout: the read timeout in seconds. Bounds how long a read blocks when no data
        arrives, and so how quickly the reader notices it has been asked to stop.
    """
    __slots__ = ()

    def __new__(cls, device, baudrate=9600, parity=serial.PARITY_NONE, bytesize=serial.EIGHTBITS,
                stopbits=serial.STOPBITS_ONE, timeout=0.2, write_timeout=1.0):
        return super().__new__(cls, device, int(baudrate), parity, int(bytesize), stopbits,
                               float(timeout), float(write_timeout))

    @classmethod
    def from_section(cls, section, **overrides):
        """ builds a config from a validated [port] configuration section """
        values = dict((k, section[k]) for k in cls._fields if k in section)
        values.update(overrides)
        return cls(**values)

    def serial_kwargs(self):
        kwargs = self._asdict()
        del kwargs['device']
        return kwargs


class SerialConduit:
    """
    Owns an open serial port and provides chunked reads and text writes.
    """

    def __init__(self, ser: serial.SerialBase):
        self.ser = ser

    @property
    def target(self):
        return self.ser

    @property
    def open(self) -> bool:
        return self.ser.is_open

    def read(self) -> bytes:
        """
        Reads whatever bytes are waiting, or blocks for up to the port timeout for the next byte.
        :return: the bytes read, empty when the timeout elapsed with no data.
        :raises serial.SerialException: when the port fails
        """
        return self.ser.read(self.ser.in_waiting or 1)

    def write(self, text: str):
        self.ser.write(text.encode('ascii'))

    def close(self):
        self.ser.close()


def open_serial_conduit(config: PortConfig) -> SerialConduit:
    """
    Opens the port described by the config.
    :raises serial.SerialException: when the port is missing, busy or access is denied
    :raises ValueError: when the settings are not valid for the port
    """
    ser = serial.serial_for_url(config.device, **config.serial_kwargs())
    logger.info("opened serial port %s at %d baud" % (config.device, config.baudrate))
    return SerialConduit(ser)


def serial_port_info():
    """
    :return: a tuple of ListPortInfo describing the serial ports on this system
    """
    return tuple(list_ports.comports())


def serial_ports():
    """
    Lists the serial port device names on this system, sorted. The list is computed on
    each call; there is no notification when ports come and go.
    """
    return sorted(port.device for port in serial_port_info())
