import unittest
from unittest.mock import Mock, patch

from hamcrest import assert_that, calling, instance_of, is_, raises
from serial.tools.list_ports_common import ListPortInfo

from thermobridge.conduit.serial_conduit import PortConfig, SerialConduit, open_serial_conduit, serial_port_info, \
    serial_ports


class PortConfigTest(unittest.TestCase):

    def test_defaults(self):
        sut = PortConfig('COM4')
        assert_that(sut, is_(PortConfig('COM4', 9600, 'N', 8, 1, 0.2, 1.0)))

    def test_is_immutable(self):
        sut = PortConfig('COM4')
        assert_that(calling(setattr).with_args(sut, 'baudrate', 19200), raises(AttributeError))

    def test_from_section(self):
        section = {'device': '/dev/ttyUSB0', 'baudrate': '19200', 'parity': 'E', 'unknown': 'x'}
        sut = PortConfig.from_section(section, timeout=0.5)
        assert_that(sut.device, is_('/dev/ttyUSB0'))
        assert_that(sut.baudrate, is_(19200))
        assert_that(sut.parity, is_('E'))
        assert_that(sut.timeout, is_(0.5))

    def test_serial_kwargs(self):
        sut = PortConfig('COM4', 115200)
        assert_that(sut.serial_kwargs(), is_({'baudrate': 115200, 'parity': 'N', 'bytesize': 8, 'stopbits': 1,
                                              'timeout': 0.2, 'write_timeout': 1.0}))


class SerialConduitTest(unittest.TestCase):

    def test_delegates_to_serial(self):
        serial = Mock()
        sut = SerialConduit(serial)
        assert_that(sut.target, is_(serial))

        serial.is_open = True
        assert_that(sut.open, is_(True))

        sut.close()
        serial.close.assert_called_once()

    def test_read_reads_waiting_bytes(self):
        serial = Mock()
        serial.in_waiting = 5
        serial.read.return_value = b'PV:1\n'
        sut = SerialConduit(serial)
        assert_that(sut.read(), is_(b'PV:1\n'))
        serial.read.assert_called_once_with(5)

    def test_read_blocks_for_one_byte_when_none_waiting(self):
        serial = Mock()
        serial.in_waiting = 0
        serial.read.return_value = b''
        sut = SerialConduit(serial)
        assert_that(sut.read(), is_(b''))
        serial.read.assert_called_once_with(1)

    def test_write_encodes_ascii(self):
        serial = Mock()
        sut = SerialConduit(serial)
        sut.write("SP:100\r\n")
        serial.write.assert_called_once_with(b"SP:100\r\n")

    @patch('thermobridge.conduit.serial_conduit.serial')
    def test_open_serial_conduit(self, serial):
        config = PortConfig('COM7', 4800)
        conduit = open_serial_conduit(config)
        serial.serial_for_url.assert_called_once_with('COM7', baudrate=4800, parity='N', bytesize=8, stopbits=1,
                                                      timeout=0.2, write_timeout=1.0)
        assert_that(conduit, is_(instance_of(SerialConduit)))
        assert_that(conduit.target, is_(serial.serial_for_url.return_value))

    def test_open_loopback_url(self):
        conduit = open_serial_conduit(PortConfig('loop://', timeout=0.05))
        try:
            assert_that(conduit.open, is_(True))
            conduit.write("PV:1\n")
            assert_that(conduit.read(), is_(b'PV:1\n'))
        finally:
            conduit.close()
        assert_that(conduit.open, is_(False))


class SerialPortsTest(unittest.TestCase):

    @patch('serial.tools.list_ports.comports')
    def test_serial_port_info(self, comports):
        ports = [ListPortInfo('COM1')]
        comports.return_value = ports
        assert_that(serial_port_info(), is_(tuple(ports)))

    def test_serial_ports_are_sorted(self):
        with patch('thermobridge.conduit.serial_conduit.serial_port_info') as info:
            info.return_value = (ListPortInfo('COM3'), ListPortInfo('COM1'), ListPortInfo('/dev/ttyUSB0'))
            assert_that(serial_ports(), is_(['/dev/ttyUSB0', 'COM1', 'COM3']))
