"""
The telemetry line protocol.

Each line from the controller is one of:

- ``PV:<decimal>``  the process value
- ``SP:<decimal>``  the set point
- anything else     free-text status

The prefixes are case insensitive. A recognised prefix with a payload that is not a decimal
number produces no event at all.

>>> parse_line("PV:123.4")
PVUpdate:{'value': '123.4'}
>>> parse_line("sp: 180")
SPUpdate:{'value': '180.0'}
>>> parse_line("PV:abc") is None
True
>>> parse_line("heater on")
StatusChange:{'text': 'heater on'}
"""
import logging
import re

from thermobridge.events import PVUpdate, SPUpdate, StatusChange

logger = logging.getLogger(__name__)

_decimal = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')

prefixes = (
    ('PV:', PVUpdate),
    ('SP:', SPUpdate),
)


def parse_decimal(text):
    """
    :return: the float value of a plain decimal number, or None if the text is not one.
        Surrounding whitespace is allowed; 'nan', 'inf' and digit separators are not.
    >>> parse_decimal(" -1.5e2 ")
    -150.0
    >>> parse_decimal("1_000") is None
    True
    """
    text = text.strip()
    if not _decimal.match(text):
        return None
    return float(text)


def parse_line(line: str):
    """
    Maps one line of text to a telemetry event.
    :param line: the line, without its terminator
    :return: a PVUpdate, SPUpdate or StatusChange, or None when the line carries no event.
    """
    line = line.strip()
    if not line:
        return None
    upper = line[:3].upper()
    for prefix, event_type in prefixes:
        if upper == prefix:
            value = parse_decimal(line[len(prefix):])
            if value is None:
                logger.debug("dropped malformed reading '%s'" % line)
                return None
            return event_type(value)
    return StatusChange(line)
