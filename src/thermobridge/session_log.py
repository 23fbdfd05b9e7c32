"""
The session log: a durable, append-only record of connection events.

One file is written per process session, named from the time the session started.
Each line is ``HH:MM:SS.fff<TAB>message`` and is flushed as soon as it is written.
Logging is best effort - a failed write is reported in the returned Outcome and never raised.
"""
import logging
import os
import threading
from datetime import datetime

from thermobridge.support.outcome import Outcome

logger = logging.getLogger(__name__)

default_prefix = 'serial_'


def session_filename(started: datetime, prefix=default_prefix):
    """
    >>> session_filename(datetime(2024, 3, 5, 7, 8, 9))
    'serial_20240305_070809.log'
    """
    return prefix + started.strftime('%Y%m%d_%H%M%S') + '.log'


def format_record(when: datetime, message):
    """
    Formats one record. Line breaks in the message are escaped so each record stays on one line.
    >>> format_record(datetime(2024, 3, 5, 7, 8, 9, 123456), 'OPEN COM4 9600')
    '07:08:09.123\\tOPEN COM4 9600'
    """
    message = str(message).replace('\r', '\\r').replace('\n', '\\n')
    return '%s.%03d\t%s' % (when.strftime('%H:%M:%S'), when.microsecond // 1000, message)


class LogClosedError(IOError):
    """ raised into a failed outcome when writing to a closed session log """


class SessionLog:
    """
    Writes timestamped records to a file.

    :param stream: the open text stream to write to. SessionLog takes ownership and closes it.
    :param clock: returns the current datetime, used to stamp each record
    """

    def __init__(self, stream, clock=datetime.now):
        self._stream = stream
        self._clock = clock
        self._lock = threading.Lock()
        self.path = getattr(stream, 'name', None)

    @classmethod
    def create(cls, directory, prefix=default_prefix, clock=datetime.now):
        """
        Creates the log file for a new session in the given directory.
        :raises OSError: when the directory or file cannot be created
        """
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, session_filename(clock(), prefix))
        stream = open(path, 'a', encoding='utf-8', newline='\n')
        logger.info("session log %s" % path)
        return cls(stream, clock)

    @property
    def closed(self) -> bool:
        return self._stream is None

    def write(self, message) -> Outcome:
        record = format_record(self._clock(), message)
        with self._lock:
            stream = self._stream
            if stream is None:
                return Outcome.failure(LogClosedError("session log is closed"))
            try:
                stream.write(record + '\n')
                stream.flush()
            except (OSError, ValueError) as e:
                return Outcome.failure(e)
        return Outcome.success()

    def close(self):
        with self._lock:
            stream, self._stream = self._stream, None
        if stream is not None:
            try:
                stream.close()
            except OSError as e:
                logger.warning("error closing session log: %s" % e)


class NullSessionLog(SessionLog):
    """ a session log that discards records, for use when no log file could be created """

    def __init__(self):
        super().__init__(None)

    @property
    def closed(self) -> bool:
        return False

    def write(self, message) -> Outcome:
        return Outcome.success()

    def close(self):
        pass
