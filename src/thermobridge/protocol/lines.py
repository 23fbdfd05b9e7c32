"""
Reassembles CR/LF terminated lines from chunks of bytes read from a stream.
"""
import re

_terminators = re.compile(b'[\r\n]+')


class LineBuffer:
    """
    Accumulates bytes and splits off complete lines.

    A line ends at CR, LF or any run of them; empty segments between terminators are dropped.
    After each call to feed(), `pending` holds only the start of the next line, if any.
    Lines are returned as bytes, untrimmed. Without a limit, the lines returned over all calls
    followed by the pending fragment are exactly the input with the terminators removed.

    :param max_pending: the most bytes kept for an unterminated line. A line that grows past
        this is dropped whole: its bytes up to the next terminator are discarded and counted in
        `overflow`, so no truncated line is ever returned. None for no limit.
    """

    def __init__(self, max_pending=None):
        self.max_pending = max_pending
        self._pending = bytearray()
        self._discarding = False
        self.overflow = 0

    @property
    def pending(self) -> bytes:
        return bytes(self._pending)

    @property
    def discarding(self) -> bool:
        """ True while skipping the remainder of an over-long line """
        return self._discarding

    def feed(self, chunk: bytes) -> list:
        """
        Appends the chunk and returns the complete lines now available, in arrival order.
        """
        if not chunk:
            return []
        if self._discarding:
            end = _terminators.search(chunk)
            if end is None:
                self.overflow += len(chunk)
                return []
            self.overflow += end.start()
            self._discarding = False
            chunk = chunk[end.end():]
        self._pending += chunk
        parts = _terminators.split(bytes(self._pending))
        # the last part is unterminated (or empty when the data ended with a terminator)
        tail = parts.pop()
        self._pending = bytearray(tail)
        self._trim()
        return [p for p in parts if p]

    def _trim(self):
        limit = self.max_pending
        if limit is not None and len(self._pending) > limit:
            self.overflow += len(self._pending)
            self._pending.clear()
            self._discarding = True

    def clear(self):
        self._pending.clear()
        self._discarding = False
        self.overflow = 0

    def __len__(self):
        return len(self._pending)
