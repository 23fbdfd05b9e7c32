"""
Explicit results for best-effort operations.

Writing to the session log or to the device must never raise into the caller. Rather than
swallowing failures silently, these operations return an Outcome, so callers (and tests)
can see what happened and decide to ignore it.
"""
from thermobridge.support.mixins import CommonEqualityMixin, StringerMixin


class Outcome(CommonEqualityMixin, StringerMixin):
    """ the result of an operation that either succeeded or failed with an exception """

    def __init__(self, error: BaseException=None):
        self.error = error

    @classmethod
    def success(cls):
        return cls()

    @classmethod
    def failure(cls, error: BaseException):
        if error is None:
            raise ValueError("a failed outcome needs an error")
        return cls(error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self):
        return self.ok

    def raise_error(self):
        """ re-raises the error of a failed outcome. Does nothing on success. """
        if self.error is not None:
            raise self.error
