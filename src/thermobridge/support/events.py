import logging

logger = logging.getLogger(__name__)


class EventSource(object):
    """
    Delivers each fired event to the registered handlers, in registration order, on the
    calling thread.

    A handler may be registered for all events, or only for events that are instances of
    a given type. A handler that raises does not stop delivery to the handlers after it;
    the failure is logged and reported in the result of fire().
    """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler, event_type=None):
        """
        :param handler: a callable receiving the event
        :param event_type: when given, the handler only receives instances of this type
        """
        self._handlers.append((handler, event_type))
        return self

    def remove(self, handler, event_type=None):
        """ removes every registration of the handler, or only those for event_type when given """
        self._handlers = [(h, t) for h, t in self._handlers
                          if not (h == handler and (event_type is None or t is event_type))]
        return self

    def handlers(self):
        return tuple(h for h, t in self._handlers)

    def fire(self, event):
        """
        :return: a tuple of (handler, exception) pairs for the handlers that failed
        """
        return self._fire(event)

    def fire_all(self, events):
        failures = []
        for e in events:
            failures.extend(self._fire(e))
        return tuple(failures)

    def _fire(self, event):
        failures = []
        for handler, event_type in tuple(self._handlers):
            if event_type is not None and not isinstance(event, event_type):
                continue
            try:
                handler(event)
            except Exception as e:
                logger.exception("handler %r failed for event %r" % (handler, event))
                failures.append((handler, e))
        return tuple(failures)
