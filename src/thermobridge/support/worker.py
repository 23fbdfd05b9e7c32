"""
Background workers with cooperative cancellation.
"""
import logging
import threading

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """ Repeatedly runs loop() on a daemon thread until stopped.

        Stopping is cooperative: stop() sets the stop event, which the loop observes
        once per iteration, and then waits a bounded time for the thread to exit.
        stop() does not guarantee termination. When the wait times out, stop() returns
        False and the thread is abandoned, to exit at the end of its current iteration.

        Exceptions raised by loop() are passed to exception_handler() and the loop continues.
    """

    def __init__(self, name=None, log=logger):
        self.name = name
        self.stop_event = threading.Event()
        self.background_thread = None
        self.logger = log

    def start(self):
        if self.background_thread is None:
            self.stop_event.clear()
            t = threading.Thread(target=self._run, name=self.name, daemon=True)
            self.background_thread = t
            t.start()

    def exception_handler(self, e):
        self.logger.exception(e)

    def _run(self):
        self._do(self.startup)
        while self.running():
            self._do(self.loop)
        self._do(self.shutdown)
        self.logger.debug("background thread %s exiting" % self.name)

    def _do(self, callme):
        try:
            callme()
        except Exception as e:
            self.exception_handler(e)

    def startup(self):
        """ template method called when the thread starts"""
        pass

    def loop(self):
        """ template method called repeatedly until the loop is stopped """
        raise NotImplementedError

    def shutdown(self):
        """ template method called when the thread exits """
        pass

    def running(self):
        return not self.stop_event.is_set()

    @property
    def alive(self) -> bool:
        thread = self.background_thread
        return thread is not None and thread.is_alive()

    def stop(self, timeout=None) -> bool:
        """
        Signals the loop to stop and waits up to timeout seconds for the thread to exit.
        :return: True if the thread exited (or was never started), False if the wait timed out.
        """
        self.stop_event.set()
        thread = self.background_thread
        self.background_thread = None
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout)
        return not thread.is_alive()
