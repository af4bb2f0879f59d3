import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Guards a value that is read by many threads and replaced by one.

    Any number of readers may hold the lock at once. A writer waits until the
    current readers are done, and new readers wait while a writer holds it."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0

    def rlock(self):
        with self._cond:
            self._readers += 1

    def runlock(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def lock(self):
        self._cond.acquire()
        while self._readers > 0:
            self._cond.wait()

    def unlock(self):
        self._cond.release()

    @contextmanager
    def read(self):
        self.rlock()
        try:
            yield self
        finally:
            self.runlock()

    @contextmanager
    def write(self):
        self.lock()
        try:
            yield self
        finally:
            self.unlock()
