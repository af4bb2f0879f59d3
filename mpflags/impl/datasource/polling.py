"""
Default implementation of the definitions polling component.
"""

import threading
from typing import Optional

import urllib3

from mpflags.config import LocalFlagsConfig
from mpflags.impl.repeating_task import RepeatingTask
from mpflags.impl.store import DefinitionStore
from mpflags.impl.util import (UnsuccessfulResponseException,
                               http_error_message, log)
from mpflags.interfaces import DefinitionsRequester


class DefinitionsPoller:
    """
    Keeps a :class:`DefinitionStore` in sync with the flags API.

    :func:`start` fetches once on the calling thread and then, if polling is enabled, schedules
    further fetches on a worker thread. A failed fetch is logged and leaves the store as it was.

    :func:`stop` only cancels future fetches. A fetch that is already in progress completes and
    its result is still installed.
    """

    def __init__(self, config: LocalFlagsConfig, requester: DefinitionsRequester, store: DefinitionStore):
        self._config = config
        self._requester = requester
        self._store = store
        self._lock = threading.Lock()
        self._task = None  # type: Optional[RepeatingTask]
        self._ready = threading.Event()

    def start(self):
        self._poll()

        if not self._config.enable_polling:
            return
        with self._lock:
            if self._task is not None:
                return
            interval = self._config.polling_interval_in_seconds
            log.info("Starting DefinitionsPoller with request interval: " + str(interval))
            self._task = RepeatingTask("mpflags.datasource.polling", interval, interval, self._poll)
            self._task.start()

    def stop(self):
        with self._lock:
            task = self._task
            self._task = None
        if task is None:
            log.warning("stop_polling_for_definitions called but polling was not active")
            return
        log.info("Stopping DefinitionsPoller")
        task.stop()

    def initialized(self) -> bool:
        return self._ready.is_set() and self._store.initialized

    @property
    def polling(self) -> bool:
        with self._lock:
            return self._task is not None

    def _poll(self) -> bool:
        try:
            definitions = self._requester.get_all_definitions()
        except UnsuccessfulResponseException as e:
            log.error(http_error_message(e.status, "flag definitions request", e.body))
            return False
        except urllib3.exceptions.HTTPError as e:
            log.error("Network error fetching flag definitions: %s" % e)
            return False
        except ValueError as e:
            log.error("Failed to parse flag definitions: %s" % e)
            return False
        except Exception as e:
            log.exception("Error: Exception encountered when fetching flag definitions. %s" % e)
            return False

        self._store.init(definitions)
        if not self._ready.is_set():
            log.info("DefinitionsPoller initialized ok")
            self._ready.set()
        return True
