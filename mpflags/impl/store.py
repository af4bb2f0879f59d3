from types import MappingProxyType
from typing import Mapping, Optional

from mpflags.impl.model import FlagDefinition
from mpflags.impl.rwlock import ReadWriteLock
from mpflags.impl.util import log


class DefinitionStore:
    """
    Holds the most recently fetched set of flag definitions.

    The set is replaced as a whole by :func:`init` and never modified afterwards, so a reader that
    obtained a snapshot from :func:`all` keeps seeing a consistent set of definitions even if a
    newer one is installed while it is evaluating.
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._initialized = False
        self._definitions = MappingProxyType({})  # type: Mapping[str, FlagDefinition]

    def get(self, key: str) -> Optional[FlagDefinition]:
        with self._lock.read():
            definitions = self._definitions
        flag = definitions.get(key)
        if flag is None:
            log.debug("Attempted to get missing flag definition %s, returning None", key)
        return flag

    def all(self) -> Mapping[str, FlagDefinition]:
        with self._lock.read():
            return self._definitions

    def init(self, definitions: Mapping[str, FlagDefinition]):
        snapshot = MappingProxyType(dict(definitions))
        with self._lock.write():
            self._definitions = snapshot
            self._initialized = True
        log.debug("Initialized definition store with %d flags", len(snapshot))

    @property
    def initialized(self) -> bool:
        with self._lock.read():
            return self._initialized
