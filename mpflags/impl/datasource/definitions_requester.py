"""
Default implementation of flag definition requests.
"""

from typing import Dict

from mpflags.config import FlagsConfig
from mpflags.impl.http import _http_factory, call_flags_endpoint
from mpflags.impl.model import FlagDefinition
from mpflags.impl.util import log
from mpflags.interfaces import DefinitionsRequester

DEFINITIONS_PATH = '/flags/definitions'


class DefinitionsRequesterImpl(DefinitionsRequester):
    def __init__(self, token: str, config: FlagsConfig):
        self._token = token
        self._base_uri = config.base_uri
        self._factory = _http_factory(config)
        self._http = self._factory.create_pool_manager(1, self._base_uri)

    def get_all_definitions(self) -> Dict[str, FlagDefinition]:
        data = call_flags_endpoint(self._http, self._factory, self._base_uri, DEFINITIONS_PATH, self._token)
        if not isinstance(data, dict) or not isinstance(data.get('flags'), list):
            raise ValueError('flag definitions response did not contain a list of flags')

        definitions = {}
        for item in data['flags']:
            if not isinstance(item, dict):
                raise ValueError('flag definition should be an object but was %s' % item.__class__)
            flag = FlagDefinition(item)
            definitions[flag.key] = flag
        log.debug("Fetched %d flag definitions", len(definitions))
        return definitions

    def close(self):
        self._http.clear()
