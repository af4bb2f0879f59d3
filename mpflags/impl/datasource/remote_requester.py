"""
Default implementation of remote evaluation requests.
"""

import json
from typing import Any, Dict, Optional

from mpflags.config import FlagsConfig
from mpflags.impl.http import _http_factory, call_flags_endpoint
from mpflags.interfaces import RemoteFlagsRequester

FLAGS_PATH = '/flags'


class RemoteFlagsRequesterImpl(RemoteFlagsRequester):
    def __init__(self, token: str, config: FlagsConfig):
        self._token = token
        self._base_uri = config.base_uri
        self._factory = _http_factory(config)
        self._http = self._factory.create_pool_manager(1, self._base_uri)

    def get_flags(self, context: Dict[str, Any], flag_key: Optional[str] = None) -> Dict[str, Any]:
        params = {'context': json.dumps(context, separators=(',', ':'))}
        if flag_key is not None:
            params['flag_key'] = flag_key

        data = call_flags_endpoint(self._http, self._factory, self._base_uri, FLAGS_PATH, self._token, params)
        if not isinstance(data, dict):
            raise ValueError('flags response should be an object but was %s' % data.__class__)
        flags = data.get('flags') or {}
        if not isinstance(flags, dict):
            raise ValueError('flags response property "flags" should be an object but was %s' % flags.__class__)
        return flags

    def close(self):
        self._http.clear()
