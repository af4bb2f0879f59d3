import base64
import json
import os
from os import environ
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode, urlparse

import certifi
import urllib3

from mpflags.impl.util import log, throw_if_unsuccessful_response
from mpflags.version import VERSION

SDK_NAME = 'python'


def prepare_common_query_params(token: str, sdk_version: str) -> Dict[str, str]:
    return {
        'mp_lib': SDK_NAME,
        '$lib_version': sdk_version,
        'token': token,
    }


def generate_traceparent() -> str:
    """
    Builds a W3C trace-context header value: ``00-<trace id>-<parent id>-01``. The ids are random
    for every request and the trace is always flagged as sampled.
    """
    trace_id = os.urandom(16).hex()
    parent_id = os.urandom(8).hex()
    return "00-%s-%s-01" % (trace_id, parent_id)


def _basic_auth_value(token: str) -> str:
    return 'Basic ' + base64.b64encode((token + ':').encode('UTF-8')).decode('ascii')


def _base_headers(token: str) -> Dict[str, str]:
    return {
        'Content-Type': 'application/json',
        'User-Agent': 'PythonFlags/' + VERSION,
        'Authorization': _basic_auth_value(token or ''),
    }


def _http_factory(config):
    return HTTPFactory(config.http, config.request_timeout_in_seconds)


class HTTPFactory:
    def __init__(self, http_config, request_timeout: float):
        self.__http_config = http_config
        self.__timeout = urllib3.Timeout(total=request_timeout)

    @property
    def http_config(self):
        return self.__http_config

    @property
    def timeout(self) -> urllib3.Timeout:
        return self.__timeout

    def create_pool_manager(self, num_pools, target_base_uri):
        proxy_url = self.__http_config.http_proxy or _get_proxy_url(target_base_uri)

        if self.__http_config.disable_ssl_verification:
            cert_reqs = 'CERT_NONE'
            ca_certs = None
        else:
            cert_reqs = 'CERT_REQUIRED'
            ca_certs = self.__http_config.ca_certs or certifi.where()

        if proxy_url is None:
            return urllib3.PoolManager(num_pools=num_pools, cert_reqs=cert_reqs, ca_certs=ca_certs)
        else:
            url = urllib3.util.parse_url(proxy_url)
            proxy_headers = None
            if url.auth is not None:
                proxy_headers = urllib3.util.make_headers(proxy_basic_auth=url.auth)
            return urllib3.ProxyManager(proxy_url, num_pools=num_pools, cert_reqs=cert_reqs, ca_certs=ca_certs, proxy_headers=proxy_headers)


def call_flags_endpoint(http, factory: HTTPFactory, base_uri: str, path: str, token: str, additional_params: Optional[Dict[str, str]] = None) -> Any:
    """
    Performs a GET against one of the flags API endpoints and returns the decoded JSON body.

    Raises :class:`mpflags.impl.util.UnsuccessfulResponseException` for any status other than 200,
    ``ValueError`` if the body is not valid JSON, and lets urllib3 errors (connection failures,
    timeouts) propagate to the caller.
    """
    params = prepare_common_query_params(token, VERSION)
    if additional_params:
        params.update(additional_params)
    uri = '%s%s?%s' % (base_uri, path, urlencode(params))

    headers = _base_headers(token)
    headers['traceparent'] = generate_traceparent()

    r = http.request('GET', uri, headers=headers, timeout=factory.timeout, retries=False)
    throw_if_unsuccessful_response(r)
    log.debug("%s%s response status:[%d]", base_uri, path, r.status)
    return json.loads(r.data.decode('UTF-8'))


def _get_proxy_url(target_base_uri):
    """
    Determine the proxy URL to use for a given target URI, based on the
    environment variables http_proxy, https_proxy, and no_proxy.

    If the target URI is an https URL, the proxy will be determined from the HTTPS_PROXY variable.
    If the target URI is not https, the proxy will be determined from the HTTP_PROXY variable.

    In either of the above instances, if the NO_PROXY variable contains either
    the target domain or '*', no proxy will be used.
    """
    if target_base_uri is None:
        return None

    target_host, target_port, is_https = _get_target_host_and_port(target_base_uri)

    proxy_url = environ.get('https_proxy') if is_https else environ.get('http_proxy')
    no_proxy = environ.get('no_proxy', '').strip()

    if proxy_url is None or no_proxy == '*':
        return None
    elif no_proxy == '':
        return proxy_url

    for no_proxy_entry in no_proxy.split(','):
        if no_proxy_entry == '':
            continue
        parts = no_proxy_entry.strip().split(':')
        if len(parts) == 1:
            if target_host.endswith(no_proxy_entry):
                return None
            continue
        if parts[0] == '':
            continue
        if target_host.endswith(parts[0]) and target_port == int(parts[1]):
            return None

    return proxy_url


def _get_target_host_and_port(uri: str) -> Tuple[str, int, bool]:
    """
    Given a URL, return the effective hostname, port, and whether it is considered a secure scheme.

    If a scheme is not supplied, the port is assumed to be 80 and the connection unsecure.
    """
    if '//' not in uri:
        parts = uri.split(':')
        return parts[0], int(parts[1]) if len(parts) > 1 else 80, False

    parsed = urlparse(uri)
    is_https = parsed.scheme == 'https'

    port = parsed.port
    if port is None:
        port = 443 if is_https else 80

    return parsed.hostname or "", port, is_https
