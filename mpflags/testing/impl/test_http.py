import base64
import re
from typing import Optional

import pytest
import urllib3

from mpflags.config import FlagsConfig, HTTPConfig
from mpflags.impl.http import (_base_headers, _get_proxy_url, _http_factory,
                               generate_traceparent,
                               prepare_common_query_params)
from mpflags.version import VERSION


@pytest.mark.parametrize(
    'target_uri, no_proxy, expected',
    [
        ('https://secure.example.com', '', 'https://secure.proxy:1234'),
        ('http://insecure.example.com', '', 'http://insecure.proxy:6789'),
        ('https://secure.example.com', 'secure.example.com', None),
        ('https://secure.example.com', 'secure.example.com:443', None),
        ('https://secure.example.com', 'secure.example.com:80', 'https://secure.proxy:1234'),
        ('https://secure.example.com', 'wrong.example.com', 'https://secure.proxy:1234'),
        ('https://secure.example.com:8080', 'secure.example.com:443,', 'https://secure.proxy:1234'),
        ('https://secure.example.com', 'example.com', None),
        ('http://insecure.example.com', 'insecure.example.com:80', None),
        ('http://insecure.example.com', 'example.com:443', 'http://insecure.proxy:6789'),
        ('secure.example.com', 'secure.example.com:443', 'http://insecure.proxy:6789'),
        ('secure.example.com:8080', 'secure.example.com', None),
        ('https://secure.example.com', '*', None),
        ('http://insecure.example.com:8080', '*', None),
    ],
)
def test_honors_no_proxy(target_uri: str, no_proxy: str, expected: Optional[str], monkeypatch):
    monkeypatch.setenv('https_proxy', 'https://secure.proxy:1234')
    monkeypatch.setenv('http_proxy', 'http://insecure.proxy:6789')
    monkeypatch.setenv('no_proxy', no_proxy)

    proxy_url = _get_proxy_url(target_uri)

    assert proxy_url == expected


def test_traceparent_format():
    value = generate_traceparent()
    assert re.match(r'^00-[0-9a-f]{32}-[0-9a-f]{16}-01$', value)


def test_traceparent_is_random_per_call():
    assert generate_traceparent() != generate_traceparent()


def test_common_query_params():
    assert prepare_common_query_params('my-token', '1.2.3') == {'mp_lib': 'python', '$lib_version': '1.2.3', 'token': 'my-token'}


def test_base_headers():
    headers = _base_headers('my-token')
    assert headers['Content-Type'] == 'application/json'
    assert headers['User-Agent'] == 'PythonFlags/' + VERSION
    assert headers['Authorization'] == 'Basic ' + base64.b64encode(b'my-token:').decode('ascii')


def test_factory_timeout_uses_configured_seconds():
    factory = _http_factory(FlagsConfig(request_timeout_in_seconds=3))
    assert factory.timeout.total == 3


def test_factory_uses_configured_proxy(monkeypatch):
    monkeypatch.delenv('https_proxy', raising=False)
    factory = _http_factory(FlagsConfig(http=HTTPConfig(http_proxy='http://my-proxy:8080')))
    pool = factory.create_pool_manager(1, 'https://api.mixpanel.com')
    assert isinstance(pool, urllib3.ProxyManager)


def test_factory_without_proxy_creates_pool_manager(monkeypatch):
    monkeypatch.delenv('https_proxy', raising=False)
    monkeypatch.delenv('http_proxy', raising=False)
    factory = _http_factory(FlagsConfig())
    pool = factory.create_pool_manager(1, 'https://api.mixpanel.com')
    assert not isinstance(pool, urllib3.ProxyManager)
