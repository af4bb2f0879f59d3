"""
This submodule contains the configuration classes for the local and remote flags providers.
"""

from typing import Optional

from mpflags.impl.util import log

DEFAULT_API_HOST = 'api.mixpanel.com'
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_POLLING_INTERVAL = 60


class HTTPConfig:
    """Advanced HTTP configuration options for the flags providers.

    These rarely need to be changed. Construct an ``HTTPConfig`` and pass it as the ``http``
    parameter of :class:`LocalFlagsConfig` or :class:`RemoteFlagsConfig`.
    """

    def __init__(self, http_proxy: Optional[str] = None, ca_certs: Optional[str] = None, disable_ssl_verification: bool = False):
        """
        :param http_proxy: Use a proxy when connecting to the flags API. This is the full URI of the
          proxy; for example: http://my-proxy.com:1234. Unlike the standard ``http_proxy`` environment
          variable, this is used regardless of whether the target URI is HTTP or HTTPS. Setting it
          overrides any proxy specified by an environment variable.
        :param ca_certs: If using a custom certificate authority, set this to the file path of the
          certificate bundle.
        :param disable_ssl_verification: If true, completely disables certificate verification for
          secure requests. This is unsafe and should not be used in a production environment.
        """
        self.__http_proxy = http_proxy
        self.__ca_certs = ca_certs
        self.__disable_ssl_verification = disable_ssl_verification

    @property
    def http_proxy(self) -> Optional[str]:
        return self.__http_proxy

    @property
    def ca_certs(self) -> Optional[str]:
        return self.__ca_certs

    @property
    def disable_ssl_verification(self) -> bool:
        return self.__disable_ssl_verification


class FlagsConfig:
    """Options shared by local and remote evaluation.
    """

    def __init__(self, api_host: str = DEFAULT_API_HOST, request_timeout_in_seconds: float = DEFAULT_REQUEST_TIMEOUT, http: HTTPConfig = HTTPConfig()):
        """
        :param api_host: The host of the flags API. A bare host name is reached over HTTPS; a value
          that already contains a scheme (such as ``http://localhost:8080``) is used as is.
        :param request_timeout_in_seconds: The time after which a request to the flags API is
          aborted and treated as failed.
        :param http: Optional properties for customizing HTTP behavior. See :class:`HTTPConfig`.
        """
        self.__api_host = api_host
        self.__request_timeout_in_seconds = request_timeout_in_seconds
        self.__http = http

    @property
    def api_host(self) -> str:
        return self.__api_host

    @property
    def base_uri(self) -> str:
        host = self.__api_host.rstrip('/')
        if '://' not in host:
            host = 'https://' + host
        return host

    @property
    def request_timeout_in_seconds(self) -> float:
        return self.__request_timeout_in_seconds

    @property
    def http(self) -> HTTPConfig:
        return self.__http


class LocalFlagsConfig(FlagsConfig):
    """Configuration for :class:`mpflags.local_flags.LocalFlagsProvider`.
    """

    def __init__(
        self,
        api_host: str = DEFAULT_API_HOST,
        request_timeout_in_seconds: float = DEFAULT_REQUEST_TIMEOUT,
        enable_polling: bool = True,
        polling_interval_in_seconds: float = DEFAULT_POLLING_INTERVAL,
        http: HTTPConfig = HTTPConfig(),
    ):
        """
        :param enable_polling: Whether definitions are refreshed in the background after the first
          fetch. If false, they are only fetched when polling is started.
        :param polling_interval_in_seconds: The number of seconds between background fetches.
        """
        super().__init__(api_host=api_host, request_timeout_in_seconds=request_timeout_in_seconds, http=http)
        self.__enable_polling = enable_polling
        if polling_interval_in_seconds is None or polling_interval_in_seconds <= 0:
            log.warning("Invalid polling interval %s; using default of %d seconds" % (polling_interval_in_seconds, DEFAULT_POLLING_INTERVAL))
            polling_interval_in_seconds = DEFAULT_POLLING_INTERVAL
        self.__polling_interval_in_seconds = polling_interval_in_seconds

    @property
    def enable_polling(self) -> bool:
        return self.__enable_polling

    @property
    def polling_interval_in_seconds(self) -> float:
        return self.__polling_interval_in_seconds


class RemoteFlagsConfig(FlagsConfig):
    """Configuration for :class:`mpflags.remote_flags.RemoteFlagsProvider`.
    """


__all__ = ['FlagsConfig', 'HTTPConfig', 'LocalFlagsConfig', 'RemoteFlagsConfig']
