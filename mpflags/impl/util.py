import logging
import time
from typing import Any, Optional

log = logging.getLogger('mpflags.util')


def current_time_millis() -> int:
    return int(time.time() * 1000)


class UnsuccessfulResponseException(Exception):
    def __init__(self, status: int, body: Optional[str] = None):
        super(UnsuccessfulResponseException, self).__init__("HTTP %d error calling flags endpoint: %s" % (status, body or ''))
        self._status = status
        self._body = body

    @property
    def status(self) -> int:
        return self._status

    @property
    def body(self) -> Optional[str]:
        return self._body


def throw_if_unsuccessful_response(resp):
    if resp.status != 200:
        body = resp.data.decode('UTF-8', errors='replace') if resp.data else None
        raise UnsuccessfulResponseException(resp.status, body)


def http_error_description(status: int) -> str:
    return "HTTP error %d%s" % (status, " (invalid project token)" if (status == 401 or status == 403) else "")


def http_error_message(status: int, context: str, body: Optional[str] = None) -> str:
    message = "Received %s for %s" % (http_error_description(status), context)
    if body:
        message += ": " + body
    return message


def stringify_value(value: Any) -> str:
    """
    Converts a context or predicate value to the string form used for hashing and comparisons.
    Booleans and ``None`` use their JSON spelling, and integral floats drop the fractional part
    (``5.0`` becomes ``"5"``), so that values sent by other SDKs hash and compare equally.
    """
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
