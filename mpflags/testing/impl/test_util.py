import pytest

from mpflags.impl.util import (UnsuccessfulResponseException,
                               http_error_message, stringify_value,
                               throw_if_unsuccessful_response)


class FakeResponse:
    def __init__(self, status, data=b''):
        self.status = status
        self.data = data


def test_ok_response_does_not_raise():
    throw_if_unsuccessful_response(FakeResponse(200, b'{}'))


@pytest.mark.parametrize('status', [201, 204, 304, 400, 401, 404, 500, 503])
def test_any_other_status_raises(status):
    with pytest.raises(UnsuccessfulResponseException) as e:
        throw_if_unsuccessful_response(FakeResponse(status, b'oops'))
    assert e.value.status == status
    assert e.value.body == 'oops'


def test_http_error_message_mentions_invalid_token():
    assert http_error_message(401, "flag definitions request") == "Received HTTP error 401 (invalid project token) for flag definitions request"


def test_http_error_message_includes_body():
    assert http_error_message(500, "remote flags request", "down") == "Received HTTP error 500 for remote flags request: down"


@pytest.mark.parametrize('value, expected', [
    ('abc', 'abc'),
    (True, 'true'),
    (False, 'false'),
    (5, '5'),
    (1.5, '1.5'),
    (7.0, '7'),
    (-3.0, '-3'),
    (None, 'null'),
])
def test_stringify_value(value, expected):
    assert stringify_value(value) == expected
