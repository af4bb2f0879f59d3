import json
from typing import Any, Optional, Union

# Helpers for decoding flag definitions from the dicts produced by the JSON parser.
#
# Every property is read through one of the opt_ or req_ functions below, so that a value of
# the wrong JSON type rejects the whole definitions payload at fetch time instead of causing a
# harder-to-diagnose error later during evaluation. A rejected payload never replaces the data
# that is already cached.


def opt_type(data: dict, name: str, desired_type) -> Any:
    value = data.get(name)
    if value is not None and not isinstance(value, desired_type):
        raise ValueError('error in flag definition data: property "%s" should be type %s but was %s' % (name, desired_type, value.__class__))
    return value


def opt_bool(data: dict, name: str) -> Optional[bool]:
    return opt_type(data, name, bool)


def opt_dict(data: dict, name: str) -> Optional[dict]:
    return opt_type(data, name, dict)


def opt_dict_list(data: dict, name: str) -> list:
    return validate_list_type(opt_list(data, name), name, dict)


def opt_int(data: dict, name: str) -> Optional[int]:
    return opt_type(data, name, int)


def opt_number(data: dict, name: str) -> Optional[Union[int, float]]:
    value = data.get(name)
    if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
        raise ValueError('error in flag definition data: property "%s" should be a number but was %s' % (name, value.__class__))
    return value


def opt_list(data: dict, name: str) -> list:
    return opt_type(data, name, list) or []


def opt_str(data: dict, name: str) -> Optional[str]:
    return opt_type(data, name, str)


def opt_id(data: dict, name: str) -> Optional[Union[int, str]]:
    # ids are numeric in some API versions and strings in others
    value = data.get(name)
    if value is not None and (isinstance(value, bool) or not isinstance(value, (int, str))):
        raise ValueError('error in flag definition data: property "%s" should be a string or integer but was %s' % (name, value.__class__))
    return value


def req_type(data: dict, name: str, desired_type) -> Any:
    value = opt_type(data, name, desired_type)
    if value is None:
        raise ValueError('error in flag definition data: required property "%s" is missing' % name)
    return value


def req_dict(data: dict, name: str) -> dict:
    return req_type(data, name, dict)


def req_str(data: dict, name: str) -> str:
    return req_type(data, name, str)


def validate_list_type(items: list, name: str, desired_type) -> list:
    for item in items:
        if not isinstance(item, desired_type):
            raise ValueError('error in flag definition data: property %s should be an array of %s but an item was %s' % (name, desired_type, item.__class__))
    return items


class ModelEntity:
    def __init__(self, data: dict):
        self._data = data

    def to_json_dict(self):
        return self._data

    def __eq__(self, other) -> bool:
        return self.__class__ == other.__class__ and self._data == other._data

    def __repr__(self) -> str:
        return json.dumps(self._data, separators=(',', ':'))
