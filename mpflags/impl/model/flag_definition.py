from typing import Any, Dict, List, Optional, Union

from mpflags.impl.model.entity import *
from mpflags.impl.util import stringify_value


class Variant:
    __slots__ = ['_key', '_value', '_is_control', '_split']

    def __init__(self, data: dict):
        self._key = req_str(data, 'key')
        self._value = data.get('value')
        self._is_control = opt_bool(data, 'is_control') is True
        self._split = opt_number(data, 'split') or 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_control(self) -> bool:
        return self._is_control

    @property
    def split(self) -> Union[int, float]:
        """Share of the entities in a matched rollout that get this variant, as a percentage."""
        return self._split


class Rollout:
    __slots__ = ['_rollout_percentage', '_runtime_evaluation_definition', '_variant_override', '_variant_splits']

    def __init__(self, data: dict):
        self._rollout_percentage = opt_number(data, 'rollout_percentage') or 0
        self._runtime_evaluation_definition = opt_dict(data, 'runtime_evaluation_definition')
        override = opt_dict(data, 'variant_override')
        self._variant_override = None if override is None else req_str(override, 'key')
        splits = opt_dict(data, 'variant_splits')
        if splits is not None:
            for variant_key in splits:
                opt_number(splits, variant_key)
        self._variant_splits = splits

    @property
    def rollout_percentage(self) -> Union[int, float]:
        return self._rollout_percentage

    @property
    def runtime_evaluation_definition(self) -> Optional[Dict[str, Any]]:
        return self._runtime_evaluation_definition

    @property
    def variant_override(self) -> Optional[str]:
        """Key of the variant every entity matching this rollout receives, if any."""
        return self._variant_override

    @property
    def variant_splits(self) -> Optional[Dict[str, Union[int, float]]]:
        return self._variant_splits


class FlagTestUsers:
    __slots__ = ['_users']

    def __init__(self, data: dict):
        users = opt_dict(data, 'users') or {}
        for distinct_id in users:
            opt_str(users, distinct_id)
        self._users = users

    @property
    def users(self) -> Dict[str, str]:
        return self._users

    def variant_key_for(self, distinct_id: Any) -> Optional[str]:
        return self._users.get(stringify_value(distinct_id))


class RuleSet:
    __slots__ = ['_variants', '_rollout', '_test']

    def __init__(self, data: dict):
        self._variants = list(Variant(item) for item in opt_dict_list(data, 'variants'))
        self._rollout = list(Rollout(item) for item in opt_dict_list(data, 'rollout'))
        test = opt_dict(data, 'test')
        self._test = None if test is None else FlagTestUsers(test)

    @property
    def variants(self) -> List[Variant]:
        return self._variants

    @property
    def rollout(self) -> List[Rollout]:
        return self._rollout

    @property
    def test(self) -> Optional[FlagTestUsers]:
        return self._test


class FlagDefinition(ModelEntity):
    __slots__ = [
        '_data',
        '_id',
        '_key',
        '_name',
        '_status',
        '_project_id',
        '_context',
        '_experiment_id',
        '_is_experiment_active',
        '_hash_salt',
        '_ruleset',
    ]

    def __init__(self, data: dict):
        super().__init__(data)
        self._id = opt_id(data, 'id')
        self._key = req_str(data, 'key')
        self._name = opt_str(data, 'name')
        self._status = opt_str(data, 'status')
        self._project_id = opt_int(data, 'project_id')
        self._context = req_str(data, 'context')
        self._experiment_id = opt_id(data, 'experiment_id')
        self._is_experiment_active = opt_bool(data, 'is_experiment_active')
        self._hash_salt = opt_str(data, 'hash_salt')
        self._ruleset = RuleSet(req_dict(data, 'ruleset'))

    @property
    def id(self) -> Optional[Union[int, str]]:
        return self._id

    @property
    def key(self) -> str:
        return self._key

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def status(self) -> Optional[str]:
        return self._status

    @property
    def project_id(self) -> Optional[int]:
        return self._project_id

    @property
    def context(self) -> str:
        """Name of the context attribute whose value is used to bucket entities for this flag."""
        return self._context

    @property
    def experiment_id(self) -> Optional[Union[int, str]]:
        return self._experiment_id

    @property
    def is_experiment_active(self) -> Optional[bool]:
        return self._is_experiment_active

    @property
    def hash_salt(self) -> Optional[str]:
        return self._hash_salt

    @property
    def ruleset(self) -> RuleSet:
        return self._ruleset
