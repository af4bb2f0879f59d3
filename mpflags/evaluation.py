"""
This submodule contains the public result type of flag evaluations.
"""

from typing import Any, Optional, Union


class SelectedVariant:
    """
    The variant of a feature flag that was chosen for an evaluation context, or a fallback supplied
    by the caller.

    Instances are created for every evaluation and are never cached or shared between calls.
    """

    __slots__ = ['__variant_key', '__variant_value', '__experiment_id', '__is_experiment_active', '__is_qa_tester']

    def __init__(
        self,
        variant_value: Any = None,
        variant_key: Optional[str] = None,
        experiment_id: Optional[Union[int, str]] = None,
        is_experiment_active: Optional[bool] = None,
        is_qa_tester: Optional[bool] = None,
    ):
        """
        :param variant_value: the value of the variant
        :param variant_key: the key of the variant; usually ``None`` for fallbacks
        :param experiment_id: the experiment associated with the flag, if any
        :param is_experiment_active: whether the associated experiment is running
        :param is_qa_tester: ``True`` only when the variant was chosen by a test user override
        """
        self.__variant_key = variant_key
        self.__variant_value = variant_value
        self.__experiment_id = experiment_id
        self.__is_experiment_active = is_experiment_active
        self.__is_qa_tester = is_qa_tester

    @property
    def variant_key(self) -> Optional[str]:
        return self.__variant_key

    @property
    def variant_value(self) -> Any:
        return self.__variant_value

    @property
    def experiment_id(self) -> Optional[Union[int, str]]:
        return self.__experiment_id

    @property
    def is_experiment_active(self) -> Optional[bool]:
        return self.__is_experiment_active

    @property
    def is_qa_tester(self) -> Optional[bool]:
        return self.__is_qa_tester

    @staticmethod
    def from_dict(data: dict) -> 'SelectedVariant':
        """Creates an instance from the JSON representation used by the remote evaluation API.

        :param data: the decoded JSON object
        """
        if not isinstance(data, dict):
            raise ValueError('selected variant should be an object but was %s' % data.__class__)
        return SelectedVariant(
            variant_value=data.get('variant_value'),
            variant_key=data.get('variant_key'),
            experiment_id=data.get('experiment_id'),
            is_experiment_active=data.get('is_experiment_active'),
            is_qa_tester=data.get('is_qa_tester'),
        )

    def to_json_dict(self) -> dict:
        """Returns a dictionary representation of this object, leaving out optional properties
        that are not set.
        """
        ret = {'variant_key': self.__variant_key, 'variant_value': self.__variant_value}  # type: dict
        if self.__experiment_id is not None:
            ret['experiment_id'] = self.__experiment_id
        if self.__is_experiment_active is not None:
            ret['is_experiment_active'] = self.__is_experiment_active
        if self.__is_qa_tester is not None:
            ret['is_qa_tester'] = self.__is_qa_tester
        return ret

    def __eq__(self, other) -> bool:
        return isinstance(other, SelectedVariant) and self.to_json_dict() == other.to_json_dict()

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __repr__(self) -> str:
        return "SelectedVariant(%s)" % ", ".join("%s=%r" % (k, v) for k, v in self.to_json_dict().items())


__all__ = ['SelectedVariant']
