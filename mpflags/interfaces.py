"""
This submodule contains interfaces for the pluggable components of the flags providers.

The default implementations talk to the flags API over HTTP; they can be replaced for testing
purposes.
"""

from abc import ABCMeta, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

from mpflags.impl.model import FlagDefinition

TrackerCallback = Callable[[Optional[Exception]], None]

Tracker = Callable[[str, Dict[str, Any], TrackerCallback], None]
"""
The function that exposure events are delivered through, normally bound to an analytics event
client. It is called as ``tracker(event_name, properties, callback)`` and should call
``callback(None)`` on success or ``callback(error)`` on failure. It may be called from several
threads at once.
"""


class DefinitionsRequester(metaclass=ABCMeta):
    """
    Interface for the component that downloads all flag definitions for a project.
    """

    @abstractmethod
    def get_all_definitions(self) -> Mapping[str, FlagDefinition]:
        """
        Fetches the full set of definitions, keyed by flag key.

        Raises an exception if the request fails or the response cannot be decoded; a partial
        result is never returned.
        """

    def close(self):
        pass


class RemoteFlagsRequester(metaclass=ABCMeta):
    """
    Interface for the component that asks the flags API to evaluate flags for a context.
    """

    @abstractmethod
    def get_flags(self, context: Dict[str, Any], flag_key: Optional[str] = None) -> Dict[str, Any]:
        """
        Returns the ``flags`` object of the API response: a dict from flag key to the JSON form
        of the selected variant. Raises an exception if the request fails.

        :param context: the evaluation context, sent to the server as JSON
        :param flag_key: if given, only this flag is evaluated
        """

    def close(self):
        pass
