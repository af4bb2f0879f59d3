"""
The mpflags module contains the entry points for evaluating feature flags, either locally against
cached definitions or remotely through the flags API.
"""

from mpflags.version import VERSION

from .config import *
from .evaluation import *
from .local_flags import LocalFlagsProvider
from .remote_flags import RemoteFlagsProvider

__version__ = VERSION

__all__ = [
    'FlagsConfig',
    'HTTPConfig',
    'LocalFlagsConfig',
    'LocalFlagsProvider',
    'RemoteFlagsConfig',
    'RemoteFlagsProvider',
    'SelectedVariant',
    'VERSION',
]
