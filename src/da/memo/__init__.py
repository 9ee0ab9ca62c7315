"""
per instance memoization of methods
"""

from .cache import (
    CACHE_ATTRIBUTE,
    ConfigurationError,
    InstanceCache,
    MemoError,
    cache_of,
    memoize,
    memoized,
)
from .tree import ABSENT, UNSET, KeyPathNode, get_in, set_in

__all__ = [
    'ABSENT',
    'CACHE_ATTRIBUTE',
    'ConfigurationError',
    'InstanceCache',
    'KeyPathNode',
    'MemoError',
    'UNSET',
    'cache_of',
    'get_in',
    'memoize',
    'memoized',
    'set_in',
]
