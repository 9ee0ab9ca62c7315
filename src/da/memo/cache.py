import functools
import inspect
import logging
import types
import weakref

from .log import log_hit, optional_args_decorator, traced_call
from .tree import ABSENT, UNSET, KeyPathNode, Sentinel, as_key, get_in, set_in

log = logging.getLogger(__name__)

# the instance attribute holding the InstanceCache
CACHE_ATTRIBUTE = '_memo_cache'

# separates positional from keyword arguments in a key path
KWARGS = Sentinel('KWARGS')

# caches of instances which do not take attributes, by id of the instance
_side_table = {}


class MemoError(Exception):
    pass


class ConfigurationError(MemoError):
    pass


class InstanceCache(object):
    """
    all memoized results of one instance

    root is the key path tree for methods taking arguments,
    slots has one value per method name for methods which don't
    """
    __slots__ = ['root', 'slots']

    def __init__(self):
        self.root = KeyPathNode()
        self.slots = {}

    def __repr__(self):
        return '<InstanceCache paths=%d slots=%d>' % (len(list(self.root.iterleaves())), len(self.slots))


def cache_of(instance):
    """
    :returns: the InstanceCache of instance or None, if no memoized method was called yet
    """
    try:
        cache = object.__getattribute__(instance, CACHE_ATTRIBUTE)
    except AttributeError:
        cache = None
    if isinstance(cache, InstanceCache):
        return cache

    entry = _side_table.get(id(instance))
    if entry is not None and entry[0]() is instance:
        return entry[1]
    return None


def _side_attach(instance, cache):
    """
    keeps cache in the side table as long as instance lives
    """
    key = id(instance)

    def forget(ref):
        entry = _side_table.get(key)
        if entry is not None and entry[0] is ref:
            del _side_table[key]

    try:
        ref = weakref.ref(instance, forget)
    except TypeError:
        raise MemoError('Can not attach a cache to %r: neither attributes nor weak references are supported.'
                        % type(instance).__name__)
    _side_table[key] = (ref, cache)


def _attach(instance):
    cache = InstanceCache()
    try:
        object.__setattr__(instance, CACHE_ATTRIBUTE, cache)
    except AttributeError:
        _side_attach(instance, cache)
    return cache


def key_path(name, args, kw):
    """
    the keys addressing one call in the tree: the name, the arguments
    and, if given, the keyword arguments sorted by name
    """
    keys = [name]
    keys.extend(as_key(a) for a in args)
    if kw:
        keys.append(KWARGS)
        for k in sorted(kw):
            keys.append(k)
            keys.append(as_key(kw[k]))
    return keys


def make_wrapper(name, original, takes_arguments=True):
    """
    creates the caching wrapper for original

    :param name: the property name, first key of every key path
    :param original: called with the instance as first argument on a cache miss
    :param takes_arguments: if False, one result per instance is cached and arguments are ignored
    """
    @functools.wraps(original)
    def memoizer(self, *args, **kw):
        cache = cache_of(self)
        if cache is None:
            cache = _attach(self)

        if takes_arguments:
            keys = key_path(name, args, kw)
            cached = get_in(cache.root, keys)
        else:
            cached = cache.slots.get(name, UNSET)

        if cached is not UNSET:
            log_hit(name, args, kw)
            return None if cached is ABSENT else cached

        value = traced_call(name, original, (self,) + args, kw)
        v = ABSENT if value is None else value

        if takes_arguments:
            set_in(cache.root, keys, v)
        else:
            cache.slots[name] = v

        return value

    memoizer.__memoized__ = True
    return memoizer


def _unbind(obj, original):
    """
    :returns: a function taking obj as its first argument
    """
    if inspect.ismethod(original) and original.__self__ is obj:
        return original.__func__

    # a plain callable stored on the instance
    def call(self, *args, **kw):
        return original(*args, **kw)
    functools.update_wrapper(call, original)
    return call


def _resolve(obj, name):
    original = getattr(obj, name, UNSET)
    if original is UNSET:
        raise ConfigurationError('Object does not have a property named "%s".' % name)
    if not callable(original):
        raise ConfigurationError('Property "%s" is not callable.' % name)

    if not isinstance(obj, type):
        return _unbind(obj, original)

    if isinstance(inspect.getattr_static(obj, name), (staticmethod, classmethod)):
        raise ConfigurationError('Property "%s" is not an instance method.' % name)
    return original


def memoize(obj, properties, takes_arguments=True):
    """
    replaces the methods named in properties by caching wrappers

    obj may be a class, then every instance gets its own cache, or a single instance.
    Nothing is installed if one of the properties is missing.

    :param obj: the class or instance, it is changed in place
    :param properties: a list of method names or a single name
    :param takes_arguments: set to False for methods whose result doesn't depend on the arguments
    :raises: ConfigurationError if a property is missing or not callable
    """
    if isinstance(properties, str):
        properties = [properties]
    if not properties:
        raise ConfigurationError('No properties to memoize given.')

    resolved = [(name, _resolve(obj, name)) for name in properties]

    for name, original in resolved:
        wrapper = make_wrapper(name, original, takes_arguments)
        if not isinstance(obj, type):
            wrapper = types.MethodType(wrapper, obj)
        setattr(obj, name, wrapper)
        log.debug('memoized %r.%s (takes_arguments=%s)', obj, name, takes_arguments)


@optional_args_decorator
def memoized(func, takes_arguments=True):
    """
    the decorator version of memoize for methods in a class body::

        class Shape(object):
            @memoized
            def area(self, scale): ...

            @memoized(takes_arguments=False)
            def perimeter(self): ...

    results are keyed by the qualified name, so an override and the
    method it calls through super() don't share a cache entry
    """
    return make_wrapper(func.__qualname__, func, takes_arguments)
