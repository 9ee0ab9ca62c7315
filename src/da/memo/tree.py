# -*- coding: utf-8 -*-
"""
a tree of dicts addressed by key paths

every node is a dict from a key to the next node, the value stored for the
path ending at a node lives under the private LEAF key of that node
"""


class Sentinel(object):
    __slots__ = ['name']

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return '<%s>' % self.name


# the key of the leaf slot, no argument value can be identical to it
LEAF = Sentinel('LEAF')

# a stored None
ABSENT = Sentinel('ABSENT')

# nothing stored at all
UNSET = Sentinel('UNSET')


class IdentityKey(object):
    """
    wraps an unhashable value, so it can be used as a key by identity
    """
    __slots__ = ['value']

    def __init__(self, value):
        self.value = value

    def __hash__(self):
        return id(self.value)

    def __eq__(self, other):
        return isinstance(other, IdentityKey) and other.value is self.value

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return 'IdentityKey(%r)' % (self.value,)


def as_key(value):
    """
    :returns: value itself if it is hashable, else an IdentityKey of it
    """
    try:
        hash(value)
    except TypeError:
        return IdentityKey(value)
    return value


class KeyPathNode(dict):
    """
    a node of the key path tree
    """

    @property
    def value(self):
        """the leaf value of this node or UNSET"""
        return self.get(LEAF, UNSET)

    def children(self):
        return ((k, v) for k, v in self.items() if k is not LEAF)

    def iterleaves(self, prefix=()):
        """
        iterates over all completed paths below this node

        :yields: (key_path, value) - value may be ABSENT
        """
        if LEAF in self:
            yield prefix, self[LEAF]
        for k, child in self.children():
            key = k.value if isinstance(k, IdentityKey) else k
            for leaf in child.iterleaves(prefix + (key,)):
                yield leaf


def get_in(root, keys):
    """
    get the value at a key path

    :param root: the root node
    :param keys: a non empty sequence of keys
    :returns: UNSET if nothing was stored, ABSENT if None was stored
    """
    node = root
    for key in keys:
        node = node.get(key, UNSET)
        if node is UNSET:
            return UNSET

    return node.get(LEAF, UNSET)


def set_in(root, keys, value):
    """
    set the value at a key path, missing nodes are created on the way
    """
    node = root
    for key in keys:
        child = node.get(key, UNSET)
        if child is UNSET:
            child = node[key] = KeyPathNode()
        node = child

    node[LEAF] = value
    return root
