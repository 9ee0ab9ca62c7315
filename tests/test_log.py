# -*- coding: utf-8 -*-
import logging

import pytest

from da.memo import memoize
from da.memo.log import MAXLEN, MangleStr, optional_args_decorator, traced_call


class Repo(object):
    def lookup(self, key):
        return key.upper()

    def broken(self):
        raise KeyError('gone')


def test_mangle_str_truncates():
    s = repr(MangleStr('x' * (MAXLEN * 2)))
    assert len(s) == MAXLEN + 3
    assert s.endswith('...')


def test_mangle_str_first_line_only():
    assert repr(MangleStr(ValueError)) == repr(ValueError)
    assert '\n' not in repr(MangleStr(type('Multi', (object,), {'__repr__': lambda self: 'a\nb'})()))


def test_optional_args_decorator():
    @optional_args_decorator
    def tag(func, label='plain'):
        func.label = label
        return func

    @tag
    def a():
        pass

    @tag(label='custom')
    def b():
        pass

    assert a.label == 'plain'
    assert b.label == 'custom'


def test_miss_and_hit_are_traced(caplog):
    caplog.set_level(logging.DEBUG, logger='da.memo.trace')
    r = Repo()
    memoize(r, ['lookup'])

    r.lookup('a')
    computing = [rec for rec in caplog.records if 'Computing lookup' in rec.getMessage()]
    assert len(computing) == 1
    assert any('Caching' in rec.getMessage() for rec in caplog.records)

    caplog.clear()
    r.lookup('a')
    messages = [rec.getMessage() for rec in caplog.records]
    assert any('Cache hit lookup' in m for m in messages)
    assert not any('Computing' in m for m in messages)


def test_info_level_omits_values(caplog):
    caplog.set_level(logging.INFO, logger='da.memo.trace')
    assert traced_call('lookup', Repo.lookup, (Repo(), 'secret'), {}) == 'SECRET'
    messages = [rec.getMessage() for rec in caplog.records]
    assert len(messages) == 2
    assert all(rec.levelno == logging.INFO for rec in caplog.records)
    assert 'SECRET' not in messages[1]


def test_failure_is_logged_and_reraised(caplog):
    caplog.set_level(logging.INFO, logger='da.memo.trace')
    r = Repo()
    memoize(r, ['broken'])

    with pytest.raises(KeyError):
        r.broken()

    errors = [rec for rec in caplog.records if rec.levelno == logging.ERROR]
    assert len(errors) == 1
    assert 'KeyError' in errors[0].getMessage()
    assert any('FAILED' in rec.getMessage() for rec in caplog.records)
