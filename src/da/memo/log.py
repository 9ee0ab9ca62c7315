import os
import logging
import inspect
import time
from functools import wraps
from itertools import count
from traceback import format_exc

import blessings

callid = count()
pid = os.getpid()
trace_log = logging.getLogger('da.memo.trace')


MAXLEN = 120

t = blessings.Terminal()


class MangleStr(object):
    __slots__ = ['f']

    def __init__(self, f):
        self.f = f

    def __repr__(self):
        s = repr(self.f).split('\n')[0]
        if len(s) > MAXLEN:
            s = s[:MAXLEN] + "..."
        return s


def optional_args_decorator(func):
    """
    Allow to use decorator either with arguments or not.

    @see http://wiki.python.org/moin/PythonDecoratorLibrary#Creating_decorator_with_optional_arguments
    """

    def is_function_arg(*args, **kw):
        return len(args) == 1 and len(kw) == 0 and inspect.isfunction(args[0])

    @wraps(func)
    def func_wrapper(*args, **kw):
        if is_function_arg(*args, **kw):
            return func(*args, **kw)

        def functor(user_func):
            return func(user_func, *args, **kw)

        return functor

    return func_wrapper


def log_hit(name, args, kw):
    if trace_log.isEnabledFor(logging.DEBUG):
        trace_log.debug("{t.green}[%s] Cache hit %s(%s,%s){t.normal}".format(t=t),
                        pid, name, [MangleStr(a) for a in args], kw)


def traced_call(name, func, args, kw):
    """
    calls func and traces the call, its duration and its failure

    :param name: the name the call is reported with
    """
    c = next(callid)
    logged_debug = trace_log.isEnabledFor(logging.DEBUG)
    logged_log_func = trace_log.debug if logged_debug else trace_log.info

    if logged_debug:
        logged_log_func("{t.yellow}[%s-%s] Computing %s(%s,%s){t.normal}".format(t=t),
                        pid, c, name, args, kw)
    else:
        logged_log_func("{t.yellow}[%s-%s] Computing %s(%s){t.normal}".format(t=t),
                        pid, c, name, [MangleStr(a) for a in args])
    start = time.time()
    try:
        res = func(*args, **kw)
    except Exception:
        stop = time.time()
        logged_log_func("{t.yellow}[%s-%s] Call to %s FAILED. Took %2.4fs. Nothing cached.{t.normal}".format(t=t),
                        pid, c, name, stop - start)
        trace_log.error("{t.red}[%s-%s] %s failure: %s{t.normal}".format(t=t),
                        pid, c, name, format_exc())
        raise
    stop = time.time()
    if logged_debug:
        logged_log_func("{t.yellow}[%s-%s] Call to %s done. Took %2.4fs. Caching: %s{t.normal}".format(t=t),
                        pid, c, name, stop - start, MangleStr(res))
    else:
        logged_log_func("{t.yellow}[%s-%s] Call to %s done. Took %2.4fs.{t.normal}".format(t=t),
                        pid, c, name, stop - start)
    return res
