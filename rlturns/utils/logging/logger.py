
"""Module-level logger: prefixed, timestamped lines to stdout and to any
registered text output files.  Use as ``from rlturns.utils.logging import
logger; logger.log("message")``."""

import datetime
import os
import os.path as osp
import sys
from contextlib import contextmanager

LOG_LEVELS = ("debug", "info")

_prefixes = []
_prefix_str = ''

_text_outputs = []
_text_fds = {}

_log_level = "info"
_disabled = False


def mkdir_p(path):
    if path:
        os.makedirs(path, exist_ok=True)


def _add_output(file_name, arr, fds, mode='a'):
    if file_name not in arr:
        mkdir_p(osp.dirname(file_name))
        arr.append(file_name)
        fds[file_name] = open(file_name, mode)


def _remove_output(file_name, arr, fds):
    if file_name in arr:
        fds[file_name].close()
        del fds[file_name]
        arr.remove(file_name)


def push_prefix(prefix):
    global _prefix_str
    _prefixes.append(prefix)
    _prefix_str = ''.join(_prefixes)


def pop_prefix():
    global _prefix_str
    del _prefixes[-1]
    _prefix_str = ''.join(_prefixes)


@contextmanager
def prefix(key):
    push_prefix(key)
    try:
        yield
    finally:
        pop_prefix()


def add_text_output(file_name):
    _add_output(file_name, _text_outputs, _text_fds, mode='a')


def remove_text_output(file_name):
    _remove_output(file_name, _text_outputs, _text_fds)


def set_log_level(level):
    global _log_level
    if level not in LOG_LEVELS:
        raise ValueError(f"Unrecognized log level: {level!r}, "
            f"expected one of {LOG_LEVELS}.")
    _log_level = level


def set_disable(disabled):
    """Silence all output (e.g. inside tight test loops)."""
    global _disabled
    _disabled = disabled


def log(s, with_prefix=True, with_timestamp=True):
    if _disabled:
        return
    out = s
    if with_prefix:
        out = _prefix_str + out
    if with_timestamp:
        now = datetime.datetime.now()
        timestamp = now.strftime('%Y-%m-%d %H:%M:%S.%f')
        out = "%s | %s" % (timestamp, out)
    print(out)
    for fd in list(_text_fds.values()):
        fd.write(out + '\n')
        fd.flush()
    sys.stdout.flush()


def debug(s, **kwargs):
    """Like ``log()``, but only emitted at the "debug" log level."""
    if _log_level == "debug":
        log(s, **kwargs)
