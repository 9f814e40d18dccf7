"""
This module bundles commonly used utility methods that are used in multiple places within QuickSlice's source code.
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import contextlib
import copy
import logging
import os
import pickle
import shutil
import sys
import tempfile
from collections.abc import Set
from typing import Union

from quickslice import UMASK

logger = logging.getLogger(__name__)


def to_unicode(
    s_or_u: Union[str, bytes], encoding: str = "utf-8", errors: str = "strict"
) -> str:
    """
    Make sure ``s_or_u`` is a unicode string (str).

    Arguments:
        s_or_u (str or bytes): The value to convert
        encoding (str): encoding to use if necessary, see :meth:`python:bytes.decode`
        errors (str): error handling to use if necessary, see :meth:`python:bytes.decode`
    Returns:
        str: converted string.
    """
    if s_or_u is None:
        return s_or_u

    if not isinstance(s_or_u, (str, bytes)):
        s_or_u = str(s_or_u)

    if isinstance(s_or_u, bytes):
        return s_or_u.decode(encoding, errors=errors)
    return s_or_u


def to_bytes(
    s_or_u: Union[str, bytes], encoding: str = "utf-8", errors: str = "strict"
) -> bytes:
    """Make sure ``s_or_u`` is a byte string, the counterpart of :func:`to_unicode`."""
    if s_or_u is None:
        return s_or_u

    if not isinstance(s_or_u, (str, bytes)):
        s_or_u = str(s_or_u)

    if isinstance(s_or_u, str):
        return s_or_u.encode(encoding, errors=errors)
    return s_or_u


def fast_deepcopy(obj):
    try:
        return pickle.loads(pickle.dumps(obj, pickle.HIGHEST_PROTOCOL))
    except (AttributeError, pickle.PicklingError):
        return copy.deepcopy(obj)


def dict_merge(a, b, in_place=False):
    """
    Recursively deep-merges two dictionaries.

    Example::

        >>> a = dict(foo="foo", bar="bar", fnord=dict(a=1))
        >>> b = dict(foo="other foo", fnord=dict(b=2))
        >>> dict_merge(a, b) == dict(foo="other foo", bar="bar", fnord=dict(a=1, b=2))
        True
        >>> dict_merge(None, None) == dict()
        True

    Arguments:
        a (dict): The dictionary to merge ``b`` into
        b (dict): The dictionary to merge into ``a``
        in_place (boolean): If set to True, ``a`` will be modified

    Returns:
        dict: ``b`` deep-merged into ``a``
    """

    if a is None:
        a = {}
    if b is None:
        b = {}

    if not isinstance(b, dict):
        return b

    result = a if in_place else fast_deepcopy(a)

    for k, v in b.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = dict_merge(result[k], v, in_place=in_place)
        else:
            result[k] = fast_deepcopy(v)
    return result


def silent_remove(file):
    """
    Silently removes a file. Does not raise an error if the file doesn't exist.

    Arguments:
        file (string): The path of the file to be removed
    """

    try:
        os.remove(file)
    except OSError:
        pass


@contextlib.contextmanager
def atomic_write(
    filename,
    mode="w+b",
    encoding="utf-8",
    prefix="tmp",
    suffix="",
    permissions=None,
    max_permissions=0o777,
):
    """
    Writes to a temporary file next to ``filename`` and moves it into place once the
    ``with`` block completes, so readers never see a half written file.
    """
    if permissions is None:
        permissions = 0o664 & ~UMASK
    if os.path.exists(filename):
        permissions |= os.stat(filename).st_mode
    permissions &= max_permissions

    kwargs = {
        "mode": mode,
        "prefix": prefix,
        "suffix": suffix,
        "dir": os.path.dirname(os.path.abspath(filename)),
        "delete": False,
    }
    if "b" not in mode:
        kwargs["encoding"] = encoding

    fd = tempfile.NamedTemporaryFile(**kwargs)
    try:
        try:
            yield fd
        finally:
            fd.close()
        os.chmod(fd.name, permissions)
        shutil.move(fd.name, filename)
    finally:
        silent_remove(fd.name)


def is_hidden_path(path):
    if path is None:
        return False

    filename = os.path.basename(to_unicode(path))
    if filename.startswith("."):
        return True

    if sys.platform == "win32":
        try:
            import ctypes

            attrs = ctypes.windll.kernel32.GetFileAttributesW(path)
            assert attrs != -1  # INVALID_FILE_ATTRIBUTES
            return bool(attrs & 2)  # FILE_ATTRIBUTE_HIDDEN
        except (AttributeError, AssertionError):
            pass

    return False


def get_exception_string(exc):
    """Formats ``exc`` for user facing error messages, preferring its ``message`` attribute."""
    message = getattr(exc, "message", None)
    if not message:
        message = str(exc)
    if not message:
        message = exc.__class__.__name__
    return message


class CaseInsensitiveSet(Set):
    """
    Basic case insensitive set

    Any str values will be stored and compared in lower case. Other value types are left as-is.
    """

    def __init__(self, *args):
        self.data = {x.lower() if isinstance(x, str) else x for x in args}

    def __contains__(self, item):
        if isinstance(item, str):
            return item.lower() in self.data
        return item in self.data

    def __iter__(self):
        return iter(self.data)

    def __len__(self):
        return len(self.data)
