"""
Reading and writing of the flat ``key = value`` INI dialect used for preset files and config bundles.

A document is a list of ``(section, values)`` tuples. The first entry always belongs to the anonymous section
(``section`` is ``None``) which collects all keys that appear before the first section header. Values are opaque
strings, no interpolation or type conversion takes place.

.. autoclass:: FormatError

.. autofunction:: parse

.. autofunction:: dump
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import collections
import re

from quickslice.util import atomic_write, to_unicode

_SECTION_REGEX = re.compile(r"^\s*\[(?P<name>[^\]]*)\]\s*$")
_KEY_VALUE_REGEX = re.compile(r"^\s*(?P<key>[^=\s\[#;][^=]*?)\s*= ?(?P<value>.*)$")

COMMENT_PREFIXES = ("#", ";")


class FormatError(Exception):
    """
    Raised if INI text can't be parsed or doesn't have the expected structure.

    .. attribute:: line

       Line number (1 based) the error was detected on, if known.
    """

    def __init__(self, message, line=None, path=None):
        Exception.__init__(self, message)
        self.line = line
        self.path = path

        self.message = message
        if path is not None:
            self.message = f"{path}: {self.message}"
        if line is not None:
            self.message += f" (line {line})"

    def __str__(self):
        return self.message


def parse(text, path=None):
    """
    Parses ``text`` into a list of ``(section, values)`` tuples, ``values`` being an ordered mapping.

    Blank lines and lines starting with ``#`` or ``;`` are skipped. Duplicate keys within a section are resolved
    in favour of the last occurrence, duplicate section headers are an error.

    Arguments:
        text (str or bytes): the text to parse
        path (str): optional path of the source file, only used for error messages

    Raises:
        FormatError: a line is neither a section header nor a ``key = value`` pair, a section header is empty or
            a section header occurs twice
    """
    try:
        text = to_unicode(text, encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise FormatError(f"File is not valid UTF-8: {e}", path=path)

    anonymous = collections.OrderedDict()
    sections = [(None, anonymous)]
    seen = set()
    current = anonymous

    # only \n ends a line, other line boundary characters are part of a value
    for lineno, line in enumerate(text.split("\n"), start=1):
        if line.endswith("\r"):
            line = line[:-1]
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIXES):
            continue

        match = _SECTION_REGEX.match(line)
        if match:
            name = match.group("name").strip()
            if not name:
                raise FormatError("Empty section header", line=lineno, path=path)
            if name in seen:
                raise FormatError(
                    f"Duplicate section header [{name}]", line=lineno, path=path
                )
            seen.add(name)
            current = collections.OrderedDict()
            sections.append((name, current))
            continue

        match = _KEY_VALUE_REGEX.match(line)
        if not match:
            raise FormatError(
                f"Expected a section header or a key = value pair, got {stripped!r}",
                line=lineno,
                path=path,
            )
        current[match.group("key")] = match.group("value")

    return sections


def dump(sections, header=None):
    """
    Serializes ``sections`` (a list of ``(section, values)`` tuples as returned by :func:`parse`) to text.

    An entry with section ``None`` is written without header and must come first.

    Raises:
        ValueError: a key or value can't be represented in the format
    """
    lines = []
    if header:
        lines += [f"# {line}" for line in header.splitlines()]

    for index, (name, values) in enumerate(sections):
        if name is None:
            if index != 0:
                raise ValueError("The anonymous section must come first")
        else:
            if not name.strip() or name != name.strip() or "]" in name or "\n" in name:
                raise ValueError(f"Invalid section name: {name!r}")
            if lines:
                lines.append("")
            lines.append(f"[{name}]")

        for key, value in values.items():
            _check_entry(key, value)
            lines.append(f"{key} = {value}")

    return "\n".join(lines) + "\n"


def _check_entry(key, value):
    if (
        not isinstance(key, str)
        or not key
        or key != key.strip()
        or "=" in key
        or "\n" in key
        or key.startswith(("[",) + COMMENT_PREFIXES)
    ):
        raise ValueError(f"Invalid key: {key!r}")
    if not isinstance(value, str) or "\n" in value or "\r" in value:
        raise ValueError(f"Invalid value for {key}: {value!r}")


def read_file(path):
    """Reads and parses the INI file at ``path``."""
    with open(path, "rb") as f:
        return parse(f.read(), path=path)


def write_file(path, sections, header=None):
    """Atomically writes ``sections`` to ``path``."""
    data = dump(sections, header=header)
    with atomic_write(path, mode="wt", prefix="quickslice-", suffix=".ini") as f:
        f.write(data)
