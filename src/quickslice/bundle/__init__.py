"""
Config bundles: a single INI file carrying application settings, the preset selection and any number of presets.

A bundle looks like this::

    [settings]
    autocenter = 1

    [presets]
    print = Fast
    filament = PLA

    [print:Fast]
    layer_height = 0.3
    print_settings_id = abc

    [filament:PLA]
    temperature = 205

Keys before the first section header would be read as a flat config by other tools, so the anonymous section of a
bundle is always empty.

.. autoclass:: Section
   :members:

.. autoclass:: Bundle
   :members:

.. autofunction:: encode

.. autofunction:: decode
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import collections
import re

from quickslice.presets import Category
from quickslice.util import ini, to_bytes
from quickslice.util.ini import FormatError

SETTINGS_SECTION = "settings"
PRESETS_SECTION = "presets"

_PRESET_SECTION_REGEX = re.compile(r"^(?P<category>[^:]+):(?P<name>.+)$")


class SectionKind:
    SETTINGS = "settings"
    PRESETS = "presets"
    PRESET = "preset"


def classify(name):
    """
    Returns ``(kind, category, preset_name)`` for a bundle section name or ``None`` if the name isn't valid within
    a bundle.
    """
    if name == SETTINGS_SECTION:
        return SectionKind.SETTINGS, None, None
    elif name == PRESETS_SECTION:
        return SectionKind.PRESETS, None, None

    match = _PRESET_SECTION_REGEX.match(name or "")
    if not match:
        return None

    category = match.group("category")
    preset_name = match.group("name").strip()
    if category not in Category.values() or not preset_name:
        return None
    return SectionKind.PRESET, category, preset_name


def preset_section_name(category, name):
    return f"{category}:{name}"


class Section:
    """One named section of a :class:`Bundle`."""

    def __init__(self, name, values=None):
        if isinstance(name, str):
            # section headers are read back stripped
            name = name.strip()

        classified = classify(name)
        if classified is None:
            raise ValueError(f"Not a valid bundle section: {name!r}")

        self.name = name
        self.kind, self.category, self.preset_name = classified
        self.values = collections.OrderedDict(values or {})

    def __eq__(self, other):
        if not isinstance(other, Section):
            return NotImplemented
        return self.name == other.name and dict(self.values) == dict(other.values)

    __hash__ = None

    def __repr__(self):
        return f"Section({self.name!r}, {len(self.values)} keys)"


class Bundle:
    """An ordered collection of uniquely named :class:`Section` objects."""

    def __init__(self, sections=None):
        self._sections = collections.OrderedDict()
        for section in sections or []:
            self.add(section)

    def add(self, section):
        if section.name in self._sections:
            raise ValueError(f"Bundle already contains a section {section.name!r}")
        self._sections[section.name] = section
        return section

    def get(self, name):
        return self._sections.get(name)

    @property
    def sections(self):
        return list(self._sections.values())

    @property
    def settings(self):
        """The ``[settings]`` values or ``None`` if the bundle has no such section."""
        section = self.get(SETTINGS_SECTION)
        return dict(section.values) if section is not None else None

    @property
    def presets(self):
        """The ``[presets]`` selection mapping or ``None`` if the bundle has no such section."""
        section = self.get(PRESETS_SECTION)
        return dict(section.values) if section is not None else None

    def preset_sections(self):
        return [
            section for section in self._sections.values() if section.kind == SectionKind.PRESET
        ]

    def __iter__(self):
        return iter(self.sections)

    def __len__(self):
        return len(self._sections)

    def __eq__(self, other):
        if not isinstance(other, Bundle):
            return NotImplemented
        return self.sections == other.sections

    __hash__ = None

    def __repr__(self):
        return "Bundle([{}])".format(", ".join(self._sections))


def _to_sections(bundle):
    return [(None, {})] + [(section.name, section.values) for section in bundle]


def encode(bundle, header=None):
    """
    Serializes ``bundle`` to bytes.

    Raises:
        ValueError: a key or value can't be represented in the format
    """
    return to_bytes(ini.dump(_to_sections(bundle), header=header))


def decode(data, path=None):
    """
    Parses bundle ``data`` (bytes or str). Values are taken as they are, they are not validated.

    Raises:
        FormatError: the data isn't a well formed bundle
    """
    parsed = ini.parse(data, path=path)

    anonymous = parsed[0][1]
    if anonymous:
        raise FormatError(
            "Config bundles must not contain settings outside of a section, is this a plain config file?",
            path=path,
        )

    bundle = Bundle()
    for name, values in parsed[1:]:
        if classify(name) is None:
            raise FormatError(
                f"Unexpected section [{name}], expected [settings], [presets] or [<category>:<name>]",
                path=path,
            )
        bundle.add(Section(name, values))
    return bundle


def read_bundle(path):
    """Reads and decodes the bundle at ``path``."""
    with open(path, "rb") as f:
        return decode(f.read(), path=path)


def write_bundle(path, bundle, header=None):
    """Atomically encodes ``bundle`` to ``path``."""
    ini.write_file(path, _to_sections(bundle), header=header)
