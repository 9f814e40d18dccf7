"""
In this module the preset model and the preset store of QuickSlice live.

A preset is a named :class:`Config` of one of the three :class:`Category` values. Stored presets are kept as flat
``key = value`` files at ``<presets folder>/<category>/<name>.ini``. External presets are config files registered
from elsewhere on disk through :meth:`PresetManager.add_external`; they are only remembered for the lifetime of the
:class:`PresetManager` and never copied into the presets folder.

.. autoclass:: Category
   :members:

.. autoclass:: Config
   :members:

.. autoclass:: Preset
   :members:

.. autoclass:: PresetManager
   :members:
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os
import threading

from quickslice.presets.exceptions import (
    CouldNotDeletePreset,
    PresetAlreadyExists,
    SaveError,
    UnknownCategory,
    UnknownPreset,
)
from quickslice.settings import settings
from quickslice.util import ini, is_hidden_path
from quickslice.util.ini import FormatError

PRESET_EXTENSION = ".ini"


class Category:
    """Valid preset categories"""

    PRINT = "print"
    """Print settings (layer heights, speeds, infill, ...)"""

    FILAMENT = "filament"
    """Filament settings (temperatures, diameters, ...)"""

    PRINTER = "printer"
    """Printer settings (bed shape, nozzle, custom G-code, ...)"""

    @classmethod
    def values(cls):
        return [
            getattr(cls, name)
            for name in cls.__dict__
            if not (name.startswith("__") or name == "values")
        ]


class Config(dict):
    """
    Flat mapping of config keys to opaque string values, the settings of one preset.

    Comparison ignores key order, two configs are equal if they hold the same keys with the same values.
    """

    @classmethod
    def from_text(cls, text, path=None):
        """
        Parses a standalone config file's contents.

        Raises:
            FormatError: the text is not a flat ``key = value`` file, e.g. because it contains section headers
        """
        sections = ini.parse(text, path=path)
        named = [name for name, _ in sections[1:]]
        if named:
            raise FormatError(
                "Expected a flat config without section headers, found [{}]".format(
                    "], [".join(named)
                ),
                path=path,
            )
        return cls(sections[0][1])

    @classmethod
    def from_file(cls, path):
        with open(path, "rb") as f:
            return cls.from_text(f.read(), path=path)

    def settings_id(self, category=None):
        """
        The stable identity of this config used for deduplication on bundle import.

        ``<category>_settings_id`` wins over a bare ``settings_id``. Returns an empty string if neither is set.
        """
        keys = ["settings_id"]
        if category:
            keys.insert(0, f"{category}_settings_id")

        for key in keys:
            value = self.get(key)
            if value:
                return value.strip()
        return ""

    def merged(self, *others):
        """Returns a new config with the keys of ``others`` layered over this one, later ones win."""
        result = Config(self)
        for other in others:
            if other:
                result.update(other)
        return result

    def copy(self):
        return Config(self)

    def to_text(self, header=None):
        return ini.dump([(None, self)], header=header)

    def save(self, path, header=None):
        ini.write_file(path, [(None, self)], header=header)


class Preset:
    """
    A named, categorized :class:`Config`.

    Arguments:
        category (str): one of :meth:`Category.values`
        name (str): name of the preset, unique within its category
        config (dict): the preset's settings
        path (str): the file the preset was loaded from or stored to, if any
        external (bool): whether this preset was registered from a file outside the presets folder
    """

    def __init__(self, category, name, config, path=None, external=False):
        if category not in Category.values():
            raise UnknownCategory(category)

        self.category = category
        self.name = name
        self.config = config if isinstance(config, Config) else Config(config or {})
        self.path = path
        self.external = external

    @property
    def settings_id(self):
        return self.config.settings_id(self.category)

    def __eq__(self, other):
        if not isinstance(other, Preset):
            return NotImplemented
        return (
            self.category == other.category
            and self.name == other.name
            and self.config == other.config
        )

    __hash__ = None

    def __repr__(self):
        return "Preset(category={!r}, name={!r}, settings_id={!r}{})".format(
            self.category,
            self.name,
            self.settings_id,
            ", external" if self.external else "",
        )


class PresetManager:
    """
    Manager for presets. Offers methods to list, add, remove, load and save presets per category and to select the
    presets making up the active configuration.

    The selection is stored in the settings under ``presets.selected`` as a mapping of category to preset name.
    """

    def __init__(self):
        self._logger = logging.getLogger(__name__)
        self._folder = settings().getBaseFolder("presets")

        self._presets = None
        self._external = {category: {} for category in Category.values()}
        self._lock = threading.RLock()

        for category in Category.values():
            folder = self.get_folder(category)
            if not os.path.isdir(folder):
                os.makedirs(folder)

    @property
    def categories(self):
        return Category.values()

    def get_folder(self, category):
        self._check_category(category)
        return os.path.join(self._folder, category)

    # ~~ listing & lookup

    def get_all(self, category):
        """Returns all presets of ``category``, stored and external, sorted by name."""
        self._check_category(category)
        with self._lock:
            presets = dict(self._load_all()[category])
            presets.update(self._external[category])
        return [presets[name] for name in sorted(presets)]

    def get(self, category, name):
        """Returns the preset ``name`` of ``category`` or ``None``. External presets shadow stored ones."""
        self._check_category(category)
        with self._lock:
            if name in self._external[category]:
                return self._external[category][name]
            return self._load_all()[category].get(name)

    def exists(self, category, name):
        return name is not None and self.get(category, name) is not None

    def settings_ids(self, category):
        """The set of non-empty settings ids currently registered for ``category``."""
        return {
            preset.settings_id for preset in self.get_all(category) if preset.settings_id
        }

    def find_by_settings_id(self, category, settings_id):
        if not settings_id:
            return None
        for preset in self.get_all(category):
            if preset.settings_id == settings_id:
                return preset
        return None

    # ~~ mutation

    def save(self, category, preset, allow_overwrite=True, trigger_event=True):
        """
        Stores ``preset`` (a :class:`Preset`) as ``<category>/<name>.ini``, replacing the config of a same-named
        preset wholesale if ``allow_overwrite`` is set.

        Returns:
            Preset: the stored preset

        Raises:
            PresetAlreadyExists: a preset of that name exists and ``allow_overwrite`` is False
            SaveError: the preset file could not be written
        """
        self._check_category(category)
        name = self._sanitize(preset.name)
        path = self._get_preset_path(category, name)

        with self._lock:
            is_overwrite = os.path.exists(path)
            if is_overwrite and not allow_overwrite:
                raise PresetAlreadyExists(category, name)

            try:
                Config(preset.config).save(path)
            except Exception as e:
                self._logger.exception(f"Error while trying to save {category} preset {name}")
                raise SaveError(category, name, cause=str(e))

            stored = Preset(category, name, Config(preset.config), path=path)
            self._load_all()[category][name] = stored
            self._external[category].pop(name, None)

        self._logger.info(f"Saved {category} preset {name} to {path}")

        if trigger_event:
            from quickslice.events import Events, eventManager

            event = Events.PRESET_MODIFIED if is_overwrite else Events.PRESET_ADDED
            eventManager().fire(event, {"category": category, "name": name})

        return stored

    def delete(self, category, name, trigger_event=True):
        """
        Deletes the preset ``name`` of ``category``. A deleted preset that was selected is deselected.

        Raises:
            UnknownPreset: there is no such preset
            CouldNotDeletePreset: the preset file could not be removed
        """
        self._check_category(category)

        with self._lock:
            if name in self._external[category]:
                del self._external[category][name]
            else:
                preset = self._load_all()[category].get(name)
                if preset is None:
                    raise UnknownPreset(category, name)

                try:
                    os.remove(preset.path)
                except OSError as e:
                    raise CouldNotDeletePreset(category, name, cause=str(e))
                del self._load_all()[category][name]

            if self.get_selected_name(category) == name:
                settings().remove(["presets", "selected", category])
                settings().save()

        self._logger.info(f"Deleted {category} preset {name}")

        if trigger_event:
            from quickslice.events import Events, eventManager

            eventManager().fire(
                Events.PRESET_DELETED, {"category": category, "name": name}
            )

    def add_external(self, path, name=None):
        """
        Registers the standalone config file at ``path`` as external preset in every category.

        The preset's name defaults to the file name without extension.

        Returns:
            str: the name the preset was registered under

        Raises:
            FormatError: the file is not a flat config file
            OSError: the file could not be read
        """
        config = Config.from_file(path)
        if name is None:
            name = os.path.splitext(os.path.basename(path))[0]
        name = self._sanitize(name)

        with self._lock:
            for category in Category.values():
                self._external[category][name] = Preset(
                    category, name, config.copy(), path=path, external=True
                )

        self._logger.info(f"Registered external preset {name} from {path}")
        return name

    # ~~ selection

    def select(self, category, name, save=True):
        """
        Selects preset ``name`` for ``category``.

        Raises:
            UnknownPreset: there is no such preset
        """
        if not self.exists(category, name):
            raise UnknownPreset(category, name)

        settings().set(["presets", "selected", category], name)
        if save:
            settings().save()

        from quickslice.events import Events, eventManager

        eventManager().fire(
            Events.PRESET_SELECTED, {"category": category, "name": name}
        )

    def get_selected_name(self, category):
        self._check_category(category)
        name = settings().get(["presets", "selected", category])
        if name and name.endswith(PRESET_EXTENSION):
            # bundles written by other tools list file names
            name = name[: -len(PRESET_EXTENSION)]
        return name or None

    def get_selected(self, category):
        """Returns the selected preset of ``category`` or ``None`` if nothing (valid) is selected."""
        name = self.get_selected_name(category)
        if name is None:
            return None

        preset = self.get(category, name)
        if preset is None:
            self._logger.warning(
                f"Selected {category} preset {name} does not exist, ignoring it"
            )
        return preset

    def get_selected_mapping(self):
        selected = settings().get(["presets", "selected"])
        return dict(selected) if selected else {}

    def set_selected_mapping(self, mapping, save=True):
        """Replaces the whole category to preset name selection with ``mapping``."""
        settings().set(["presets", "selected"], dict(mapping))
        if save:
            settings().save()

    def get_active_config(self):
        """The merged config of the selected print, filament and printer presets."""
        config = Config()
        for category in Category.values():
            preset = self.get_selected(category)
            if preset is not None:
                config = config.merged(preset.config)
        return config

    # ~~ loading

    def reload(self, trigger_event=True):
        """Drops everything loaded from disk and rescans the presets folder."""
        with self._lock:
            self._presets = None
            presets = self._load_all()
            counts = {category: len(presets[category]) for category in presets}

        self._logger.info(
            "Reloaded presets: {}".format(
                ", ".join(f"{count} {category}" for category, count in counts.items())
            )
        )

        if trigger_event:
            from quickslice.events import Events, eventManager

            eventManager().fire(Events.PRESETS_RELOADED, {"presets": counts})

    def _load_all(self):
        with self._lock:
            if self._presets is None:
                self._presets = {
                    category: self._load_category(category)
                    for category in Category.values()
                }
            return self._presets

    def _load_category(self, category):
        folder = self.get_folder(category)
        results = {}
        if not os.path.isdir(folder):
            return results

        for entry in os.scandir(folder):
            if is_hidden_path(entry.name) or not entry.name.endswith(PRESET_EXTENSION):
                continue

            if not entry.is_file():
                continue

            name = entry.name[: -len(PRESET_EXTENSION)]
            try:
                config = Config.from_file(entry.path)
            except (FormatError, OSError) as e:
                self._logger.warning(f"{category} preset {name} is invalid, skipping: {e}")
                continue

            results[name] = Preset(category, name, config, path=entry.path)
        return results

    def _get_preset_path(self, category, name):
        return os.path.join(self.get_folder(category), name + PRESET_EXTENSION)

    def _check_category(self, category):
        if category not in Category.values():
            raise UnknownCategory(category)

    def _sanitize(self, name):
        if name is None or not name.strip():
            raise ValueError("name must not be empty")

        if "/" in name or "\\" in name or "\0" in name:
            raise ValueError("name must not contain / or \\")

        name = name.strip()
        if name.startswith("."):
            raise ValueError("name must not start with .")
        return name
