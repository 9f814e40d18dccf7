"""
This module represents QuickSlice's settings management. Within this module the default settings for the core
application are defined and the instance of the :class:`Settings` is held, which offers getter and setter
methods for the raw configuration values as well as convenience methods to access the paths to base folders.

.. autodata:: default_settings
   :annotation: = dict(...)

.. autodata:: valid_boolean_trues

.. autofunction:: settings

.. autoclass:: Settings
   :members:
   :undoc-members:
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os
import sys
import threading

from yaml import YAMLError

from quickslice.schema.config import Config
from quickslice.util import (
    CaseInsensitiveSet,
    atomic_write,
    dict_merge,
    fast_deepcopy,
    yaml,
)

_APPNAME = "QuickSlice"

_instance = None


def settings(init=False, basedir=None, configfile=None):
    """
    Factory method for initially constructing and consecutively retrieving the :class:`~quickslice.settings.Settings`
    singleton.

    Arguments:
        init (boolean): A flag indicating whether this is the initial call to construct the singleton (True) or not
            (False, default). If this is set to True and the settings have already been initialized, a
            :class:`ValueError` will be raised. The same will happen if the settings have not yet been initialized
            and this is set to False.
        basedir (str): Path of the base directory for all of QuickSlice's settings, presets and logs. If not set
            the default will be used: ``~/.quickslice`` on Linux, ``%APPDATA%/QuickSlice`` on Windows and
            ``~/Library/Application Support/QuickSlice`` on MacOS.
        configfile (str): Path of the configuration file (``config.yaml``) to work on. If not set the default will
            be used: ``<basedir>/config.yaml`` for ``basedir`` as defined above.

    Returns:
        Settings: The fully initialized :class:`Settings` instance.

    Raises:
        ValueError: ``init`` is True but settings are already initialized or vice versa.
    """
    global _instance
    if _instance is not None:
        if init:
            raise ValueError("Settings Manager already initialized")

    else:
        if init:
            _instance = Settings(configfile=configfile, basedir=basedir)
        else:
            raise ValueError("Settings not initialized yet")

    return _instance


default_settings = Config().model_dump(by_alias=True)
"""The default settings of the core application."""

valid_boolean_trues = CaseInsensitiveSet(True, "true", "yes", "y", "1", 1)
"""Values that are considered to be equivalent to the boolean ``True`` value."""


class NoSuchSettingsPath(Exception):
    pass


class InvalidSettings(Exception):
    pass


class InvalidYaml(InvalidSettings):
    def __init__(self, file, line=None, column=None, details=None):
        self.file = file
        self.line = line
        self.column = column
        self.details = details

    def __str__(self):
        message = f"Error parsing the configuration file {self.file}, it is invalid YAML."
        if self.line and self.column:
            message += f" The parser reported an error on line {self.line}, column {self.column}."
        return message


class Settings:
    """
    The :class:`Settings` class allows managing all of QuickSlice's settings. It takes care of initializing the
    settings directory, loading the configuration from ``config.yaml``, persisting changes to disk and provides
    access methods for getting and setting specific values via paths.

    A path is a list of keys to follow down into the settings structure. For a structure like::

        general:
            autocenter: true
        recent:
            skein_directory: /home/user/models

    ``["general", "autocenter"]`` yields ``True`` and ``["recent"]`` yields the whole ``recent`` dict. Values not
    present in ``config.yaml`` are taken from :data:`default_settings`.
    """

    def __init__(self, configfile=None, basedir=None):
        self._logger = logging.getLogger(__name__)

        self._basedir = None
        self._config = {}
        self._dirty = False
        self._lock = threading.RLock()

        self._init_basedir(basedir)

        if configfile is not None:
            self._configfile = configfile
        else:
            self._configfile = os.path.join(self._basedir, "config.yaml")
        self.load()

    def _init_basedir(self, basedir):
        if basedir is not None:
            self._basedir = basedir
        else:
            self._basedir = _default_basedir(_APPNAME)

        if not os.path.isdir(self._basedir):
            try:
                os.makedirs(self._basedir)
            except Exception:
                self._logger.fatal(
                    "Could not create basefolder at {}. This is a fatal error, QuickSlice "
                    "can't run without a writable base folder.".format(self._basedir),
                    exc_info=1,
                )
                raise

    @property
    def basedir(self):
        return self._basedir

    @property
    def configfile(self):
        return self._configfile

    @property
    def config(self):
        """A copy of the local configuration, without defaults."""
        with self._lock:
            return fast_deepcopy(self._config)

    def load(self):
        config = None
        if os.path.isfile(self._configfile):
            try:
                config = yaml.load_from_file(path=self._configfile)
            except YAMLError as e:
                details = str(e)
                mark = getattr(e, "problem_mark", None)
                if mark is not None:
                    raise InvalidYaml(
                        self._configfile,
                        line=mark.line + 1,
                        column=mark.column + 1,
                        details=details,
                    )
                raise InvalidYaml(self._configfile, details=details)

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise InvalidSettings(
                f"Configuration file {self._configfile} does not contain a mapping"
            )

        with self._lock:
            self._config = config
            self._dirty = False

    def save(self, force=False, trigger_event=False):
        with self._lock:
            if not self._dirty and not force:
                return False

            try:
                with atomic_write(
                    self._configfile,
                    mode="wt",
                    prefix="quickslice-config-",
                    suffix=".yaml",
                    permissions=0o600,
                    max_permissions=0o666,
                ) as f:
                    yaml.save_to_file(self._config, file=f, pretty=True)
                    self._dirty = False
            except Exception:
                self._logger.exception("Error while saving config.yaml!")
                raise

        if trigger_event:
            from quickslice.events import Events, eventManager

            eventManager().fire(Events.SETTINGS_UPDATED, {"path": self._configfile})

        return True

    ##~~ Internal getter

    def _get_by_path(self, path, config):
        current = config
        for key in path:
            if not isinstance(current, dict) or key not in current:
                raise NoSuchSettingsPath()
            current = current[key]
        return current

    def _get_value(self, path, config=None, defaults=None):
        if not path:
            raise NoSuchSettingsPath()

        if config is None:
            config = self._config
        if defaults is None:
            defaults = default_settings

        missing = object()

        def lookup(source):
            try:
                return self._get_by_path(path, source)
            except NoSuchSettingsPath:
                return missing

        with self._lock:
            local = lookup(config)
            default = lookup(defaults)

            if local is missing and default is missing:
                raise NoSuchSettingsPath()
            elif local is missing:
                value = default
            elif isinstance(local, dict) and isinstance(default, dict):
                value = dict_merge(default, local)
            else:
                value = local

            return fast_deepcopy(value)

    def has(self, path, **kwargs):
        try:
            self._get_value(path, **kwargs)
        except NoSuchSettingsPath:
            return False
        else:
            return True

    # ~~ getter

    def get(self, path, **kwargs):
        error_on_path = kwargs.pop("error_on_path", False)
        validator = kwargs.pop("validator", None)
        fallback = kwargs.pop("fallback", None)

        try:
            result = self._get_value(path, **kwargs)
        except NoSuchSettingsPath:
            if error_on_path:
                raise
            result = None

        if callable(validator) and not validator(result):
            result = fallback
        return result

    def getInt(self, path, **kwargs):
        value = self.get(path, **kwargs)
        if value is None:
            return None

        try:
            return int(value)
        except ValueError:
            self._logger.warning(
                f"Could not convert {value!r} to a valid integer when getting option {path!r}"
            )
            return None

    def getBoolean(self, path, **kwargs):
        value = self.get(path, **kwargs)
        if value is None:
            return None
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            return value in valid_boolean_trues
        return value is not None

    def getBaseFolder(self, type, create=True):
        """
        Returns the folder for ``type``, either as configured under ``folder.<type>`` or as sub folder of the
        base directory. ``base`` returns the base directory itself.
        """
        if type == "base":
            return self._basedir

        if type not in default_settings["folder"]:
            raise NoSuchSettingsPath()

        folder = self.get(["folder", type])
        if folder is None:
            folder = os.path.join(self._basedir, type)

        if create and not os.path.isdir(folder):
            os.makedirs(folder)
        return folder

    # ~~ setter

    def remove(self, path, error_on_path=False):
        if not path:
            if error_on_path:
                raise NoSuchSettingsPath()
            return

        with self._lock:
            try:
                parent = self._get_by_path(path[:-1], self._config)
            except NoSuchSettingsPath:
                parent = None

            if not isinstance(parent, dict) or path[-1] not in parent:
                if error_on_path:
                    raise NoSuchSettingsPath()
                return

            del parent[path[-1]]
            self._clean_upward_path(path[:-1])
            self._mark_dirty()

    def set(self, path, value, force=False, error_on_path=False):
        if not path:
            if error_on_path:
                raise NoSuchSettingsPath()
            return

        with self._lock:
            try:
                default_value = self._get_by_path(path, default_settings)
                in_defaults = True
            except NoSuchSettingsPath:
                default_value = None
                in_defaults = False

            if error_on_path and not in_defaults:
                raise NoSuchSettingsPath()

            try:
                current = self._get_by_path(path, self._config)
                in_local = True
            except NoSuchSettingsPath:
                current = None
                in_local = False

            if not force and in_defaults and default_value == value:
                if in_local:
                    self.remove(path)
                return

            if force or not in_local or current != value:
                node = self._config
                for key in path[:-1]:
                    if not isinstance(node.get(key), dict):
                        node[key] = {}
                    node = node[key]
                node[path[-1]] = fast_deepcopy(value)
                self._mark_dirty()

    def setBoolean(self, path, value, **kwargs):
        if value is None or isinstance(value, bool):
            self.set(path, value, **kwargs)
        else:
            self.set(path, value in valid_boolean_trues, **kwargs)

    def _clean_upward_path(self, path):
        while path:
            try:
                node = self._get_by_path(path, self._config)
            except NoSuchSettingsPath:
                return
            if node:
                return
            parent = self._get_by_path(path[:-1], self._config) if len(path) > 1 else self._config
            del parent[path[-1]]
            path = path[:-1]

    def _mark_dirty(self):
        with self._lock:
            self._dirty = True


def _default_basedir(applicationName):
    if sys.platform == "darwin":
        return os.path.join(
            os.path.expanduser("~"), "Library", "Application Support", applicationName
        )
    elif sys.platform == "win32":
        return os.path.join(os.environ["APPDATA"], applicationName)
    else:
        return os.path.expanduser(os.path.join("~", "." + applicationName.lower()))
