"""
The application controller: the operations behind QuickSlice's file menu, independent of the user interface.

.. autoclass:: QuickSliceApp
   :members:
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os

from quickslice.bundle import read_bundle
from quickslice.bundle.exporter import export_bundle, file_header
from quickslice.bundle.importer import import_bundle
from quickslice.events import Events, eventManager
from quickslice.interaction import INI_WILDCARD
from quickslice.presets import Category
from quickslice.presets.exceptions import PresetException
from quickslice.session import SessionState
from quickslice.slicing import QuickSlice
from quickslice.slicing.exceptions import SlicingException
from quickslice.util import get_exception_string
from quickslice.util.ini import FormatError

DEFAULT_CONFIG_FILENAME = "config.ini"
DEFAULT_BUNDLE_FILENAME = "QuickSlice_config_bundle.ini"

# errors reported to the user instead of propagated
REPORTED_ERRORS = (FormatError, PresetException, SlicingException, OSError, ValueError)


class QuickSliceApp:
    """
    Ties the preset store, the slicing engine and the interaction layer together.

    Every operation reports its errors through :meth:`~quickslice.interaction.Interaction.show_error` and returns
    ``None`` in that case, just like it does if the user cancels a dialog.

    Arguments:
        settings (quickslice.settings.Settings): the application settings
        preset_manager (quickslice.presets.PresetManager): the preset store
        engine (quickslice.slicing.engine.SlicingEngine): the slicing engine
        interaction (quickslice.interaction.Interaction): dialogs and messages
        session (quickslice.session.SessionState): paths remembered during this run, a fresh one if not set
    """

    def __init__(self, settings, preset_manager, engine, interaction, session=None):
        self._logger = logging.getLogger(__name__)

        self._settings = settings
        self._preset_manager = preset_manager
        self._engine = engine
        self._interaction = interaction

        self.session = session if session is not None else SessionState()
        self._quick_slice = QuickSlice(
            engine, preset_manager, self.session, interaction
        )

    @property
    def preset_manager(self):
        return self._preset_manager

    def get_config(self):
        """The active config, merged from the selected presets."""
        return self._preset_manager.get_active_config()

    # ~~ quick slice

    def quick_slice(self, save_as=False, reslice=False, export_svg=False):
        """Runs a quick slice, see :meth:`quickslice.slicing.QuickSlice.run`."""
        return self._quick_slice.run(
            save_as=save_as, reslice=reslice, export_svg=export_svg
        )

    # ~~ single config files

    def export_config(self, path=None):
        """
        Validates the active config and writes it to ``path`` as flat config file, asking for the path if not set.

        Returns:
            str: the written path, ``None`` if cancelled or failed
        """
        config = self.get_config()
        try:
            self._engine.validate(config)
        except SlicingException as e:
            self._report_error(e)
            return None

        if path is None:
            path = self._interaction.choose_output_file(
                "Save configuration as:",
                self._config_directory(),
                DEFAULT_CONFIG_FILENAME,
                wildcard=INI_WILDCARD,
            )
            if not path:
                return None

        try:
            config.save(path, header=file_header())
        except REPORTED_ERRORS as e:
            self._report_error(e)
            return None

        self._remember_config_directory(path)
        self.session.last_config = path

        self._logger.info(f"Exported config to {path}")
        eventManager().fire(Events.CONFIG_EXPORTED, {"path": path})
        return path

    def load_config_file(self, path=None):
        """
        Loads the flat config file at ``path`` as external preset and selects it for all categories, asking for the
        path if not set.

        Returns:
            str: the name of the loaded preset, ``None`` if cancelled or failed
        """
        if path is None:
            path = self._interaction.choose_input_file(
                "Select configuration to load:",
                self._config_directory(),
                DEFAULT_CONFIG_FILENAME,
                wildcard=INI_WILDCARD,
            )
            if not path:
                return None

        self._remember_config_directory(path)

        try:
            name = self._preset_manager.add_external(path)
            for category in Category.values():
                self._preset_manager.select(category, name)
        except REPORTED_ERRORS as e:
            self._report_error(e)
            return None

        self.session.last_config = path

        self._logger.info(f"Loaded config {path} as preset {name}")
        eventManager().fire(Events.CONFIG_LOADED, {"path": path, "name": name})
        return name

    # ~~ config bundles

    def export_configbundle(self, path=None):
        """
        Writes all stored presets, the selection and the whitelisted settings as bundle to ``path``, asking for the
        path if not set.

        Returns:
            str: the written path, ``None`` if cancelled or failed
        """
        try:
            self._engine.validate(self.get_config())
        except SlicingException as e:
            self._report_error(e)
            return None

        if path is None:
            path = self._interaction.choose_output_file(
                "Save presets bundle as:",
                self._config_directory(),
                DEFAULT_BUNDLE_FILENAME,
                wildcard=INI_WILDCARD,
            )
            if not path:
                return None

        self._remember_config_directory(path)

        try:
            bundle = export_bundle(path, self._preset_manager)
        except REPORTED_ERRORS as e:
            self._report_error(e)
            return None

        eventManager().fire(
            Events.BUNDLE_EXPORTED,
            {"path": path, "presets": len(bundle.preset_sections())},
        )
        return path

    def load_configbundle(self, path=None, skip_no_id=False, allow_duplicates=False):
        """
        Imports the bundle at ``path``, asking for the path if not set.

        Returns:
            int: the number of imported presets, ``None`` if cancelled or failed
        """
        if path is None:
            path = self._interaction.choose_input_file(
                "Select configuration to load:",
                self._config_directory(),
                DEFAULT_CONFIG_FILENAME,
                wildcard=INI_WILDCARD,
            )
            if not path:
                return None

        self._remember_config_directory(path)

        try:
            bundle = read_bundle(path)
            imported = import_bundle(
                bundle,
                self._preset_manager,
                allow_duplicates=allow_duplicates,
                skip_no_id=skip_no_id,
            )
        except REPORTED_ERRORS as e:
            self._report_error(e)
            return None

        self._logger.info(f"Imported {imported} presets from {path}")
        eventManager().fire(Events.BUNDLE_IMPORTED, {"path": path, "presets": imported})

        if imported:
            self._interaction.show_info(
                f"{imported} presets successfully imported.", title="Done"
            )
        return imported

    # ~~ helpers

    def _config_directory(self):
        if self.session.last_config:
            return os.path.dirname(self.session.last_config)
        return (
            self._settings.get(["recent", "config_directory"])
            or self._settings.get(["recent", "skein_directory"])
            or ""
        )

    def _remember_config_directory(self, path):
        self._settings.set(
            ["recent", "config_directory"], os.path.dirname(os.path.abspath(path))
        )
        self._settings.save()

    def _report_error(self, exc):
        # the interaction layer shows the error, the console only gets it in verbose mode
        self._logger.info(f"Operation failed: {get_exception_string(exc)}")
        self._interaction.show_error(get_exception_string(exc))
