__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os
import shutil
import tempfile
import unittest
from unittest import mock

from quickslice.app import DEFAULT_BUNDLE_FILENAME, DEFAULT_CONFIG_FILENAME, QuickSliceApp
from quickslice.bundle import read_bundle
from quickslice.events import Events
from quickslice.interaction import Interaction
from quickslice.presets import Config, Preset, PresetManager
from quickslice.settings import Settings
from quickslice.slicing.engine import Slic3rEngine

BUNDLE = """[settings]
autocenter = 0

[presets]
print = Fast
filament = PLA

[print:Fast]
layer_height = 0.3
settings_id = abc

[filament:PLA]
temperature = 205
settings_id = xyz
"""


class ScriptedInteraction(Interaction):
    def __init__(self):
        self.answers = []
        self.dialogs = []
        self.infos = []
        self.errors = []

    def _answer(self, title, directory, filename):
        self.dialogs.append((title, directory, filename))
        return self.answers.pop(0) if self.answers else None

    def choose_input_file(self, title, directory, filename="", wildcard=None):
        return self._answer(title, directory, filename)

    def choose_output_file(self, title, directory, filename, wildcard=None):
        return self._answer(title, directory, filename)

    def show_info(self, message, title=None):
        self.infos.append((message, title))

    def show_warning(self, message, title=None):
        pass

    def show_error(self, message, title=None):
        self.errors.append(message)


class QuickSliceAppTest(unittest.TestCase):
    def setUp(self):
        self.addCleanup(self.cleanUp)

        self.basedir = tempfile.mkdtemp()
        self.settings = Settings(basedir=self.basedir)

        self.patchers = [
            mock.patch("quickslice.presets.settings", return_value=self.settings),
            mock.patch("quickslice.bundle.importer.settings", return_value=self.settings),
            mock.patch("quickslice.bundle.exporter.settings", return_value=self.settings),
            mock.patch("quickslice.slicing.settings", return_value=self.settings),
            mock.patch("quickslice.events.eventManager"),
            mock.patch("quickslice.slicing.eventManager"),
        ]
        for patcher in self.patchers:
            patcher.start()

        event_manager_patcher = mock.patch("quickslice.app.eventManager")
        self.event_manager = event_manager_patcher.start().return_value
        self.patchers.append(event_manager_patcher)

        self.preset_manager = PresetManager()
        self.interaction = ScriptedInteraction()
        self.app = QuickSliceApp(
            self.settings, self.preset_manager, Slic3rEngine("slic3r"), self.interaction
        )

        self.workdir = os.path.join(self.basedir, "work")
        os.makedirs(self.workdir)

    def tearDown(self):
        shutil.rmtree(self.basedir)

    def cleanUp(self):
        for patcher in reversed(self.patchers):
            patcher.stop()

    def _select(self, category, name, config):
        self.preset_manager.save(category, Preset(category, name, config))
        self.preset_manager.select(category, name)

    def _write(self, name, text):
        path = os.path.join(self.workdir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def _fired(self):
        return [call.args for call in self.event_manager.fire.call_args_list]

    # ~~ export_config

    def test_export_config(self):
        self._select("print", "Fast", {"layer_height": "0.3"})
        self._select("printer", "MK2", {"nozzle_diameter": "0.4"})
        path = os.path.join(self.workdir, "out.ini")

        self.assertEqual(path, self.app.export_config(path))

        self.assertEqual({"layer_height": "0.3", "nozzle_diameter": "0.4"}, Config.from_file(path))
        with open(path, encoding="utf-8") as f:
            self.assertTrue(f.readline().startswith("# generated by QuickSlice"))
        self.assertEqual(path, self.app.session.last_config)
        self.assertEqual(self.workdir, self.settings.get(["recent", "config_directory"]))
        self.assertEqual([(Events.CONFIG_EXPORTED, {"path": path})], self._fired())

    def test_export_config_invalid(self):
        self._select("print", "Fast", {"layer_height": "0.5"})
        self._select("printer", "MK2", {"nozzle_diameter": "0.4"})

        self.assertIsNone(self.app.export_config())

        self.assertEqual(
            ["Invalid configuration: Layer height can't be greater than nozzle diameter"],
            self.interaction.errors,
        )
        self.assertEqual([], self.interaction.dialogs)
        self.assertIsNone(self.app.session.last_config)
        self.assertEqual([], os.listdir(self.workdir))

    def test_export_config_dialog(self):
        self.settings.set(["recent", "config_directory"], self.workdir)
        path = os.path.join(self.workdir, "chosen.ini")
        self.interaction.answers = [path]

        self.assertEqual(path, self.app.export_config())

        self.assertEqual(
            [("Save configuration as:", self.workdir, DEFAULT_CONFIG_FILENAME)],
            self.interaction.dialogs,
        )
        self.assertTrue(os.path.isfile(path))

    def test_export_config_write_failed(self):
        self._select("print", "Fast", {"layer_height": "0.3"})
        self._select("printer", "MK2", {"nozzle_diameter": "0.4"})
        self.settings.set(["recent", "config_directory"], self.workdir)
        blocker = self._write("no", "")
        path = os.path.join(blocker, "such", "dir", "config.ini")

        self.assertIsNone(self.app.export_config(path))

        self.assertEqual(1, len(self.interaction.errors))
        self.assertIsNone(self.app.session.last_config)
        self.assertEqual(self.workdir, self.settings.get(["recent", "config_directory"]))
        self.assertEqual([], self._fired())

    def test_reported_errors_not_logged_as_warnings(self):
        with self.assertLogs("quickslice.app", level="DEBUG") as cm:
            self.assertIsNone(self.app.load_config_file(os.path.join(self.workdir, "missing.ini")))

        self.assertEqual(1, len(self.interaction.errors))
        self.assertTrue(cm.records)
        self.assertTrue(all(record.levelno < logging.WARNING for record in cm.records))

    def test_export_config_cancelled(self):
        self.assertIsNone(self.app.export_config())

        self.assertEqual([], self.interaction.errors)
        self.assertIsNone(self.app.session.last_config)
        self.assertEqual([], self._fired())

    # ~~ load_config_file

    def test_load_config_file(self):
        path = self._write("My Config.ini", "layer_height = 0.25\ntemperature = 210\n")

        self.assertEqual("My Config", self.app.load_config_file(path))

        self.assertEqual(
            {"print": "My Config", "filament": "My Config", "printer": "My Config"},
            self.preset_manager.get_selected_mapping(),
        )
        self.assertEqual({"layer_height": "0.25", "temperature": "210"}, self.app.get_config())
        self.assertEqual(path, self.app.session.last_config)
        self.assertEqual(
            [(Events.CONFIG_LOADED, {"path": path, "name": "My Config"})], self._fired()
        )

    def test_load_config_file_bundle(self):
        path = self._write("bundle.ini", BUNDLE)

        self.assertIsNone(self.app.load_config_file(path))

        self.assertEqual(1, len(self.interaction.errors))
        self.assertIn("section headers", self.interaction.errors[0])
        self.assertEqual({}, self.preset_manager.get_selected_mapping())

    def test_load_config_file_missing(self):
        self.assertIsNone(self.app.load_config_file(os.path.join(self.workdir, "missing.ini")))

        self.assertEqual(1, len(self.interaction.errors))

    def test_config_directory_follows_session(self):
        path = self._write("config.ini", "layer_height = 0.25\n")
        self.app.load_config_file(path)
        self.settings.set(["recent", "config_directory"], "/somewhere/else")

        self.app.load_config_file()

        self.assertEqual(
            [("Select configuration to load:", self.workdir, DEFAULT_CONFIG_FILENAME)],
            self.interaction.dialogs,
        )

    # ~~ config bundles

    def test_load_configbundle(self):
        path = self._write("bundle.ini", BUNDLE)

        self.assertEqual(2, self.app.load_configbundle(path))

        self.assertEqual([("2 presets successfully imported.", "Done")], self.interaction.infos)
        self.assertEqual({"print": "Fast", "filament": "PLA"}, self.preset_manager.get_selected_mapping())
        self.assertFalse(self.settings.get(["general", "autocenter"]))
        self.assertEqual(
            [(Events.BUNDLE_IMPORTED, {"path": path, "presets": 2})], self._fired()
        )

        self.assertEqual(0, self.app.load_configbundle(path))
        self.assertEqual(1, len(self.interaction.infos))

    def test_load_configbundle_plain_config(self):
        path = self._write("config.ini", "layer_height = 0.25\n")

        self.assertIsNone(self.app.load_configbundle(path))

        self.assertEqual(1, len(self.interaction.errors))
        self.assertEqual([], self.interaction.infos)

    def test_load_configbundle_cancelled(self):
        self.assertIsNone(self.app.load_configbundle())

        self.assertEqual([], self.interaction.errors)

    def test_export_configbundle(self):
        self._select("print", "Fast", {"layer_height": "0.3", "settings_id": "abc"})
        self._select("filament", "PLA", {"temperature": "205"})
        self.interaction.answers = [os.path.join(self.workdir, DEFAULT_BUNDLE_FILENAME)]

        path = self.app.export_configbundle()

        self.assertEqual(os.path.join(self.workdir, DEFAULT_BUNDLE_FILENAME), path)
        self.assertEqual(
            ["settings", "presets", "filament:PLA", "print:Fast"],
            [section.name for section in read_bundle(path)],
        )
        self.assertEqual([(Events.BUNDLE_EXPORTED, {"path": path, "presets": 2})], self._fired())

    def test_export_configbundle_invalid(self):
        self._select("print", "Fast", {"layer_height": "0"})

        self.assertIsNone(self.app.export_configbundle(os.path.join(self.workdir, "b.ini")))

        self.assertEqual(1, len(self.interaction.errors))
        self.assertEqual([], os.listdir(self.workdir))

    # ~~ quick slice

    def test_reslice_without_prior_input(self):
        result = self.app.quick_slice(reslice=True)

        self.assertTrue(result.failed)
        self.assertEqual(["No previously sliced file."], self.interaction.errors)
