__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import os
import shutil
import tempfile
import unittest
from unittest import mock

import ddt

import quickslice.settings
from quickslice.util import yaml


@ddt.ddt
class SettingsTest(unittest.TestCase):
    def setUp(self):
        self.basedir = tempfile.mkdtemp()
        self.configfile = os.path.join(self.basedir, "config.yaml")

    def tearDown(self):
        shutil.rmtree(self.basedir)

    def _write_config(self, config):
        yaml.save_to_file(config, path=self.configfile)

    def test_basedir_initialization(self):
        basedir = os.path.join(self.basedir, "not", "there", "yet")

        settings = quickslice.settings.Settings(basedir=basedir)

        self.assertTrue(os.path.isdir(basedir))
        self.assertEqual(os.path.join(basedir, "config.yaml"), settings.configfile)

    @ddt.data(
        (["general", "autocenter"], True),
        (["general", "remember_output_path"], True),
        (["slicing", "path"], "slic3r"),
        (["slicing", "bundleSettings"], ["autocenter"]),
        (["presets", "selected"], {}),
        (["recent", "skein_directory"], None),
    )
    @ddt.unpack
    def test_get_defaults(self, path, expected):
        settings = quickslice.settings.Settings(basedir=self.basedir)
        self.assertEqual(expected, settings.get(path))

    def test_get_local_over_default(self):
        self._write_config({"general": {"autocenter": False}, "slicing": {"path": "/opt/slic3r"}})

        settings = quickslice.settings.Settings(basedir=self.basedir)

        self.assertFalse(settings.get(["general", "autocenter"]))
        self.assertEqual("/opt/slic3r", settings.get(["slicing", "path"]))
        self.assertEqual([], settings.get(["slicing", "args"]))

    def test_get_dict_merges_defaults(self):
        self._write_config({"general": {"autocenter": False}})

        settings = quickslice.settings.Settings(basedir=self.basedir)

        general = settings.get(["general"])
        self.assertFalse(general["autocenter"])
        self.assertTrue(general["remember_output_path"])

    def test_get_unknown_path(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        self.assertIsNone(settings.get(["does", "not", "exist"]))
        with self.assertRaises(quickslice.settings.NoSuchSettingsPath):
            settings.get(["does", "not", "exist"], error_on_path=True)

    def test_get_returns_copies(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        settings.get(["slicing", "args"]).append("--fnord")

        self.assertEqual([], settings.get(["slicing", "args"]))

    @ddt.data(("true", True), ("yes", True), ("1", True), ("false", False), (0, False))
    @ddt.unpack
    def test_get_boolean(self, value, expected):
        self._write_config({"general": {"autocenter": value}})
        settings = quickslice.settings.Settings(basedir=self.basedir)
        self.assertEqual(expected, settings.getBoolean(["general", "autocenter"]))

    @ddt.data((3, 3), ("42", 42), ("fnord", None))
    @ddt.unpack
    def test_get_int(self, value, expected):
        self._write_config({"general": {"last_output_path": value}})
        settings = quickslice.settings.Settings(basedir=self.basedir)
        self.assertEqual(expected, settings.getInt(["general", "last_output_path"]))

    def test_has(self):
        self._write_config({"presets": {"selected": {"print": "Fast"}}})
        settings = quickslice.settings.Settings(basedir=self.basedir)

        self.assertTrue(settings.has(["general", "autocenter"]))
        self.assertTrue(settings.has(["presets", "selected", "print"]))
        self.assertFalse(settings.has(["presets", "selected", "filament"]))

    @ddt.data(("yes", False), ("0", True), (False, True), ("true", False))
    @ddt.unpack
    def test_set_boolean(self, value, expected_local):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        settings.setBoolean(["general", "autocenter"], value)

        self.assertEqual(
            value in quickslice.settings.valid_boolean_trues,
            settings.getBoolean(["general", "autocenter"]),
        )
        self.assertEqual(expected_local, "general" in settings.config)

    def test_set_and_save(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        settings.set(["recent", "skein_directory"], "/home/user/models")
        settings.set(["presets", "selected", "print"], "Fast")
        self.assertTrue(settings.save())

        reloaded = quickslice.settings.Settings(basedir=self.basedir)
        self.assertEqual("/home/user/models", reloaded.get(["recent", "skein_directory"]))
        self.assertEqual({"print": "Fast"}, reloaded.get(["presets", "selected"]))

    def test_set_default_value_removes_local(self):
        self._write_config({"general": {"autocenter": False}})
        settings = quickslice.settings.Settings(basedir=self.basedir)

        settings.set(["general", "autocenter"], True)

        self.assertEqual({}, settings.config)
        self.assertTrue(settings.get(["general", "autocenter"]))

    def test_save_without_changes(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        self.assertFalse(settings.save())
        self.assertFalse(os.path.exists(self.configfile))

    def test_save_triggers_event(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)
        settings.set(["general", "last_output_path"], "/tmp")

        with mock.patch("quickslice.events.eventManager") as event_manager:
            settings.save(trigger_event=True)

        event_manager.return_value.fire.assert_called_once_with(
            "SettingsUpdated", {"path": self.configfile}
        )

    def test_remove(self):
        self._write_config({"presets": {"selected": {"print": "Fast", "filament": "PLA"}}})
        settings = quickslice.settings.Settings(basedir=self.basedir)

        settings.remove(["presets", "selected", "print"])

        self.assertEqual({"filament": "PLA"}, settings.get(["presets", "selected"]))

        settings.remove(["presets", "selected", "filament"])

        self.assertEqual({}, settings.config)

    def test_get_base_folder(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        self.assertEqual(self.basedir, settings.getBaseFolder("base"))

        presets = settings.getBaseFolder("presets")
        self.assertEqual(os.path.join(self.basedir, "presets"), presets)
        self.assertTrue(os.path.isdir(presets))

    def test_get_base_folder_configured(self):
        folder = os.path.join(self.basedir, "elsewhere")
        self._write_config({"folder": {"logs": folder}})
        settings = quickslice.settings.Settings(basedir=self.basedir)

        self.assertEqual(folder, settings.getBaseFolder("logs"))
        self.assertTrue(os.path.isdir(folder))

    def test_get_base_folder_unknown(self):
        settings = quickslice.settings.Settings(basedir=self.basedir)

        with self.assertRaises(quickslice.settings.NoSuchSettingsPath):
            settings.getBaseFolder("fnord")

    def test_invalid_yaml(self):
        with open(self.configfile, "w") as f:
            f.write("general:\n  autocenter: [true\n")

        with self.assertRaises(quickslice.settings.InvalidYaml) as cm:
            quickslice.settings.Settings(basedir=self.basedir)

        self.assertEqual(self.configfile, cm.exception.file)

    def test_not_a_mapping(self):
        with open(self.configfile, "w") as f:
            f.write("- just\n- a list\n")

        with self.assertRaises(quickslice.settings.InvalidSettings):
            quickslice.settings.Settings(basedir=self.basedir)


class SettingsSingletonTest(unittest.TestCase):
    def setUp(self):
        self.basedir = tempfile.mkdtemp()

    def tearDown(self):
        quickslice.settings._instance = None
        shutil.rmtree(self.basedir)

    def test_not_initialized(self):
        with mock.patch("quickslice.settings._instance", None):
            with self.assertRaises(ValueError):
                quickslice.settings.settings()

    def test_init_once(self):
        with mock.patch("quickslice.settings._instance", None):
            instance = quickslice.settings.settings(init=True, basedir=self.basedir)
            self.assertIs(instance, quickslice.settings.settings())

            with self.assertRaises(ValueError):
                quickslice.settings.settings(init=True, basedir=self.basedir)
