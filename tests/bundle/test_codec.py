__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import os
import shutil
import tempfile
import unittest

import ddt

from quickslice.bundle import (
    Bundle,
    Section,
    SectionKind,
    classify,
    decode,
    encode,
    read_bundle,
    write_bundle,
)
from quickslice.util.ini import FormatError

BUNDLE = b"""# generated by QuickSlice
[settings]
autocenter = 1

[presets]
print = Fast
filament = PLA.ini

[print:Fast]
layer_height = 0.3
print_settings_id = abc

[filament:PLA]
settings_id = xyz
"""


@ddt.ddt
class ClassifyTest(unittest.TestCase):
    @ddt.data(
        ("settings", (SectionKind.SETTINGS, None, None)),
        ("presets", (SectionKind.PRESETS, None, None)),
        ("print:Fast", (SectionKind.PRESET, "print", "Fast")),
        ("printer:Prusa i3: MK2", (SectionKind.PRESET, "printer", "Prusa i3: MK2")),
        ("filament: PLA ", (SectionKind.PRESET, "filament", "PLA")),
        ("fnord:Fast", None),
        ("print:", None),
        ("print: ", None),
        ("print", None),
        ("", None),
        (None, None),
    )
    @ddt.unpack
    def test_classify(self, name, expected):
        self.assertEqual(expected, classify(name))


class DecodeTest(unittest.TestCase):
    def test_decode(self):
        bundle = decode(BUNDLE)

        self.assertEqual(
            ["settings", "presets", "print:Fast", "filament:PLA"],
            [section.name for section in bundle],
        )
        self.assertEqual({"autocenter": "1"}, bundle.settings)
        self.assertEqual({"print": "Fast", "filament": "PLA.ini"}, bundle.presets)

        presets = bundle.preset_sections()
        self.assertEqual(
            [("print", "Fast"), ("filament", "PLA")],
            [(section.category, section.preset_name) for section in presets],
        )
        self.assertEqual(
            {"layer_height": "0.3", "print_settings_id": "abc"}, dict(presets[0].values)
        )

    def test_decode_without_optional_sections(self):
        bundle = decode("[print:Fast]\nlayer_height = 0.3\n")

        self.assertIsNone(bundle.settings)
        self.assertIsNone(bundle.presets)
        self.assertEqual(1, len(bundle))

    def test_decode_empty(self):
        bundle = decode(b"")

        self.assertEqual(0, len(bundle))
        self.assertEqual([], bundle.preset_sections())

    def test_decode_plain_config(self):
        with self.assertRaises(FormatError):
            decode(b"layer_height = 0.3\n[print:Fast]\nlayer_height = 0.2\n")

    def test_decode_unexpected_section(self):
        with self.assertRaises(FormatError) as cm:
            decode(b"[fnord:Fast]\nlayer_height = 0.3\n", path="/some/bundle.ini")

        self.assertIn("fnord:Fast", cm.exception.message)
        self.assertIn("/some/bundle.ini", cm.exception.message)

    def test_decode_duplicate_section(self):
        with self.assertRaises(FormatError):
            decode(b"[print:Fast]\na = 1\n[print:Fast]\na = 2\n")

    def test_decode_garbage(self):
        with self.assertRaises(FormatError):
            decode(b"[print:Fast]\nthis is not a key value pair\n")


@ddt.ddt
class EncodeTest(unittest.TestCase):
    def test_round_trip(self):
        bundle = Bundle(
            [
                Section("settings", {"autocenter": "0"}),
                Section("presets", {"print": "Fast", "printer": "MK2"}),
                Section("print:Fast", {"layer_height": "0.3", "start_gcode": "G28 ; home"}),
                Section("printer:MK2", {"bed_shape": "0x0,250x0,250x210,0x210", "empty": ""}),
            ]
        )

        data = encode(bundle, header="a header")

        self.assertIsInstance(data, bytes)
        self.assertTrue(data.startswith(b"# a header\n"))
        self.assertEqual(bundle, decode(data))

    @ddt.data("a\x0bb", "a\x0cb", "a\x1cb", "a\x1eb", "a\x85b", "a\u2028b", "a\u2029b", " a\x0c")
    def test_round_trip_line_boundary_characters(self, value):
        bundle = Bundle([Section("print:Fast", {"start_gcode": value})])

        decoded = decode(encode(bundle))

        self.assertEqual(bundle, decoded)
        self.assertEqual(value, decoded.get("print:Fast").values["start_gcode"])

    def test_round_trip_padded_section_name(self):
        bundle = Bundle([Section(" print:Fast ", {"layer_height": "0.3"})])

        self.assertEqual("print:Fast", bundle.sections[0].name)
        self.assertEqual(b"[print:Fast]\nlayer_height = 0.3\n", encode(bundle))
        self.assertEqual(bundle, decode(encode(bundle)))

    def test_decode_crlf(self):
        bundle = decode(b"[print:Fast]\r\nlayer_height = 0.3\r\n")

        self.assertEqual({"layer_height": "0.3"}, bundle.get("print:Fast").values)

    def test_encode_keeps_order(self):
        bundle = Bundle([Section("print:B", {"a": "1"}), Section("print:A", {"a": "2"})])

        self.assertEqual(b"[print:B]\na = 1\n\n[print:A]\na = 2\n", encode(bundle))

    def test_encode_multiline_value(self):
        bundle = Bundle([Section("print:Fast", {"start_gcode": "G28\nG1 Z5"})])

        with self.assertRaises(ValueError):
            encode(bundle)

    def test_encode_empty(self):
        self.assertEqual(b"\n", encode(Bundle()))


class BundleTest(unittest.TestCase):
    def test_invalid_section_name(self):
        with self.assertRaises(ValueError):
            Section("fnord:Fast", {})

    def test_duplicate_section(self):
        bundle = Bundle([Section("print:Fast", {"a": "1"})])

        with self.assertRaises(ValueError):
            bundle.add(Section("print:Fast", {"a": "2"}))

    def test_section_equality_ignores_key_order(self):
        self.assertEqual(
            Section("print:Fast", [("a", "1"), ("b", "2")]),
            Section("print:Fast", [("b", "2"), ("a", "1")]),
        )
        self.assertNotEqual(Section("print:Fast", {"a": "1"}), Section("print:Slow", {"a": "1"}))


class FileTest(unittest.TestCase):
    def setUp(self):
        self.basedir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.basedir)

    def test_write_and_read(self):
        path = os.path.join(self.basedir, "bundle.ini")
        bundle = decode(BUNDLE)

        write_bundle(path, bundle, header="generated by a test")

        self.assertEqual(bundle, read_bundle(path))

    def test_read_missing(self):
        with self.assertRaises(OSError):
            read_bundle(os.path.join(self.basedir, "missing.ini"))
