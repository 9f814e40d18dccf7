__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import sys
import unittest

import ddt

import quickslice.util.commandline


@ddt.ddt
class CommandlineTest(unittest.TestCase):
    @ddt.data(
        (
            "Some text with some \x1b[31mred words\x1b[39m in it",
            "Some text with some red words in it",
        ),
        (
            "We \x1b[?25lhide the cursor here and then \x1b[?25hshow it again here",
            "We hide the cursor here and then show it again here",
        ),
        ("=> Generating perimeters", "=> Generating perimeters"),
    )
    @ddt.unpack
    def test_clean_ansi(self, input, expected):
        actual = quickslice.util.commandline.clean_ansi(input)
        self.assertEqual(expected, actual)

    def test_call_collects_output(self):
        caller = quickslice.util.commandline.CommandlineCaller()
        stdout_lines = []
        caller.on_log_stdout = lambda *lines: stdout_lines.extend(lines)

        returncode, stdout, stderr = caller.call(
            [sys.executable, "-c", "import sys; print('one'); print('two'); sys.stderr.write('three\\n')"]
        )

        self.assertEqual(0, returncode)
        self.assertEqual(["one", "two"], stdout)
        self.assertEqual(["three"], stderr)
        self.assertEqual(["one", "two"], stdout_lines)
