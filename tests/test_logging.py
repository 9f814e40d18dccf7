__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os
import shutil
import tempfile
import unittest
from unittest import mock

from quickslice.logging.handlers import (
    CleaningTimedRotatingFileHandler,
    RecordingLogHandler,
)


def _record(message):
    return logging.LogRecord("quickslice.test", logging.INFO, __file__, 1, message, None, None)


class RecordingLogHandlerTest(unittest.TestCase):
    def test_replays_into_target(self):
        target = mock.Mock()
        handler = RecordingLogHandler()

        handler.emit(_record("first"))
        handler.emit(_record("second"))
        self.assertEqual(2, len(handler))

        handler.setTarget(target)
        handler.close()

        self.assertEqual(
            ["first", "second"], [call.args[0].msg for call in target.handle.call_args_list]
        )
        self.assertEqual(0, len(handler))

    def test_flush_without_target_keeps_buffer(self):
        handler = RecordingLogHandler()
        handler.emit(_record("kept"))

        handler.flush()

        self.assertEqual(1, len(handler))


class CleaningTimedRotatingFileHandlerTest(unittest.TestCase):
    def setUp(self):
        self.basedir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.basedir)

    def test_removes_surplus_backups_on_start(self):
        path = os.path.join(self.basedir, "quickslice.log")
        for day in range(1, 6):
            with open(f"{path}.2026-01-0{day}", "w") as f:
                f.write("old\n")

        handler = CleaningTimedRotatingFileHandler(path, when="D", backupCount=2)
        handler.close()

        self.assertEqual(
            ["quickslice.log", "quickslice.log.2026-01-04", "quickslice.log.2026-01-05"],
            sorted(os.listdir(self.basedir)),
        )
