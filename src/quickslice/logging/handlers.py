__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import concurrent.futures
import logging.handlers
import os


class AsyncLogHandlerMixin(logging.Handler):
    def __init__(self, *args, **kwargs):
        self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        super().__init__(*args, **kwargs)

    def emit(self, record):
        if getattr(self._executor, "_shutdown", False):
            return

        try:
            self._executor.submit(self._emit, record)
        except Exception:
            self.handleError(record)

    def _emit(self, record):
        super().emit(record)

    def close(self):
        self._executor.shutdown(wait=True)
        super().close()


class CleaningTimedRotatingFileHandler(logging.handlers.TimedRotatingFileHandler):
    def __init__(self, *args, **kwargs):
        kwargs["encoding"] = kwargs.get("encoding", "utf-8")
        super().__init__(*args, **kwargs)

        # clean up old files on handler start
        if self.backupCount > 0:
            for s in self.getFilesToDelete():
                os.remove(s)


class QuickSliceLogHandler(AsyncLogHandlerMixin, CleaningTimedRotatingFileHandler):
    pass


class QuickSliceStreamHandler(AsyncLogHandlerMixin, logging.StreamHandler):
    pass


class RecordingLogHandler(logging.Handler):
    """Buffers records emitted before logging is fully configured, to be replayed into ``target`` later."""

    def __init__(self, target=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._buffer = []
        self._target = target

    def emit(self, record):
        self._buffer.append(record)

    def setTarget(self, target):
        self._target = target

    def flush(self):
        if not self._target:
            return

        self.acquire()
        try:
            for record in self._buffer:
                self._target.handle(record)
            self._buffer = []
        finally:
            self.release()

    def close(self):
        self.flush()
        self.acquire()
        try:
            self._buffer = []
        finally:
            self.release()
        super().close()

    def __len__(self):
        return len(self._buffer)
