__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import logging
import queue
import re
import sys
import time
from typing import List, Optional, Tuple, Union

import sarge

from quickslice.util import to_unicode

CLOSE_FDS = sys.platform != "win32"

# ANSI control sequences as emitted by colorizing terminal programs (CSI and OSC)
_ANSI_REGEX = re.compile(
    "\001?\033\\[(\\??(?:\\d|;)*)([a-zA-Z])\002?|\001?\033\\]((?:.|;)*?)(\x07)\002?"
)


def clean_ansi(line: str) -> str:
    """Removes ANSI control codes from ``line``."""
    return _ANSI_REGEX.sub("", line)


class CommandlineCaller:
    """
    Runs command line commands through sarge, handing every line of stdout and stderr to callbacks
    while the command is still running.

    Callbacks are expected to have a signature matching ``callback(*lines)``.
    """

    def __init__(self):
        self._logger = logging.getLogger(__name__)

        self.on_log_call = lambda *args, **kwargs: None
        """Callback for the called command line"""

        self.on_log_stdout = lambda *args, **kwargs: None
        """Callback for stdout output"""

        self.on_log_stderr = lambda *args, **kwargs: None
        """Callback for stderr output"""

    def call(
        self,
        command: Union[str, List[str], Tuple[str]],
        delimiter: bytes = b"\n",
        output_timeout: float = 0.5,
        **kwargs,
    ) -> Tuple[Optional[int], List[str], List[str]]:
        """
        Calls a command

        Args:
            command (list, tuple or str): command to call
            kwargs (dict): additional keyword arguments to pass to the sarge ``run`` call (note that ``async_``,
                           ``stdout`` and ``stderr`` will be overwritten)

        Returns:
            (tuple) a 3-tuple of return code, full stdout and full stderr output
        """

        p = self.non_blocking_call(command, delimiter=delimiter, **kwargs)
        if p is None:
            return None, [], []

        all_stdout = []
        all_stderr = []

        def process_lines(lines, callback):
            if not lines:
                return []
            processed = [
                clean_ansi(to_unicode(line, errors="replace")).rstrip("\r\n")
                for line in lines
            ]
            callback(*processed)
            return processed

        try:
            # readlines blocks up to the timeout, so this isn't a busy loop
            while p.commands[0].poll() is None:
                all_stderr += process_lines(
                    p.stderr.readlines(timeout=output_timeout), self.on_log_stderr
                )
                all_stdout += process_lines(
                    p.stdout.readlines(timeout=output_timeout), self.on_log_stdout
                )
        finally:
            p.close()

        all_stderr += process_lines(p.stderr.readlines(), self.on_log_stderr)
        all_stdout += process_lines(p.stdout.readlines(), self.on_log_stdout)

        return p.returncode, all_stdout, all_stderr

    def non_blocking_call(
        self, command: Union[str, List, Tuple], delimiter: bytes = b"\n", **kwargs
    ) -> Optional[sarge.Pipeline]:
        if isinstance(command, (list, tuple)):
            joined_command = " ".join(command)
        else:
            joined_command = command
        self._logger.debug(f"Calling: {joined_command}")
        self.on_log_call(joined_command)

        kwargs.update(
            {
                "close_fds": CLOSE_FDS,
                "async_": True,
                "stdout": DelimiterCapture(delimiter=delimiter),
                "stderr": DelimiterCapture(delimiter=delimiter),
            }
        )

        p = sarge.run(command, **kwargs)
        while len(p.commands) == 0:
            # sarge populates the command list from its own thread
            time.sleep(0.01)

        p.commands[0].process_ready.wait()

        if not p.commands[0].process:
            self._logger.error(f"Error while trying to run command {joined_command}")
            return None

        return p


class DelimiterCapture(sarge.Capture):
    def __init__(self, delimiter=b"\n", *args, **kwargs):
        self._delimiter = delimiter
        sarge.Capture.__init__(self, *args, **kwargs)

    def readline(self, size=-1, block=True, timeout=None):
        if not self.streams_open():
            block = False
            timeout = None
        else:
            timeout = timeout or self.timeout
        if self.current is None:
            try:
                self.current = self.buffer.get(block, timeout)
            except queue.Empty:
                self.current = b""
        while self._delimiter not in self.current:
            try:
                self.current += self.buffer.get(block, timeout)
            except queue.Empty:
                break
        if self._delimiter not in self.current:
            result = self.current
            self.current = None
        else:
            i = self.current.index(self._delimiter)
            if 0 < size < i:
                i = size - 1
            result = self.current[: i + 1]
            self.current = self.current[i + 1 :]
        return result
