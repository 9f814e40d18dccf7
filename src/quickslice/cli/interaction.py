__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import collections
import contextlib
import os

import click

from quickslice.interaction import (
    GCODE_WILDCARD,
    MODEL_WILDCARD,
    Interaction,
    ProgressIndicator,
)


class ConsoleProgressIndicator(ProgressIndicator):
    def __init__(self, bar):
        self._bar = bar
        self._percent = 0

    def update(self, percent, message=None):
        if message:
            self._bar.label = message
        if percent > self._percent:
            self._bar.update(percent - self._percent)
            self._percent = percent


class ConsoleInteraction(Interaction):
    """
    Console implementation of the interaction layer.

    File choosers first hand out answers queued through :meth:`queue_answer`, e.g. paths given on the command line.
    Only if none are queued they prompt, unless ``interactive`` is False, in which case they behave like a cancelled
    dialog.

    .. attribute:: failed

       Whether an error has been shown.
    """

    def __init__(self, interactive=True):
        self._interactive = interactive
        self._answers = collections.deque()
        self.failed = False

    def queue_answer(self, path):
        self._answers.append(path)

    def choose_input_file(self, title, directory, filename="", wildcard=MODEL_WILDCARD):
        return self._choose(title, directory, filename)

    def choose_output_file(self, title, directory, filename, wildcard=GCODE_WILDCARD):
        return self._choose(title, directory, filename)

    def _choose(self, title, directory, filename):
        if self._answers:
            return self._answers.popleft()

        if not self._interactive:
            return None

        default = os.path.join(directory, filename) if filename else None
        path = click.prompt(title, default=default or "", show_default=bool(default))
        path = path.strip()
        return os.path.expanduser(path) if path else None

    @contextlib.contextmanager
    def progress(self, title, message):
        click.echo(title, err=True)
        with click.progressbar(length=100, label=message, file=click.get_text_stream("stderr")) as bar:
            yield ConsoleProgressIndicator(bar)

    def show_info(self, message, title=None):
        click.echo(message)

    def show_warning(self, message, title=None):
        click.echo(f"Warning: {message}", err=True)

    def show_error(self, message, title=None):
        self.failed = True
        click.echo(f"Error: {message}", err=True)
