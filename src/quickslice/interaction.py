"""
The user interaction layer: file dialogs, progress display and messages.

Implementations exist for the console (:class:`quickslice.cli.interaction.ConsoleInteraction`). A GUI would provide
its own.
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import contextlib

MODEL_WILDCARD = "*.stl;*.obj;*.amf;*.xml"
INI_WILDCARD = "*.ini"
GCODE_WILDCARD = "*.gcode;*.gco;*.g"
SVG_WILDCARD = "*.svg"


class ProgressIndicator:
    def update(self, percent, message=None):
        pass


class Interaction:
    """
    Interface of the user interaction layer.

    The file choosers return the chosen path or ``None`` if the user cancelled.
    """

    def choose_input_file(self, title, directory, filename="", wildcard=MODEL_WILDCARD):
        raise NotImplementedError()

    def choose_output_file(self, title, directory, filename, wildcard=GCODE_WILDCARD):
        raise NotImplementedError()

    @contextlib.contextmanager
    def progress(self, title, message):
        """
        Shows a progress indicator while the ``with`` block runs and yields a :class:`ProgressIndicator`. The
        indicator is closed however the block is left.
        """
        yield ProgressIndicator()

    def show_info(self, message, title=None):
        raise NotImplementedError()

    def show_warning(self, message, title=None):
        raise NotImplementedError()

    def show_error(self, message, title=None):
        raise NotImplementedError()
