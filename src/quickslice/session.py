__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


class SessionState:
    """
    Paths remembered for the lifetime of one application run, never persisted.

    .. attribute:: last_config

       The config file or bundle most recently loaded or exported.

    .. attribute:: last_input

       The input file of the most recent successful quick slice, the source for reslicing.

    .. attribute:: last_output

       The output file of the most recent successful quick slice.
    """

    def __init__(self):
        self.last_config = None
        self.last_input = None
        self.last_output = None

    def record_slice(self, input_path, output_path):
        self.last_input = input_path
        self.last_output = output_path

    def reset(self):
        self.__init__()

    def __repr__(self):
        return "SessionState(last_config={!r}, last_input={!r}, last_output={!r})".format(
            self.last_config, self.last_input, self.last_output
        )
