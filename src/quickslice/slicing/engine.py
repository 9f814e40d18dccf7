"""
The slicing engine contract and its command line implementation for Slic3r.

.. autoclass:: SlicingEngine
   :members:

.. autoclass:: Slic3rEngine
   :members:

.. autoclass:: TemporaryConfig
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os
import re
import tempfile

from quickslice.presets import Config
from quickslice.slicing.exceptions import EngineError, ValidationError
from quickslice.util import to_unicode
from quickslice.util.commandline import CommandlineCaller

DEFAULT_BED_SHAPE = "0x0,200x0,200x200,0x200"
DEFAULT_OUTPUT_FILENAME_FORMAT = "[input_filename_base].gcode"

_PLACEHOLDER_REGEX = re.compile(r"\[(?P<key>\w+)\]")
_WARNING_REGEX = re.compile(r"^\s*warning:\s*(?P<message>.*)$", re.IGNORECASE)
_STEP_REGEX = re.compile(r"^\s*=>\s*(?P<message>.+?)\s*$")

# rough share of the total run time that has passed once a step starts
_PROGRESS_STEPS = {
    "Processing triangulated mesh": 10,
    "Generating perimeters": 20,
    "Preparing infill": 30,
    "Infilling layers": 70,
    "Generating support material": 85,
    "Generating skirt": 88,
    "Generating brim": 88,
    "Exporting G-code": 90,
    "Exporting SVG": 90,
}


def parse_bed_shape(value):
    """
    Parses a ``bed_shape`` value like ``0x0,200x0,200x200,0x200`` into a list of ``(x, y)`` float tuples.

    Raises:
        ValueError: the value is malformed or describes less than three points
    """
    points = []
    for point in value.split(","):
        point = point.strip()
        if not point:
            continue
        x, sep, y = point.partition("x")
        if not sep:
            raise ValueError(f"Invalid bed shape point: {point!r}")
        points.append((float(x), float(y)))

    if len(points) < 3:
        raise ValueError("A bed shape needs at least three points")
    return points


class SlicingEngine:
    """
    Interface of the slicing engine the quick slice workflow delegates to.
    """

    def validate(self, config):
        """
        Validates ``config``.

        Raises:
            ValidationError: the config is not usable for slicing
        """
        raise NotImplementedError()

    def output_filepath(self, input_path, config, export_svg=False):
        """The default output path for slicing ``input_path`` with ``config``."""
        raise NotImplementedError()

    def print_center(self, config):
        """The ``(x, y)`` position the model is centered on."""
        raise NotImplementedError()

    def slice(
        self,
        input_path,
        config,
        output_path,
        on_progress=None,
        on_warning=None,
        export_svg=False,
        print_center=None,
    ):
        """
        Slices ``input_path`` with ``config`` into ``output_path``, blocking until done.

        ``on_progress`` is called as ``on_progress(percent, message)``, ``on_warning`` as ``on_warning(message)``.

        Raises:
            EngineError: slicing failed
        """
        raise NotImplementedError()


class TemporaryConfig:
    """
    Writes a config to a temporary file for the duration of a ``with`` block and yields its path.

    .. code-block:: python

       with TemporaryConfig(config) as path:
           run_engine("--load", path)
    """

    def __init__(self, config):
        self.config = config
        self.temp_path = None

    def __enter__(self):
        temp_file = tempfile.NamedTemporaryFile(
            prefix="quickslice-config-", suffix=".ini", delete=False
        )
        temp_file.close()

        self.temp_path = temp_file.name
        Config(self.config).save(self.temp_path)
        return self.temp_path

    def __exit__(self, type, value, traceback):
        try:
            os.remove(self.temp_path)
        except OSError:
            pass


class Slic3rEngine(SlicingEngine):
    """
    Runs the ``slic3r`` command line tool.

    Arguments:
        path (str): path of the slic3r executable
        extra_args (list): additional arguments to pass on every call
    """

    def __init__(self, path, extra_args=None):
        self._logger = logging.getLogger(__name__)
        self._engine_logger = logging.getLogger(f"{__name__}.output")

        self._path = path
        self._extra_args = list(extra_args or [])

    @property
    def path(self):
        return self._path

    def validate(self, config):
        errors = []

        def convert_value(key, converter):
            if key not in config:
                return None
            try:
                return converter(config[key])
            except (TypeError, ValueError):
                errors.append(f"Invalid value for {key}: {config[key]!r}")
                return None

        def positive_float(value):
            value = float(value)
            if value <= 0:
                raise ValueError()
            return value

        def float_list(value):
            values = [positive_float(v) for v in value.split(",")]
            if not values:
                raise ValueError()
            return values

        def percent(value):
            value = value.strip()
            if value.endswith("%"):
                value = float(value[:-1])
            else:
                value = float(value)
                if value <= 1:
                    value *= 100
            if not 0 <= value <= 100:
                raise ValueError()
            return value

        def non_negative_int(value):
            value = int(value)
            if value < 0:
                raise ValueError()
            return value

        layer_height = convert_value("layer_height", positive_float)
        nozzle_diameters = convert_value("nozzle_diameter", float_list)
        convert_value("fill_density", percent)
        convert_value("perimeters", non_negative_int)
        convert_value("bed_shape", parse_bed_shape)

        if layer_height and nozzle_diameters and layer_height > min(nozzle_diameters):
            errors.append("Layer height can't be greater than nozzle diameter")

        if errors:
            raise ValidationError(errors)

    def output_filepath(self, input_path, config, export_svg=False):
        input_filename = os.path.basename(input_path)
        placeholders = {
            "input_filename": input_filename,
            "input_filename_base": os.path.splitext(input_filename)[0],
        }

        def replace(match):
            key = match.group("key")
            if key in placeholders:
                return placeholders[key]
            if key in config:
                return config[key]
            return match.group(0)

        output_format = config.get("output_filename_format") or DEFAULT_OUTPUT_FILENAME_FORMAT
        filename = _PLACEHOLDER_REGEX.sub(replace, output_format)

        if export_svg:
            filename = os.path.splitext(filename)[0] + ".svg"

        return os.path.join(os.path.dirname(input_path), filename)

    def print_center(self, config):
        points = parse_bed_shape(config.get("bed_shape") or DEFAULT_BED_SHAPE)
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        return (min(xs) + max(xs)) / 2.0, (min(ys) + max(ys)) / 2.0

    def slice(
        self,
        input_path,
        config,
        output_path,
        on_progress=None,
        on_warning=None,
        export_svg=False,
        print_center=None,
    ):
        if not self._path:
            raise EngineError("Path to the slicing engine is not configured")

        state = {"progress": 0}

        def process_lines(*lines):
            for line in lines:
                self._engine_logger.debug(line)

                match = _WARNING_REGEX.match(line)
                if match:
                    if on_warning is not None:
                        on_warning(match.group("message"))
                    continue

                match = _STEP_REGEX.match(line)
                if match and on_progress is not None:
                    message = match.group("message")
                    state["progress"] = max(
                        state["progress"], _PROGRESS_STEPS.get(message, state["progress"])
                    )
                    on_progress(state["progress"], message)

        caller = CommandlineCaller()
        caller.on_log_stdout = process_lines
        caller.on_log_stderr = process_lines

        with TemporaryConfig(config) as config_path:
            command = [self._path] + self._extra_args + ["--load", config_path]
            if print_center is not None:
                command += ["--print-center", "{:g},{:g}".format(*print_center)]
            if export_svg:
                command += ["--export-svg"]
            command += ["--output", output_path, input_path]

            self._logger.info(
                "Slicing {} to {}".format(
                    to_unicode(input_path, errors="replace"),
                    to_unicode(output_path, errors="replace"),
                )
            )

            try:
                returncode, stdout, stderr = caller.call(command)
            except (OSError, ValueError) as e:
                raise EngineError(f"Could not run slicing engine {self._path}: {e}")

        if returncode is None:
            raise EngineError(f"Could not run slicing engine {self._path}")

        if returncode != 0:
            output = stderr or stdout
            message = f"Slicing engine exited with return code {returncode}"
            if output:
                message += f": {output[-1]}"
            raise EngineError(message, returncode=returncode, output=output)

        if not os.path.exists(output_path):
            raise EngineError(
                f"Slicing engine finished but {output_path} was not created",
                returncode=returncode,
            )

        if on_progress is not None:
            on_progress(100, "Done")
