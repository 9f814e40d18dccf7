"""
In this module the quick slice workflow of QuickSlice is encapsulated: validate the active config, choose a file,
slice it with the slicing engine and tell the user about it.

.. autoclass:: QuickSliceState
   :members:

.. autoclass:: QuickSliceResult
   :members:

.. autoclass:: QuickSlice
   :members:
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging
import os
import threading

from quickslice.events import Events, eventManager
from quickslice.interaction import GCODE_WILDCARD, MODEL_WILDCARD, SVG_WILDCARD
from quickslice.settings import settings
from quickslice.util import get_exception_string

from .exceptions import (
    InputMissing,
    NoPriorInput,
    SlicingCancelled,
    SlicingException,
)


class QuickSliceState:
    """States of a quick slice run"""

    VALIDATING = "validating"
    SELECTING_INPUT = "selecting_input"
    RESOLVING_OUTPUT = "resolving_output"
    SLICING = "slicing"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @classmethod
    def values(cls):
        return [
            getattr(cls, name)
            for name in cls.__dict__
            if not (name.startswith("__") or name == "values")
        ]


class QuickSliceResult:
    """
    Outcome of a :meth:`QuickSlice.run`.

    Arguments:
        state (str): the terminal state, one of ``done``, ``cancelled`` or ``failed``
        input_path (str): the input file, if one was chosen
        output_path (str): the output file, if one was resolved
        warnings (list): warnings the engine reported
        error (Exception): what made the run fail
    """

    def __init__(self, state, input_path=None, output_path=None, warnings=None, error=None):
        self.state = state
        self.input_path = input_path
        self.output_path = output_path
        self.warnings = warnings or []
        self.error = error

    @property
    def done(self):
        return self.state == QuickSliceState.DONE

    @property
    def cancelled(self):
        return self.state == QuickSliceState.CANCELLED

    @property
    def failed(self):
        return self.state == QuickSliceState.FAILED

    def __repr__(self):
        return "QuickSliceResult(state={!r}, input_path={!r}, output_path={!r})".format(
            self.state, self.input_path, self.output_path
        )


class QuickSlice:
    """
    Runs quick slices of single files.

    Arguments:
        engine (quickslice.slicing.engine.SlicingEngine): engine to validate and slice with
        preset_manager (quickslice.presets.PresetManager): source of the active config
        session (quickslice.session.SessionState): remembers the last input and output for reslicing
        interaction (quickslice.interaction.Interaction): dialogs and messages
    """

    def __init__(self, engine, preset_manager, session, interaction):
        self._logger = logging.getLogger(__name__)

        self._engine = engine
        self._preset_manager = preset_manager
        self._session = session
        self._interaction = interaction

        self._state = None
        self._job_mutex = threading.Lock()

    @property
    def state(self):
        return self._state

    def run(self, save_as=False, reslice=False, export_svg=False, config=None):
        """
        Runs one quick slice.

        Errors are reported through the interaction layer and returned as part of the result, not raised.

        Arguments:
            save_as (bool): ask for the output file instead of using the default
            reslice (bool): slice the last input of this session again, into its last output
            export_svg (bool): export SVG layers instead of G-code, doesn't touch the remembered paths
            config (dict): config to slice with, defaults to the active config of the preset store

        Returns:
            QuickSliceResult: how it went

        Raises:
            SlicingException: another quick slice is already running
        """
        if not self._job_mutex.acquire(False):
            raise SlicingException("A quick slice is already running")

        try:
            return self._run(save_as=save_as, reslice=reslice, export_svg=export_svg, config=config)
        finally:
            self._state = None
            self._job_mutex.release()

    def _run(self, save_as=False, reslice=False, export_svg=False, config=None):
        input_path = None
        output_path = None
        warnings = []

        try:
            self._set_state(QuickSliceState.VALIDATING)
            if config is None:
                config = self._preset_manager.get_active_config()
            self._engine.validate(config)

            self._set_state(QuickSliceState.SELECTING_INPUT)
            input_path = self._select_input(reslice)
            input_basename = os.path.basename(input_path)

            self._set_state(QuickSliceState.RESOLVING_OUTPUT)
            output_path = self._resolve_output(input_path, config, save_as, reslice, export_svg)

            self._set_state(QuickSliceState.SLICING)
            print_center = self._engine.print_center(config)

            payload = {"input": input_path, "output": output_path, "svg": export_svg}
            eventManager().fire(Events.SLICING_STARTED, payload)

            with self._interaction.progress("Slicing…", f"Processing {input_basename}…") as progress:
                self._engine.slice(
                    input_path,
                    config,
                    output_path,
                    on_progress=progress.update,
                    on_warning=warnings.append,
                    export_svg=export_svg,
                    print_center=print_center,
                )

        except SlicingCancelled:
            self._logger.info("Quick slice cancelled")
            eventManager().fire(Events.SLICING_CANCELLED, {"input": input_path})
            return QuickSliceResult(
                QuickSliceState.CANCELLED, input_path=input_path, output_path=output_path
            )

        except Exception as e:
            if isinstance(e, SlicingException):
                self._logger.info(f"Quick slice failed: {e}")
            else:
                self._logger.exception("Quick slice failed with an unexpected error")

            eventManager().fire(
                Events.SLICING_FAILED,
                {"input": input_path, "output": output_path, "reason": get_exception_string(e)},
            )
            self._interaction.show_error(get_exception_string(e))
            return QuickSliceResult(
                QuickSliceState.FAILED,
                input_path=input_path,
                output_path=output_path,
                warnings=warnings,
                error=e,
            )

        self._set_state(QuickSliceState.DONE)
        if not export_svg:
            self._session.record_slice(input_path, output_path)

        for warning in warnings:
            self._interaction.show_warning(warning)

        message = f"{input_basename} was successfully sliced."
        self._logger.info(message)
        eventManager().fire(
            Events.SLICING_DONE,
            {"input": input_path, "output": output_path, "warnings": len(warnings)},
        )
        self._interaction.show_info(message, title="Slicing Done!")

        return QuickSliceResult(
            QuickSliceState.DONE,
            input_path=input_path,
            output_path=output_path,
            warnings=warnings,
        )

    def _set_state(self, state):
        self._logger.debug(f"Quick slice state: {state}")
        self._state = state

    def _select_input(self, reslice):
        if reslice:
            input_path = self._session.last_input
            if input_path is None:
                raise NoPriorInput()
            if not os.path.exists(input_path):
                raise InputMissing(input_path)
            return input_path

        s = settings()
        directory = (
            s.get(["recent", "skein_directory"]) or s.get(["recent", "config_directory"]) or ""
        )
        input_path = self._interaction.choose_input_file(
            "Choose a file to slice (STL/OBJ/AMF):", directory, wildcard=MODEL_WILDCARD
        )
        if not input_path:
            raise SlicingCancelled()

        s.set(["recent", "skein_directory"], os.path.dirname(os.path.abspath(input_path)))
        s.save()
        return input_path

    def _resolve_output(self, input_path, config, save_as, reslice, export_svg):
        default = self._engine.output_filepath(input_path, config, export_svg=export_svg)
        if export_svg:
            default = os.path.splitext(default)[0] + ".svg"

        if reslice:
            return self._session.last_output or default

        if not save_as:
            return default

        output_path = self._interaction.choose_output_file(
            "Save {} file as:".format("SVG" if export_svg else "G-code"),
            self._output_directory(os.path.dirname(default)),
            os.path.basename(default),
            wildcard=SVG_WILDCARD if export_svg else GCODE_WILDCARD,
        )
        if not output_path:
            raise SlicingCancelled()

        s = settings()
        s.set(["general", "last_output_path"], os.path.dirname(os.path.abspath(output_path)))
        s.save()
        return output_path

    def _output_directory(self, directory):
        s = settings()
        last_output_path = s.get(["general", "last_output_path"])
        if last_output_path and s.getBoolean(["general", "remember_output_path"]):
            return last_output_path
        return directory
