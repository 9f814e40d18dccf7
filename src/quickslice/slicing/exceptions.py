"""
Slicing related exceptions.

.. autoclass:: SlicingException

.. autoclass:: SlicingCancelled
   :show-inheritance:

.. autoclass:: ValidationError
   :show-inheritance:

.. autoclass:: EngineError
   :show-inheritance:

.. autoclass:: NoPriorInput
   :show-inheritance:

.. autoclass:: InputMissing
   :show-inheritance:
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


class SlicingException(Exception):
    """
    Base exception of all slicing related exceptions.
    """

    def __init__(self, message=None, *args, **kwargs):
        Exception.__init__(self, *args, **kwargs)
        self.message = message or "Slicing failed"

    def __str__(self):
        return self.message


class SlicingCancelled(SlicingException):
    """
    Raised if the user cancelled a dialog or the engine run. Not an error, nothing gets reported.
    """

    def __init__(self, *args, **kwargs):
        SlicingException.__init__(self, "Slicing was cancelled", *args, **kwargs)


class ValidationError(SlicingException):
    """
    Raised if a config doesn't pass validation.

    .. attribute:: errors

       List of the individual problems found.
    """

    def __init__(self, errors, *args, **kwargs):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        SlicingException.__init__(
            self, "Invalid configuration: {}".format("; ".join(self.errors)), *args, **kwargs
        )


class EngineError(SlicingException):
    """
    Raised if the slicing engine failed.

    .. attribute:: returncode

       Return code of the engine process, if it ran at all.

    .. attribute:: output

       The engine's error output, if any.
    """

    def __init__(self, message, returncode=None, output=None, *args, **kwargs):
        SlicingException.__init__(self, message, *args, **kwargs)
        self.returncode = returncode
        self.output = output or []


class NoPriorInput(SlicingException):
    """
    Raised on a reslice request when nothing has been sliced yet in this session.
    """

    def __init__(self, *args, **kwargs):
        SlicingException.__init__(
            self, "No previously sliced file.", *args, **kwargs
        )


class InputMissing(SlicingException):
    """
    Raised if the input file to slice (again) doesn't exist anymore.

    .. attribute:: path

       The missing input path.
    """

    def __init__(self, path, *args, **kwargs):
        SlicingException.__init__(
            self, f"Previously sliced file ({path}) not found.", *args, **kwargs
        )
        self.path = path
