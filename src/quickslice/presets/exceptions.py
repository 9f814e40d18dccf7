"""
Preset related exceptions.

.. autoclass:: PresetException

.. autoclass:: UnknownCategory
   :show-inheritance:

.. autoclass:: UnknownPreset
   :show-inheritance:

.. autoclass:: PresetAlreadyExists
   :show-inheritance:

.. autoclass:: CouldNotDeletePreset
   :show-inheritance:

.. autoclass:: SaveError
   :show-inheritance:
"""

__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


class PresetException(Exception):
    """
    Base exception of all preset related exceptions.

    .. attribute:: category

       Category of the preset for which the exception was raised.

    .. attribute:: name

       Name of the preset for which the exception was raised, may be ``None``.
    """

    def __init__(self, category, name, *args, **kwargs):
        Exception.__init__(self, *args, **kwargs)
        self.category = category
        self.name = name
        self.message = f"Error processing {category} preset {name}"

    def __str__(self):
        return self.message


class UnknownCategory(PresetException):
    """
    Raised if a preset category is neither ``print``, ``filament`` nor ``printer``.
    """

    def __init__(self, category, *args, **kwargs):
        PresetException.__init__(self, category, None, *args, **kwargs)
        self.message = f"No such preset category: {category}"


class UnknownPreset(PresetException):
    """
    Raised if a preset does not exist but must exist to proceed.
    """

    def __init__(self, category, name, *args, **kwargs):
        PresetException.__init__(self, category, name, *args, **kwargs)
        self.message = f"The {category} preset {name} does not exist"


class PresetAlreadyExists(PresetException):
    """
    Raised if a preset already exists and must not be overwritten.
    """

    def __init__(self, category, name, *args, **kwargs):
        PresetException.__init__(self, category, name, *args, **kwargs)
        self.message = f"The {category} preset {name} already exists"


class CouldNotDeletePreset(PresetException):
    """
    Raised if there is an unexpected error trying to delete a known preset.
    """

    def __init__(self, category, name, cause=None, *args, **kwargs):
        PresetException.__init__(self, category, name, *args, **kwargs)

        self.cause = cause
        if cause:
            self.message = f"Could not delete {category} preset {name}: {cause}"
        else:
            self.message = f"Could not delete {category} preset {name}"


class SaveError(PresetException):
    """
    Raised if writing a preset file fails.
    """

    def __init__(self, category, name, cause=None, *args, **kwargs):
        PresetException.__init__(self, category, name, *args, **kwargs)

        self.cause = cause
        self.message = f"Cannot save {category} preset {name}: {cause}"
