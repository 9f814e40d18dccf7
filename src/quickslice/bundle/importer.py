__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging

from quickslice.presets import Config, Preset
from quickslice.settings import default_settings, settings, valid_boolean_trues

_logger = logging.getLogger(__name__)


def import_bundle(bundle, preset_manager, allow_duplicates=False, skip_no_id=False):
    """
    Applies ``bundle`` to the application settings and the preset store.

    ``[settings]`` keys are merged into the ``general`` settings, a ``[presets]`` section replaces the preset
    selection wholesale. Presets are imported in bundle order. Unless ``allow_duplicates`` is set, a preset is
    skipped if its settings id is already known in its category, including ids imported earlier from the same
    bundle. With ``skip_no_id`` presets without any settings id are skipped as well. Everything else is saved,
    overwriting a same-named preset.

    The import is not transactional, if it fails half way the presets saved so far stay saved.

    Arguments:
        bundle (quickslice.bundle.Bundle): the decoded bundle
        preset_manager (quickslice.presets.PresetManager): the store to import into

    Returns:
        int: the number of imported presets
    """
    s = settings()

    global_settings = bundle.settings
    if global_settings:
        for key, value in global_settings.items():
            s.set(["general", key], _from_bundle_value(key, value))
        s.save()

    selection = bundle.presets
    if selection is not None:
        preset_manager.set_selected_mapping(selection)

    imported = 0
    try:
        for section in bundle.preset_sections():
            category, name = section.category, section.preset_name
            config = Config(section.values)
            settings_id = config.settings_id(category)

            if skip_no_id and not settings_id:
                _logger.info(f"Skipping {category} preset {name}, it has no settings id")
                continue

            if (
                not allow_duplicates
                and settings_id
                and settings_id in preset_manager.settings_ids(category)
            ):
                _logger.info(
                    f"Skipping {category} preset {name}, settings id {settings_id} is already present"
                )
                continue

            preset_manager.save(
                category, Preset(category, name, config), allow_overwrite=True, trigger_event=False
            )
            _logger.debug(f"Imported {category} preset {name}")
            imported += 1
    finally:
        preset_manager.reload()

    return imported


def _from_bundle_value(key, value):
    default = default_settings["general"].get(key)
    if isinstance(default, bool):
        return value in valid_boolean_trues
    elif isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            _logger.warning(f"Could not convert {value!r} to a valid integer for {key}")
    return value
