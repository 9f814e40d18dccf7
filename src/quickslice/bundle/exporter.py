__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import datetime
import logging

from quickslice.bundle import (
    PRESETS_SECTION,
    SETTINGS_SECTION,
    Bundle,
    Section,
    preset_section_name,
    write_bundle,
)
from quickslice.presets import Category
from quickslice.settings import settings

_logger = logging.getLogger(__name__)


def build_bundle(preset_manager, settings_keys=None):
    """
    Builds a :class:`~quickslice.bundle.Bundle` from the current application state without touching it.

    Contains the whitelisted ``general`` settings (``slicing.bundleSettings`` unless ``settings_keys`` is given),
    the preset selection and every stored preset, ordered by category and then by name. External presets are not
    included, they live in their own files, and neither is their selection.
    """
    s = settings()
    if settings_keys is None:
        settings_keys = s.get(["slicing", "bundleSettings"]) or []

    global_settings = {}
    for key in settings_keys:
        value = s.get(["general", key])
        if value is None:
            continue
        global_settings[key] = _to_bundle_value(value)

    preset_sections = []
    for category in sorted(Category.values()):
        for preset in preset_manager.get_all(category):
            if preset.external:
                continue
            preset_sections.append(
                Section(preset_section_name(category, preset.name), preset.config)
            )

    # the selection only names presets contained in the bundle
    exported = {(section.category, section.preset_name) for section in preset_sections}
    selection = {}
    for category in Category.values():
        name = preset_manager.get_selected_name(category)
        if name is None:
            continue
        if (category, name.strip()) in exported:
            selection[category] = name
        else:
            _logger.info(
                f"Selected {category} preset {name} is not part of the bundle, leaving it out of the selection"
            )

    bundle = Bundle()
    bundle.add(Section(SETTINGS_SECTION, global_settings))
    bundle.add(Section(PRESETS_SECTION, selection))
    for section in preset_sections:
        bundle.add(section)

    return bundle


def file_header():
    """The comment line written on top of exported config files and bundles."""
    from quickslice import __version__

    return "generated by QuickSlice {} on {}".format(
        __version__, datetime.datetime.now().strftime("%Y-%m-%d at %H:%M:%S")
    )


def export_bundle(path, preset_manager):
    """Writes the current application state as bundle to ``path`` and returns the written bundle."""
    bundle = build_bundle(preset_manager)
    write_bundle(path, bundle, header=file_header())

    _logger.info(
        f"Exported {len(bundle.preset_sections())} presets to config bundle {path}"
    )
    return bundle


def _to_bundle_value(value):
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)
