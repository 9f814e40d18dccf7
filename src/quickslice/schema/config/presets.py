__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from typing import Dict

from quickslice.schema import BaseModel


class PresetsConfig(BaseModel):
    selected: Dict[str, str] = {}
    """Currently selected preset per category, maps category to preset name. A trailing `.ini` is ignored."""
