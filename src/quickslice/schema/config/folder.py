__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from typing import Optional

from quickslice.schema import BaseModel


class FolderConfig(BaseModel):
    presets: Optional[str] = None
    """Absolute path where to store presets, one sub folder per category. Defaults to the `presets` folder in QuickSlice's base folder."""

    logs: Optional[str] = None
    """Absolute path where to store logs. Defaults to the `logs` folder in QuickSlice's base folder."""
