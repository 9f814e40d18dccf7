__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from typing import Optional

from quickslice.schema import BaseModel


class RecentConfig(BaseModel):
    skein_directory: Optional[str] = None
    """Folder of the last model file chosen for slicing."""

    config_directory: Optional[str] = None
    """Folder of the last config or bundle file loaded or exported."""
