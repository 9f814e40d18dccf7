__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from typing import Optional

from quickslice.schema import BaseModel


class GeneralConfig(BaseModel):
    autocenter: bool = True
    """Whether to center models on the bed after loading them."""

    remember_output_path: bool = True
    """Whether save dialogs should start in the folder of the last exported file."""

    last_output_path: Optional[str] = None
    """Folder of the last file written through a save dialog."""
