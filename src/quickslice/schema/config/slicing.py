__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from typing import List

from quickslice.schema import BaseModel


class SlicingConfig(BaseModel):
    path: str = "slic3r"
    """Path to the slicer executable."""

    args: List[str] = []
    """Additional arguments to pass to the slicer executable on every call."""

    bundleSettings: List[str] = ["autocenter"]
    """Keys of the `general` settings to include in exported config bundles."""
