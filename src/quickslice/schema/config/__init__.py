__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

from quickslice.schema import BaseModel

from .folder import FolderConfig
from .general import GeneralConfig
from .presets import PresetsConfig
from .recent import RecentConfig
from .slicing import SlicingConfig


class Config(BaseModel):
    folder: FolderConfig = FolderConfig()
    general: GeneralConfig = GeneralConfig()
    presets: PresetsConfig = PresetsConfig()
    recent: RecentConfig = RecentConfig()
    slicing: SlicingConfig = SlicingConfig()
