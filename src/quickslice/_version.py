__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

VERSION = "0.1.0"


def get_versions():
    return {"version": VERSION}


def get_data():
    return get_versions()
