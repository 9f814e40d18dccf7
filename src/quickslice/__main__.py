__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

if __name__ == "__main__":
    from quickslice.cli import quickslice_cli

    quickslice_cli(prog_name="quickslice")
