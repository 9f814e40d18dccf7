__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import click

from quickslice.cli import init_app_for_cli, standard_options
from quickslice.cli.interaction import ConsoleInteraction

# ~~ "quickslice config" commands


@click.group()
def config_commands():
    pass


@config_commands.group(name="config")
def config():
    """Loading and exporting of single config files."""
    pass


@config.command(name="load")
@standard_options(hidden=True)
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def load_command(ctx, path):
    """Loads the config file at PATH and selects it for all categories."""
    interaction = ConsoleInteraction(interactive=False)
    app = init_app_for_cli(ctx, interaction)

    name = app.load_config_file(path)
    if name is None:
        ctx.exit(1)
    click.echo(f"Loaded {path} as preset {name}")


@config.command(name="export")
@standard_options(hidden=True)
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def export_command(ctx, path):
    """Exports the active config to PATH."""
    interaction = ConsoleInteraction(interactive=False)
    app = init_app_for_cli(ctx, interaction)

    if app.export_config(path) is None:
        ctx.exit(1)
    click.echo(f"Exported config to {path}")
