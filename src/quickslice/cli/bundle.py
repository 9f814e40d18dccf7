__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import click

from quickslice.cli import init_app_for_cli, standard_options
from quickslice.cli.interaction import ConsoleInteraction

# ~~ "quickslice bundle" commands


@click.group()
def bundle_commands():
    pass


@bundle_commands.group(name="bundle")
def bundle():
    """Import and export of config bundles."""
    pass


@bundle.command(name="import")
@standard_options(hidden=True)
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--allow-duplicates",
    is_flag=True,
    help="Import presets even if a preset with the same settings id exists.",
)
@click.option(
    "--skip-no-id", is_flag=True, help="Skip presets without a settings id."
)
@click.pass_context
def import_command(ctx, path, allow_duplicates, skip_no_id):
    """Imports the config bundle at PATH."""
    interaction = ConsoleInteraction(interactive=False)
    app = init_app_for_cli(ctx, interaction)

    imported = app.load_configbundle(
        path, skip_no_id=skip_no_id, allow_duplicates=allow_duplicates
    )
    if imported is None:
        ctx.exit(1)
    elif not imported:
        click.echo("No new presets to import.")


@bundle.command(name="export")
@standard_options(hidden=True)
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def export_command(ctx, path):
    """Exports all presets as config bundle to PATH."""
    interaction = ConsoleInteraction(interactive=False)
    app = init_app_for_cli(ctx, interaction)

    if app.export_configbundle(path) is None:
        ctx.exit(1)
    click.echo(f"Exported config bundle to {path}")
