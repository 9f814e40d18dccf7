__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import click

from quickslice.cli import init_app_for_cli, standard_options
from quickslice.cli.interaction import ConsoleInteraction
from quickslice.presets import Category
from quickslice.presets.exceptions import PresetException

# ~~ "quickslice presets" commands


@click.group()
def preset_commands():
    pass


@preset_commands.group(name="presets")
def presets():
    """Preset management."""
    pass


def _preset_manager(ctx):
    return init_app_for_cli(ctx, ConsoleInteraction(interactive=False)).preset_manager


@presets.command(name="list")
@standard_options(hidden=True)
@click.argument("category", type=click.Choice(Category.values()), required=False)
@click.pass_context
def list_command(ctx, category):
    """Lists all presets, or only those of CATEGORY."""
    preset_manager = _preset_manager(ctx)

    categories = [category] if category else Category.values()
    for category in categories:
        selected = preset_manager.get_selected_name(category)
        click.echo(f"{category}:")
        for preset in preset_manager.get_all(category):
            flags = []
            if preset.name == selected:
                flags.append("selected")
            if preset.external:
                flags.append("external")
            if preset.settings_id:
                flags.append(f"id: {preset.settings_id}")

            line = f"  {preset.name}"
            if flags:
                line += " ({})".format(", ".join(flags))
            click.echo(line)


@presets.command(name="select")
@standard_options(hidden=True)
@click.argument("category", type=click.Choice(Category.values()))
@click.argument("name", type=click.STRING)
@click.pass_context
def select_command(ctx, category, name):
    """Selects preset NAME for CATEGORY."""
    try:
        _preset_manager(ctx).select(category, name)
    except PresetException as e:
        click.echo(e.message, err=True)
        ctx.exit(1)
    click.echo(f"Selected {category} preset {name}")


@presets.command(name="delete")
@standard_options(hidden=True)
@click.argument("category", type=click.Choice(Category.values()))
@click.argument("name", type=click.STRING)
@click.pass_context
def delete_command(ctx, category, name):
    """Deletes preset NAME of CATEGORY."""
    try:
        _preset_manager(ctx).delete(category, name)
    except PresetException as e:
        click.echo(e.message, err=True)
        ctx.exit(1)
    click.echo(f"Deleted {category} preset {name}")
