__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import click

from quickslice.cli import init_app_for_cli, standard_options
from quickslice.cli.interaction import ConsoleInteraction

SESSION_COMMANDS = {
    "slice": {},
    "slice-as": {"save_as": True},
    "reslice": {"reslice": True},
    "svg": {"save_as": True, "export_svg": True},
}

# ~~ "quickslice slice" and "quickslice session" commands


@click.group()
def slicing_commands():
    pass


@slicing_commands.command(name="slice")
@standard_options(hidden=True)
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Where to save the result.")
@click.option("--svg", "export_svg", is_flag=True, help="Export SVG layers instead of G-code.")
@click.pass_context
def slice_command(ctx, path, output, export_svg):
    """Slices PATH with the active config."""
    interaction = ConsoleInteraction(interactive=False)
    app = init_app_for_cli(ctx, interaction)

    interaction.queue_answer(path)
    if output:
        interaction.queue_answer(output)

    result = app.quick_slice(save_as=bool(output), export_svg=export_svg)
    if not result.done:
        ctx.exit(1)


@slicing_commands.command(name="session")
@standard_options(hidden=True)
@click.pass_context
def session_command(ctx):
    """
    Starts an interactive slicing session.

    Accepts the commands "slice", "slice-as", "reslice", "svg" and "quit". The last sliced file is remembered for
    "reslice" until the session ends.
    """
    interaction = ConsoleInteraction()
    app = init_app_for_cli(ctx, interaction)

    choices = sorted(SESSION_COMMANDS) + ["quit"]
    while True:
        command = click.prompt(
            "quickslice", type=click.Choice(choices), show_choices=True
        )
        if command == "quit":
            break
        app.quick_slice(**SESSION_COMMANDS[command])
