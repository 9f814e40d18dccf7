__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import click

import quickslice

# ~~ click context


class QuickSliceContext:
    """Custom context wrapping the standard options."""

    def __init__(self, configfile=None, basedir=None, verbosity=0):
        self.configfile = configfile
        self.basedir = basedir
        self.verbosity = verbosity


pass_quickslice_ctx = click.make_pass_decorator(QuickSliceContext, ensure=True)
"""Decorator to pass in the :class:`QuickSliceContext` instance."""

# ~~ Basic CLI initialization


def init_app_for_cli(ctx, interaction):
    """
    Brings up the platform and returns a :class:`~quickslice.app.QuickSliceApp` talking to the user through
    ``interaction``. Exits the command on fatal startup errors.
    """
    from quickslice import FatalStartupError, init_platform
    from quickslice.app import QuickSliceApp

    try:
        settings, _, _, preset_manager, engine = init_platform(
            get_ctx_obj_option(ctx, "basedir", None),
            get_ctx_obj_option(ctx, "configfile", None),
            verbosity=get_ctx_obj_option(ctx, "verbosity", 0),
        )
    except FatalStartupError as e:
        click.echo(str(e), err=True)
        click.echo("There was a fatal error initializing QuickSlice.", err=True)
        ctx.exit(-1)

    return QuickSliceApp(settings, preset_manager, engine, interaction)


# ~~ Custom click option to hide from help


class HiddenOption(click.Option):
    """Custom option sub class with empty help."""

    def get_help_record(self, ctx):
        pass


def hidden_option(*param_decls, **attrs):
    """Attaches a hidden option to the command.  All positional arguments are
    passed as parameter declarations to :class:`Option`; all keyword
    arguments are forwarded unchanged.
    """

    import inspect

    from click.decorators import _param_memo

    def decorator(f):
        if "help" in attrs:
            attrs["help"] = inspect.cleandoc(attrs["help"])
        _param_memo(f, HiddenOption(param_decls, **attrs))
        return f

    return decorator


# ~~ helper for setting context options


def set_ctx_obj_option(ctx, param, value):
    """Helper for setting eager options on the context."""
    if ctx.obj is None:
        ctx.obj = QuickSliceContext()
    # the group and its subcommands share one context object, unset options must not reset it
    if value != param.default:
        setattr(ctx.obj, param.name, value)


# ~~ helper for retrieving context options


def get_ctx_obj_option(ctx, key, default, include_parents=True):
    if include_parents and hasattr(ctx, "parent") and ctx.parent:
        fallback = get_ctx_obj_option(ctx.parent, key, default)
    else:
        fallback = default
    return getattr(ctx.obj, key, fallback)


# ~~ helper for setting a lot of bulk options


def bulk_options(options):
    """
    Utility decorator to decorate a function with a list of click decorators.

    The provided list of ``options`` will be reversed to ensure correct
    processing order (inverse from what would be intuitive).
    """

    def decorator(f):
        options.reverse()
        for option in options:
            option(f)
        return f

    return decorator


# ~~ helper for setting --basedir, --config and --verbose options


def standard_options(hidden=False):
    """
    Decorator to add the standard options shared among all "quickslice" commands.

    Adds the options ``--basedir``, ``--config`` and ``--verbose``. If ``hidden``
    is set to ``True``, the options will be available on the command but not
    listed in its help page.
    """

    factory = click.option
    if hidden:
        factory = hidden_option

    options = [
        factory(
            "--basedir",
            "-b",
            type=click.Path(),
            callback=set_ctx_obj_option,
            is_eager=True,
            expose_value=False,
            help="Specify the basedir to use for the config, presets and logs.",
        ),
        factory(
            "--config",
            "-c",
            "configfile",
            type=click.Path(),
            callback=set_ctx_obj_option,
            is_eager=True,
            expose_value=False,
            help="Specify the config file to use.",
        ),
        factory(
            "--verbose",
            "-v",
            "verbosity",
            count=True,
            callback=set_ctx_obj_option,
            is_eager=True,
            expose_value=False,
            help="Increase logging verbosity.",
        ),
    ]

    return bulk_options(options)


# ~~ "quickslice" command, merges all command groups

from .bundle import bundle_commands  # noqa: E402
from .config import config_commands  # noqa: E402
from .presets import preset_commands  # noqa: E402
from .slicing import slicing_commands  # noqa: E402


@click.group(
    name="quickslice",
    cls=click.CommandCollection,
    sources=[slicing_commands, preset_commands, bundle_commands, config_commands],
)
@standard_options()
@click.version_option(version=quickslice.__version__, allow_from_autoenv=False)
def quickslice_cli():
    """Slice single files with your presets, manage presets and config bundles."""
    pass
