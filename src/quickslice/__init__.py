__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import io
import logging as log
import os
import sys

from ._version import get_versions

# ~~ version

versions = get_versions()

__version__ = versions["version"]

del versions
del get_versions

# figure out current umask - only doable by setting a new one and resetting it
UMASK = os.umask(0)
os.umask(UMASK)

# ~~ custom exceptions


class FatalStartupError(Exception):
    def __init__(self, message, cause=None):
        self.cause = cause
        Exception.__init__(self, message)

    def __str__(self):
        result = Exception.__str__(self)
        if self.cause:
            return f"{result}: {self.cause}"
        return result


# ~~ init methods to bring up the platform


def init_platform(basedir, configfile, use_logging_file=True, verbosity=0):
    """
    Brings up settings, logging, the event manager, the preset store and the slicing engine, in that order.

    Returns:
        tuple: ``(settings, logger, event_manager, preset_manager, engine)``
    """
    logger, recorder = preinit_logging(verbosity=verbosity)

    settings = init_settings(basedir, configfile)
    logger = init_logging(settings, use_logging_file=use_logging_file, verbosity=verbosity)

    # replay what was logged before the file handler existed
    from quickslice.logging import get_handler

    log.getLogger().removeHandler(recorder)
    recorder.setTarget(get_handler("file"))
    recorder.close()

    event_manager = init_event_manager(settings)
    preset_manager = init_preset_manager(settings)
    engine = init_engine(settings)

    return settings, logger, event_manager, preset_manager, engine


def init_settings(basedir, configfile):
    """Inits the settings instance based on basedir and configfile to use."""

    from quickslice.settings import InvalidSettings, settings

    try:
        return settings(init=True, basedir=basedir, configfile=configfile)
    except InvalidSettings as e:
        raise FatalStartupError(str(e))


def preinit_logging(verbosity=0):
    config = {
        "version": 1,
        "formatters": {
            "simple": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG" if verbosity else "WARNING",
                "formatter": "simple",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {"quickslice": {"level": "DEBUG" if verbosity else "INFO"}},
        "root": {"level": "WARN", "handlers": ["console"]},
    }

    logger = set_logging_config(config, verbosity)

    from quickslice.logging.handlers import RecordingLogHandler

    recorder = RecordingLogHandler(level=log.DEBUG)
    log.getLogger().addHandler(recorder)

    return logger, recorder


def init_logging(settings, use_logging_file=True, logging_file=None, verbosity=0):
    """Sets up logging."""

    from quickslice.util import dict_merge

    default_config = {
        "version": 1,
        "formatters": {
            "simple": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
        },
        "handlers": {
            "console": {
                "class": "quickslice.logging.handlers.QuickSliceStreamHandler",
                "level": "WARNING",
                "formatter": "simple",
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "quickslice.logging.handlers.QuickSliceLogHandler",
                "level": "DEBUG",
                "formatter": "simple",
                "when": "D",
                "backupCount": 6,
                "filename": os.path.join(
                    settings.getBaseFolder("logs"), "quickslice.log"
                ),
            },
        },
        "loggers": {
            "quickslice": {"level": "INFO"},
            "quickslice.util": {"level": "INFO"},
        },
        "root": {"level": "WARN", "handlers": ["console", "file"]},
    }

    if verbosity > 0:
        default_config["handlers"]["console"]["level"] = "DEBUG"
        default_config["loggers"]["quickslice"]["level"] = "DEBUG"
        default_config["root"]["level"] = "INFO"
    if verbosity > 1:
        default_config["loggers"]["quickslice.util"]["level"] = "DEBUG"
        default_config["root"]["level"] = "DEBUG"

    config = default_config
    if use_logging_file:
        if logging_file is None:
            logging_file = os.path.join(settings.getBaseFolder("base"), "logging.yaml")

        config_from_file = {}
        if os.path.isfile(logging_file):
            import yaml

            with io.open(logging_file, "rt", encoding="utf-8") as f:
                config_from_file = yaml.safe_load(f)

        if config_from_file is not None and isinstance(config_from_file, dict):
            config = dict_merge(default_config, config_from_file)

    return set_logging_config(config, verbosity)


def set_logging_config(config, verbosity):
    import logging.config as logconfig

    logconfig.dictConfig(config)

    # make sure we log any warnings
    log.captureWarnings(True)

    import warnings

    if verbosity > 1:
        warnings.simplefilter("always")
    elif verbosity > 0:
        for category in (DeprecationWarning, PendingDeprecationWarning):
            warnings.simplefilter("always", category=category)

    logger = log.getLogger(__name__)

    def exception_logger(exc_type, exc_value, exc_tb):
        logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_tb))

    sys.excepthook = exception_logger

    return logger


def init_event_manager(settings):
    from quickslice.events import eventManager

    return eventManager()


def init_preset_manager(settings):
    from quickslice.presets import PresetManager

    return PresetManager()


def init_engine(settings):
    from quickslice.slicing.engine import Slic3rEngine

    return Slic3rEngine(
        settings.get(["slicing", "path"]),
        extra_args=settings.get(["slicing", "args"]),
    )
