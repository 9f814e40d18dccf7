__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import logging

from quickslice.logging import handlers  # noqa: F401


def get_handler(name, logger=None):
    """
    Retrieves the handler named ``name``.

    If optional ``logger`` is provided, search will be limited to that logger, otherwise the root logger will be
    searched.

    Returns:
        the handler if it could be found, None otherwise
    """
    if logger is None:
        logger = logging.getLogger()

    for handler in logger.handlers:
        if handler.get_name() == name:
            return handler

    return None
