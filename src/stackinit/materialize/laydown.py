"""Decide whether a directory can receive a template without --overwrite."""

import logging
import os

from stackinit.errors import FilesystemError
from stackinit.materialize.whitelist import DEFAULT_WHITELIST

logger = logging.getLogger(__name__)


def is_safe_to_lay_aside(directory, whitelist=DEFAULT_WHITELIST) -> bool:
    """Return True if every immediate child of *directory* is whitelisted.

    An empty directory is safe. Raises FilesystemError if the directory
    cannot be listed.
    """
    try:
        names = os.listdir(directory)
    except OSError as e:
        raise FilesystemError(f"Can not read directory {directory}: {e}") from e

    safe = True
    for name in sorted(names):
        if not whitelist.is_whitelisted(name):
            logger.debug("%s is not in the list of whitelisted files or directories", name)
            safe = False
    logger.debug("Laydown safe for %s: %s", directory, safe)
    return safe
