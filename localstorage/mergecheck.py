"""Detection of an installed mergerfs."""

from __future__ import annotations

import logging
import os
from typing import Iterable

logger = logging.getLogger(__name__)

MERGERFS_PATHS = (
    "/sbin/mount.mergerfs",
    "/usr/sbin/mount.mergerfs",
    "/usr/local/sbin/mount.mergerfs",
    "/bin/mount.mergerfs",
    "/usr/bin/mount.mergerfs",
    "/usr/local/bin/mount.mergerfs",
)


def is_mergerfs_installed(paths: Iterable[str] = MERGERFS_PATHS) -> bool:
    """Tell whether a mergerfs mount helper exists at any of the given paths."""
    paths = list(paths)
    for path in paths:
        try:
            os.stat(path)
        except OSError:
            continue
        logger.info("mergerfs is installed at %s", path)
        return True
    logger.error("mergerfs is not installed at any path: %s", ", ".join(paths))
    return False