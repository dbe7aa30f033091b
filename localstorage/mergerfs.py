"""Runtime control of a mounted mergerfs through its control file's xattrs."""

from __future__ import annotations

import logging
import os
from typing import Iterable

logger = logging.getLogger(__name__)

BRANCHES_KEY = "user.mergerfs.branches"
SRCMOUNTS_KEY = "user.mergerfs.srcmounts"


def control_file(fspath: str) -> str:
    """Return the path of the mergerfs control file under a mount point."""
    return os.path.join(fspath, ".mergerfs")


def list_values(fspath: str) -> dict[str, str]:
    """Read every extended attribute exposed by the control file."""
    ctrl = control_file(fspath)
    values: dict[str, str] = {}
    for key in os.listxattr(ctrl):
        if not key:
            continue
        raw = os.getxattr(ctrl, key)
        values[key] = raw.decode("utf-8", errors="surrogateescape")
    return values


def set_source(fspath: str, sources: Iterable[str]) -> None:
    """Replace the branches of a mergerfs mount, dropping duplicates."""
    deduped = list(dict.fromkeys(sources))
    value = ":".join(deduped).encode("utf-8")
    try:
        os.setxattr(control_file(fspath), BRANCHES_KEY, value, 0)
    except OSError as error:
        logger.error("SetSource: %s", error)
        raise


def get_source(fspath: str) -> list[str]:
    """Return the source mounts of a mergerfs mount."""
    return list_values(fspath).get(SRCMOUNTS_KEY, "").split(":")


def add_source(fspath: str, source: str) -> None:
    """Append one branch to a mergerfs mount."""
    os.setxattr(control_file(fspath), BRANCHES_KEY, ("+" + source).encode("utf-8"), 0)


def remove_source(fspath: str, source: str) -> None:
    """Remove one branch from a mergerfs mount."""
    os.setxattr(control_file(fspath), BRANCHES_KEY, ("-" + source).encode("utf-8"), 0)


def add_path(fspath: str, path: str) -> None:
    """Append a branch, addressing the mount through its control file."""
    add_source(control_file(fspath), path)


def remove_path(fspath: str, path: str) -> None:
    """Remove a branch, addressing the mount through its control file."""
    remove_source(control_file(fspath), path)