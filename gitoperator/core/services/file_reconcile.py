"""
File reconciliation — apply declared files to a working copy.

Merge policy per file:

    missing                      → write it (parents created)
    exists, readOnly=false       → leave it; the user owns it now
    exists, readOnly=true, same  → leave it
    exists, readOnly=true, diff  → overwrite

Paths inside ``.git`` are refused so a resource cannot rewrite the
clone's config or hooks.

Files are processed in declaration order, so identical input always
produces identical writes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from gitoperator.core.models.gitcontent import FileSpec

logger = logging.getLogger(__name__)

# git control directory; never writable from a FileSpec
GIT_DIR = ".git"


def resolve_path(root: Path, relative: str) -> Path:
    """Join ``relative`` onto ``root``, refusing paths that escape it.

    Raises:
        ValueError: Absolute path, one that climbs out of ``root``, or one
            that reaches into ``.git``.
    """
    if not relative or Path(relative).is_absolute():
        raise ValueError(f"File path must be relative to the repository root: {relative!r}")

    base = root.resolve()
    target = (base / relative).resolve()
    if target != base and base not in target.parents:
        raise ValueError(f"File path escapes the repository: {relative!r}")
    if target == base:
        raise ValueError(f"File path names the repository root: {relative!r}")
    if any(part.lower() == GIT_DIR for part in target.relative_to(base).parts):
        raise ValueError(f"File path points into git metadata: {relative!r}")
    return target


def reconcile_file(file: FileSpec, root: Path) -> bool:
    """Apply one file. Returns True if it was written."""
    target = resolve_path(root, file.path)

    if not target.exists():
        logger.info("Creating %s", file.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(file.content.encode("utf-8"))
        return True

    if not file.read_only:
        logger.debug("%s exists and is user-owned, skipping", file.path)
        return False

    desired = file.content.encode("utf-8")
    if target.read_bytes() == desired:
        logger.debug("%s is up to date", file.path)
        return False

    logger.info("Updating %s", file.path)
    target.write_bytes(desired)
    return True


def reconcile_files(files: Iterable[FileSpec], root: Path) -> bool:
    """Apply every file in order. Returns True if any file was written.

    Every path is checked before the first write, so one bad path leaves
    the working copy untouched.
    """
    files = list(files)
    for file in files:
        resolve_path(root, file.path)

    changed = False
    for file in files:
        changed = reconcile_file(file, root) or changed
    return changed
