"""Extraction of source-host tarballs into a workspace.

Source-host tarballs wrap the tree in one top-level directory named after
the repository and revision (``owner-repo-sha``). Archives are extracted
into a dedicated staging directory so that single root can be located
without guessing, then moved to its final name.
"""

from __future__ import annotations

import asyncio
import shutil
import tarfile
import typing as typ

from sitedrop.errors import ArchiveLoadError
from sitedrop.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


def extract_archive(fileobj: typ.IO[bytes], dest: Path) -> None:
    """Extract a gzip-compressed tarball into ``dest``.

    Members are passed through the ``data`` extraction filter, which
    rejects absolute paths, parent-directory traversal and links that
    escape ``dest``.

    Raises
    ------
    ArchiveLoadError
        If the stream is not a readable gzip tarball or a member is unsafe.

    """
    dest.mkdir(parents=True, exist_ok=True)
    fileobj.seek(0)
    try:
        with tarfile.open(fileobj=fileobj, mode="r:gz") as archive:
            archive.extractall(dest, filter="data")
    except (tarfile.TarError, EOFError, OSError) as exc:
        raise ArchiveLoadError(str(exc)) from exc


def promote_archive_root(staging: Path, target: Path) -> Path:
    """Move the single top-level directory of ``staging`` to ``target``.

    Parameters
    ----------
    staging
        Directory an archive was extracted into, holding nothing else.
    target
        Final location for the archive root. Must not exist yet.

    Returns
    -------
    Path
        ``target``, now holding the archive contents.

    Raises
    ------
    ArchiveLoadError
        If ``staging`` does not contain exactly one entry, or that entry is
        not a directory.

    """
    entries = sorted(staging.iterdir()) if staging.is_dir() else []
    if len(entries) != 1:
        names = ", ".join(entry.name for entry in entries) or "no entries"
        msg = f"expected one top-level directory, found {names}"
        raise ArchiveLoadError(msg)

    (root,) = entries
    if not root.is_dir():
        msg = f"top-level entry {root.name!r} is not a directory"
        raise ArchiveLoadError(msg)

    target.parent.mkdir(parents=True, exist_ok=True)
    root.rename(target)
    staging.rmdir()
    log_debug(logger, "Promoted archive root %s to %s", root.name, target)
    return target


def _unpack(fileobj: typ.IO[bytes], staging: Path, target: Path) -> Path:
    try:
        extract_archive(fileobj, staging)
        return promote_archive_root(staging, target)
    finally:
        shutil.rmtree(staging, ignore_errors=True)


async def unpack_archive(
    fileobj: typ.IO[bytes], *, staging: Path, target: Path
) -> Path:
    """Extract ``fileobj`` via ``staging`` and move its root to ``target``.

    Runs in a worker thread; the staging directory is always removed.
    """
    return await asyncio.to_thread(_unpack, fileobj, staging, target)


__all__ = ["extract_archive", "promote_archive_root", "unpack_archive"]
