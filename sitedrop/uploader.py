"""Publish a generated site directory to an object-storage bucket."""

from __future__ import annotations

import asyncio
import mimetypes
import typing as typ

from sitedrop.errors import UploadError
from sitedrop.logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sitedrop.storage import ObjectStore

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def iter_site_files(public_dir: Path) -> cabc.Iterator[Path]:
    """Yield every regular file under ``public_dir`` in a stable order."""
    for path in sorted(public_dir.rglob("*")):
        if path.is_file():
            yield path


def object_key(public_dir: Path, path: Path) -> str:
    """Return the storage key for ``path``: its POSIX path relative to the root."""
    return path.relative_to(public_dir).as_posix()


def content_type_for(path: Path) -> str:
    """Infer a content type from the file extension."""
    guessed, _encoding = mimetypes.guess_type(path.name)
    return guessed or DEFAULT_CONTENT_TYPE


async def _upload_one(
    store: ObjectStore, bucket: str, public_dir: Path, path: Path
) -> str:
    key = object_key(public_dir, path)
    try:
        await store.put_object(bucket, key, path, content_type=content_type_for(path))
    except Exception as exc:
        log_error(logger, "Failed to write %s", key, exc_info=exc)
        raise UploadError(key, bucket) from exc
    log_info(logger, "Wrote %s", key)
    return key


async def upload_site(store: ObjectStore, bucket: str, public_dir: Path) -> list[str]:
    """Upload every file under ``public_dir`` to ``bucket`` concurrently.

    All uploads are started at once. The batch waits for every upload to
    settle so no request is still in flight when the caller reacts to a
    failure.

    Parameters
    ----------
    store
        Destination object store.
    bucket
        Destination bucket name.
    public_dir
        Root of the generated site.

    Returns
    -------
    list[str]
        Keys written, in the order the files were enumerated.

    Raises
    ------
    UploadError
        For the first file, in enumeration order, whose upload failed.

    """
    files = await asyncio.to_thread(lambda: list(iter_site_files(public_dir)))
    results = await asyncio.gather(
        *(_upload_one(store, bucket, public_dir, path) for path in files),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return typ.cast("list[str]", results)


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "content_type_for",
    "iter_site_files",
    "object_key",
    "upload_site",
]
