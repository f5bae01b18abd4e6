"""Scoped scratch directories for a single deployment.

A workspace holds the extracted source tree under ``src/`` and the
generated site under ``public/``. It is removed when the context manager
exits, whether the deployment succeeded or not.

Usage
-----
>>> import asyncio
>>> async def demo() -> bool:
...     async with provision_workspace("acme_blog") as workspace:
...         return workspace.public.is_dir()
>>> asyncio.run(demo())
True

"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses as dc
import shutil
import tempfile
import typing as typ
from pathlib import Path

from sitedrop.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

SOURCE_DIR = "src"
PUBLIC_DIR = "public"
THEMES_DIR = "themes"


@dc.dataclass(frozen=True, slots=True)
class Workspace:
    """Directory layout for one deployment."""

    root: Path

    @property
    def src(self) -> Path:
        """Return the extracted repository directory."""
        return self.root / SOURCE_DIR

    @property
    def public(self) -> Path:
        """Return the build output directory."""
        return self.root / PUBLIC_DIR

    @property
    def themes(self) -> Path:
        """Return the Hugo themes directory inside the source tree."""
        return self.src / THEMES_DIR

    def staging(self, name: str) -> Path:
        """Return a scratch directory path for extracting an archive."""
        return self.root / f".{name}"


def _create(prefix: str, root: Path | None) -> Workspace:
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=f"{prefix}-", dir=root))
    workspace = Workspace(root=path)
    workspace.public.mkdir()
    return workspace


@contextlib.asynccontextmanager
async def provision_workspace(
    prefix: str,
    *,
    root: Path | None = None,
) -> cabc.AsyncIterator[Workspace]:
    """Create a unique workspace with an empty ``public`` directory.

    Parameters
    ----------
    prefix
        Prefix for the temporary directory name.
    root
        Parent directory. ``None`` uses the system temporary directory.

    Yields
    ------
    Workspace
        The provisioned workspace. Its tree is deleted on exit.

    """
    workspace = await asyncio.to_thread(_create, prefix, root)
    log_debug(logger, "Provisioned workspace %s", workspace.root)
    try:
        yield workspace
    finally:
        await asyncio.to_thread(shutil.rmtree, workspace.root, ignore_errors=True)
        log_debug(logger, "Removed workspace %s", workspace.root)


__all__ = ["PUBLIC_DIR", "SOURCE_DIR", "THEMES_DIR", "Workspace", "provision_workspace"]
