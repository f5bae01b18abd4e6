"""Installation of the pinned Hugo theme into a workspace."""

from __future__ import annotations

import asyncio
import dataclasses as dc
import tempfile
import typing as typ

from sitedrop.archive import unpack_archive
from sitedrop.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from pathlib import Path

    from sitedrop.source import SourceArchiveClient

logger = get_logger(__name__)

_SPOOL_MAX_BYTES = 8 * 1024 * 1024


@dc.dataclass(frozen=True, slots=True)
class ThemeSpec:
    """A theme repository pinned at a fixed revision.

    Attributes
    ----------
    owner
        Owner of the theme repository.
    repository
        Theme repository name.
    revision
        Commit the theme is pinned to.
    name
        Directory name Hugo expects under ``themes/``; also the value of
        ``--theme``.

    """

    owner: str
    repository: str
    revision: str
    name: str

    @property
    def archive_url(self) -> str:
        """Return the tarball URL for the pinned revision."""
        return (
            f"https://api.github.com/repos/{self.owner}/{self.repository}"
            f"/tarball/{self.revision}"
        )


DEFAULT_THEME = ThemeSpec(
    owner="dim0627",
    repository="hugo_theme_robust",
    revision="b8ce466",
    name="hugo_theme_robust",
)


async def load_theme(
    client: SourceArchiveClient,
    themes_dir: Path,
    theme: ThemeSpec = DEFAULT_THEME,
) -> Path:
    """Download ``theme`` and install it as ``themes_dir / theme.name``.

    Returns
    -------
    Path
        The installed theme directory.

    """
    await asyncio.to_thread(themes_dir.mkdir, parents=True, exist_ok=True)
    with tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_BYTES) as archive:
        await client.download(theme.archive_url, archive)
        installed = await unpack_archive(
            archive,
            staging=themes_dir / f".{theme.name}-staging",
            target=themes_dir / theme.name,
        )
    log_info(logger, "Installed theme %s at %s", theme.name, theme.revision)
    return installed


__all__ = ["DEFAULT_THEME", "ThemeSpec", "load_theme"]
