"""Run the Hugo static-site generator against a workspace.

The build process's standard output and error are relayed line by line to
the log as they are produced. There is no timeout: a hung build holds the
deployment until the hosting environment stops it.
"""

from __future__ import annotations

import asyncio
import typing as typ

from sitedrop.errors import BuildError
from sitedrop.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from sitedrop.workspace import Workspace

logger = get_logger(__name__)

_READ_CHUNK = 64 * 1024


class SiteBuilder(typ.Protocol):
    """Renders ``workspace.src`` into ``workspace.public``."""

    async def build(self, workspace: Workspace) -> None:
        """Build the site, raising ``BuildError`` on failure."""
        ...


def hugo_arguments(theme_name: str, workspace: Workspace) -> list[str]:
    """Return Hugo's command-line arguments for ``workspace``."""
    return [
        f"--theme={theme_name}",
        "-s",
        str(workspace.src),
        "-d",
        str(workspace.public),
    ]


def _log_line(label: str, raw: bytes) -> None:
    line = raw.decode("utf-8", errors="replace").rstrip()
    if line:
        log_info(logger, "%s: %s", label, line)


async def _relay(stream: asyncio.StreamReader | None, label: str) -> None:
    """Log ``stream`` line by line, however long each line is."""
    if stream is None:
        return
    pending = b""
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        *lines, pending = (pending + chunk).split(b"\n")
        for raw in lines:
            _log_line(label, raw)
    _log_line(label, pending)


class HugoSiteBuilder:
    """``SiteBuilder`` backed by a Hugo executable.

    Parameters
    ----------
    executable
        Name or path of the Hugo binary.
    theme_name
        Theme directory under ``src/themes`` passed as ``--theme``.

    """

    def __init__(self, executable: str, theme_name: str) -> None:
        """Configure the executable and theme."""
        self._executable = executable
        self._theme_name = theme_name

    async def build(self, workspace: Workspace) -> None:
        """Render the workspace and wait for the process to exit.

        Raises
        ------
        BuildError
            If the process cannot be started or exits with a non-zero code.

        """
        args = hugo_arguments(self._theme_name, workspace)
        log_info(logger, "Running %s %s", self._executable, " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                self._executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise BuildError(None, executable=self._executable) from exc

        try:
            await asyncio.gather(
                _relay(process.stdout, "stdout"),
                _relay(process.stderr, "stderr"),
            )
        except BaseException:
            if process.returncode is None:
                process.kill()
            await process.wait()
            raise
        exit_code = await process.wait()
        if exit_code != 0:
            raise BuildError(exit_code, executable=self._executable)
        log_info(logger, "Site built into %s", workspace.public)


__all__ = ["HugoSiteBuilder", "SiteBuilder", "hugo_arguments"]
