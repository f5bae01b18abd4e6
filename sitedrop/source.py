"""HTTP client for downloading repository archives from the source host."""

from __future__ import annotations

import typing as typ

import httpx

from sitedrop.errors import SourceHostError
from sitedrop.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from sitedrop.config import DeployConfig

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_CHUNK_SIZE = 64 * 1024


def expand_archive_url(
    template: str,
    *,
    ref: str,
    archive_format: str = "tarball",
) -> str:
    """Fill the ``{archive_format}`` and ``{/ref}`` slots of an archive URL.

    >>> expand_archive_url(
    ...     "https://api.github.com/repos/acme/blog/{archive_format}{/ref}",
    ...     ref="b8ce466",
    ... )
    'https://api.github.com/repos/acme/blog/tarball/b8ce466'

    """
    ref_segment = f"/{ref}" if ref else ""
    return template.replace("{archive_format}", archive_format).replace(
        "{/ref}", ref_segment
    )


def build_headers(*, user_agent: str, token: str | None) -> dict[str, str]:
    """Return the fixed request headers for archive downloads."""
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": user_agent,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class SourceArchiveClient:
    """Stream repository tarballs from the source host.

    Parameters
    ----------
    config
        Deployment configuration supplying the token, user agent and
        timeout.
    http_client
        Optional preconfigured ``httpx.AsyncClient``. When omitted the
        instance creates and owns its own client.

    """

    def __init__(
        self,
        config: DeployConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        self._headers = build_headers(
            user_agent=config.user_agent, token=config.github_token
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.http_timeout_s,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client when owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def download(self, url: str, sink: typ.BinaryIO) -> int:
        """Stream the archive at ``url`` into ``sink``.

        Parameters
        ----------
        url
            Fully expanded archive URL.
        sink
            Writable binary file that receives the compressed archive.

        Returns
        -------
        int
            Number of bytes written.

        Raises
        ------
        SourceHostError
            If the source host answers with a 4xx or 5xx status, or the
            request times out or fails at the network level.

        """
        written = 0
        try:
            async with self._client.stream(
                "GET", url, headers=self._headers, follow_redirects=True
            ) as response:
                if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
                    raise SourceHostError.http_error(url, response.status_code)
                async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                    sink.write(chunk)
                    written += len(chunk)
        except httpx.TimeoutException as exc:
            raise SourceHostError.timeout(url) from exc
        except httpx.RequestError as exc:
            raise SourceHostError.network_error(url, str(exc)) from exc
        sink.flush()
        log_info(logger, "Downloaded %d bytes from %s", written, url)
        return written


__all__ = ["SourceArchiveClient", "build_headers", "expand_archive_url"]
