"""Assemble a ready-to-use webhook handler from configuration.

All long-lived clients (one boto3 S3 client, one httpx client) are built
here and passed down explicitly. The returned :class:`DeployServices`
owns them and must be closed when the process stops.

Usage
-----
>>> services = build_services(DeployConfig.from_env())
>>> # response = asyncio.run(services.handler({"body": payload}))
>>> asyncio.run(services.aclose())

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from sitedrop.builder import HugoSiteBuilder
from sitedrop.config import DeployConfig
from sitedrop.handler import WebhookHandler
from sitedrop.pipeline import DeployPipeline, PipelineDependencies
from sitedrop.source import SourceArchiveClient
from sitedrop.storage import S3ObjectStore
from sitedrop.theme import DEFAULT_THEME, ThemeSpec

if typ.TYPE_CHECKING:
    import httpx

    from sitedrop.builder import SiteBuilder
    from sitedrop.storage import ObjectStore

__all__ = ["DeployServices", "build_services"]


@dc.dataclass(frozen=True, slots=True)
class DeployServices:
    """The handler together with the clients it depends on."""

    handler: WebhookHandler
    source: SourceArchiveClient

    async def aclose(self) -> None:
        """Release network clients held by the services."""
        await self.source.aclose()


def _default_store() -> ObjectStore:
    import boto3

    return S3ObjectStore(boto3.client("s3"))


def build_services(
    config: DeployConfig | None = None,
    *,
    store: ObjectStore | None = None,
    builder: SiteBuilder | None = None,
    http_client: httpx.AsyncClient | None = None,
    theme: ThemeSpec = DEFAULT_THEME,
) -> DeployServices:
    """Build a :class:`WebhookHandler` and the clients behind it.

    Parameters
    ----------
    config
        Deployment configuration. Read from the environment when omitted.
    store
        Object store override. Defaults to S3 through a new boto3 client.
    builder
        Site builder override. Defaults to Hugo from ``config.hugo_bin``.
    http_client
        Optional httpx client for archive downloads.
    theme
        Theme to install and pass to the builder.

    Returns
    -------
    DeployServices
        Handler plus the owned clients.

    """
    effective = config or DeployConfig.from_env()
    source = SourceArchiveClient(effective, http_client=http_client)
    dependencies = PipelineDependencies(
        source=source,
        store=store or _default_store(),
        builder=builder or HugoSiteBuilder(effective.hugo_bin, theme.name),
    )
    pipeline = DeployPipeline(dependencies, config=effective, theme=theme)
    return DeployServices(handler=WebhookHandler(pipeline), source=source)
