"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from sitedrop.config import DeployConfig
from sitedrop.handler import WebhookHandler
from sitedrop.pipeline import DeployPipeline, PipelineDependencies
from sitedrop.source import SourceArchiveClient
from tests.helpers.fakes import ArchiveHost, FakeSiteBuilder, InMemoryObjectStore

if typ.TYPE_CHECKING:
    from pathlib import Path

SITE_BUCKET = "sites"


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    """Return the parent directory for workspaces created during a test."""
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def deploy_config(work_root: Path) -> DeployConfig:
    """Return a configuration that keeps workspaces under ``work_root``."""
    return DeployConfig(
        site_bucket=SITE_BUCKET,
        github_token="test-token",  # noqa: S106 - fixture credential
        work_root=work_root,
    )


@pytest.fixture
def archive_host() -> ArchiveHost:
    """Return a mock source host serving the standard archives."""
    return ArchiveHost()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    """Return an empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def site_builder() -> FakeSiteBuilder:
    """Return a builder that writes the default site."""
    return FakeSiteBuilder()


def build_pipeline(
    config: DeployConfig,
    *,
    host: ArchiveHost,
    store: InMemoryObjectStore,
    builder: FakeSiteBuilder,
) -> DeployPipeline:
    """Wire a pipeline to test doubles."""
    source = SourceArchiveClient(config, http_client=host.client())
    dependencies = PipelineDependencies(source=source, store=store, builder=builder)
    return DeployPipeline(dependencies, config=config)


@pytest.fixture
def pipeline(
    deploy_config: DeployConfig,
    archive_host: ArchiveHost,
    object_store: InMemoryObjectStore,
    site_builder: FakeSiteBuilder,
) -> DeployPipeline:
    """Return a pipeline wired to the default test doubles."""
    return build_pipeline(
        deploy_config, host=archive_host, store=object_store, builder=site_builder
    )


@pytest.fixture
def webhook_handler(pipeline: DeployPipeline) -> WebhookHandler:
    """Return a handler around the default test pipeline."""
    return WebhookHandler(pipeline)
