"""Deploy pushed repository revisions as static sites.

A push webhook names a repository and commit. sitedrop downloads that
revision, renders it with Hugo, and publishes the output to a new public
bucket named after the commit, deleting the bucket again if anything goes
wrong after it was created.
"""

from sitedrop.config import DeployConfig
from sitedrop.errors import (
    ArchiveLoadError,
    BuildError,
    ConfigError,
    InvalidPayloadError,
    SitedropError,
    SourceHostError,
    UploadError,
)
from sitedrop.events import PushEvent, parse_push_event
from sitedrop.handler import WebhookHandler
from sitedrop.pipeline import DeployOutcome, DeployPipeline, PipelineDependencies

__all__ = [
    "ArchiveLoadError",
    "BuildError",
    "ConfigError",
    "DeployConfig",
    "DeployOutcome",
    "DeployPipeline",
    "InvalidPayloadError",
    "PipelineDependencies",
    "PushEvent",
    "SitedropError",
    "SourceHostError",
    "UploadError",
    "WebhookHandler",
    "parse_push_event",
]
