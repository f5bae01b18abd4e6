"""Orchestration of a single push-to-bucket deployment.

The pipeline runs these stages in order, suspending at each one:

1. Probe the destination bucket. If it already exists the commit has been
   deployed and nothing else happens.
2. Create a workspace while the repository archive downloads.
3. Unpack the archive to ``src/`` and install the pinned theme.
4. Build the site into ``public/``.
5. Create the bucket and upload every generated file.

A failure after the bucket was created deletes it before the original
exception is re-raised. Failures before that point leave nothing behind
but are reported the same way.

Usage
-----
>>> pipeline = DeployPipeline(dependencies, config=config)
>>> outcome = asyncio.run(pipeline.deploy(event))
>>> outcome.status_code
201

"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses as dc
import enum
import tempfile
import typing as typ
from http import HTTPStatus

from sitedrop.archive import unpack_archive
from sitedrop.logging import get_logger, log_exception, log_info, log_warning
from sitedrop.source import expand_archive_url
from sitedrop.theme import DEFAULT_THEME, ThemeSpec, load_theme
from sitedrop.uploader import upload_site
from sitedrop.workspace import Workspace, provision_workspace

if typ.TYPE_CHECKING:
    from sitedrop.builder import SiteBuilder
    from sitedrop.config import DeployConfig
    from sitedrop.events import PushEvent
    from sitedrop.source import SourceArchiveClient
    from sitedrop.storage import ObjectStore

logger = get_logger(__name__)

_SPOOL_MAX_BYTES = 32 * 1024 * 1024


class DeployOutcome(enum.Enum):
    """Successful results of a deployment, keyed by response status."""

    DEPLOYED = HTTPStatus.CREATED
    ALREADY_DEPLOYED = HTTPStatus.NO_CONTENT

    @property
    def status_code(self) -> int:
        """Return the HTTP status reported for this outcome."""
        return int(self.value)


class DeployStage(enum.StrEnum):
    """Stages a deployment passes through, logged as it advances."""

    VALIDATED = "validated"
    BUILDING = "building"
    BUCKET_CREATED = "bucket-created"
    UPLOADING = "uploading"
    DONE_SUCCESS = "done-success"
    DONE_NOOP = "done-noop"
    ROLLED_BACK = "rolled-back"
    FAILED = "failed"


@dc.dataclass(frozen=True, slots=True)
class PipelineDependencies:
    """External collaborators used by :class:`DeployPipeline`.

    Attributes
    ----------
    source
        Client that downloads repository and theme archives.
    store
        Object store receiving the generated site.
    builder
        Static-site generator.

    """

    source: SourceArchiveClient
    store: ObjectStore
    builder: SiteBuilder


class DeployPipeline:
    """Deploy one pushed commit to its own public bucket."""

    def __init__(
        self,
        dependencies: PipelineDependencies,
        *,
        config: DeployConfig,
        theme: ThemeSpec = DEFAULT_THEME,
    ) -> None:
        """Configure the pipeline with collaborators and settings."""
        self._source = dependencies.source
        self._store = dependencies.store
        self._builder = dependencies.builder
        self._config = config
        self._theme = theme

    def _advance(self, stage: DeployStage, bucket: str) -> None:
        log_info(logger, "Deploy %s: %s", bucket, stage)

    async def deploy(self, event: PushEvent) -> DeployOutcome:
        """Deploy ``event``'s head commit unless its bucket already exists.

        Parameters
        ----------
        event
            Validated push event.

        Returns
        -------
        DeployOutcome
            ``DEPLOYED`` after a full build and upload, or
            ``ALREADY_DEPLOYED`` when the bucket was found.

        Raises
        ------
        Exception
            Whatever failed first. The bucket, if this call created it, has
            been deleted by the time the exception reaches the caller.

        """
        bucket = event.bucket_name(self._config.site_bucket)
        self._advance(DeployStage.VALIDATED, bucket)

        if await self._store.bucket_exists(bucket):
            log_info(logger, "Bucket exists, no action")
            self._advance(DeployStage.DONE_NOOP, bucket)
            return DeployOutcome.ALREADY_DEPLOYED

        bucket_created = False
        try:
            async with contextlib.AsyncExitStack() as stack:
                self._advance(DeployStage.BUILDING, bucket)
                workspace = await self._prepare_workspace(stack, event)
                await self._builder.build(workspace)

                await self._store.create_bucket(bucket)
                bucket_created = True
                self._advance(DeployStage.BUCKET_CREATED, bucket)

                self._advance(DeployStage.UPLOADING, bucket)
                keys = await upload_site(self._store, bucket, workspace.public)
        except Exception as exc:
            log_exception(logger, f"Deploy of {bucket} failed: {exc}", exc)
            if bucket_created:
                await self._rollback(bucket)
                self._advance(DeployStage.ROLLED_BACK, bucket)
            else:
                self._advance(DeployStage.FAILED, bucket)
            raise

        log_info(logger, "Uploaded %d file(s) to %s", len(keys), bucket)
        self._advance(DeployStage.DONE_SUCCESS, bucket)
        return DeployOutcome.DEPLOYED

    async def _prepare_workspace(
        self, stack: contextlib.AsyncExitStack, event: PushEvent
    ) -> Workspace:
        """Provision the workspace and fetch sources into it.

        The workspace is created while the archive downloads; both must
        finish before the archive is unpacked.
        """
        archive = stack.enter_context(
            tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_BYTES)
        )
        url = expand_archive_url(event.repository.archive_url, ref=event.commit_id)
        workspace_result, download_result = await asyncio.gather(
            stack.enter_async_context(
                provision_workspace(
                    event.workspace_prefix, root=self._config.work_root
                )
            ),
            self._source.download(url, archive),
            return_exceptions=True,
        )
        for result in (workspace_result, download_result):
            if isinstance(result, BaseException):
                raise result
        workspace = typ.cast("Workspace", workspace_result)

        await unpack_archive(
            archive, staging=workspace.staging("archive"), target=workspace.src
        )
        await load_theme(self._source, workspace.themes, self._theme)
        return workspace

    async def _rollback(self, bucket: str) -> None:
        """Delete ``bucket``; a failure here is logged, never raised."""
        log_warning(logger, "Rolling back bucket %s", bucket)
        try:
            await self._store.delete_bucket(bucket)
        except Exception as exc:  # noqa: BLE001
            log_exception(logger, f"Rollback of bucket {bucket} failed", exc)


__all__ = [
    "DeployOutcome",
    "DeployPipeline",
    "DeployStage",
    "PipelineDependencies",
]
