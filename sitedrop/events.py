"""Typed decoding of repository push webhook payloads.

Only the fields the pipeline needs are declared; everything else in the
payload is ignored by msgspec.

Usage
-----
>>> event = parse_push_event(
...     '{"after": "b8ce466", "repository": {"full_name": "acme/blog",'
...     ' "archive_url": "https://api.github.com/repos/acme/blog/'
...     '{archive_format}{/ref}"}}'
... )
>>> event.bucket_name("sites")
'sites-b8ce466'

"""

from __future__ import annotations

import typing as typ

import msgspec

from sitedrop.errors import InvalidPayloadError

_NonEmpty = typ.Annotated[str, msgspec.Meta(min_length=1)]
_CommitId = typ.Annotated[str, msgspec.Meta(pattern=r"^[0-9a-f]{7,64}$")]
_FullName = typ.Annotated[str, msgspec.Meta(pattern=r"^[^/\s]+/[^/\s]+$")]


class PushRepository(msgspec.Struct, frozen=True):
    """Repository block of a push event."""

    full_name: _FullName
    archive_url: _NonEmpty


class PushEvent(msgspec.Struct, frozen=True):
    """Push notification for a single repository revision.

    Attributes
    ----------
    repository
        Identity of the pushed repository and its archive URL template.
    after
        Head commit identifier after the push.

    """

    repository: PushRepository
    after: _CommitId

    @property
    def commit_id(self) -> str:
        """Return the head commit identifier."""
        return self.after

    @property
    def workspace_prefix(self) -> str:
        """Return a filesystem-safe prefix for this repository's workspaces."""
        return self.repository.full_name.replace("/", "_")

    def bucket_name(self, site_bucket: str) -> str:
        """Return the destination bucket name for this commit."""
        return f"{site_bucket}-{self.after}"


def parse_push_event(body: str | bytes | None) -> PushEvent:
    """Decode a raw webhook body into a :class:`PushEvent`.

    Parameters
    ----------
    body
        JSON text of the webhook delivery.

    Returns
    -------
    PushEvent
        The validated event.

    Raises
    ------
    InvalidPayloadError
        If the body is absent, is not JSON, or lacks required fields.

    """
    if body is None or not body:
        msg = "empty body"
        raise InvalidPayloadError(msg)
    try:
        return msgspec.json.decode(body, type=PushEvent)
    except msgspec.DecodeError as exc:
        raise InvalidPayloadError(str(exc)) from exc


__all__ = ["PushEvent", "PushRepository", "parse_push_event"]
