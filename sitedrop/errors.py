"""Exceptions raised by the deployment pipeline."""

from __future__ import annotations


class SitedropError(Exception):
    """Base class for every failure the pipeline reports to its caller."""


class ConfigError(SitedropError):
    """Raised when environment configuration is missing or invalid."""

    @classmethod
    def missing(cls, env_var: str) -> ConfigError:
        """Return an error for a required variable that is unset or blank."""
        return cls(f"{env_var} is required")

    @classmethod
    def invalid(cls, env_var: str, raw: str, expected: str) -> ConfigError:
        """Return an error for a variable that failed to parse."""
        return cls(f"{env_var} must be {expected}, got: {raw!r}")


class InvalidPayloadError(SitedropError):
    """Raised when a webhook body cannot be decoded into a push event.

    Attributes
    ----------
    reason
        Human-readable description of the decoding failure.

    """

    def __init__(self, reason: str) -> None:
        """Initialise with the decoding failure reason."""
        self.reason = reason
        super().__init__(f"Malformed webhook payload: {reason}")


class SourceHostError(SitedropError):
    """Raised when an archive request fails or is answered with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, url: str, status_code: int) -> SourceHostError:
        """Return an error for a non-2xx archive response."""
        msg = f"Archive request to {url} failed: HTTP {status_code}"
        return cls(msg, status_code=status_code)

    @classmethod
    def timeout(cls, url: str) -> SourceHostError:
        """Return an error for an archive request that timed out."""
        return cls(f"Archive request to {url} timed out")

    @classmethod
    def network_error(cls, url: str, detail: str) -> SourceHostError:
        """Return an error for a connection, DNS or TLS failure."""
        return cls(f"Archive request to {url} failed: {detail}")


class ArchiveLoadError(SitedropError):
    """Raised when an extracted archive does not have a single root directory."""

    def __init__(self, detail: str | None = None) -> None:
        """Initialise with an optional description of what was found."""
        self.detail = detail
        message = "Archive failed to load"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class BuildError(SitedropError):
    """Raised when the site generator exits unsuccessfully.

    Attributes
    ----------
    exit_code
        Process exit status, or ``None`` when the executable never started.

    """

    def __init__(self, exit_code: int | None, *, executable: str = "hugo") -> None:
        """Initialise with the exit status of the build process."""
        self.exit_code = exit_code
        self.executable = executable
        if exit_code is None:
            message = f"{executable} could not be started"
        else:
            message = f"{executable} exited with code {exit_code}"
        super().__init__(message)


class UploadError(SitedropError):
    """Raised when a single object upload fails, aborting the batch."""

    def __init__(self, key: str, bucket: str) -> None:
        """Initialise with the object key and bucket that failed."""
        self.key = key
        self.bucket = bucket
        super().__init__(f"Failed to write {key} to bucket {bucket}")


__all__ = [
    "ArchiveLoadError",
    "BuildError",
    "ConfigError",
    "InvalidPayloadError",
    "SitedropError",
    "SourceHostError",
    "UploadError",
]
