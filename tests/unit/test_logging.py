"""Unit tests for the femtologging helpers.

Run with:
    pytest tests/unit/test_logging.py
"""

from __future__ import annotations

import pytest

from sitedrop.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


@pytest.mark.parametrize(
    ("raw", "expected_level", "expected_invalid"),
    [
        ("warning", "WARNING", False),
        ("  debug ", "DEBUG", False),
        (None, "INFO", True),
        ("", "INFO", True),
        ("   ", "INFO", True),
        ("verbose", "INFO", True),
    ],
)
def test_normalize_log_level(
    raw: str | None, expected_level: str, *, expected_invalid: bool
) -> None:
    """Known levels are upper-cased; anything else falls back to INFO."""
    level, invalid = normalize_log_level(raw)
    assert level == expected_level, f"unexpected level for {raw!r}"
    assert invalid is expected_invalid, f"unexpected invalid flag for {raw!r}"


@pytest.mark.parametrize(
    ("helper", "level"),
    [
        (log_debug, "DEBUG"),
        (log_info, "INFO"),
        (log_warning, "WARNING"),
        (log_error, "ERROR"),
    ],
)
def test_level_helpers_interpolate_and_tag_level(helper: object, level: str) -> None:
    """Each helper formats with percent-style args and logs at its level."""
    logger = _FakeLogger()

    helper(logger, "deploy %s (%d files)", "acme/blog", 3)  # type: ignore[operator]

    assert logger.calls == [(level, "deploy acme/blog (3 files)", None, False)]


def test_template_without_args_is_not_interpolated() -> None:
    """A literal percent sign survives when no args are given."""
    logger = _FakeLogger()

    log_info(logger, "100% uploaded")

    assert logger.calls == [("INFO", "100% uploaded", None, False)]


def test_log_warning_forwards_exc_info() -> None:
    """exc_info is passed through to the logger."""
    logger = _FakeLogger()
    exc = ValueError("boom")

    log_warning(logger, "warning: %s", "oops", exc_info=exc)

    assert logger.calls == [("WARNING", "warning: oops", exc, False)]


def test_log_exception_emits_message_verbatim() -> None:
    """log_exception never treats its message as a template."""
    logger = _FakeLogger()
    exc = RuntimeError("boom")

    log_exception(logger, "Deploy of sites-%s failed", exc)

    assert logger.calls == [("ERROR", "Deploy of sites-%s failed", exc, False)]


@pytest.mark.parametrize(
    ("raw", "expected_level", "expected_invalid"),
    [("DEBUG", "DEBUG", False), ("nope", "INFO", True)],
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected_level: str,
    *,
    expected_invalid: bool,
) -> None:
    """configure_logging applies the normalised level via basicConfig."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("sitedrop.logging.basicConfig", fake_basic_config)

    level, invalid = configure_logging(raw)

    assert level == expected_level
    assert invalid is expected_invalid
    assert captured == {"level": expected_level, "force": False}
