"""Unit tests for archive extraction and root promotion."""

from __future__ import annotations

import io
import typing as typ

import pytest

from sitedrop.archive import extract_archive, promote_archive_root, unpack_archive
from sitedrop.errors import ArchiveLoadError
from tests.helpers.archives import REPO_ROOT, SITE_FILES, make_tarball, repo_tarball

if typ.TYPE_CHECKING:
    from pathlib import Path


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_extracts_members(self, tmp_path: Path) -> None:
        """Files land under their archive paths."""
        extract_archive(io.BytesIO(repo_tarball()), tmp_path / "out")

        config = tmp_path / "out" / REPO_ROOT / "config.toml"
        assert config.read_bytes() == SITE_FILES["config.toml"]

    def test_rewinds_stream_before_reading(self, tmp_path: Path) -> None:
        """A stream left at its end after download is read from the start."""
        stream = io.BytesIO(repo_tarball())
        stream.seek(0, io.SEEK_END)

        extract_archive(stream, tmp_path / "out")

        assert (tmp_path / "out" / REPO_ROOT).is_dir()

    def test_rejects_non_gzip(self, tmp_path: Path) -> None:
        """An error page instead of a tarball fails to load."""
        with pytest.raises(ArchiveLoadError, match="Archive failed to load"):
            extract_archive(io.BytesIO(b"<html>oops</html>"), tmp_path / "out")

    def test_rejects_parent_traversal(self, tmp_path: Path) -> None:
        """Members escaping the destination are refused."""
        archive = make_tarball({"../escape.txt": b"x"})

        with pytest.raises(ArchiveLoadError):
            extract_archive(io.BytesIO(archive), tmp_path / "out")

        assert not (tmp_path / "escape.txt").exists()


class TestPromoteArchiveRoot:
    """Tests for promote_archive_root."""

    def test_moves_single_root(self, tmp_path: Path) -> None:
        """The only top-level directory becomes the target."""
        staging = tmp_path / "staging"
        (staging / REPO_ROOT / "content").mkdir(parents=True)
        target = tmp_path / "src"

        result = promote_archive_root(staging, target)

        assert result == target
        assert (target / "content").is_dir()
        assert not staging.exists()

    def test_empty_staging_fails(self, tmp_path: Path) -> None:
        """No top-level entry means the archive did not load."""
        staging = tmp_path / "staging"
        staging.mkdir()

        with pytest.raises(ArchiveLoadError, match="no entries"):
            promote_archive_root(staging, tmp_path / "src")

    def test_missing_staging_fails(self, tmp_path: Path) -> None:
        """A staging directory that was never created is treated as empty."""
        with pytest.raises(ArchiveLoadError):
            promote_archive_root(tmp_path / "absent", tmp_path / "src")

    def test_multiple_roots_fail(self, tmp_path: Path) -> None:
        """Two top-level entries are ambiguous and rejected."""
        staging = tmp_path / "staging"
        (staging / "one").mkdir(parents=True)
        (staging / "two").mkdir()

        with pytest.raises(ArchiveLoadError, match="one, two"):
            promote_archive_root(staging, tmp_path / "src")

    def test_file_root_fails(self, tmp_path: Path) -> None:
        """A lone top-level file is not a source tree."""
        staging = tmp_path / "staging"
        staging.mkdir()
        (staging / "README").write_text("hi", encoding="utf-8")

        with pytest.raises(ArchiveLoadError, match="not a directory"):
            promote_archive_root(staging, tmp_path / "src")


@pytest.mark.asyncio
async def test_unpack_archive_cleans_staging_on_failure(tmp_path: Path) -> None:
    """The staging directory is removed even when promotion fails."""
    archive = make_tarball({"one/a.txt": b"a", "two/b.txt": b"b"})
    staging = tmp_path / ".archive"

    with pytest.raises(ArchiveLoadError):
        await unpack_archive(
            io.BytesIO(archive), staging=staging, target=tmp_path / "src"
        )

    assert not staging.exists()
    assert not (tmp_path / "src").exists()


@pytest.mark.asyncio
async def test_unpack_archive_promotes_root(tmp_path: Path) -> None:
    """A well-formed archive ends up at the target path."""
    target = tmp_path / "src"

    await unpack_archive(
        io.BytesIO(repo_tarball()), staging=tmp_path / ".archive", target=target
    )

    assert (target / "content" / "posts" / "hello.md").is_file()
