"""Unit tests for local artifact storage."""

import io
import zipfile
from pathlib import Path

import pytest

from gangsheets.domain import RenderingError
from gangsheets.infrastructure import LocalArtifactStorage, build_zip_archive


@pytest.fixture
def storage(tmp_path: Path) -> LocalArtifactStorage:
    return LocalArtifactStorage(tmp_path / "files", "http://cdn.local/files/")


class TestBuildZipArchive:
    """Tests for build_zip_archive."""

    def test_contains_every_entry(self) -> None:
        content = build_zip_archive([("a.svg", b"<svg/>"), ("b.svg", b"<svg></svg>")])

        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            assert archive.namelist() == ["a.svg", "b.svg"]
            assert archive.read("b.svg") == b"<svg></svg>"

    def test_empty_archive_is_valid(self) -> None:
        with zipfile.ZipFile(io.BytesIO(build_zip_archive([]))) as archive:
            assert archive.namelist() == []


class TestLocalArtifactStorage:
    """Tests for LocalArtifactStorage."""

    def test_url_for(self, storage: LocalArtifactStorage) -> None:
        assert storage.url_for("t/r.svg") == "http://cdn.local/files/t/r.svg"

    @pytest.mark.parametrize("key", ["", "/etc/passwd", "../outside.svg", "a/../../b"])
    def test_rejects_unsafe_keys(self, storage: LocalArtifactStorage, key: str) -> None:
        with pytest.raises(RenderingError, match="Invalid artifact key"):
            storage.path_for(key)

    @pytest.mark.asyncio
    async def test_store_writes_file(self, storage: LocalArtifactStorage) -> None:
        url = await storage.store("tenant_1/gangsheet_2/r.svg", b"<svg/>", "image/svg+xml")

        assert url == "http://cdn.local/files/tenant_1/gangsheet_2/r.svg"
        path = storage.root / "tenant_1" / "gangsheet_2" / "r.svg"
        assert path.read_bytes() == b"<svg/>"

    @pytest.mark.asyncio
    async def test_store_archive(self, storage: LocalArtifactStorage) -> None:
        url = await storage.store_archive("t/all.zip", [("r1.svg", b"1"), ("r2.svg", b"2")])

        assert url.endswith("/t/all.zip")
        with zipfile.ZipFile(storage.path_for("t/all.zip")) as archive:
            assert sorted(archive.namelist()) == ["r1.svg", "r2.svg"]

    @pytest.mark.asyncio
    async def test_store_failure_is_rendering_error(
        self, storage: LocalArtifactStorage
    ) -> None:
        storage.root.mkdir(parents=True)
        (storage.root / "blocked").write_bytes(b"file, not a directory")

        with pytest.raises(RenderingError, match="Could not store"):
            await storage.store("blocked/r.svg", b"x", "image/svg+xml")

    @pytest.mark.asyncio
    async def test_delete_prefix(self, storage: LocalArtifactStorage) -> None:
        await storage.store("tenant_1/gangsheet_1/a.svg", b"a", "image/svg+xml")
        await storage.store("tenant_1/gangsheet_1/b.zip", b"b", "application/zip")
        await storage.store("tenant_1/gangsheet_2/a.svg", b"a", "image/svg+xml")

        removed = await storage.delete_prefix("tenant_1/gangsheet_1")

        assert removed == 2
        assert not (storage.root / "tenant_1" / "gangsheet_1").exists()
        assert (storage.root / "tenant_1" / "gangsheet_2" / "a.svg").exists()

    @pytest.mark.asyncio
    async def test_delete_missing_prefix(self, storage: LocalArtifactStorage) -> None:
        assert await storage.delete_prefix("tenant_9/gangsheet_9") == 0
