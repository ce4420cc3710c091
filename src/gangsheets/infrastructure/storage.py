"""Local filesystem storage for rendered gangsheet files."""

from __future__ import annotations

import asyncio
import io
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Sequence

from gangsheets.domain.exceptions import RenderingError

logger = logging.getLogger(__name__)

ZIP_MEDIA_TYPE = "application/zip"


def build_zip_archive(entries: Sequence[tuple[str, bytes]]) -> bytes:
    """Pack ``(filename, content)`` pairs into an in-memory ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for filename, content in entries:
            archive.writestr(filename, content)
    return buffer.getvalue()


class LocalArtifactStorage:
    """Writes artifacts below a root directory served at ``base_url``.

    Keys are relative POSIX paths such as ``tenant_1/gangsheet_5/roll_1.svg``;
    the URL of a stored file is ``{base_url}/{key}``.

    Attributes:
        root: Directory files are written to.
        base_url: Public URL prefix the root directory is served under.
    """

    def __init__(self, root: Path | str, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def path_for(self, key: str) -> Path:
        """Filesystem path of ``key``.

        Raises:
            RenderingError: If the key is absolute or escapes the root.
        """
        relative = PurePosixPath(key)
        if not key or relative.is_absolute() or ".." in relative.parts:
            raise RenderingError(f"Invalid artifact key: {key!r}")
        return self.root.joinpath(*relative.parts)

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    async def store(self, key: str, content: bytes, media_type: str) -> str:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(self._write, path, content)
        except OSError as e:
            raise RenderingError(f"Could not store {key}: {e}") from e
        logger.debug("Stored %s (%s, %d bytes)", key, media_type, len(content))
        return self.url_for(key)

    async def store_archive(
        self, key: str, entries: Sequence[tuple[str, bytes]]
    ) -> str:
        content = await asyncio.to_thread(build_zip_archive, entries)
        return await self.store(key, content, ZIP_MEDIA_TYPE)

    async def delete_prefix(self, prefix: str) -> int:
        path = self.path_for(prefix)
        return await asyncio.to_thread(self._delete_tree, path)

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    @staticmethod
    def _delete_tree(path: Path) -> int:
        if not path.exists():
            return 0
        if path.is_file():
            path.unlink()
            return 1
        removed = sum(1 for p in path.rglob("*") if p.is_file())
        shutil.rmtree(path)
        return removed
