"""Filesystem writer for captured screenshots."""

import asyncio
import logging
from pathlib import Path

from .base import FileWriter

logger = logging.getLogger(__name__)


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class LocalFileWriter(FileWriter):
    """Writes bytes to the local filesystem, creating parent directories."""

    __slots__ = ()

    async def write(self, path: Path, data: bytes) -> None:
        await asyncio.to_thread(_write_bytes, path, data)
        logger.debug("Wrote %d bytes to %s", len(data), path)
