import logging
import os
import re
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
SAFE_SUFFIX = re.compile(r"\.[a-z0-9]{1,16}")


class FileTooLarge(Exception):
    def __init__(self, limit: int):
        super().__init__(f"File exceeds the {limit} byte upload limit")
        self.limit = limit


def safe_suffix(original_name: str) -> str:
    """Lower-cased extension of the client name, or "" when it is not plain alphanumerics."""
    suffix = Path(original_name).suffix.lower()
    return suffix if SAFE_SUFFIX.fullmatch(suffix) else ""


@dataclass(frozen=True)
class StoredFile:
    stored_name: str
    byte_size: int
    path: Path


class FileStore:
    """Uploaded files on local disk, served back under ``url_prefix``."""

    def __init__(self, root: str | os.PathLike, base_url: str,
                 url_prefix: str = "/uploads", max_bytes: int | None = None):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes

    def ensure_ready(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, stored_name: str) -> Path:
        if not stored_name or "/" in stored_name or "\\" in stored_name or stored_name in (".", ".."):
            raise ValueError(f"invalid stored file name: {stored_name!r}")
        return self.root / stored_name

    def public_url(self, stored_name: str) -> str:
        return f"{self.base_url}{self.url_prefix}/{stored_name}"

    def save(self, stream: BinaryIO, original_name: str) -> StoredFile:
        """Copy ``stream`` to disk under a fresh random name.

        The stream is read in chunks, so memory use does not grow with the
        file. The returned size comes from the filesystem, not the client.
        """
        self.ensure_ready()
        stored_name = secrets.token_hex(16) + safe_suffix(original_name)
        path = self.path_for(stored_name)

        written = 0
        try:
            with open(path, "xb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if self.max_bytes is not None and written > self.max_bytes:
                        raise FileTooLarge(self.max_bytes)
                    out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        size = path.stat().st_size
        logger.info("stored %s (%d bytes) from %r", stored_name, size, original_name)
        return StoredFile(stored_name=stored_name, byte_size=size, path=path)

    def delete(self, stored_name: str) -> bool:
        try:
            self.path_for(stored_name).unlink()
        except FileNotFoundError:
            return False
        logger.info("deleted stored file %s", stored_name)
        return True
