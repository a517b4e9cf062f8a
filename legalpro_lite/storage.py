"""
Local File Storage
==================

Flat directory of uploaded files. Stored names are generated so that two
uploads of the same file never collide:

    {sanitized-base}-{epoch-millis}-{random}{ext}
"""

import hashlib
import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_.]")
PUBLIC_PREFIX = "/uploads"


@dataclass
class StoredFile:
    """Metadata of a stored blob"""
    key: str
    size_bytes: int
    sha256: str
    content_type: Optional[str] = None

    @property
    def url(self) -> str:
        return public_url(self.key)


def public_url(key: str) -> str:
    return f"{PUBLIC_PREFIX}/{key}"


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


class LocalStorage:
    """Filesystem storage backend"""

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)

    @staticmethod
    def generate_key(original_name: str) -> str:
        """Collision-resistant stored name derived from the uploaded file name."""
        base_name = os.path.basename(original_name or "") or "file"
        stem, ext = os.path.splitext(base_name)
        stem = sanitize_filename(stem) or "file"
        ext = sanitize_filename(ext)
        millis = int(time.time() * 1000)
        suffix = secrets.randbelow(1_000_000_000)
        return f"{stem}-{millis}-{suffix}{ext}"

    def path_for(self, key: str) -> Path:
        # Keys are flat names; anything with a path component is rejected
        if not key or key != os.path.basename(key) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_path / key

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> StoredFile:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return StoredFile(
            key=key,
            size_bytes=len(data),
            sha256=hashlib.sha256(data).hexdigest(),
            content_type=content_type,
        )

    def get(self, key: str) -> bytes:
        return self.path_for(key).read_bytes()

    def exists(self, key: str) -> bool:
        try:
            return self.path_for(key).is_file()
        except ValueError:
            return False

    def delete(self, key: str) -> bool:
        """Remove a stored file. Failures are logged and reported as False."""
        try:
            self.path_for(key).unlink()
            return True
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to delete stored file {key}: {e}")
            return False


def get_storage(base_path: Optional[str] = None) -> LocalStorage:
    """Storage rooted at the configured upload directory"""
    if base_path is None:
        from .config import get_settings
        base_path = get_settings().upload_dir
    return LocalStorage(base_path=base_path)
