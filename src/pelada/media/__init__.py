"""Player photo storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4


logger = logging.getLogger("uvicorn.error")

UPLOADS_URL_PREFIX = "/uploads/"
_KEEP_FILES = {".gitkeep"}


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content: bytes


class PhotoStore:
    """Accepts a binary, returns a retrievable URL that doubles as its reference."""

    def save(self, upload: PhotoUpload) -> str:
        raise NotImplementedError

    def delete(self, ref: str) -> bool:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError


class LocalPhotoStore(PhotoStore):
    """Writes photos under ``uploads_dir``; served at ``/uploads/<name>``."""

    def __init__(self, uploads_dir: Path | str):
        self.uploads_dir = Path(uploads_dir)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, ref: str) -> Path | None:
        name = ref[len(UPLOADS_URL_PREFIX):] if ref.startswith(UPLOADS_URL_PREFIX) else ref
        candidate = (self.uploads_dir / name).resolve()
        if candidate.parent != self.uploads_dir.resolve():
            logger.warning("Refusing to touch photo outside uploads dir: %s", ref)
            return None
        return candidate

    def save(self, upload: PhotoUpload) -> str:
        suffix = Path(upload.filename or "").suffix.lower()
        name = f"{uuid4().hex}{suffix}"
        (self.uploads_dir / name).write_bytes(upload.content)
        return f"{UPLOADS_URL_PREFIX}{name}"

    def delete(self, ref: str) -> bool:
        path = self._path_for(ref)
        if path is None or not path.exists():
            return False
        try:
            path.unlink()
        except OSError:
            logger.warning("Failed to delete photo %s", path, exc_info=True)
            return False
        return True

    def clear(self) -> int:
        removed = 0
        for path in self.uploads_dir.iterdir():
            if path.name in _KEEP_FILES or not path.is_file():
                continue
            try:
                path.unlink()
                removed += 1
            except OSError:
                logger.warning("Failed to delete photo %s", path, exc_info=True)
        return removed


__all__ = ["LocalPhotoStore", "PhotoStore", "PhotoUpload", "UPLOADS_URL_PREFIX"]
