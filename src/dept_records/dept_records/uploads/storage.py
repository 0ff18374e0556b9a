from __future__ import annotations

import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.constants import ALLOWED_UPLOAD_MIMETYPES, UPLOAD_URL_PREFIX
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class UploadStore:
    """Files on local disk, addressed by `/uploads/<name>` URLs."""

    def __init__(self, folder: str | Path):
        self._folder = Path(folder).resolve()
        self._folder.mkdir(parents=True, exist_ok=True)

    @property
    def folder(self) -> Path:
        return self._folder

    def save(self, file: Optional[FileStorage], *, field_name: str = "file") -> str:
        """Store an upload under a unique name and return its URL."""

        if file is None or not file.filename:
            raise ValidationError("No file uploaded or invalid file type")
        if file.mimetype not in ALLOWED_UPLOAD_MIMETYPES:
            logger.info("Rejected upload %s (%s)", file.filename, file.mimetype)
            raise ValidationError("No file uploaded or invalid file type")

        ext = os.path.splitext(secure_filename(file.filename))[1].lower()
        name = f"{secure_filename(field_name) or 'file'}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        file.save(self._folder / name)
        logger.info("Stored upload %s as %s", file.filename, name)
        return UPLOAD_URL_PREFIX + name

    def resolve(self, file_url: str) -> Path:
        """Map a file URL (or bare name) to a path inside the upload folder."""

        name = (file_url or "").rstrip("/").split("/")[-1]
        if not name:
            raise ValidationError("Invalid file URL format")
        path = (self._folder / name).resolve()
        if path.parent != self._folder:
            raise ValidationError("Invalid file path")
        return path

    def delete(self, file_url: Optional[str]) -> bool:
        """Remove a stored file; False when it was already gone."""

        if not file_url:
            return False
        path = self.resolve(file_url)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Removed upload %s", path.name)
        return True
