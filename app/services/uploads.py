"""
Photo file uploads: decode base64 payloads and write them under UPLOAD_DIR.

Stored names are "{unix_time_ms}_{random_base36}_{original_name}" so
concurrent uploads of the same file name never collide.
"""

import asyncio
import base64
import binascii
import logging
import secrets
import string
import time
from pathlib import Path, PurePath
from typing import List, Optional

from app.core.config import get_settings
from app.core.exceptions import UploadError
from app.core.logging_config import UPLOADS_LOGGER_NAME
from app.schemas.uploads import UploadedFile, UploadFileData

# Upload logs go to logs/uploads.log (see app/core/logging_config.py)
logger = logging.getLogger(UPLOADS_LOGGER_NAME)

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def unique_file_name(original_name: str, now_ms: Optional[int] = None) -> str:
    """
    Build the stored file name for an upload.

    Directory components in original_name are dropped so a name cannot escape UPLOAD_DIR.
    """
    safe_name = PurePath(original_name.replace("\\", "/")).name or "file"
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}_{_to_base36(secrets.randbits(52))}_{safe_name}"


def _decode(file_data: UploadFileData) -> bytes:
    try:
        return base64.b64decode(file_data.base64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UploadError(f"Invalid base64 data for file {file_data.name}", status_code=400) from e


async def _remove_written(paths: List[Path]) -> None:
    """Delete files already stored by a batch that failed part way."""
    for path in paths:
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s after failed upload: %s", path.name, e)
        else:
            logger.info("Removed %s after failed upload", path.name)


async def save_uploaded_files(
    files: List[UploadFileData],
    upload_dir: Optional[str] = None,
    url_prefix: Optional[str] = None,
) -> List[UploadedFile]:
    """
    Decode and store each file; return where each one was written.

    **Input (request):**
        - files: name, base64Data, size, type, optional description per file.
        - upload_dir: Target directory. Default from settings UPLOAD_DIR.
        - url_prefix: Public URL prefix for file_path. Default from settings UPLOAD_URL_PREFIX.

    **Output (response):**
        - UploadedFile list (file_name, file_path = "{url_prefix}/{file_name}", original name, size, mime type, description).

    Raises UploadError (400) for undecodable data and UploadError (500) when a write fails.
    Files already written by a batch that fails part way are removed again.
    """
    settings = get_settings()
    target_dir = Path(upload_dir or settings.UPLOAD_DIR)
    prefix = (url_prefix if url_prefix is not None else settings.UPLOAD_URL_PREFIX).rstrip("/")

    payloads = [(f, _decode(f)) for f in files]
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Cannot create upload directory %s: %s", target_dir, e)
        raise UploadError("Failed to prepare upload directory") from e

    stored: List[UploadedFile] = []
    written: List[Path] = []
    for file_data, content in payloads:
        file_name = unique_file_name(file_data.name)
        path = target_dir / file_name
        try:
            await asyncio.to_thread(path.write_bytes, content)
        except OSError as e:
            logger.error("Failed to write %s: %s", file_name, e)
            await _remove_written([*written, path])
            raise UploadError(f"Failed to save file {file_data.name}") from e
        written.append(path)
        stored.append(
            UploadedFile(
                file_name=file_name,
                file_path=f"{prefix}/{file_name}",
                original_name=file_data.name,
                size=file_data.size,
                mime_type=file_data.type,
                description=file_data.description,
            )
        )
        logger.info(
            "Saved upload %s (%s bytes, description: %s)",
            file_name,
            len(content),
            file_data.description or "none",
        )
    return stored
