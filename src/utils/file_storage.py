"""Storage of uploaded assignment files on local disk."""

import logging
import re
import secrets
import time
from pathlib import Path
from typing import Optional, Tuple

from config import (
    ALLOWED_UPLOAD_EXTENSIONS,
    ASSIGNMENT_UPLOAD_DIR,
    MAX_UPLOAD_SIZE_BYTES,
    UPLOADS_DIR,
)
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._\-가-힣]")


def sanitize_filename(filename: str) -> str:
    """Reduce a client file name to a safe basename."""
    name = Path(filename).name
    name = _UNSAFE_CHARS.sub("_", name)
    return name or "file"


def validate_upload(filename: Optional[str], size: int) -> None:
    """Check extension and size of an upload.

    Raises:
        ValidationError: If the file is not allowed.
    """
    if not filename:
        raise ValidationError("File name is missing")
    extension = Path(filename).suffix.lower()
    if extension not in ALLOWED_UPLOAD_EXTENSIONS:
        raise ValidationError(f"File type not allowed: {filename}")
    if size > MAX_UPLOAD_SIZE_BYTES:
        raise ValidationError(f"File exceeds the 50MB limit: {filename}")


def save_assignment_file(filename: str, content: bytes) -> Tuple[str, Path]:
    """Write an upload below the assignment directory.

    Returns:
        The path relative to the uploads root (stored in the database) and
        the absolute path on disk.
    """
    ASSIGNMENT_UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    stored_name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{sanitize_filename(filename)}"
    target = ASSIGNMENT_UPLOAD_DIR / stored_name
    # "x" refuses to overwrite another upload
    with open(target, "xb") as f:
        f.write(content)
    relative = target.relative_to(UPLOADS_DIR).as_posix()
    return relative, target


def remove_stored_file(relative_path: str) -> bool:
    """Delete a stored file; failures are logged and reported as False."""
    target = UPLOADS_DIR / relative_path
    try:
        target.unlink()
    except FileNotFoundError:
        logger.warning("Stored file already missing: %s", target)
        return False
    except OSError as e:
        logger.error("Failed to delete stored file %s: %s", target, e)
        return False
    return True
