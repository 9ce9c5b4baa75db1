import logging
import time
import uuid
from pathlib import Path

from fastapi import Request, UploadFile

from intake.config import Settings
from intake.utils.errors import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
FILE_TOO_LARGE_MESSAGE = "ဖိုင်အရွယ်အစား 5MB ထက် မကျော်ရပါ"


def ensure_upload_dir(config: Settings) -> Path:
    config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    return config.UPLOAD_DIR


def generate_stored_name(original_filename: str | None) -> str:
    """Millisecond timestamp, random suffix and the original extension."""
    extension = Path(original_filename or "").suffix.lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"


def _resolve(config: Settings, stored_name: str) -> Path:
    # Stored names never carry directories
    return config.UPLOAD_DIR / Path(stored_name).name


async def save_upload(upload: UploadFile, config: Settings) -> str:
    """Write an uploaded part into the upload folder under a fresh name.

    Raises ValidationError when the part exceeds MAX_UPLOAD_BYTES; the
    partially written file is removed first.
    """
    stored_name = generate_stored_name(upload.filename)
    target = _resolve(config, stored_name)
    ensure_upload_dir(config)

    written = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > config.MAX_UPLOAD_BYTES:
                    raise ValidationError(FILE_TOO_LARGE_MESSAGE)
                out.write(chunk)
    except Exception:
        target.unlink(missing_ok=True)
        raise

    logger.info("Stored upload %s as %s (%s bytes)", upload.filename, stored_name, written)
    return stored_name


def delete_stored_file(stored_name: str | None, config: Settings) -> bool:
    """Remove a stored file; an already missing file is not an error."""
    if not stored_name:
        return False
    target = _resolve(config, stored_name)
    try:
        target.unlink()
    except FileNotFoundError:
        logger.info("Stored file %s already absent", stored_name)
        return False
    except OSError:
        logger.exception("Failed to delete stored file %s", stored_name)
        return False
    logger.info("Deleted stored file %s", stored_name)
    return True


def discard_files(stored_names, config: Settings) -> None:
    for stored_name in stored_names:
        delete_stored_file(stored_name, config)


def build_file_url(request: Request, stored_name: str, config: Settings) -> str:
    base = str(request.base_url).rstrip("/")
    return f"{base}{config.UPLOAD_URL_PREFIX}/{stored_name}"
