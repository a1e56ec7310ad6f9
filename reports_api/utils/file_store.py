import os
import random
import logging
from datetime import datetime, timezone
from fastapi import UploadFile

from reports_api.config import PORT, PUBLIC_HOST, UPLOAD_DIR
from reports_api.utils.errors import ImageValidationError

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE_MB = 5
MAX_UPLOAD_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}


def ensure_upload_dir():
    if not UPLOAD_DIR.exists():
        UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        logger.info("Carpeta uploads/ creada en %s", UPLOAD_DIR)


def generate_filename(original_name: str):
    ext = os.path.splitext(os.path.basename(original_name))[1]

    ts = int(datetime.now(timezone.utc).timestamp() * 1000)
    suffix = random.randint(0, 10**9)

    return f"{ts}-{suffix}{ext}"


def validate_image(filename: str, content_type: str):
    ext = os.path.splitext(filename or "")[1].lower()
    mime = (content_type or "").lower()

    if ext not in ALLOWED_EXTENSIONS or mime not in ALLOWED_MIME_TYPES:
        raise ImageValidationError("Solo se permiten imágenes (jpeg, jpg, png, gif, webp)")


async def save_image(image: UploadFile):
    validate_image(image.filename, image.content_type)

    # one extra byte is enough to tell an oversized file apart
    raw_bytes = await image.read(MAX_UPLOAD_BYTES + 1)

    if len(raw_bytes) > MAX_UPLOAD_BYTES:
        raise ImageValidationError(f"La imagen supera el límite de {MAX_UPLOAD_SIZE_MB}MB")

    filename = generate_filename(image.filename)
    (UPLOAD_DIR / filename).write_bytes(raw_bytes)

    logger.info("Imagen guardada: %s (%d bytes)", filename, len(raw_bytes))
    return filename


def delete_image(filename: str):
    try:
        (UPLOAD_DIR / filename).unlink()
    except FileNotFoundError:
        pass


def image_url(filename):
    if not filename:
        return None

    return f"http://{PUBLIC_HOST}:{PORT}/uploads/{filename}"


def with_image_urls(rows: list):
    return [{**row, "imageUrl": image_url(row["image"])} for row in rows]
