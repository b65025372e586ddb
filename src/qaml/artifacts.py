"""Save diagnostic attachments (screenshots, element dumps) to disk."""
import io
import logging
from pathlib import Path

from PIL import Image

from . import config

log = logging.getLogger(__name__)

SUFFIXES = {"png": ".png", "json": ".json", "text": ".txt"}


def png_to_thumbnail(png_bytes: bytes) -> bytes | None:
    """Downscale a PNG screenshot to a small JPEG preview."""
    try:
        img = Image.open(io.BytesIO(png_bytes))
        img.thumbnail((config.THUMBNAIL_MAX_DIM, config.THUMBNAIL_MAX_DIM))
        buf = io.BytesIO()
        img.convert("RGB").save(buf, format="JPEG", quality=config.THUMBNAIL_JPEG_QUALITY)
        return buf.getvalue()
    except Exception as e:
        log.warning(f"Failed to build thumbnail: {e}")
        return None


def save_attachment(activity_id: str, name: str, data: bytes, kind: str = "text", artifacts_dir: Path = None) -> dict:
    """Write one attachment (plus a thumbnail for screenshots). Returns {"full": ..., "thumb": ...}."""
    artifacts_dir = artifacts_dir or config.ARTIFACTS_DIR
    artifacts_dir.mkdir(parents=True, exist_ok=True)

    full_name = f"{activity_id}_{name}{SUFFIXES.get(kind, '.bin')}"
    try:
        (artifacts_dir / full_name).write_bytes(data)
    except Exception as e:
        log.error(f"Failed to save attachment {full_name}: {e}")
        return {}

    result = {"full": full_name}

    if kind == "png":
        thumb_bytes = png_to_thumbnail(data)
        if thumb_bytes is not None:
            thumb_name = f"{activity_id}_{name}_thumb.jpg"
            try:
                (artifacts_dir / thumb_name).write_bytes(thumb_bytes)
                result["thumb"] = thumb_name
            except Exception as e:
                log.warning(f"Failed to save thumbnail {thumb_name}: {e}")

    return result


def cleanup_artifacts(activity_ids: list[str], artifacts_dir: Path = None) -> int:
    """Delete every attachment written for the given activities. Returns number of files deleted."""
    artifacts_dir = artifacts_dir or config.ARTIFACTS_DIR
    if not artifacts_dir.exists():
        return 0
    count = 0
    for activity_id in activity_ids:
        for path in artifacts_dir.glob(f"{activity_id}_*"):
            try:
                path.unlink()
                count += 1
            except Exception as e:
                log.warning(f"Failed to delete attachment {path.name}: {e}")
    return count
