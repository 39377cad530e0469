# vidshare/services/storage.py
# -*- coding: utf-8 -*-
"""
Local media storage under UPLOAD_DIR:

    UPLOAD_DIR/videos/<uuid>_<name>    uploaded videos
    UPLOAD_DIR/avatars/<uuid>_<name>   profile images

Uploads are streamed to disk in chunks and rejected on mime type or size.
Deletion is best-effort: failures are logged and never block the caller.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from fastapi import UploadFile

from vidshare.config import settings
from vidshare.errors import InternalError, ValidationError

log = logging.getLogger("vidshare.storage")

MediaKind = Literal["video", "avatar"]
CHUNK = 1024 * 1024


@dataclass(frozen=True)
class StoredFile:
    name: str
    path: Path
    size: int
    content_type: str


def _sanitize_filename(name: str) -> str:
    name = name or "upload"
    name = re.sub(r"[^\w.\-]+", "_", name)
    return name[:120]


def media_dir(kind: MediaKind) -> Path:
    d = settings.videos_dir if kind == "video" else settings.avatars_dir
    d.mkdir(parents=True, exist_ok=True)
    return d


def _rules(kind: MediaKind) -> tuple[list[str], int, str]:
    if kind == "video":
        return (
            settings.allowed_video_types,
            settings.MAX_VIDEO_SIZE_MB * 1024 * 1024,
            "Invalid file type. Only video files are allowed.",
        )
    return (
        settings.allowed_image_types,
        settings.MAX_IMAGE_SIZE_MB * 1024 * 1024,
        "Invalid file type. Only image files are allowed.",
    )


async def save_upload(upload: UploadFile, kind: MediaKind) -> StoredFile:
    allowed, max_bytes, type_msg = _rules(kind)
    content_type = (upload.content_type or "").lower()
    if content_type not in allowed:
        raise ValidationError(type_msg)

    name = f"{uuid.uuid4().hex}_{_sanitize_filename(upload.filename or kind)}"
    dest = media_dir(kind) / name
    size = 0
    try:
        with dest.open("wb") as f:
            while True:
                chunk = await upload.read(CHUNK)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    break
                f.write(chunk)
    except OSError as e:
        log.exception("could not write %s upload %s", kind, dest)
        delete_media(name, kind)
        raise InternalError("Could not store the uploaded file") from e

    if size > max_bytes:
        delete_media(name, kind)
        raise ValidationError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")

    log.info("stored %s upload %s (%d bytes)", kind, name, size)
    return StoredFile(name=name, path=dest, size=size, content_type=content_type)


def delete_media(name: Optional[str], kind: MediaKind) -> bool:
    """Remove a stored file; returns False (and logs) when it could not be removed."""
    if not name:
        return False
    path = media_dir(kind) / Path(name).name
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        log.warning("media file already gone: %s", path)
        return False
    except OSError:
        log.exception("could not delete media file %s", path)
        return False
