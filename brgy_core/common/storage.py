# brgy_core/common/storage.py
"""
Object storage helpers on top of Django's default storage.

Local/test: FileSystemStorage under MEDIA_ROOT.
Prod: S3-compatible bucket via django-storages.

Stored paths always carry their folder prefix, e.g.
"learning-materials/1718000000000-123456789-worksheet.pdf".
"""
from __future__ import annotations

import logging
import os
import secrets
import time
from urllib.parse import unquote, urlencode, urlparse

from django.conf import settings
from django.core import signing
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)

FOLDER_LEARNING_MATERIALS = "learning-materials"
FOLDER_PROOFS_OF_RESIDENCY = "proofs-of-residency"

DOWNLOAD_PATH = "/api/v1/files/download/"
_SIGNING_SALT = "brgy_core.files.download"


class StorageError(Exception):
    pass


class InvalidDownloadToken(Exception):
    pass


def _signed_url_ttl() -> int:
    return int(settings.PORTAL.get("SIGNED_URL_TTL_SECONDS", 3600))


def build_object_name(folder: str, original_name: str) -> str:
    base = get_valid_filename(os.path.basename(original_name or "")) or "file"
    return f"{folder}/{int(time.time() * 1000)}-{secrets.randbelow(10**9)}-{base}"


def upload_file(folder: str, file, *, name: str | None = None) -> str:
    """
    Save an uploaded file and return its storage path.
    Raises StorageError when the backend refuses the write.
    """
    path = name or build_object_name(folder, getattr(file, "name", ""))
    try:
        saved = default_storage.save(path, file)
    except Exception as exc:
        logger.exception("Storage upload failed path=%s", path)
        raise StorageError(f"Failed to upload file: {exc}") from exc

    logger.info("Stored file path=%s", saved)
    return saved


def delete_file(path: str) -> None:
    if not path:
        return
    try:
        default_storage.delete(path)
    except Exception as exc:
        logger.exception("Storage delete failed path=%s", path)
        raise StorageError(f"Failed to delete file: {exc}") from exc


def discard_file(path: str) -> None:
    """
    Remove an upload whose database row was never written.
    Delete failures are logged, not raised.
    """
    try:
        delete_file(path)
    except StorageError:
        logger.exception("Orphaned upload left in storage path=%s", path)

def file_exists(path: str) -> bool:
    return bool(path) and default_storage.exists(path)


def open_file(path: str):
    return default_storage.open(path, "rb")


def get_download_url(path: str, *, expires_in: int | None = None) -> str:
    """
    Signed, time-limited download URL (default 1 hour).
    """
    ttl = int(expires_in or _signed_url_ttl())
    token = signing.TimestampSigner(salt=_SIGNING_SALT).sign_object({"p": path, "ttl": ttl})
    return f"{DOWNLOAD_PATH}?{urlencode({'token': token})}"


def resolve_download_token(token: str) -> str:
    """
    Returns the storage path for a valid token, raises InvalidDownloadToken otherwise.
    """
    signer = signing.TimestampSigner(salt=_SIGNING_SALT)
    try:
        payload = signer.unsign_object(token)
        signer.unsign_object(token, max_age=int(payload.get("ttl", _signed_url_ttl())))
    except signing.SignatureExpired as exc:
        raise InvalidDownloadToken("Download link has expired.") from exc
    except (signing.BadSignature, ValueError, TypeError) as exc:
        raise InvalidDownloadToken("Invalid download link.") from exc
    return payload["p"]


def extract_file_path_from_url(url: str, folder: str) -> str:
    """
    Accepts either a stored path ("folder/name") or a full storage URL and
    returns the stored path. Empty string when the folder is not present.
    """
    if not url:
        return ""
    if url.startswith(f"{folder}/"):
        return url

    path = unquote(urlparse(url).path)
    marker = f"/{folder}/"
    idx = path.find(marker)
    if idx < 0:
        return ""
    return path[idx + 1:]
