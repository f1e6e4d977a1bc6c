"""Listing image storage in the Supabase house-photos bucket."""

import re
from typing import Optional

from ulid import ULID

from protea.services.supabase_client import SupabaseClient
from protea.utils.config import AppConfig
from protea.utils.errors import StorageError
from protea.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

_PUBLIC_PREFIX = re.compile(r"^.*?/object/public/")


def image_object_name(filename: str) -> str:
    """Unique object name keeping the upload's extension."""
    _, dot, ext = filename.rpartition(".")
    ext = ext.lower() if dot and ext else "jpg"
    return f"{ULID()}.{ext}"


def object_path_from_url(path_or_url: str, bucket: Optional[str] = None) -> str:
    """Turn a public object URL into a path inside the bucket.

    ``https://x.supabase.co/storage/v1/object/public/house-photos/a.jpg``
    becomes ``a.jpg``; bare paths pass through.
    """
    bucket = bucket or AppConfig.IMAGE_BUCKET
    path = _PUBLIC_PREFIX.sub("", path_or_url.strip()).split("?", 1)[0]
    if path.startswith(f"{bucket}/"):
        path = path[len(bucket) + 1:]
    return path.lstrip("/")


async def upload_listing_image(data: bytes, filename: str, content_type: str = "image/jpeg") -> str:
    """Upload image bytes and return their public URL."""
    if not data:
        raise StorageError("Empty image upload")

    object_name = image_object_name(filename)
    async with SupabaseClient() as client:
        try:
            bucket = client.storage.from_(AppConfig.IMAGE_BUCKET)
            bucket.upload(object_name, data, {"content-type": content_type})
            public_url = bucket.get_public_url(object_name)
        except Exception as e:
            raise StorageError(f"Failed to upload image: {e}")

    logger.info("Listing image uploaded", object_name=object_name, size_bytes=len(data))
    return public_url


async def remove_listing_image(path_or_url: str) -> str:
    """Delete an image by bucket path or public URL; returns the path removed."""
    path = object_path_from_url(path_or_url)
    if not path:
        raise StorageError("No image path given")

    async with SupabaseClient() as client:
        try:
            client.storage.from_(AppConfig.IMAGE_BUCKET).remove([path])
        except Exception as e:
            raise StorageError(f"Failed to remove image: {e}")

    logger.info("Listing image removed", object_name=path)
    return path
