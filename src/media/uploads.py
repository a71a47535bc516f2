import asyncio
import io
import logging
import os
import re
import time
import uuid
from dataclasses import dataclass
from typing import Optional

import cloudinary.exceptions
import cloudinary.uploader

from src.config import MediaConfig
from src.exceptions import InvalidMediaError, MediaStorageError

# Get logger
logger = logging.getLogger(__name__)

# accept image files only
IMAGE_FILENAME = re.compile(r"\.(jpg|jpeg|png|gif)\Z", re.IGNORECASE)


class LocalMediaStorage:
    """Writes files under a directory served at a public base URL."""

    def __init__(self, config: MediaConfig):
        self.config = config

    def store(self, content: bytes, name: str) -> str:
        try:
            os.makedirs(self.config.upload_dir, exist_ok=True)
            with open(os.path.join(self.config.upload_dir, name), "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error writing {name} to {self.config.upload_dir}: {e}")
            raise MediaStorageError(str(e))
        return f"{self.config.public_base_url.rstrip('/')}/{name}"


class CloudinaryMediaStorage:
    """Uploads to Cloudinary with the account settings injected through MediaConfig."""

    def __init__(self, config: MediaConfig):
        if not config.cloud_name or not config.api_key or not config.api_secret:
            raise ValueError("Cloudinary storage needs a cloud name, an API key and an API secret")
        self.config = config

    def store(self, content: bytes, name: str) -> str:
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(content),
                public_id=os.path.splitext(name)[0],
                resource_type="image",
                cloud_name=self.config.cloud_name,
                api_key=self.config.api_key,
                api_secret=self.config.api_secret,
                timeout=self.config.timeout
            )
        except (cloudinary.exceptions.Error, OSError) as e:
            logger.error(f"Error uploading {name} to Cloudinary: {e}")
            raise MediaStorageError(str(e))

        url = result.get("secure_url")
        if not url:
            raise MediaStorageError("response carried no secure_url")
        return url


def storage_from_config(config: MediaConfig):
    if config.backend == "cloudinary":
        return CloudinaryMediaStorage(config)
    if config.backend == "local":
        return LocalMediaStorage(config)
    raise ValueError(f"Unknown media backend: {config.backend}")


class MediaUploadPipeline:
    def __init__(self, config: Optional[MediaConfig] = None, storage=None):
        self.config = config or MediaConfig()
        self.storage = storage or storage_from_config(self.config)

    @staticmethod
    def validate(filename: Optional[str]) -> str:
        if not filename or not IMAGE_FILENAME.search(filename):
            logger.warning(f"Rejected upload with non-image name: {filename!r}")
            raise InvalidMediaError(filename or "")
        return os.path.basename(filename)

    @staticmethod
    def storage_name(filename: str) -> str:
        """Timestamp-prefixed name, with a random infix for uploads in the same millisecond."""
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", filename)
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe}"

    async def upload(self, filename: Optional[str], content: bytes) -> str:
        name = self.storage_name(self.validate(filename))
        url = await asyncio.to_thread(self.storage.store, content, name)
        logger.info(f"Stored image {name} at {url}")
        return url


@dataclass(frozen=True)
class ImageUpload:
    filename: Optional[str]
    content: bytes
