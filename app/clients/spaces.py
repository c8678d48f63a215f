from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import SpacesSettings
from app.domain.errors import StorageUploadError

logger = logging.getLogger(__name__)


class SpacesStorageClient:
    """S3-compatible object storage (DigitalOcean Spaces) with public-read objects."""

    def __init__(self, settings: SpacesSettings, s3_client: object | None = None) -> None:
        if not settings.enabled:
            raise ValueError("SpacesStorageClient requires endpoint, bucket, key and secret")
        self._endpoint = settings.endpoint
        self._bucket = settings.bucket
        self._s3_client = s3_client or boto3.client(
            "s3",
            region_name=settings.region,
            endpoint_url=f"https://{settings.endpoint}",
            aws_access_key_id=settings.key,
            aws_secret_access_key=settings.secret,
        )

    def public_url(self, key: str) -> str:
        return f"https://{self._bucket}.{self._endpoint}/{key}"

    def put_bytes(self, *, key: str, payload: bytes, content_type: str) -> str:
        try:
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=payload,
                ContentType=content_type,
                ACL="public-read",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to upload %s to bucket %s: %s", key, self._bucket, exc)
            raise StorageUploadError(f"upload failed for {key}") from exc
        return self.public_url(key)
