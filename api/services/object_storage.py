import io
import time
from typing import Any
from urllib.parse import urlparse

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config

from api.core.config import Settings
from src.logging_config import logger

MULTIPART_THRESHOLD_BYTES = 8 * 1024 * 1024
MULTIPART_CHUNK_BYTES = 8 * 1024 * 1024


def _now_ms() -> int:
    return int(time.time() * 1000)


def build_storage_key(category: str, url: str, extension: str, now_ms: int | None = None) -> str:
    """<category>/<hostname>/<epoch millis>.<extension>"""
    hostname = urlparse(url).hostname or "unknown-host"
    timestamp = now_ms if now_ms is not None else _now_ms()
    return f"{category}/{hostname}/{timestamp}.{extension}"


def build_s3_client(settings: Settings) -> Any:
    settings.require_storage()
    session = boto3.session.Session(
        aws_access_key_id=settings.r2_access_key_id,
        aws_secret_access_key=settings.r2_secret_access_key,
    )
    # R2 ignores the region but botocore needs one to sign requests.
    config = Config(region_name="auto", signature_version="s3v4")
    return session.client("s3", endpoint_url=settings.r2_endpoint, config=config)


class ObjectStorage:
    def __init__(self, bucket: str, client: Any) -> None:
        self.bucket = bucket
        self.client = client
        self.transfer_config = TransferConfig(
            multipart_threshold=MULTIPART_THRESHOLD_BYTES,
            multipart_chunksize=MULTIPART_CHUNK_BYTES,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStorage":
        return cls(settings.r2_bucket_name, build_s3_client(settings))

    def close(self) -> None:
        self.client.close()

    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        logger.info("Stored object bucket=%s key=%s bytes=%s", self.bucket, key, len(body))
        return key

    def upload_multipart(self, key: str, data: bytes, content_type: str) -> str:
        """Upload through the managed transfer, which switches to multipart for large payloads."""
        self.client.upload_fileobj(
            io.BytesIO(data),
            self.bucket,
            key,
            ExtraArgs={"ContentType": content_type},
            Config=self.transfer_config,
        )
        logger.info("Uploaded object bucket=%s key=%s bytes=%s", self.bucket, key, len(data))
        return key
