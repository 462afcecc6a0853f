"""
S3 Uploader
Single-part or managed multipart upload to S3 with one put_object fallback
"""
import io
import os
import random
import threading
import time
import unicodedata
from typing import Dict, Optional

import boto3
import botocore.config
from boto3.s3.transfer import TransferConfig

from kbcms.config.settings import MULTIPART_PART_SIZE, MULTIPART_QUEUE_SIZE, MULTIPART_THRESHOLD
from kbcms.exceptions.exceptions import (
    FileReadError, MissingBucketError, MissingFileError, MissingFolderError
)
from kbcms.logging_logs.log_config import get_logger

logger = get_logger(__name__)

CACHE_CONTROL = "max-age=31536000"
SERVER_SIDE_ENCRYPTION = "AES256"
OBJECT_ACL = "public-read"
DEFAULT_MIME_TYPE = "application/octet-stream"

_cfg = botocore.config.Config(
    max_pool_connections=50,
    connect_timeout=10,
    read_timeout=60,
    retries={"max_attempts": 3, "mode": "standard"},
    tcp_keepalive=True,
)


def build_s3_client(settings):
    """Create the S3 client used by the uploader"""
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_DEFAULT_REGION,
        config=_cfg,
    )


def sanitize_filename(name: str) -> str:
    """NFD-normalize and drop combining marks"""
    decomposed = unicodedata.normalize("NFD", name or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class UploadFile:
    """An uploaded file held either in memory (buffer) or on disk (path)"""

    def __init__(self, original_name: str, mime_type: Optional[str] = None, size: Optional[int] = None,
                 buffer: Optional[bytes] = None, path: Optional[str] = None):
        self.original_name = original_name
        self.mime_type = mime_type
        self.size = size
        self.buffer = buffer
        self.path = path

    @classmethod
    def from_storage(cls, storage) -> "UploadFile":
        """Read a werkzeug FileStorage into memory"""
        data = storage.read()
        return cls(
            original_name=storage.filename or "",
            mime_type=storage.mimetype or DEFAULT_MIME_TYPE,
            size=len(data),
            buffer=data,
        )


class S3Uploader:
    """Uploads files into ``{folder}/`` keys of the configured bucket"""

    def __init__(self, client, settings):
        self.client = client
        self.region = settings.AWS_DEFAULT_REGION
        self.default_bucket = settings.AWS_BUCKET
        self.url_base = settings.s3_url_base
        self.cdn_base = settings.cdn_url_base

    def upload(self, file: Optional[UploadFile], folder_name: str, bucket: Optional[str] = None) -> Dict:
        if file is None:
            raise MissingFileError()
        try:
            if not folder_name:
                raise MissingFolderError()
            bucket = bucket or self.default_bucket
            if not bucket:
                raise MissingBucketError()

            original_name = sanitize_filename(file.original_name)
            key = self._build_key(folder_name, original_name)
            body = self._read_body(file)
            size = file.size if file.size is not None else len(body)
            mime_type = file.mime_type or DEFAULT_MIME_TYPE

            logger.info("Uploading %s (%s bytes) to s3://%s/%s", original_name, size, bucket, key)

            if size < MULTIPART_THRESHOLD:
                etag = self._put_object(bucket, key, body, mime_type)
            else:
                try:
                    etag = self._multipart_upload(bucket, key, body, mime_type, size)
                except Exception as e:
                    logger.error("Multipart upload failed for %s, falling back to put_object: %s", key, e)
                    etag = self._put_object(bucket, key, body, mime_type)

            url = self.url_base + key
            result = {
                "success": True,
                "key": key,
                "url": url,
                "cdnUrl": self.cdn_base + key if self.cdn_base else url,
                "fileName": os.path.basename(key),
                "originalName": original_name,
                "size": size,
                "mimeType": mime_type,
                "location": f"https://{bucket}.s3.{self.region}.amazonaws.com/{key}",
                "etag": etag,
            }
            logger.info("Upload complete: %s", key)
            return result
        except Exception as e:
            logger.error("S3 upload failed for %s: %s", file.original_name, e)
            raise
        finally:
            self._cleanup(file)

    @staticmethod
    def _build_key(folder_name: str, original_name: str) -> str:
        ext = os.path.splitext(original_name)[1]
        millis = int(time.time() * 1000)
        return f"{folder_name}/{folder_name}-{millis}-{random.randint(0, 10**9)}{ext}"

    @staticmethod
    def _read_body(file: UploadFile) -> bytes:
        if file.buffer is not None:
            return file.buffer
        if file.path:
            try:
                with open(file.path, "rb") as fh:
                    return fh.read()
            except OSError as e:
                raise FileReadError(f"Could not read file {file.path}: {e}")
        raise FileReadError()

    def _put_object(self, bucket: str, key: str, body: bytes, mime_type: str) -> Optional[str]:
        response = self.client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=mime_type,
            CacheControl=CACHE_CONTROL,
            ServerSideEncryption=SERVER_SIDE_ENCRYPTION,
            ACL=OBJECT_ACL,
        )
        return (response or {}).get("ETag")

    def _multipart_upload(self, bucket: str, key: str, body: bytes, mime_type: str, size: int) -> None:
        config = TransferConfig(
            multipart_threshold=MULTIPART_THRESHOLD,
            multipart_chunksize=MULTIPART_PART_SIZE,
            max_concurrency=MULTIPART_QUEUE_SIZE,
        )
        progress = _UploadProgress(key, size)
        self.client.upload_fileobj(
            io.BytesIO(body),
            bucket,
            key,
            ExtraArgs={
                "ContentType": mime_type,
                "CacheControl": CACHE_CONTROL,
                "ServerSideEncryption": SERVER_SIDE_ENCRYPTION,
                "ACL": OBJECT_ACL,
            },
            Config=config,
            Callback=progress,
        )
        # managed transfers do not surface the ETag
        return None

    @staticmethod
    def _cleanup(file: UploadFile) -> None:
        if not file.path:
            return
        try:
            os.remove(file.path)
        except OSError as e:
            logger.warning("Could not remove temp file %s: %s", file.path, e)


class _UploadProgress:
    """boto3 transfer callback; invoked from transfer threads"""

    def __init__(self, key: str, total: int):
        self.key = key
        self.total = total
        self.loaded = 0
        self._lock = threading.Lock()

    def __call__(self, bytes_amount: int):
        with self._lock:
            self.loaded += bytes_amount
            percent = (self.loaded / self.total * 100) if self.total else 100
            logger.info("Upload progress %s: %s/%s (%.1f%%)", self.key, self.loaded, self.total, percent)
