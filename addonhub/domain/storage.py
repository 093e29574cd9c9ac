# addonhub/domain/storage.py
import os
import shutil
from dataclasses import dataclass

import boto3
from botocore.exceptions import ClientError

from ..core.config import get_settings


# ---------------------------------------------------------
# Base class
# ---------------------------------------------------------
class BlobStore:
    def put(self, key: str, file_path: str) -> str:
        """Upload a file and return its key."""
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove the blob; missing keys are ignored."""
        raise NotImplementedError


# ---------------------------------------------------------
# Local filesystem implementation
# ---------------------------------------------------------
@dataclass
class LocalBlobStore(BlobStore):
    root: str

    def put(self, key: str, file_path: str) -> str:
        dst = os.path.join(self.root, key)
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        shutil.copyfile(file_path, dst)
        return key

    def get_path(self, key: str) -> str:
        return os.path.join(self.root, key)

    def exists(self, key: str) -> bool:
        return os.path.isfile(self.get_path(key))

    def delete(self, key: str) -> None:
        try:
            os.remove(self.get_path(key))
        except FileNotFoundError:
            pass


# ---------------------------------------------------------
# AWS S3 implementation
# ---------------------------------------------------------
@dataclass
class S3BlobStore(BlobStore):
    bucket: str
    region: str | None = None

    def __post_init__(self):
        self.client = boto3.client("s3", region_name=self.region)

    def put(self, key: str, file_path: str) -> str:
        self.client.upload_file(file_path, self.bucket, key)
        return key

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError:
            return False
        return True

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)


# ---------------------------------------------------------
# Factory / global getter
# ---------------------------------------------------------
_blob_instance: BlobStore | None = None

def get_blob_store() -> BlobStore:
    """Return the active blob store instance (local or S3)."""
    global _blob_instance
    if _blob_instance:
        return _blob_instance

    s = get_settings()
    if s.STORAGE_BACKEND == "local":
        os.makedirs(s.BLOB_ROOT, exist_ok=True)
        _blob_instance = LocalBlobStore(s.BLOB_ROOT)
    elif s.STORAGE_BACKEND == "s3":
        if not s.S3_BUCKET:
            raise RuntimeError("S3 backend selected but S3_BUCKET is not set")
        _blob_instance = S3BlobStore(bucket=s.S3_BUCKET, region=s.AWS_REGION)
    else:
        raise NotImplementedError(f"Unknown STORAGE_BACKEND={s.STORAGE_BACKEND}")
    return _blob_instance
