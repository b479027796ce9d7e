"""Backend storing payload bytes in S3 and metadata in a local store."""

from typing import Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from common.logging_config import get_logger
from fragments.exceptions import StorageError
from fragments.storage.backend import FragmentBackend
from fragments.storage.memory_db import MemoryDB

logger = get_logger(__name__)

NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def create_s3_client(region: str, endpoint_url: Optional[str] = None):
    """
    Build an S3 client; endpoint_url points at S3-compatible services such as MinIO.
    """
    return boto3.client(
        "s3",
        region_name=region,
        endpoint_url=endpoint_url,
        config=BotoConfig(
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


class S3Backend(FragmentBackend):
    """
    Payload objects are keyed "{owner_id}/{fragment_id}" in one bucket.

    Transport errors never escape: they are logged with bucket and key and
    re-raised as StorageError.
    """

    def __init__(self, s3_client, bucket: str, metadata_db=None) -> None:
        super().__init__(metadata_db if metadata_db is not None else MemoryDB())
        self.s3 = s3_client
        self.bucket = bucket

    @staticmethod
    def object_key(owner_id: str, fragment_id: str) -> str:
        return f"{owner_id}/{fragment_id}"

    def write_fragment_data(self, owner_id: str, fragment_id: str, data: bytes) -> None:
        key = self.object_key(owner_id, fragment_id)
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=bytes(data))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading fragment data to S3 [bucket={self.bucket}] [key={key}]: {e}")
            raise StorageError("unable to upload fragment data") from e
        logger.debug(f"Uploaded fragment data to S3 [key={key}] size={len(data)}")

    def read_fragment_data(self, owner_id: str, fragment_id: str) -> Optional[bytes]:
        key = self.object_key(owner_id, fragment_id)
        try:
            response = self.s3.get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                logger.debug(f"No fragment data in S3 [key={key}]")
                return None
            logger.error(f"Error reading fragment data from S3 [bucket={self.bucket}] [key={key}]: {e}")
            raise StorageError("unable to read fragment data") from e
        except BotoCoreError as e:
            logger.error(f"Error reading fragment data from S3 [bucket={self.bucket}] [key={key}]: {e}")
            raise StorageError("unable to read fragment data") from e

    def delete_fragment_data(self, owner_id: str, fragment_id: str) -> None:
        key = self.object_key(owner_id, fragment_id)
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                f"Error deleting fragment data from S3 [bucket={self.bucket}] [key={key}]: {e}"
            )
            raise StorageError("unable to delete fragment data") from e
