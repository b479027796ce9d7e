"""Storage backends for fragment metadata and payload bytes."""

from common.logging_config import get_logger
from fragments import config
from fragments.storage.backend import FragmentBackend
from fragments.storage.memory import MemoryBackend
from fragments.storage.memory_db import MemoryDB
from fragments.storage.s3 import S3Backend, create_s3_client
from fragments.storage.sqlite_db import SqliteDB

logger = get_logger(__name__)


def create_backend() -> FragmentBackend:
    """
    Choose a backend from the environment.

    S3 holds payloads when AWS_S3_BUCKET_NAME is set; metadata goes to
    SQLite when FRAGMENTS_DATABASE_PATH is set and to memory otherwise.
    """
    if config.FRAGMENTS_DATABASE_PATH:
        metadata_db = SqliteDB(config.FRAGMENTS_DATABASE_PATH)
        logger.info(f"Using SQLite metadata store at {config.FRAGMENTS_DATABASE_PATH}")
    else:
        metadata_db = MemoryDB()
        logger.info("Using in-memory metadata store")

    if config.AWS_S3_BUCKET_NAME:
        logger.info(f"Using S3 for fragment data [bucket={config.AWS_S3_BUCKET_NAME}]")
        client = create_s3_client(config.AWS_REGION, config.AWS_S3_ENDPOINT_URL)
        return S3Backend(client, config.AWS_S3_BUCKET_NAME, metadata_db=metadata_db)

    logger.info("Using in-memory storage for fragment data")
    return MemoryBackend(metadata_db=metadata_db)


__all__ = [
    "FragmentBackend",
    "MemoryBackend",
    "MemoryDB",
    "S3Backend",
    "SqliteDB",
    "create_backend",
    "create_s3_client",
]
