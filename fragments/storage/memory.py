"""Backend keeping both metadata and payload bytes in process memory."""

from typing import Optional

from common.logging_config import get_logger
from fragments.storage.backend import FragmentBackend
from fragments.storage.memory_db import MemoryDB

logger = get_logger(__name__)


class MemoryBackend(FragmentBackend):
    def __init__(self, metadata_db=None, data_db: Optional[MemoryDB] = None) -> None:
        super().__init__(metadata_db if metadata_db is not None else MemoryDB())
        self.data = data_db if data_db is not None else MemoryDB()

    def write_fragment_data(self, owner_id: str, fragment_id: str, data: bytes) -> None:
        self.data.put(owner_id, fragment_id, bytes(data))
        logger.debug(f"Stored fragment data in memory [id={fragment_id}] size={len(data)}")

    def read_fragment_data(self, owner_id: str, fragment_id: str) -> Optional[bytes]:
        return self.data.get(owner_id, fragment_id)

    def delete_fragment_data(self, owner_id: str, fragment_id: str) -> None:
        self.data.delete(owner_id, fragment_id)
