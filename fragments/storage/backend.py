"""Storage contract shared by the memory and S3 backends."""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from common.logging_config import get_logger
from fragments.exceptions import StorageError

logger = get_logger(__name__)

FragmentRecord = Dict[str, Any]


class FragmentBackend(ABC):
    """
    Persists fragment metadata and payload bytes in two separate stores.

    Metadata always passes through JSON before it reaches the metadata
    store, whatever that store is, so an in-process store behaves exactly
    like a networked one.
    """

    def __init__(self, metadata_db) -> None:
        self.metadata = metadata_db

    def write_fragment(self, record: FragmentRecord) -> None:
        serialized = json.dumps(record)
        self.metadata.put(record["ownerId"], record["id"], serialized)

    def read_fragment(self, owner_id: str, fragment_id: str) -> Optional[FragmentRecord]:
        serialized = self.metadata.get(owner_id, fragment_id)
        if serialized is None:
            return None
        return json.loads(serialized)

    def list_fragments(self, owner_id: str, expand: bool = False) -> Union[List[str], List[FragmentRecord]]:
        """
        List an owner's fragments.

        Args:
            owner_id: Owner partition to read
            expand: Return full metadata records instead of ids

        Returns:
            Ids or records, in no particular order; empty when the owner has none
        """
        records = [json.loads(serialized) for serialized in self.metadata.query(owner_id)]
        if expand:
            return records
        return [record["id"] for record in records]

    def delete_fragment(self, owner_id: str, fragment_id: str) -> None:
        """
        Remove metadata, then payload.

        The payload delete is attempted even when the metadata delete fails.
        Nothing is rolled back: a failure on either side is raised as
        StorageError after both deletes have been tried, and the other side
        may already be gone.
        """
        metadata_error = None
        try:
            self.metadata.delete(owner_id, fragment_id)
        except StorageError as e:
            logger.error(f"Error deleting fragment metadata [id={fragment_id}]; deleting data anyway: {e}")
            metadata_error = e

        self.delete_fragment_data(owner_id, fragment_id)

        if metadata_error is not None:
            raise metadata_error

    @abstractmethod
    def write_fragment_data(self, owner_id: str, fragment_id: str, data: bytes) -> None:
        ...

    @abstractmethod
    def read_fragment_data(self, owner_id: str, fragment_id: str) -> Optional[bytes]:
        ...

    @abstractmethod
    def delete_fragment_data(self, owner_id: str, fragment_id: str) -> None:
        ...
