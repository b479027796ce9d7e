"""Fragment repository: persistence and content negotiation over a backend."""

from typing import List, Optional, Union

from common.logging_config import get_logger
from fragments import content_types
from fragments.conversion import ConversionEngine
from fragments.exceptions import (
    FragmentNotFoundError,
    InvalidArgumentError,
    UnsupportedConversionError,
)
from fragments.storage.backend import FragmentBackend
from fragments.types import Fragment

logger = get_logger(__name__)


class FragmentRepository:
    """
    Creates, loads, lists, mutates and deletes fragments.

    The backend is injected so the same code runs against memory, S3 or a
    test fixture. Fragments are rebuilt from storage on every read.
    """

    def __init__(self, backend: FragmentBackend, engine: Optional[ConversionEngine] = None):
        self.backend = backend
        self.engine = engine or ConversionEngine()

    def save(self, fragment: Fragment) -> None:
        fragment.touch()
        self.backend.write_fragment(fragment.to_dict())
        logger.debug(f"Fragment metadata saved [id={fragment.id}]")

    def set_data(self, fragment: Fragment, data: bytes) -> None:
        """
        Store a new payload, then the metadata describing it.

        The payload is written first so metadata never claims more bytes
        than storage holds. A metadata failure after the payload write is
        raised as-is and not rolled back.

        Raises:
            InvalidArgumentError: If data is not a byte buffer
            StorageError: If either write fails
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError("data must be a byte buffer")

        data = bytes(data)
        self.backend.write_fragment_data(fragment.owner_id, fragment.id, data)

        fragment.size = len(data)
        fragment.touch()
        self.backend.write_fragment(fragment.to_dict())

        logger.info(f"Fragment data saved [id={fragment.id}]")
        logger.debug(f"Fragment data updated [id={fragment.id}] size={fragment.size}")

    def get_data(self, fragment: Fragment) -> Optional[bytes]:
        """
        Returns:
            The stored payload, or None if none was ever written
        """
        data = self.backend.read_fragment_data(fragment.owner_id, fragment.id)
        logger.debug(f"Fragment data retrieved [id={fragment.id}] size={len(data) if data else 0}")
        return data

    def get_converted_data(self, fragment: Fragment, target_type: Optional[str] = None) -> Optional[bytes]:
        """
        Return the payload in the requested type.

        A request for the fragment's own type (with or without parameters)
        is served unchanged before legality is checked, so a fragment can
        always be fetched as itself.

        Raises:
            UnsupportedConversionError: If target_type is not in fragment.formats
            FragmentNotFoundError: If a conversion is needed but no payload exists
        """
        if not target_type or target_type == fragment.type or target_type == fragment.mime_type.value:
            return self.get_data(fragment)

        try:
            target = content_types.normalize(target_type)
        except InvalidArgumentError as e:
            raise UnsupportedConversionError(f"Cannot convert {fragment.type} to {target_type}") from e

        if target is fragment.mime_type:
            return self.get_data(fragment)

        if target not in fragment.formats:
            logger.warning(
                f"Unsupported conversion [id={fragment.id}] {fragment.type} -> {target_type} "
                f"formats={[f.value for f in fragment.formats]}"
            )
            raise UnsupportedConversionError(f"Cannot convert {fragment.type} to {target_type}")

        data = self.get_data(fragment)
        if data is None:
            raise FragmentNotFoundError(f"Fragment {fragment.id} has no data")

        return self.engine.convert(data, fragment.mime_type, target)

    def by_owner(self, owner_id: str, expand: bool = False) -> Union[List[str], List[Fragment]]:
        records = self.backend.list_fragments(owner_id, expand)
        if not expand:
            return list(records)
        return [Fragment.from_dict(record) for record in records]

    def by_id(self, owner_id: str, fragment_id: str) -> Fragment:
        if not fragment_id:
            raise FragmentNotFoundError("Fragment not found")
        record = self.backend.read_fragment(owner_id, fragment_id)
        if record is None:
            raise FragmentNotFoundError("Fragment not found")
        return Fragment.from_dict(record)

    def delete(self, owner_id: str, fragment_id: str) -> None:
        self.backend.delete_fragment(owner_id, fragment_id)
        logger.info(f"Fragment deleted [id={fragment_id}]")
