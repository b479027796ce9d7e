"""Fragment service for business logic."""

from typing import List, Tuple, Union

from common.logging_config import get_logger
from fragments import content_types
from fragments.exceptions import (
    FragmentNotFoundError,
    FragmentTypeMismatchError,
    UnsupportedConversionError,
    UnsupportedTypeError,
)
from fragments.repositories.fragment_repository import FragmentRepository
from fragments.types import Fragment
from fragments.utils import split_extension

logger = get_logger(__name__)


class FragmentService:
    def __init__(self, repository: FragmentRepository):
        self.repository = repository

    def create_fragment(self, owner_id: str, content_type: str, data: bytes) -> Fragment:
        if not content_types.is_supported_type(content_type):
            logger.warning(f"Rejected fragment with unsupported type: {content_type}")
            raise UnsupportedTypeError(f"Unsupported Content-Type: {content_type}")

        fragment = Fragment(owner_id=owner_id, type=content_type)
        self.repository.set_data(fragment, data)

        logger.info(f"Fragment created [id={fragment.id}] type={fragment.type} size={fragment.size}")
        return fragment

    def update_fragment(self, owner_id: str, fragment_id: str, content_type: str, data: bytes) -> Fragment:
        """
        Replace a fragment's data; its declared type cannot change.

        Raises:
            FragmentNotFoundError: If the fragment does not exist
            FragmentTypeMismatchError: If content_type differs from the stored type
        """
        fragment = self.repository.by_id(owner_id, fragment_id)

        if not content_types.is_supported_type(content_type) or \
                content_types.normalize(content_type) is not fragment.mime_type:
            logger.warning(
                f"Cannot change fragment type [id={fragment_id}] {fragment.type} -> {content_type}"
            )
            raise FragmentTypeMismatchError(
                f"Fragment type cannot be changed from {fragment.type} to {content_type}"
            )

        self.repository.set_data(fragment, data)
        logger.info(f"Fragment updated [id={fragment_id}] size={fragment.size}")
        return fragment

    def list_fragments(self, owner_id: str, expand: bool = False) -> Union[List[str], List[Fragment]]:
        fragments = self.repository.by_owner(owner_id, expand)
        logger.info(f"Found {len(fragments)} fragments for owner")
        return fragments

    def get_fragment_info(self, owner_id: str, fragment_id: str) -> Fragment:
        return self.repository.by_id(owner_id, fragment_id)

    def get_fragment_data(self, owner_id: str, id_with_ext: str) -> Tuple[bytes, str]:
        """
        Fetch a fragment's data, converted when the id carries an extension.

        Args:
            owner_id: Owner of the fragment
            id_with_ext: Fragment id, optionally followed by ".ext"

        Returns:
            (data, content_type) to send back

        Raises:
            FragmentNotFoundError: If the fragment or its data does not exist
            UnsupportedConversionError: If the extension is unknown or not a legal target
        """
        fragment_id, extension = split_extension(id_with_ext)
        fragment = self.repository.by_id(owner_id, fragment_id)

        if extension is None:
            data = self.repository.get_data(fragment)
            content_type = fragment.type
        else:
            target = content_types.type_for_extension(extension)
            if target is None:
                logger.warning(f"Unsupported extension: .{extension}")
                raise UnsupportedConversionError(f"Unsupported file extension: .{extension}")

            data = self.repository.get_converted_data(fragment, target.value)
            content_type = fragment.type if target is fragment.mime_type else target.value
            logger.info(f"Fragment converted [id={fragment_id}] {fragment.type} -> {target.value}")

        if data is None:
            raise FragmentNotFoundError(f"Fragment {fragment_id} has no data")

        return data, content_type

    def delete_fragment(self, owner_id: str, fragment_id: str) -> None:
        self.repository.by_id(owner_id, fragment_id)
        self.repository.delete(owner_id, fragment_id)
