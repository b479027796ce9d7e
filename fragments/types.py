"""Fragment domain type."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from fragments import content_types
from fragments.content_types import MediaType
from fragments.exceptions import InvalidArgumentError, UnsupportedTypeError
from fragments.utils import generate_uuid, parse_iso, to_iso, utc_now


@dataclass
class Fragment:
    """
    One stored blob's descriptor.

    Construction validates but does not persist; see FragmentRepository.
    `id`, `owner_id`, `type` and `created` never change after construction.
    """
    owner_id: str
    type: str
    id: Optional[str] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    size: int = 0
    _media_type: MediaType = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.owner_id or not isinstance(self.owner_id, str):
            raise InvalidArgumentError("ownerId is required")

        if not self.type or not content_types.is_supported_type(self.type):
            raise UnsupportedTypeError(f"unsupported fragment type: {self.type}")

        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise InvalidArgumentError("size must be a non-negative number")

        self._media_type = content_types.normalize(self.type)
        self.id = self.id or generate_uuid()
        now = utc_now()
        self.created = _coerce_timestamp(self.created) or now
        self.updated = _coerce_timestamp(self.updated) or now

    @property
    def mime_type(self) -> MediaType:
        """Declared type without parameters."""
        return self._media_type

    @property
    def is_text(self) -> bool:
        return content_types.is_text(self._media_type)

    @property
    def is_image(self) -> bool:
        return content_types.is_image(self._media_type)

    @property
    def formats(self) -> Tuple[MediaType, ...]:
        """Types this fragment may be converted to."""
        return content_types.CONVERSIONS[self._media_type]

    def touch(self) -> None:
        """
        Refresh `updated`, keeping it strictly increasing even if the
        clock has not advanced since the last refresh.
        """
        now = utc_now()
        if now <= self.updated:
            now = self.updated + timedelta(microseconds=1)
        self.updated = now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "created": to_iso(self.created),
            "updated": to_iso(self.updated),
            "type": self.type,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Fragment":
        return cls(
            owner_id=record.get("ownerId"),
            type=record.get("type"),
            id=record.get("id"),
            created=record.get("created"),
            updated=record.get("updated"),
            size=record.get("size", 0),
        )


def _coerce_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return parse_iso(value)
        except ValueError as e:
            raise InvalidArgumentError(f"invalid timestamp: {value}") from e
    raise InvalidArgumentError(f"invalid timestamp: {value!r}")
