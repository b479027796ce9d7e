"""Pydantic schemas for fragment endpoints."""

from typing import List, Union

from pydantic import BaseModel, Field

from fragments.types import Fragment


class FragmentMetadata(BaseModel):
    """Metadata of one fragment, as stored."""
    id: str
    owner_id: str = Field(serialization_alias="ownerId")
    created: str
    updated: str
    type: str
    size: int

    @classmethod
    def from_fragment(cls, fragment: Fragment) -> "FragmentMetadata":
        record = fragment.to_dict()
        return cls(
            id=record["id"],
            owner_id=record["ownerId"],
            created=record["created"],
            updated=record["updated"],
            type=record["type"],
            size=record["size"],
        )


class FragmentResponse(BaseModel):
    """Response model for create, update and info."""
    status: str = "ok"
    fragment: FragmentMetadata


class FragmentListResponse(BaseModel):
    """Response model for fragment listing; ids unless expanded."""
    status: str = "ok"
    fragments: Union[List[FragmentMetadata], List[str]]
