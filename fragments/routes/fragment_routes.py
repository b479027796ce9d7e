"""Fragment API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response, status

from common.logging_config import get_logger
from fragments import config
from fragments.auth import get_current_user
from fragments.exceptions import FragmentTooLargeError
from fragments.schemas.common import StatusResponse
from fragments.schemas.fragments import FragmentListResponse, FragmentMetadata, FragmentResponse
from fragments.services.fragment_service import FragmentService

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/fragments", tags=["Fragments"])


def get_fragment_service(request: Request) -> FragmentService:
    return FragmentService(request.app.state.repository)


async def read_body(request: Request) -> bytes:
    """
    Read the raw request body, enforcing MAX_FRAGMENT_SIZE.

    Runs as an async dependency; the route handlers are sync and run in
    the threadpool.

    Raises:
        FragmentTooLargeError: If the body is larger than the limit
    """
    limit = config.MAX_FRAGMENT_SIZE
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise FragmentTooLargeError(f"Fragment exceeds {limit} bytes")

    body = await request.body()
    if len(body) > limit:
        raise FragmentTooLargeError(f"Fragment exceeds {limit} bytes")
    return body


def fragment_location(request: Request, fragment_id: str) -> str:
    base_url = config.API_URL or str(request.base_url)
    return f"{base_url.rstrip('/')}/v1/fragments/{fragment_id}"


@router.get("", response_model=FragmentListResponse)
def list_fragments(
    expand: Optional[str] = Query(None, description="1 to return full metadata"),
    current_user: str = Depends(get_current_user),
    service: FragmentService = Depends(get_fragment_service),
):
    """
    List the current user's fragments.

    Parameters:
        - expand: "1" to return metadata objects instead of ids

    Returns:
        - fragments: ids, or metadata when expanded
    """
    fragments = service.list_fragments(current_user, expand == "1")
    if expand == "1":
        fragments = [FragmentMetadata.from_fragment(fragment) for fragment in fragments]
    return FragmentListResponse(fragments=fragments)


@router.post("", response_model=FragmentResponse, status_code=status.HTTP_201_CREATED)
def create_fragment(
    request: Request,
    response: Response,
    content_type: Optional[str] = Header(None),
    current_user: str = Depends(get_current_user),
    body: bytes = Depends(read_body),
    service: FragmentService = Depends(get_fragment_service),
):
    """
    Create a fragment from the raw request body.

    Parameters:
        - Content-Type header: declared type of the fragment (required)

    Returns:
        - fragment: metadata of the created fragment, with a Location header

    Raises:
        - 401: Missing or invalid credentials
        - 413: Body larger than MAX_FRAGMENT_SIZE
        - 415: Unsupported Content-Type
    """
    fragment = service.create_fragment(current_user, content_type or "", body)

    response.headers["Location"] = fragment_location(request, fragment.id)
    return FragmentResponse(fragment=FragmentMetadata.from_fragment(fragment))


@router.get("/{fragment_id}/info", response_model=FragmentResponse)
def get_fragment_info(
    fragment_id: str,
    current_user: str = Depends(get_current_user),
    service: FragmentService = Depends(get_fragment_service),
):
    """
    Get a fragment's metadata.

    Raises:
        - 404: Fragment not found
    """
    fragment = service.get_fragment_info(current_user, fragment_id)
    return FragmentResponse(fragment=FragmentMetadata.from_fragment(fragment))


@router.get("/{fragment_id}")
def get_fragment(
    fragment_id: str,
    current_user: str = Depends(get_current_user),
    service: FragmentService = Depends(get_fragment_service),
):
    """
    Get a fragment's data, converted when the id ends in an extension.

    Parameters:
        - fragment_id: id, or id.ext (txt, md, html, json, png, jpg, jpeg, webp, gif, avif)

    Raises:
        - 404: Fragment not found
        - 415: Unknown extension or conversion not allowed for this fragment
    """
    data, content_type = service.get_fragment_data(current_user, fragment_id)
    return Response(content=data, media_type=content_type)


@router.put("/{fragment_id}", response_model=FragmentResponse)
def update_fragment(
    fragment_id: str,
    content_type: Optional[str] = Header(None),
    current_user: str = Depends(get_current_user),
    body: bytes = Depends(read_body),
    service: FragmentService = Depends(get_fragment_service),
):
    """
    Replace a fragment's data. The Content-Type must match the stored type.

    Raises:
        - 400: Content-Type differs from the fragment's type
        - 404: Fragment not found
        - 413: Body larger than MAX_FRAGMENT_SIZE
    """
    fragment = service.update_fragment(current_user, fragment_id, content_type or "", body)
    return FragmentResponse(fragment=FragmentMetadata.from_fragment(fragment))


@router.delete("/{fragment_id}", response_model=StatusResponse)
def delete_fragment(
    fragment_id: str,
    current_user: str = Depends(get_current_user),
    service: FragmentService = Depends(get_fragment_service),
):
    """
    Delete a fragment's metadata and data.

    Raises:
        - 404: Fragment not found
        - 500: A store failed; the other store may already be cleared
    """
    service.delete_fragment(current_user, fragment_id)
    return StatusResponse()
