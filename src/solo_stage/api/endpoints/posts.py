# src/solo_stage/api/endpoints/posts.py
"""Post-related endpoints for the Solo Stage API."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from solo_stage.api.dependencies import AdminDep, SessionDep
from solo_stage.repositories import PostRepository
from solo_stage.schemas.post import (
    PinResponse,
    PinUpdate,
    PostCreate,
    PostCreatedInfo,
    PostCreatedResponse,
    PostEnvelope,
    PostListResponse,
    PostUpdate,
    SuccessResponse,
)
from solo_stage.services.errors import PostNotFoundError
from solo_stage.services.pins import PinCoordinator
from solo_stage.services.post_ids import PostIdExhaustedError, build_post_id_allocator
from solo_stage.services.posts import PostService, post_url

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(db: SessionDep) -> PostService:
    """Return a post service bound to the request's database session."""
    return PostService(db, allocator=build_post_id_allocator(PostRepository(db)))


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


def _post_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")


@router.get("", response_model=PostListResponse)
async def list_posts(
    service: PostServiceDep,
    tag: str | None = Query(None, description="Only posts carrying this tag"),
    pinned: bool = Query(False, description="Only the pinned post"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0, description="Number of posts to skip"),
) -> PostListResponse:
    """List posts, pinned first and then newest first."""
    posts = service.list(tag=tag, pinned_only=pinned, limit=limit, offset=offset)
    return PostListResponse(posts=posts)


@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(post_id: str, service: PostServiceDep) -> PostEnvelope:
    """Get a specific post with its tags and like count."""
    try:
        return PostEnvelope(post=service.get(post_id))
    except PostNotFoundError as err:
        raise _post_not_found() from err


@router.post("", response_model=PostCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    _admin: AdminDep,
    service: PostServiceDep,
) -> PostCreatedResponse:
    """Create a new post under a freshly allocated time-derived id."""
    try:
        post = await service.create(post_data)
    except PostIdExhaustedError as err:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate a post id",
        ) from err

    return PostCreatedResponse(
        post=PostCreatedInfo(id=post.id, url=post_url(post.id), created_at=post.created_at)
    )


@router.put("/{post_id}", response_model=SuccessResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    _admin: AdminDep,
    service: PostServiceDep,
) -> SuccessResponse:
    """Replace a post's fields and its whole tag set."""
    try:
        service.update(post_id, post_data)
    except PostNotFoundError as err:
        raise _post_not_found() from err
    return SuccessResponse()


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(post_id: str, _admin: AdminDep, service: PostServiceDep) -> SuccessResponse:
    """Delete a post; its tag links and likes are removed with it."""
    try:
        service.delete(post_id)
    except PostNotFoundError as err:
        raise _post_not_found() from err
    return SuccessResponse()


@router.put("/{post_id}/pin", response_model=PinResponse)
async def set_pin(
    post_id: str,
    pin_data: PinUpdate,
    _admin: AdminDep,
    db: SessionDep,
) -> PinResponse:
    """Pin or unpin a post; pinning releases any other pinned post."""
    try:
        PinCoordinator(db).set_pinned(post_id, pin_data.is_pinned)
    except PostNotFoundError as err:
        raise _post_not_found() from err
    return PinResponse(is_pinned=pin_data.is_pinned)
