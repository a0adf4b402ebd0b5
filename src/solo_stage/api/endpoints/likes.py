# src/solo_stage/api/endpoints/likes.py
"""Like endpoints keyed by the caller's hashed IP."""

from fastapi import APIRouter, HTTPException, status

from solo_stage.api.dependencies import ClientTokenDep, SessionDep
from solo_stage.schemas.like import LikeState, LikeToggleResponse
from solo_stage.services.errors import PostNotFoundError
from solo_stage.services.likes import LikeToggle

router = APIRouter(tags=["likes"])


@router.post("/like/{post_id}", response_model=LikeToggleResponse)
async def toggle_like(post_id: str, client_token: ClientTokenDep, db: SessionDep) -> LikeToggleResponse:
    """Like the post, or remove the caller's like if present."""
    try:
        state = LikeToggle(db).toggle(post_id, client_token)
    except PostNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        ) from err
    return LikeToggleResponse(likes=state.likes, liked=state.liked)


@router.get("/likes/{post_id}", response_model=LikeState)
async def get_likes(post_id: str, client_token: ClientTokenDep, db: SessionDep) -> LikeState:
    """Return the like count and whether the caller has liked the post."""
    return LikeToggle(db).state(post_id, client_token)
