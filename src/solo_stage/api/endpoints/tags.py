# src/solo_stage/api/endpoints/tags.py
"""Tag listing endpoint."""

from fastapi import APIRouter

from solo_stage.api.dependencies import SessionDep
from solo_stage.repositories import PostRepository
from solo_stage.schemas.tag import TagListResponse, TagOut

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=TagListResponse)
async def list_tags(db: SessionDep) -> TagListResponse:
    """List tags in use with their post counts, most used first."""
    counts = PostRepository(db).tag_counts()
    return TagListResponse(tags=[TagOut.model_validate(count) for count in counts])
