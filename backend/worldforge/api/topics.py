"""
Topics API: GET /topics (the fixed interview catalog, in question order).
No user header required.
"""
from fastapi import APIRouter

from worldforge.schemas.api import TopicListResponse, TopicResponse
from worldforge.services.topic_catalog import ALL_TOPICS

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=TopicListResponse)
def list_topics():
    """List all interview topics (category, name, description) in the order they are asked."""
    return TopicListResponse(
        items=[TopicResponse(category=t.category.value, name=t.name, description=t.description) for t in ALL_TOPICS]
    )
