"""
API endpoints for club discussions.

Topics live under a club; posts live under a topic and can reply to other
posts, so threads come back as nested trees.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from booktalks_buddy.core.models.io.discussions import (
    PostCreate,
    PostRead,
    PostUpdate,
    TopicCreate,
    TopicModerate,
    TopicRead,
)
from booktalks_buddy.server.services.deps import CurrentUserDep, DiscussionServiceDep

router = APIRouter(tags=["discussions"])


@router.get(
    "/clubs/{club_id}/topics",
    response_model=List[TopicRead],
    summary="List Topics",
    description="Topics of a club, pinned first, then most recently active.",
    response_description="Topics with their post counts.",
    responses={403: {"description": "Not a club member"}},
)
async def list_topics(club_id: str, user: CurrentUserDep, service: DiscussionServiceDep) -> List[TopicRead]:
    return await service.list_topics(club_id, user.id)


@router.post(
    "/clubs/{club_id}/topics",
    response_model=TopicRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Topic",
    description="Open a discussion topic in a club.",
    response_description="The created topic.",
    responses={400: {"description": "Invalid title or content"}, 403: {"description": "Not a club member"}},
)
async def create_topic(
    club_id: str, payload: TopicCreate, user: CurrentUserDep, service: DiscussionServiceDep
) -> TopicRead:
    """
    Create a topic.

    - **title**: 1..200 characters.
    - **content**: Optional opening text, at most 5000 characters.
    """
    topic = await service.create_topic(club_id, user.id, payload)
    return TopicRead.model_validate(topic)


@router.get(
    "/topics/{topic_id}/posts",
    response_model=List[PostRead],
    summary="Get Thread",
    description="All posts of a topic as a tree of replies, oldest first at every level.",
)
async def get_thread(topic_id: str, user: CurrentUserDep, service: DiscussionServiceDep) -> List[PostRead]:
    return await service.get_thread(topic_id, user.id)


@router.post(
    "/topics/{topic_id}/posts",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Post in a topic, optionally as a reply to another post of the same topic.",
    responses={403: {"description": "Topic locked or not a club member"}},
)
async def create_post(topic_id: str, payload: PostCreate, user: CurrentUserDep, service: DiscussionServiceDep) -> PostRead:
    post = await service.create_post(topic_id, user.id, payload)
    return PostRead.model_validate(post)


@router.patch(
    "/topics/{topic_id}/moderation",
    response_model=TopicRead,
    summary="Pin Or Lock Topic",
    description="Pin or lock a topic. Requires club moderation rights.",
)
async def moderate_topic(
    topic_id: str, payload: TopicModerate, user: CurrentUserDep, service: DiscussionServiceDep
) -> TopicRead:
    topic = await service.moderate_topic(topic_id, user.id, payload)
    return TopicRead.model_validate(topic)


@router.delete(
    "/topics/{topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Topic",
    description="Delete a topic with all its posts. Allowed for its author and club moderators.",
)
async def delete_topic(topic_id: str, user: CurrentUserDep, service: DiscussionServiceDep) -> None:
    await service.delete_topic(topic_id, user.id)


@router.patch(
    "/posts/{post_id}",
    response_model=PostRead,
    summary="Edit Post",
    description="Edit the content of one's own post.",
)
async def update_post(post_id: str, payload: PostUpdate, user: CurrentUserDep, service: DiscussionServiceDep) -> PostRead:
    post = await service.update_post(post_id, user.id, payload.content)
    return PostRead.model_validate(post)


@router.delete(
    "/posts/{post_id}",
    response_model=PostRead,
    summary="Delete Post",
    description="Soft delete a post; its replies stay in place. Allowed for the author and club moderators.",
)
async def delete_post(post_id: str, user: CurrentUserDep, service: DiscussionServiceDep) -> PostRead:
    post = await service.delete_post(post_id, user.id)
    return PostRead.model_validate(post)
