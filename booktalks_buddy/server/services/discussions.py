"""
Service for club discussions.

Topics belong to a club; posts belong to a topic and may reply to another
post. Deleting a post keeps the row so the thread below it stays intact.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy import delete, func
from sqlmodel import select

from booktalks_buddy.core.database.entities.discussions import DiscussionPost, DiscussionTopic
from booktalks_buddy.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from booktalks_buddy.core.models.io.discussions import PostCreate, PostRead, TopicCreate, TopicModerate, TopicRead
from booktalks_buddy.core.validation import validate_optional_text, validate_required_text
from booktalks_buddy.entitlements import can_moderate_club

from .base import BaseService

logger = logging.getLogger(__name__)

DELETED_CONTENT = "[deleted]"


def build_thread(posts: List[DiscussionPost]) -> List[PostRead]:
    """Nest posts under their parents, oldest first at every level."""
    nodes: Dict[str, PostRead] = {p.id: PostRead.model_validate(p) for p in posts}
    roots: List[PostRead] = []
    for post in sorted(posts, key=lambda p: p.created_at):
        node = nodes[post.id]
        parent = nodes.get(post.parent_post_id) if post.parent_post_id else None
        if parent is None:
            roots.append(node)
        else:
            parent.replies.append(node)
    return roots


class DiscussionService(BaseService):
    """Topics and threaded posts of club discussions."""

    async def _topic(self, topic_id: str) -> DiscussionTopic:
        return await self.get_or_404(DiscussionTopic, topic_id, "Topic not found")

    async def _post(self, post_id: str) -> DiscussionPost:
        return await self.get_or_404(DiscussionPost, post_id, "Post not found")

    async def list_topics(self, club_id: str, user_id: str) -> List[TopicRead]:
        """Topics of a club, pinned first, then most recently active."""
        club = await self.get_club(club_id)
        await self.require_member(club, user_id)
        post_counts = (
            select(DiscussionPost.topic_id, func.count().label("post_count"))
            .group_by(DiscussionPost.topic_id)
            .subquery()
        )
        result = await self.session.execute(
            select(DiscussionTopic, func.coalesce(post_counts.c.post_count, 0))
            .outerjoin(post_counts, post_counts.c.topic_id == DiscussionTopic.id)
            .where(DiscussionTopic.club_id == club_id)
            .order_by(DiscussionTopic.is_pinned.desc(), DiscussionTopic.updated_at.desc())
        )
        return [
            TopicRead.model_validate(topic).model_copy(update={"post_count": int(count)})
            for topic, count in result.all()
        ]

    async def create_topic(self, club_id: str, user_id: str, payload: TopicCreate) -> DiscussionTopic:
        club = await self.get_club(club_id)
        await self.require_member(club, user_id)
        topic = DiscussionTopic(
            club_id=club_id,
            user_id=user_id,
            title=self.checked(validate_required_text(payload.title, 200, "Title"), "title"),
            content=self.checked(validate_optional_text(payload.content, 5000, "Content"), "content") or None,
        )
        self.session.add(topic)
        await self.session.commit()
        await self.session.refresh(topic)
        logger.info(f"User {user_id} opened topic {topic.id} in club {club_id}")
        return topic

    async def get_thread(self, topic_id: str, user_id: str) -> List[PostRead]:
        topic = await self._topic(topic_id)
        club = await self.get_club(topic.club_id)
        await self.require_member(club, user_id)
        result = await self.session.execute(
            select(DiscussionPost).where(DiscussionPost.topic_id == topic_id).order_by(DiscussionPost.created_at)
        )
        return build_thread(list(result.scalars().all()))

    async def create_post(self, topic_id: str, user_id: str, payload: PostCreate) -> DiscussionPost:
        """Reply to a topic or to a post in it. Locked topics accept no posts."""
        topic = await self._topic(topic_id)
        club = await self.get_club(topic.club_id)
        await self.require_member(club, user_id)
        if topic.is_locked:
            raise PermissionDeniedError("This topic is locked")
        if payload.parent_post_id:
            parent = await self._post(payload.parent_post_id)
            if parent.topic_id != topic_id:
                raise ValidationError("Parent post belongs to another topic", field="parent_post_id")

        post = DiscussionPost(
            topic_id=topic_id,
            user_id=user_id,
            parent_post_id=payload.parent_post_id,
            content=self.checked(validate_required_text(payload.content, 5000, "Content"), "content"),
        )
        self.session.add(post)
        # Bump the topic so recently active topics sort first
        topic.updated_at = post.created_at
        await self.session.commit()
        await self.session.refresh(post)
        logger.info(f"User {user_id} posted {post.id} in topic {topic_id}")
        return post

    async def update_post(self, post_id: str, user_id: str, content: str) -> DiscussionPost:
        post = await self._post(post_id)
        if post.user_id != user_id:
            raise PermissionDeniedError("You can only edit your own posts")
        if post.is_deleted:
            raise NotFoundError("Post not found")
        post.content = self.checked(validate_required_text(content, 5000, "Content"), "content")
        await self.session.commit()
        await self.session.refresh(post)
        logger.info(f"Post {post_id} edited by its author")
        return post

    async def delete_post(self, post_id: str, user_id: str) -> DiscussionPost:
        """Soft delete by the author or a club moderator."""
        post = await self._post(post_id)
        topic = await self._topic(post.topic_id)
        club = await self.get_club(topic.club_id)
        if post.user_id != user_id:
            ents = await self.entitlements(user_id)
            self.require(can_moderate_club(ents, club.id, club.store_id), "Only moderators can delete posts")
        post.is_deleted = True
        post.content = DELETED_CONTENT
        await self.session.commit()
        await self.session.refresh(post)
        logger.info(f"Post {post_id} deleted by {user_id}")
        return post

    async def moderate_topic(self, topic_id: str, user_id: str, payload: TopicModerate) -> DiscussionTopic:
        topic = await self._topic(topic_id)
        club = await self.get_club(topic.club_id)
        ents = await self.entitlements(user_id)
        self.require(can_moderate_club(ents, club.id, club.store_id), "Only moderators can pin or lock topics")
        if payload.is_pinned is not None:
            topic.is_pinned = payload.is_pinned
        if payload.is_locked is not None:
            topic.is_locked = payload.is_locked
        await self.session.commit()
        await self.session.refresh(topic)
        logger.info(f"Topic {topic_id} moderated by {user_id}: pinned={topic.is_pinned} locked={topic.is_locked}")
        return topic

    async def delete_topic(self, topic_id: str, user_id: str) -> None:
        topic = await self._topic(topic_id)
        club = await self.get_club(topic.club_id)
        if topic.user_id != user_id:
            ents = await self.entitlements(user_id)
            self.require(can_moderate_club(ents, club.id, club.store_id), "Only moderators can delete topics")
        await self.session.execute(delete(DiscussionPost).where(DiscussionPost.topic_id == topic_id))
        await self.session.delete(topic)
        await self.session.commit()
        logger.info(f"Topic {topic_id} deleted by {user_id}")

