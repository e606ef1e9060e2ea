# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError

from inkwell.core.content import strip_to_plain_text
from inkwell.core.results import Err, Invalid, NotPermitted, Ok
from inkwell.infra.post_repo import Post, PostRepo

logger = logging.getLogger(__name__)

TITLE_MAX = 200
BODY_MAX = 10000


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix (sorts lexicographically)."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_post(title: object, body: object) -> Tuple[List[str], str, str]:
    """Check a submitted title/body pair.

    Returns ``(errors, clean_title, clean_body)``; the clean values are trimmed
    and stripped of all markup and are only meaningful when ``errors`` is empty.
    """
    errors: List[str] = []
    t = title if isinstance(title, str) else ""
    b = body if isinstance(body, str) else ""

    if t.strip() == "":
        errors.append("Invalid title")
    if b.strip() == "":
        errors.append("Invalid content")

    if len(t) > TITLE_MAX:
        errors.append(f"Title must be less than {TITLE_MAX} characters")
    if len(b) > BODY_MAX:
        errors.append("Content must be less than 10,000 characters")

    clean_title = strip_to_plain_text(t.strip())
    clean_body = strip_to_plain_text(b.strip())
    if not clean_title.strip() or not clean_body.strip():
        errors.append("Invalid title or content")

    return errors, clean_title, clean_body


class PostService:
    """Post CRUD with the ownership gate.

    Reads are open to everyone. Mutations need the owner's id; a missing post
    and a post owned by someone else produce the same ``NotPermitted``.
    """

    def __init__(self, posts: PostRepo, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self.posts = posts
        self.clock = clock

    def list_owned_posts(self, user_id: int) -> List[Post]:
        return self.posts.list_by_owner(user_id)

    def get_post(self, post_id: Optional[int]) -> Optional[Post]:
        if post_id is None:
            return None
        return self.posts.get(post_id)

    def owned_post(self, post_id: Optional[int], owner_id: int) -> Optional[Post]:
        post = self.get_post(post_id)
        if post is None or post.owner_id != owner_id:
            logger.warning("Post %s not writable by user %s", post_id, owner_id)
            return None
        return post

    def create_post(
        self, owner_id: int, title: object, body: object
    ) -> Union[Ok[Post], Err[Invalid], Err[NotPermitted]]:
        errors, clean_title, clean_body = validate_post(title, body)
        if errors:
            return Err(Invalid(tuple(errors)))
        try:
            post = self.posts.insert(
                owner_id=owner_id,
                created_at=_iso(self.clock()),
                title=clean_title,
                body=clean_body,
            )
        except IntegrityError:
            logger.warning("Post rejected: owner %s does not exist", owner_id)
            return Err(NotPermitted())
        logger.info("Created post id=%s owner=%s", post.id, owner_id)
        return Ok(post)

    def update_post(
        self, post_id: Optional[int], owner_id: int, title: object, body: object
    ) -> Union[Ok[Post], Err[Invalid], Err[NotPermitted]]:
        post = self.owned_post(post_id, owner_id)
        if post is None:
            return Err(NotPermitted())
        errors, clean_title, clean_body = validate_post(title, body)
        if errors:
            return Err(Invalid(tuple(errors)))
        self.posts.update(post.id, title=clean_title, body=clean_body)
        logger.info("Updated post id=%s", post.id)
        return Ok(Post(
            id=post.id,
            created_at=post.created_at,
            title=clean_title,
            body=clean_body,
            owner_id=post.owner_id,
            owner_username=post.owner_username,
        ))

    def delete_post(self, post_id: Optional[int], owner_id: int) -> Union[Ok[None], Err[NotPermitted]]:
        post = self.owned_post(post_id, owner_id)
        if post is None:
            return Err(NotPermitted())
        self.posts.delete(post.id)
        logger.info("Deleted post id=%s", post.id)
        return Ok(None)
