# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func

from inkwell.infra.database import Database, PostRow, UserRow


@dataclass(frozen=True)
class Post:
    id: int
    created_at: str
    title: str
    body: str
    owner_id: int
    owner_username: str = ""


def _to_post(row: PostRow, owner_username: str = "") -> Post:
    return Post(
        id=int(row.id),
        created_at=str(row.created_date or ""),
        title=str(row.title),
        body=str(row.body),
        owner_id=int(row.user_id),
        owner_username=owner_username or "",
    )


class PostRepo:
    """Post store: the ``posts`` table. Owner is fixed at insert time."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, post_id: int) -> Optional[Post]:
        with self.db.session() as s:
            hit = (
                s.query(PostRow, UserRow.username)
                .join(UserRow, PostRow.user_id == UserRow.id)
                .filter(PostRow.id == post_id)
                .first()
            )
        if hit is None:
            return None
        row, username = hit
        return _to_post(row, username)

    def list_by_owner(self, owner_id: int) -> List[Post]:
        """Newest first; ties on createdDate fall back to the later id."""
        with self.db.session() as s:
            rows = (
                s.query(PostRow)
                .filter(PostRow.user_id == owner_id)
                .order_by(PostRow.created_date.desc(), PostRow.id.desc())
                .all()
            )
            return [_to_post(r) for r in rows]

    def count(self) -> int:
        with self.db.session() as s:
            return int(s.query(func.count(PostRow.id)).scalar() or 0)

    def insert(self, *, owner_id: int, created_at: str, title: str, body: str) -> Post:
        """Raises sqlalchemy IntegrityError when the owner does not exist."""
        with self.db.session() as s:
            row = PostRow(created_date=created_at, title=title, body=body, user_id=owner_id)
            s.add(row)
            s.flush()
            return _to_post(row)

    def update(self, post_id: int, *, title: str, body: str) -> None:
        with self.db.session() as s:
            s.query(PostRow).filter(PostRow.id == post_id).update(
                {PostRow.title: title, PostRow.body: body}
            )

    def delete(self, post_id: int) -> None:
        with self.db.session() as s:
            s.query(PostRow).filter(PostRow.id == post_id).delete()
