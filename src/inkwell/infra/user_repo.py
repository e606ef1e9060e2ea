# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from inkwell.core.results import Err, Ok, StoreFailure, UsernameTaken
from inkwell.infra.database import Database, UserRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    id: int
    username: str
    password_hash: str


def _to_user(row: Optional[UserRow]) -> Optional[User]:
    if row is None:
        return None
    return User(id=int(row.id), username=str(row.username), password_hash=str(row.password))


class UserRepo:
    """Credential store: the ``users`` table. Usernames are unique."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get_by_username(self, username: str) -> Optional[User]:
        with self.db.session() as s:
            return _to_user(s.query(UserRow).filter(UserRow.username == username).first())

    def create(
        self, username: str, password_hash: str
    ) -> Union[Ok[User], Err[UsernameTaken], Err[StoreFailure]]:
        try:
            with self.db.session() as s:
                row = UserRow(username=username, password=password_hash)
                s.add(row)
                s.flush()
                user = _to_user(row)
        except IntegrityError:
            return Err(UsernameTaken())
        except SQLAlchemyError:
            logger.exception("Database error while creating user")
            return Err(StoreFailure())
        return Ok(user)

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        with self.db.session() as s:
            s.query(UserRow).filter(UserRow.id == user_id).update({UserRow.password: password_hash})
