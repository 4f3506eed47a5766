"""SQLAlchemy implementation of UserRepository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from teahaven.domain.model.user import Role, User
from teahaven.domain.repository.user_repository import UserRepository
from teahaven.infrastructure.persistence.database import UserRow


class SqlUserRepository(UserRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, user_id: int) -> User | None:
        row = self._session.get(UserRow, user_id)
        return None if row is None else self._to_domain(row)

    def get_by_ids(self, user_ids: Iterable[int]) -> dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        rows = self._session.scalars(select(UserRow).where(UserRow.id.in_(ids)))
        return {row.id: self._to_domain(row) for row in rows}

    def get_by_email(self, email: str) -> User | None:
        stmt = select(UserRow).where(func.lower(UserRow.email) == email.strip().lower())
        row = self._session.scalars(stmt).one_or_none()
        return None if row is None else self._to_domain(row)

    def add(self, user: User) -> User:
        row = UserRow(email=user.email, full_name=user.full_name, role=user.role.value)
        self._session.add(row)
        self._session.flush()
        user.id = row.id
        return user

    @staticmethod
    def _to_domain(row: UserRow) -> User:
        return User(id=row.id, email=row.email, full_name=row.full_name, role=Role(row.role))
