"""Application service: Add User use case."""

from __future__ import annotations

from collections.abc import Callable

from teahaven.domain.exceptions import ValidationError
from teahaven.domain.model.user import Role, User
from teahaven.domain.repository.unit_of_work import UnitOfWork


class AddUserHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, email: str, full_name: str, role: str = "CUSTOMER") -> User:
        email = (email or "").strip().lower()
        if "@" not in email:
            raise ValidationError(f"Invalid email address: '{email}'")
        if not full_name or not full_name.strip():
            raise ValidationError("Full name is required")
        try:
            user_role = Role(role.upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown role '{role}'") from exc

        with self._uow_factory() as uow:
            if uow.users.get_by_email(email) is not None:
                raise ValidationError(f"User '{email}' already exists")
            user = uow.users.add(User(id=None, email=email, full_name=full_name.strip(), role=user_role))
            uow.commit()
        return user
