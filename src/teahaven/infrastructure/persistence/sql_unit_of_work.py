"""SQLAlchemy implementation of UnitOfWork: one Session, one transaction."""

from __future__ import annotations

from types import TracebackType

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from teahaven.domain.exceptions import ConflictError
from teahaven.domain.repository.unit_of_work import UnitOfWork
from teahaven.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from teahaven.infrastructure.persistence.sql_product_repository import SqlProductRepository
from teahaven.infrastructure.persistence.sql_user_repository import SqlUserRepository

_CONFLICT_MESSAGE = "The store rejected the transaction because of a concurrent update; retry"

# serialization_failure, deadlock_detected, lock_not_available
_CONTENTION_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
# ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK
_CONTENTION_MYSQL_ERRNOS = frozenset({1205, 1213})
_CONTENTION_SQLITE_MESSAGES = ("database is locked", "database table is locked")


def is_contention(exc: OperationalError) -> bool:
    """True when *exc* reports a lock wait, deadlock or serialization failure."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _CONTENTION_SQLSTATES:
        return True
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int) and args[0] in _CONTENTION_MYSQL_ERRNOS:
        return True
    message = str(orig).lower()
    return any(m in message for m in _CONTENTION_SQLITE_MESSAGES)


class SqlUnitOfWork(UnitOfWork):
    """Lock waits, serialization failures and deadlocks surface as ConflictError."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.products = SqlProductRepository(self._session)
        self.orders = SqlOrderRepository(self._session)
        self.users = SqlUserRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._session.close()  # type: ignore[union-attr]
            self._session = None
        if isinstance(exc, OperationalError) and is_contention(exc):
            raise ConflictError(_CONFLICT_MESSAGE) from exc

    def commit(self) -> None:
        try:
            self._session.commit()  # type: ignore[union-attr]
        except OperationalError as exc:
            self._session.rollback()  # type: ignore[union-attr]
            if is_contention(exc):
                raise ConflictError(_CONFLICT_MESSAGE) from exc
            raise

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
