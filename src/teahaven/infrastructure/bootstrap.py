"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from sqlalchemy.engine import Engine, make_url

from teahaven.application.notifications import NotificationDispatcher, NotificationSender
from teahaven.domain.exceptions import EntityNotFoundError
from teahaven.domain.model.user import User
from teahaven.domain.repository.unit_of_work import UnitOfWork
from teahaven.infrastructure.config import Settings
from teahaven.infrastructure.email.senders import (
    LoggingNotificationSender,
    SmtpNotificationSender,
)
from teahaven.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from teahaven.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork

logger = logging.getLogger(__name__)


def settings() -> Settings:
    return Settings.from_env()


def engine() -> Engine:
    url = settings().database_url
    database = make_url(url).database
    if url.startswith("sqlite") and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_db_engine(url)


def unit_of_work_factory(db_engine: Engine | None = None) -> Callable[[], UnitOfWork]:
    session_factory = create_session_factory(db_engine or engine())
    return lambda: SqlUnitOfWork(session_factory)


def notification_sender() -> NotificationSender:
    cfg = settings()
    if cfg.smtp_configured:
        return SmtpNotificationSender(
            host=cfg.email_host,  # type: ignore[arg-type]
            port=cfg.email_port,  # type: ignore[arg-type]
            user=cfg.email_user,  # type: ignore[arg-type]
            password=cfg.email_pass,  # type: ignore[arg-type]
            from_address=cfg.email_from,
        )
    logger.warning("Email credentials not fully configured; email notifications will be logged.")
    return LoggingNotificationSender()


def notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(notification_sender(), max_workers=settings().notify_workers)


def acting_user(uow_factory: Callable[[], UnitOfWork], user_id: int) -> User:
    """Resolve the identity a command acts as (stands in for an auth guard)."""
    with uow_factory() as uow:
        user = uow.users.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundError(f"User #{user_id} not found")
    return user
