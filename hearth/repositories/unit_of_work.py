"""Unit of Work Pattern Implementation.

Hands the services one consistent set of repositories bound to a single
database transaction. Everything done through one context commits or rolls
back together.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from hearth.repositories.household_repository import HouseholdRepository
from hearth.repositories.member_repository import MemberRepository
from hearth.repositories.permission_repository import PermissionRepository, TagPermissionRepository
from hearth.repositories.refresh_token_repository import RefreshTokenRepository
from hearth.repositories.tag_repository import TagRepository, TaskTagRepository
from hearth.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class UnitOfWorkContext(ABC):
    """Capability set of repositories sharing one transaction."""

    @property
    @abstractmethod
    def households(self) -> HouseholdRepository: ...

    @property
    @abstractmethod
    def members(self) -> MemberRepository: ...

    @property
    @abstractmethod
    def permissions(self) -> PermissionRepository: ...

    @property
    @abstractmethod
    def tag_permissions(self) -> TagPermissionRepository: ...

    @property
    @abstractmethod
    def tags(self) -> TagRepository: ...

    @property
    @abstractmethod
    def task_tags(self) -> TaskTagRepository: ...

    @property
    @abstractmethod
    def tasks(self) -> TaskRepository: ...

    @property
    @abstractmethod
    def refresh_tokens(self) -> RefreshTokenRepository: ...


class SqlAlchemyUnitOfWorkContext(UnitOfWorkContext):
    """
    SQLAlchemy backend: every repository wraps the same session, so all of
    them live and die with the transaction that created the context.
    """

    def __init__(self, session: Session):
        self.session = session
        self._households = HouseholdRepository(session)
        self._members = MemberRepository(session)
        self._permissions = PermissionRepository(session)
        self._tag_permissions = TagPermissionRepository(session)
        self._tags = TagRepository(session)
        self._task_tags = TaskTagRepository(session)
        self._tasks = TaskRepository(session)
        self._refresh_tokens = RefreshTokenRepository(session)

    @property
    def households(self) -> HouseholdRepository:
        return self._households

    @property
    def members(self) -> MemberRepository:
        return self._members

    @property
    def permissions(self) -> PermissionRepository:
        return self._permissions

    @property
    def tag_permissions(self) -> TagPermissionRepository:
        return self._tag_permissions

    @property
    def tags(self) -> TagRepository:
        return self._tags

    @property
    def task_tags(self) -> TaskTagRepository:
        return self._task_tags

    @property
    def tasks(self) -> TaskRepository:
        return self._tasks

    @property
    def refresh_tokens(self) -> RefreshTokenRepository:
        return self._refresh_tokens


class UnitOfWork:
    """
    Opens one transaction per call.

    Usage:
        with unit_of_work.transaction() as context:
            context.households.create(household)
            # Commits on clean exit, rolls back on exception

    Failures are never retried; the original exception propagates after the
    rollback.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def transaction(self) -> Iterator[UnitOfWorkContext]:
        session: Session = self._session_factory()
        try:
            yield SqlAlchemyUnitOfWorkContext(session)
            session.commit()
            logger.debug("UnitOfWork committed")
        except Exception as e:
            session.rollback()
            logger.debug(f"UnitOfWork rolled back due to: {type(e).__name__}")
            raise
        finally:
            session.close()
