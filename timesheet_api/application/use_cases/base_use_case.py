"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass
from datetime import datetime

from timesheet_api.domain.events.base import DomainEvent, EventDispatcher, get_event_dispatcher
from timesheet_api.domain.models.base import BaseEntity, DomainException
from timesheet_api.domain.models.user import UserRole


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class UseCaseContext:
    """
    Identity of the caller, already verified by the web layer.
    Passed explicitly to every use case execution.
    """

    user_id: str
    role: UserRole = UserRole.EMPLOYEE
    request_id: Optional[str] = None

    @property
    def is_elevated(self) -> bool:
        return UserRole(self.role).is_elevated

    def has_role(self, *roles: UserRole) -> bool:
        return UserRole(self.role) in roles


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception. Non-domain errors are not described."""
        if isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        return cls.error_result(INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR")


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """

    def __init__(self):
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def execute(self, request: T, context: UseCaseContext) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        self.execution_start = datetime.utcnow()

        try:
            await self._validate_request(request, context)

            result = await self._execute_business_logic(request, context)

            self.execution_end = datetime.utcnow()
            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": self._elapsed(),
                    "executed_at": self.execution_end.isoformat()
                }
            )

        except Exception as exc:
            self.execution_end = datetime.utcnow()

            if isinstance(exc, DomainException):
                logger.info(
                    f"{self.__class__.__name__} rejected for user {context.user_id}: "
                    f"{exc.code}: {exc.message}"
                )
            else:
                logger.exception(f"{self.__class__.__name__} failed for user {context.user_id}")

            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                "execution_time_seconds": self._elapsed(),
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }
            return error_result

    def _elapsed(self) -> float:
        return (self.execution_end - self.execution_start).total_seconds()

    async def _validate_request(self, request: T, context: UseCaseContext) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        pass

    @abstractmethod
    async def _execute_business_logic(self, request: T, context: UseCaseContext) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Domain events collected during the command are published only after the
    command logic has committed and returned.
    """

    def __init__(self, event_dispatcher: Optional[EventDispatcher] = None):
        super().__init__()
        self.events: List[DomainEvent] = []
        self.event_dispatcher = event_dispatcher or get_event_dispatcher()

    async def _execute_business_logic(self, request: T, context: UseCaseContext) -> R:
        try:
            result = await self._execute_command_logic(request, context)
        except Exception:
            self.events.clear()
            raise

        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, request: T, context: UseCaseContext) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def collect_events(self, entity: BaseEntity) -> None:
        self.events.extend(entity.pull_events())

    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        events, self.events = self.events, []
        for event in events:
            await self.event_dispatcher.dispatch(event)
