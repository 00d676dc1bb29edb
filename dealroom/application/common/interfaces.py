"""
CQRS building blocks for the deal room handlers.

Commands change a conversation (most of them append a message); queries only
read. Inputs are frozen dataclasses typed with the handler's result:

    @dataclass(frozen=True)
    class AdvanceStatusCommand(Command[Message]):
        conversation_id: ConversationId
        acting_user_id: UserId
        next_status: DealStatus

    class AdvanceStatusHandler(CommandHandler[Message]):
        async def execute(self, command: AdvanceStatusCommand) -> Message:
            ...

Handlers raise domain exceptions; the HTTP layer maps them to status codes.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

Result = TypeVar("Result")


class Command(ABC, Generic[Result]):
    """Input of a write operation."""


class Query(ABC, Generic[Result]):
    """Input of a read operation."""


class CommandHandler(ABC, Generic[Result]):
    @abstractmethod
    async def execute(self, command: Command[Result]) -> Result: ...


class QueryHandler(ABC, Generic[Result]):
    @abstractmethod
    async def execute(self, query: Query[Result]) -> Result: ...
