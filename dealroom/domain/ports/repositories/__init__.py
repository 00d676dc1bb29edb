"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the domain needs
- Does NOT specify implementation (in-memory, Redis, etc.)

Infrastructure layer provides implementations.
"""

from dealroom.domain.ports.repositories.conversation_repository import (
    ConversationRepository,
)

__all__ = [
    "ConversationRepository",
]
