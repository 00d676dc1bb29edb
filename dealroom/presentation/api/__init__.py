"""
API Routers - FastAPI endpoint definitions.
"""

from dealroom.presentation.api.conversations import router as conversations_router
from dealroom.presentation.api.chat import router as chat_router
from dealroom.presentation.api.lenders import router as lenders_router

__all__ = [
    "conversations_router",
    "chat_router",
    "lenders_router",
]
