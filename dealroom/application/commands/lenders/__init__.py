"""Lender commands."""

from .select_lender import SelectLenderCommand, SelectLenderHandler, SelectLenderResult

__all__ = [
    "SelectLenderCommand",
    "SelectLenderHandler",
    "SelectLenderResult",
]
