# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from repository.py, knowledge.py, or tools/; this prevents circular imports.
"""Typed return-value contracts for the repository and tool layers."""

from __future__ import annotations

from itsm_tools.types.core import (
    ArticleDict,
    CommentDict,
    ISOTimestamp,
    ServiceConfig,
    TicketDict,
)

__all__ = [
    "ArticleDict",
    "CommentDict",
    "ISOTimestamp",
    "ServiceConfig",
    "TicketDict",
]
