"""Shared SQLAlchemy models registry for the workspace database.

Currently holds the account/category/transaction tables written by
``statement_ingest``.
"""

from .finance import Account, Base, Category, Transaction

__all__ = [
    "Account",
    "Base",
    "Category",
    "Transaction",
]
