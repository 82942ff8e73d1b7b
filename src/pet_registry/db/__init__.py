"""Persistence primitives: ORM models, schema bootstrap and transactions."""

from .db_models import Base, MicrochipModel, PetModel, active, is_active
from .transactions import Transaction, TransactionManager

__all__ = [
    "Base",
    "MicrochipModel",
    "PetModel",
    "Transaction",
    "TransactionManager",
    "active",
    "is_active",
]
