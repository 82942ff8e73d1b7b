"""Connection-bound transaction scopes shared by gateways and services.

A :class:`Transaction` is the opaque handle passed to the ``*_within``
gateway methods. It owns exactly one session (and therefore one
connection) until :meth:`TransactionManager.commit` or
:meth:`TransactionManager.rollback` releases it.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass, field
from itertools import count
from typing import Iterator

import structlog
from sqlalchemy.orm import Session

from ..exceptions import TransactionClosedError, handle_sqlalchemy_errors

logger = structlog.get_logger(__name__)

_handle_ids = count(1)


@dataclass(slots=True)
class Transaction:
    """Handle for one open transaction."""

    session: Session
    id: int = field(default_factory=lambda: next(_handle_ids))
    closed: bool = False

    def ensure_open(self) -> Session:
        if self.closed:
            raise TransactionClosedError(f"transaction {self.id} is already finished")
        return self.session


class TransactionManager:
    """Open, commit and roll back connection-bound transactions."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def begin(self) -> Transaction:
        session = self._session_factory()
        try:
            with handle_sqlalchemy_errors(entity="transaction"):
                session.begin()
                session.connection()
        except BaseException:
            session.close()
            raise
        tx = Transaction(session=session)
        logger.debug("transaction.begin", tx_id=tx.id)
        return tx

    def commit(self, tx: Transaction) -> None:
        session = tx.ensure_open()
        tx.closed = True
        try:
            with handle_sqlalchemy_errors(entity="transaction", identifier=tx.id):
                session.commit()
            logger.debug("transaction.commit", tx_id=tx.id)
        finally:
            session.close()

    def rollback(self, tx: Transaction) -> None:
        session = tx.ensure_open()
        tx.closed = True
        try:
            with handle_sqlalchemy_errors(entity="transaction", identifier=tx.id):
                session.rollback()
            logger.info("transaction.rollback", tx_id=tx.id)
        finally:
            session.close()

    @contextmanager
    def scope(self) -> Iterator[Transaction]:
        """Commit on normal exit, roll back on any exception."""
        tx = self.begin()
        try:
            yield tx
        except BaseException:
            if not tx.closed:
                self.rollback(tx)
            raise
        if not tx.closed:
            self.commit(tx)
