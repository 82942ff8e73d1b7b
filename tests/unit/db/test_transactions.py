from __future__ import annotations

import pytest
from sqlalchemy import exc as sa_exc

from pet_registry.db.transactions import TransactionManager
from pet_registry.exceptions import StoreError, TransactionClosedError
from pet_registry.microchips.microchips_models import Microchip


def test_writes_within_open_transaction_are_invisible_until_commit(transactions, microchip_repo):
    tx = transactions.begin()
    microchip_repo.insert_within(Microchip(code="TX-1"), tx)

    assert microchip_repo.find_by_code("TX-1") is None

    transactions.commit(tx)
    assert microchip_repo.find_by_code("TX-1") is not None


def test_rollback_discards_writes(transactions, microchip_repo):
    tx = transactions.begin()
    chip = microchip_repo.insert_within(Microchip(code="TX-2"), tx)
    assert chip.id is not None

    transactions.rollback(tx)

    assert microchip_repo.find_by_code("TX-2") is None
    assert tx.closed


def test_handle_can_only_be_finalized_once(transactions):
    tx = transactions.begin()
    transactions.commit(tx)

    with pytest.raises(TransactionClosedError):
        transactions.rollback(tx)
    with pytest.raises(TransactionClosedError):
        transactions.commit(tx)


def test_scope_rolls_back_and_reraises(transactions, microchip_repo):
    with pytest.raises(RuntimeError):
        with transactions.scope() as tx:
            microchip_repo.insert_within(Microchip(code="TX-3"), tx)
            raise RuntimeError("boom")

    assert tx.closed
    assert microchip_repo.find_by_code("TX-3") is None


def test_scope_commits_on_success(transactions, microchip_repo):
    with transactions.scope() as tx:
        microchip_repo.insert_within(Microchip(code="TX-4"), tx)

    assert tx.closed
    assert microchip_repo.find_by_code("TX-4") is not None


class RecordingSession:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def begin(self) -> None:
        self.calls.append("begin")

    def connection(self) -> None:
        self.calls.append("connection")

    def commit(self) -> None:
        self.calls.append("commit")
        raise RuntimeError("commit failed")

    def rollback(self) -> None:
        self.calls.append("rollback")

    def close(self) -> None:
        self.calls.append("close")


def test_session_is_released_when_commit_fails():
    session = RecordingSession()
    manager = TransactionManager(lambda: session)  # type: ignore[arg-type, return-value]

    tx = manager.begin()
    with pytest.raises(RuntimeError):
        manager.commit(tx)

    assert session.calls == ["begin", "connection", "commit", "close"]
    assert tx.closed


class UnreachableStoreSession(RecordingSession):
    def connection(self) -> None:
        self.calls.append("connection")
        raise sa_exc.OperationalError("connect", {}, Exception("store down"))


def test_begin_acquires_connection_and_releases_it_on_failure():
    session = UnreachableStoreSession()
    manager = TransactionManager(lambda: session)  # type: ignore[arg-type, return-value]

    with pytest.raises(StoreError):
        manager.begin()

    assert session.calls == ["begin", "connection", "close"]


def test_begin_binds_a_connection(transactions):
    tx = transactions.begin()
    try:
        assert tx.session.in_transaction()
        assert tx.session.connection().in_transaction()
    finally:
        transactions.rollback(tx)
