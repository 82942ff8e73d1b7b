from __future__ import annotations

import threading

import pytest

from pet_registry.exceptions import DuplicateCodeError, NotFoundError, ValidationError
from pet_registry.microchips.microchips_models import Microchip


def test_create_rejects_blank_code(microchip_service):
    with pytest.raises(ValidationError):
        microchip_service.create(Microchip(code="   "))
    assert microchip_service.list_active() == []


def test_create_rejects_duplicate_code(microchip_service):
    microchip_service.create(Microchip(code="CHIP-A"))

    with pytest.raises(DuplicateCodeError):
        microchip_service.create(Microchip(code="CHIP-A"))


def test_update_keeps_own_code(microchip_service):
    chip = microchip_service.create(Microchip(code="CHIP-A"))
    chip.clinic = "Vet Sur"

    microchip_service.update(chip)

    assert microchip_service.get(chip.id).clinic == "Vet Sur"


def test_update_cannot_take_code_of_another_chip(microchip_service):
    microchip_service.create(Microchip(code="CHIP-A"))
    other = microchip_service.create(Microchip(code="CHIP-B"))
    other.code = "CHIP-A"

    with pytest.raises(DuplicateCodeError):
        microchip_service.update(other)


def test_update_requires_positive_id(microchip_service):
    with pytest.raises(ValidationError):
        microchip_service.update(Microchip(code="CHIP-A", id=0))


def test_get_deleted_chip_is_not_found(microchip_service):
    chip = microchip_service.create(Microchip(code="CHIP-A"))
    microchip_service.delete(chip.id)

    with pytest.raises(NotFoundError):
        microchip_service.get(chip.id)


def test_store_constraint_backs_up_code_pre_check(microchip_service, monkeypatch):
    microchip_service.create(Microchip(code="CHIP-A"))
    # another session inserted the same code between check and insert
    monkeypatch.setattr(microchip_service.repo, "find_by_code", lambda code: None)

    with pytest.raises(DuplicateCodeError):
        microchip_service.create(Microchip(code="CHIP-A"))


def test_concurrent_creates_with_same_code_yield_one_duplicate(microchip_service):
    barrier = threading.Barrier(2)
    lookup = microchip_service.repo.find_by_code

    def find_then_wait(code):
        found = lookup(code)
        barrier.wait(timeout=5)
        return found

    microchip_service.repo.find_by_code = find_then_wait
    outcomes: list[str] = []
    lock = threading.Lock()

    def create() -> None:
        try:
            microchip_service.create(Microchip(code="RACE-1"))
            outcome = "ok"
        except DuplicateCodeError:
            outcome = "duplicate"
        with lock:
            outcomes.append(outcome)

    workers = [threading.Thread(target=create) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=15)

    assert sorted(outcomes) == ["duplicate", "ok"]
    assert [chip.code for chip in microchip_service.list_active()] == ["RACE-1"]
