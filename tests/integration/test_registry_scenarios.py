"""End-to-end flows through the services against a real SQLite store."""

from __future__ import annotations

from pet_registry.microchips.microchips_models import Microchip
from pet_registry.pets.pets_models import Pet


def test_create_then_detach_microchip(pet_service, microchip_service):
    chip = microchip_service.create(Microchip(code="CHIP-A"))
    pet = pet_service.create_pet(
        Pet(name="Rex", species="Dog", owner="Ana", microchip=chip)
    ).unwrap()

    assert pet.microchip_id == chip.id

    detached = pet_service.detach_and_delete_microchip(pet.id, chip.id).unwrap()

    assert detached.microchip_id is None
    assert pet_service.get_pet(pet.id).unwrap().microchip is None
    assert "CHIP-A" not in [c.code for c in microchip_service.list_active()]


def test_deleted_code_can_be_reused_for_a_new_chip(pet_service, microchip_service):
    pet = pet_service.create_pet(
        Pet(name="Rex", species="Dog", owner="Ana", microchip=Microchip(code="CHIP-A"))
    ).unwrap()
    pet_service.detach_and_delete_microchip(pet.id, pet.microchip_id).unwrap()

    replacement = pet_service.update_pet_microchip(pet.id, Microchip(code="CHIP-A"))
    assert not replacement.ok

    chip = microchip_service.create(Microchip(code="CHIP-A"))
    reassigned = pet_service.reassign_microchip(pet.id, chip.id).unwrap()

    assert reassigned.microchip_id == chip.id
    assert chip.id != pet.microchip_id


def test_rollback_demo_leaves_no_orphan(pet_service, microchip_service):
    result = pet_service.create_pet_unvalidated(
        Pet(name="Ghost", species="Cat", owner="", microchip=Microchip(code="MC-9001"))
    )

    assert not result.ok
    assert microchip_service.repo.find_by_code("MC-9001") is None
    assert pet_service.search_pets("Ghost").unwrap() == []
    assert microchip_service.list_active() == []
