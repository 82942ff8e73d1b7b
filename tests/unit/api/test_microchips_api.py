from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pet_registry.dependencies import include_routers


@pytest.fixture()
def client(app_config) -> TestClient:
    app = FastAPI()
    include_routers(app, app_config)
    return TestClient(app)


def test_create_list_update_microchip(client):
    created = client.post("/api/microchips/", json={"code": "CHIP-A", "clinic": "Vet Norte"})
    assert created.status_code == 201
    chip = created.json()

    updated = client.put(
        f"/api/microchips/{chip['id']}",
        json={"code": "CHIP-A", "clinic": "Vet Sur", "implanted_on": "2024-05-02"},
    )

    assert updated.status_code == 200
    assert updated.json()["clinic"] == "Vet Sur"
    assert [c["implanted_on"] for c in client.get("/api/microchips/").json()] == ["2024-05-02"]


def test_blank_code_is_rejected(client):
    response = client.post("/api/microchips/", json={"code": "  "})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation"


def test_unchecked_delete_requires_force_flag(client):
    chip = client.post("/api/microchips/", json={"code": "CHIP-A"}).json()

    assert client.delete(f"/api/microchips/{chip['id']}").status_code == 422
    assert client.delete(f"/api/microchips/{chip['id']}", params={"force": "true"}).status_code == 204
    assert client.delete(f"/api/microchips/{chip['id']}", params={"force": "true"}).status_code == 404
