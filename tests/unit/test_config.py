from __future__ import annotations

from pet_registry.config import RegistrySettings, build_config
from pet_registry.main import create_app


def test_settings_read_prefixed_environment(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'env.db'}"
    monkeypatch.setenv("PET_REGISTRY_DATABASE_URL", url)
    monkeypatch.setenv("PET_REGISTRY_LOG_LEVEL", "DEBUG")

    settings = RegistrySettings()

    assert settings.database_url == url
    assert settings.log_level == "DEBUG"


def test_build_config_bootstraps_schema(tmp_path):
    config = build_config(RegistrySettings(database_url=f"sqlite:///{tmp_path / 'boot.db'}"))

    app = create_app(config)

    assert app.state.pet_service.list_pets().unwrap() == []
    config.engine.dispose()
