from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from playmilestones.config import (
    ConfigurationError,
    StorageBackend,
    get_persistence_config,
    get_storage_config,
    get_tracker_config,
    storage,
)


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("PLAYMILESTONES_DATA_DIR", str(custom))

    config = get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()
    assert config.progress_path() == custom.resolve() / "artist-progress.json"
    assert config.milestones_path() == custom.resolve() / "artist-milestones.json"


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("PLAYMILESTONES_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "xdg" / "playmilestones").resolve()


def test_persistence_defaults_to_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)

    config = get_persistence_config()

    assert config.backend is StorageBackend.JSON
    assert config.database_uri.endswith("playmilestones.db")
    assert not config.storage.resolve_data_dir().joinpath("playmilestones.db").exists()


def test_persistence_sqlalchemy_backend_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("PLAYMILESTONES_DATA_DIR", str(tmp_path / "data-dir"))
    monkeypatch.setenv("PLAYMILESTONES_BACKEND", " SQLAlchemy ")

    config = get_persistence_config()

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert config.backend is StorageBackend.SQLALCHEMY
    assert config.database_uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_database_uri_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_persistence_config().database_uri == "sqlite:///override.db"


def test_unknown_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLAYMILESTONES_BACKEND", "redis")

    with pytest.raises(ConfigurationError, match="PLAYMILESTONES_BACKEND"):
        get_persistence_config()


def test_tracker_config_defaults() -> None:
    config = get_tracker_config()

    assert config.debounce_seconds == 5.0
    assert config.progress_log_interval == 1000


def test_tracker_config_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLAYMILESTONES_DEBOUNCE_SECONDS", "0.5")
    monkeypatch.setenv("PLAYMILESTONES_PROGRESS_LOG_INTERVAL", "250")

    config = get_tracker_config()

    assert config.debounce_seconds == 0.5
    assert config.progress_log_interval == 250


def test_blank_env_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLAYMILESTONES_DEBOUNCE_SECONDS", "   ")

    assert get_tracker_config().debounce_seconds == 5.0


@pytest.mark.parametrize("value", ["soon", "-1", "nan", "inf"])
def test_invalid_debounce_is_rejected(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("PLAYMILESTONES_DEBOUNCE_SECONDS", value)

    with pytest.raises(ConfigurationError, match="PLAYMILESTONES_DEBOUNCE_SECONDS"):
        get_tracker_config()


@pytest.mark.parametrize("value", ["often", "0", "2.5"])
def test_invalid_progress_interval_is_rejected(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setenv("PLAYMILESTONES_PROGRESS_LOG_INTERVAL", value)

    with pytest.raises(ConfigurationError):
        get_tracker_config()
