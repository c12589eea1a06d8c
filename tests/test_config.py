import pytest

from scoretime.config import PROJECT_ROOT, Settings


def test_defaults(monkeypatch):
    for name in ("SCORETIME_ERROR_POLICY", "SCORETIME_MERGE_CHORDS", "SCORETIME_LOG_DIR", "APP_ENV", "ENV"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.error_policy == "isolate"
    assert settings.merge_chords is True
    assert settings.app_env == "dev"
    assert settings.log_dir == (PROJECT_ROOT / "logs").resolve()
    assert settings.project_root == PROJECT_ROOT


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SCORETIME_ERROR_POLICY", " ABORT ")
    monkeypatch.setenv("SCORETIME_MERGE_CHORDS", "no")
    monkeypatch.setenv("SCORETIME_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("APP_ENV", "prod")
    settings = Settings.from_env()
    assert settings.error_policy == "abort"
    assert settings.merge_chords is False
    assert settings.log_dir == tmp_path
    assert settings.app_env == "prod"


def test_invalid_error_policy(monkeypatch):
    monkeypatch.setenv("SCORETIME_ERROR_POLICY", "salvage")
    with pytest.raises(ValueError, match="SCORETIME_ERROR_POLICY"):
        Settings.from_env()


def test_settings_are_frozen(monkeypatch):
    monkeypatch.delenv("SCORETIME_ERROR_POLICY", raising=False)
    settings = Settings.from_env()
    with pytest.raises(AttributeError):
        settings.error_policy = "abort"
