"""Tests for settings.json and profile.yaml handling."""

import json

import pytest
import yaml

from setaside.sdk import (
    ProfileNotFoundError,
    ProfileValidationError,
    TaxProfile,
    get_config_dir,
    get_profile_path,
    get_profile_value,
    get_store_path,
    load_profile,
    save_profile,
    set_profile_value,
    set_setting,
)
from setaside.sdk.schemas import TaxationMode


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Isolated config dir with data_dir pointed into tmp_path."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()

    monkeypatch.setenv("SETASIDE_CONFIG_PATH", str(config_dir))
    (config_dir / "settings.json").write_text(json.dumps({"data_dir": str(data_dir)}))

    return {"config_dir": config_dir, "data_dir": data_dir}


class TestPaths:

    def test_config_dir_from_env(self, isolated_env):
        assert get_config_dir() == isolated_env["config_dir"]

    def test_store_under_data_dir(self, isolated_env):
        assert get_store_path() == isolated_env["data_dir"] / "store.json"
        assert isolated_env["data_dir"].is_dir()

    def test_xdg_config_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SETASIDE_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "setaside"

    def test_custom_profile_path(self, isolated_env, tmp_path):
        custom = tmp_path / "elsewhere" / "profile.yaml"
        set_setting("profile", str(custom))
        assert get_profile_path() == custom


class TestProfile:

    def test_missing_profile_uses_defaults(self, isolated_env):
        profile = load_profile()
        assert profile == TaxProfile()
        assert profile.country_code == "US"
        assert profile.taxation_mode is TaxationMode.FREELANCER
        assert profile.default_tax_rate == 0.25
        assert profile.default_reserve_extra_rate == 0.03

    def test_require_exists(self, isolated_env):
        with pytest.raises(ProfileNotFoundError):
            load_profile(require_exists=True)

    def test_save_and_load(self, isolated_env):
        save_profile(TaxProfile(default_tax_rate=0.3, filing_status="mfj"))
        profile = load_profile(require_exists=True)
        assert profile.default_tax_rate == 0.3
        assert profile.filing_status == "mfj"

    def test_set_value(self, isolated_env):
        set_profile_value("reminder.day", 15)
        assert get_profile_value("reminder.day") == 15
        assert load_profile().reminder.day == 15

    def test_set_value_clamps_reminder(self, isolated_env):
        set_profile_value("reminder.day", 31)
        data = yaml.safe_load(get_profile_path().read_text())
        assert data["reminder"]["day"] == 28

    def test_invalid_value_not_saved(self, isolated_env):
        with pytest.raises(ProfileValidationError, match="default_tax_rate"):
            set_profile_value("default_tax_rate", 5)
        assert not get_profile_path().exists()

    def test_unknown_key_rejected(self, isolated_env):
        get_profile_path().write_text("default_tax_rat: 0.2\n")
        with pytest.raises(ProfileValidationError):
            load_profile()

    def test_null_reminder_value_rejected(self, isolated_env):
        get_profile_path().write_text("reminder:\n  day: null\n")
        with pytest.raises(ProfileValidationError, match="reminder.day"):
            load_profile()

    def test_set_non_numeric_reminder_rejected(self, isolated_env):
        with pytest.raises(ProfileValidationError):
            set_profile_value("reminder.hour", "noon")
        assert not get_profile_path().exists()

    def test_get_missing_value(self, isolated_env):
        assert get_profile_value("reminder.week", default="n/a") == "n/a"
