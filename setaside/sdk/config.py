"""Configuration management for Set-aside.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - data_dir: where the record store lives (optional)
   - profile: path to profile.yaml (optional, if not colocated)

2. profile.yaml - User's tax profile
   - default_tax_rate, default_reserve_extra_rate, filing_status, ...
   - reminder: monthly reminder day/hour/minute
   - deductions: custom deduction categories

Config directory resolution:
1. SETASIDE_CONFIG_PATH environment variable (if set)
2. ~/.config/setaside/ (XDG_CONFIG_HOME fallback)

Data directory resolution:
1. settings.json "data_dir" key (if set via CLI)
2. XDG_DATA_HOME/setaside/ or ~/.local/share/setaside/
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .schemas import TaxProfile


APP_NAME = "setaside"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"
STORE_FILENAME = "store.json"


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


class ProfileValidationError(Exception):
    """Raised when profile.yaml doesn't match the TaxProfile schema."""

    def __init__(self, path: Path, errors: list):
        self.path = path
        self.errors = errors
        details = "\n  ! ".join(errors)
        super().__init__(f"Profile has validation errors:\n\n  ! {details}\n\nProfile: {path}")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. SETASIDE_CONFIG_PATH environment variable
    2. ~/.config/setaside/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("SETASIDE_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = get_setting("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
    else:
        profile_path = get_config_dir() / PROFILE_FILENAME

    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Create a profile with: setaside profile init"
        )

    return profile_path


def load_profile_dict(require_exists: bool = False) -> dict:
    """Load profile.yaml as a plain dictionary (empty if missing)."""
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def validate_profile(data: dict, path: Optional[Path] = None) -> TaxProfile:
    """Validate a profile dictionary against the TaxProfile schema.

    Raises:
        ProfileValidationError: If any field is invalid
    """
    try:
        return TaxProfile.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or 'root'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ProfileValidationError(path or get_profile_path(), errors) from e


def load_profile(require_exists: bool = False) -> TaxProfile:
    """Load the user's tax profile.

    A missing profile yields the default TaxProfile unless require_exists.
    """
    return validate_profile(load_profile_dict(require_exists=require_exists))


def save_profile(profile: TaxProfile, path: Optional[Path] = None) -> Path:
    """Save the tax profile to profile.yaml."""
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get an effective profile value by dot-notation key (e.g., "reminder.day")."""
    value = load_profile().model_dump(mode="json")

    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key, validating the result.

    Raises:
        ProfileValidationError: If the new value makes the profile invalid
    """
    profile = load_profile_dict(require_exists=False)

    parts = key.split(".")
    current = profile

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(validate_profile(profile))


# =============================================================================
# XDG path helpers
# =============================================================================

def get_data_path() -> Path:
    """Get the data directory path (created if doesn't exist).

    Uses settings.json data_dir if set, else XDG_DATA_HOME/setaside/.
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_store_path() -> Path:
    """Path to the record store document (may not exist yet)."""
    return get_data_path() / STORE_FILENAME
