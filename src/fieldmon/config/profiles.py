"""Configuration profile management.

Selects the configuration profile from the environment.
"""

import os
from enum import Enum
from pathlib import Path

from .loader import DEFAULT_CONFIG_DIR

PROFILE_ENV_VAR = "FIELDMON_PROFILE"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def detect_profile() -> Profile:
    """Detect the configuration profile.

    Uses the FIELDMON_PROFILE environment variable, falling back to dev.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    for profile in Profile:
        if profile.value == env_profile:
            return profile
    return Profile.DEV


def get_profile_path(profile: Profile | None = None, config_dir: Path | None = None) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile to use, or None to auto-detect
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    if profile is None:
        profile = detect_profile()
    return (config_dir or DEFAULT_CONFIG_DIR) / f"{profile.value}.yaml"


__all__ = ["PROFILE_ENV_VAR", "Profile", "detect_profile", "get_profile_path"]
