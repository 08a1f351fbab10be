"""YAML profile loading for the field monitor.

Profiles live in the config directory as ``<profile>.yaml``. A profile may
name a parent with ``extends``; the parent is loaded first and the child's
values are merged over it section by section. Everything sits under a
top-level ``fieldmon:`` key.
"""

from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigurationError
from . import FieldmonConfig, InferenceConfig, LoggingConfig, RetryConfig, TranscriptionConfig

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent.parent / "config"

ROOT_KEY = "fieldmon"

SECTIONS: dict[str, type] = {
    "inference": InferenceConfig,
    "transcription": TranscriptionConfig,
    "retry": RetryConfig,
    "logging": LoggingConfig,
}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base.

    Nested mappings merge key by key; any other override value replaces
    the base value outright.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_with_inheritance(path: Path, _chain: tuple[Path, ...] = ()) -> dict[str, Any]:
    """Read a profile file, resolving its ``extends`` parents.

    Raises:
        FileNotFoundError: If the file or one of its parents is missing.
        ConfigurationError: If the file is not a mapping or the
            ``extends`` chain loops.
    """
    resolved = path.resolve()
    if resolved in _chain:
        loop = " -> ".join(p.name for p in (*_chain, resolved))
        raise ConfigurationError(f"Config inheritance loop: {loop}")
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        document = yaml.safe_load(f)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the top level")

    parent = document.pop("extends", None)
    if parent is None:
        return document
    inherited = load_yaml_with_inheritance(path.parent / parent, (*_chain, resolved))
    return deep_merge(inherited, document)


def _build_section(name: str, values: Any) -> Any:
    section_type = SECTIONS[name]
    if values is None:
        return section_type()
    if not isinstance(values, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping")

    known = {f.name for f in fields(section_type)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
    return section_type(**values)


def dict_to_config(data: dict[str, Any]) -> FieldmonConfig:
    """Build a typed FieldmonConfig from a merged profile document.

    Missing or empty sections take their defaults.

    Raises:
        ConfigurationError: If a section has the wrong shape or unknown keys.
    """
    root = data.get(ROOT_KEY) or {}
    if not isinstance(root, dict):
        raise ConfigurationError(f"'{ROOT_KEY}' must be a mapping")

    unknown = sorted(set(root) - set(SECTIONS))
    if unknown:
        raise ConfigurationError(f"Unknown config sections: {', '.join(unknown)}")

    return FieldmonConfig(**{name: _build_section(name, root.get(name)) for name in SECTIONS})


class YAMLConfigLoader:
    """Loads FieldmonConfig from profile files in one directory."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader.

        Args:
            config_dir: Directory holding profile files. Defaults to the
                project's config directory.
        """
        self._config_dir = config_dir or DEFAULT_CONFIG_DIR

    def load(self, path: Path) -> FieldmonConfig:
        """Load configuration from an explicit file."""
        return dict_to_config(load_yaml_with_inheritance(path))

    def load_profile(self, profile: str) -> FieldmonConfig:
        """Load configuration for a profile name such as 'dev' or 'prod'."""
        return self.load(self._config_dir / f"{profile}.yaml")

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(
    path: str | Path | None = None,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> FieldmonConfig:
    """Load field monitor configuration.

    An explicit path wins over a profile name; with neither, the dev
    profile is used.

    Examples:
        >>> config = load_config(profile="test")
        >>> config = load_config(path="/etc/fieldmon/site.yaml")
    """
    loader = YAMLConfigLoader(config_dir)
    if path is not None:
        return loader.load(Path(path))
    return loader.load_profile(profile or "dev")


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "ROOT_KEY",
    "SECTIONS",
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
