"""
Configuration Module for the Steel Packing-List Extraction Pipeline.

Every tunable of the pipeline (OCR threshold, classifier weights, supplier
dimension bounds, vendor and finish codes, inventory identifier format)
lives in ``settings.yaml`` next to this file. Components read their values
once in ``__init__`` through :func:`get_config` and fall back to coded
defaults when a key is missing, so a trimmed settings file still works.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


# Environment variable that points the pipeline at an alternate settings file
CONFIG_ENV_VAR = "PACKLIST_CONFIG"


class ConfigurationManager:
    """
    Singleton access to the YAML settings.

    Attributes:
        config_path (Path): Path of the loaded settings file.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("ocr.confidence_threshold")
        70
        >>> config.get("suppliers.vendor_codes.wuu_jing")
        'V005006'
    """

    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional path to a settings file. Defaults to the
                PACKLIST_CONFIG environment variable, then config/settings.yaml.
        """
        if self._initialized:
            return

        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path is None:
            self.config_path = Path(__file__).parent / "settings.yaml"
        else:
            self.config_path = Path(config_path)

        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Load configuration from the YAML file.

        Raises:
            FileNotFoundError: If the settings file doesn't exist.
            yaml.YAMLError: If the settings file is invalid.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}"
            )

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f) or {}

        self._resolve_paths()

    def _resolve_paths(self) -> None:
        """Make relative entries under ``paths`` absolute against the project root."""
        project_root = Path(__file__).parent.parent

        for key, value in self._config.get('paths', {}).items():
            if value and not Path(value).is_absolute():
                self._config['paths'][key] = str(project_root / value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "ocr.language").
            default: Value returned when the key doesn't exist.

        Returns:
            Configuration value or default.
        """
        value: Any = self._config
        try:
            for part in key.split('.'):
                value = value[part]
        except (KeyError, TypeError):
            return default
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Override a configuration value in memory (dot notation).

        The settings file is not touched; call :meth:`reload` to discard
        overrides.
        """
        parts = key.split('.')
        node = self._config
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Return a deep copy of the complete configuration."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from file, dropping in-memory overrides."""
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """Forget the singleton so the next access reloads from disk."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get configuration values.

    Args:
        key: Configuration key in dot notation.
        default: Default value if key doesn't exist.

    Returns:
        Configuration value or default.
    """
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']
