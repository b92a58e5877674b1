"""Configuration loader for YAML-based settings.

Loads YAML files from the ``modules/config/`` directory:

1. **model.yaml**: per-provider model identifiers, sampling temperatures and
   output token limits for extraction and solution generation.
2. **client.yaml**: default request timeout and retry count handed to the
   underlying chat-model clients.

Usage Pattern:
    >>> from modules.config_loader import get_config_loader
    >>> loader = get_config_loader()
    >>> openai_models = loader.get_provider_model_config("openai")
    >>> client_defaults = loader.get_client_config()

Missing files or invalid YAML produce empty dictionaries and a logged
warning, so callers fall back to their built-in defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from modules.logger import setup_logger

logger = setup_logger(__name__)

# ============================================================================
# Path Resolution
# ============================================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]
MODULES_DIR = Path(__file__).resolve().parent
CONFIG_DIR = MODULES_DIR / "config"


# ============================================================================
# Configuration Loader Class
# ============================================================================
class ConfigLoader:
    """
    Lightweight loader for the YAML configs under ``modules/config/``.

    Example:
        >>> loader = ConfigLoader()
        >>> loader.load_configs()
        >>> loader.get_model_config()["providers"]["openai"]["vision_model"]
        'gpt-4o'
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir = config_dir or CONFIG_DIR
        self._model: dict[str, Any] = {}
        self._client: dict[str, Any] = {}

    def load_configs(self) -> None:
        """Load model.yaml and client.yaml. Errors are logged, never raised."""
        self._model = self._load_yaml_config("model.yaml")
        self._client = self._load_yaml_config("client.yaml")

    def _load_yaml_config(self, filename: str) -> dict[str, Any]:
        """Load a single YAML configuration file."""
        config_path = self._config_dir / filename

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return {}

        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error in {filename}: {e}")
            return {}
        except OSError as e:
            logger.error(f"Error reading config {filename}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Config file {filename} did not contain a dictionary. Using empty config.")
            return {}

        return data

    def get_model_config(self) -> dict[str, Any]:
        """Get the full model configuration."""
        return dict(self._model)

    def get_provider_model_config(self, provider: str) -> dict[str, Any]:
        """Get the model settings for one provider (empty dict if absent)."""
        providers = self._model.get("providers", {})
        if not isinstance(providers, dict):
            return {}
        section = providers.get(provider, {})
        return dict(section) if isinstance(section, dict) else {}

    def get_client_config(self) -> dict[str, Any]:
        """Get the client (timeout/retry) configuration."""
        return dict(self._client)

    def is_loaded(self) -> bool:
        """Check if any configuration has been loaded."""
        return bool(self._model or self._client)


# ============================================================================
# Singleton Pattern for Config Loader
# ============================================================================
_config_loader_instance: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get or create a singleton ConfigLoader instance."""
    global _config_loader_instance

    if _config_loader_instance is None:
        _config_loader_instance = ConfigLoader()
        _config_loader_instance.load_configs()
        logger.debug("Initialized singleton ConfigLoader")

    return _config_loader_instance


__all__ = [
    "ConfigLoader",
    "get_config_loader",
    "PROJECT_ROOT",
    "MODULES_DIR",
    "CONFIG_DIR",
]
