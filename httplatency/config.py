"""
load the config from config.yaml and .env
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any

from dotenv import find_dotenv, load_dotenv


class Config:
    """Configuration loader that reads from config.yaml and environment variables."""

    # Environment variable mapping
    ENV_MAPPINGS = {
        'HTTPLATENCY_USER_AGENT': ('prober', 'user_agent'),
        'HTTPLATENCY_TIMEOUT': ('prober', 'timeout'),
        'HTTPLATENCY_CONNECT_TIMEOUT': ('prober', 'connect_timeout'),
        'HTTPLATENCY_WORKERS': ('pipeline', 'workers'),
        'HTTPLATENCY_OUTPUT': ('output', 'path'),
        'LOG_LEVEL': ('logging', 'level'),
        'LOG_FORMAT': ('logging', 'format'),
    }

    def __init__(self, config_path: str = None, load_env: bool = True):
        """Initialize configuration loader.

        Args:
            config_path: Path to config.yaml file. If None, uses the config.yaml
                        shipped next to this module.
            load_env: Load a .env file into the environment before applying
                      overrides.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        if load_env:
            load_dotenv(find_dotenv(usecwd=True))

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and override with environment variables."""
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Navigate to the nested config location
                current = config
                for key in config_path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                current[config_path[-1]] = self._convert_env_value(env_value)

        return config

    def _convert_env_value(self, value: str):
        """Convert environment variable string to appropriate Python type."""
        if value.lower() in ('none', 'null'):
            return None

        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, *keys, default=None):
        """Get configuration value by walking nested keys.

        Args:
            *keys: Configuration keys (e.g., 'prober', 'timeout')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    @property
    def prober(self) -> Dict[str, Any]:
        """Get HTTP prober configuration."""
        return self.get('prober', default={})

    @property
    def pipeline(self) -> Dict[str, Any]:
        """Get measurement pipeline configuration."""
        return self.get('pipeline', default={})

    @property
    def output(self) -> Dict[str, Any]:
        """Get output configuration."""
        return self.get('output', default={})

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get('logging', default={})
