"""
Configuration management for the Zephyr CLI.

Loads connection settings from a .env file and the process environment.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ..configurations.zephyr_scale import CLOUD_API_URL

logger = logging.getLogger(__name__)


class CLIConfig:
    """Configuration manager for the Zephyr CLI."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize CLI configuration.

        Args:
            env_file: Path to .env file. If None, checks ZEPHYR_ENV_FILE env var,
                      then falls back to .env in current directory
        """
        if env_file:
            self.env_file = env_file
        else:
            self.env_file = os.path.expanduser(os.getenv('ZEPHYR_ENV_FILE', '.env'))
        self._load_env()

    def _load_env(self):
        """Load environment variables from .env file."""
        if os.path.exists(self.env_file):
            # .env values take precedence over the shell
            load_dotenv(self.env_file, override=True)
            logger.debug(f"Loaded environment from {self.env_file}")
        else:
            logger.debug(f"No .env file found at {self.env_file}, using system environment")

    @property
    def deployment(self) -> str:
        return (os.getenv('ZEPHYR_DEPLOYMENT') or 'cloud').strip().lower()

    @property
    def base_url(self) -> Optional[str]:
        value = os.getenv('ZEPHYR_BASE_URL')
        if value:
            return value
        # only the cloud API has a well-known address
        return CLOUD_API_URL if self.deployment == 'cloud' else None

    @property
    def token(self) -> Optional[str]:
        return os.getenv('ZEPHYR_API_TOKEN')

    @property
    def username(self) -> Optional[str]:
        return os.getenv('ZEPHYR_USERNAME')

    @property
    def password(self) -> Optional[str]:
        return os.getenv('ZEPHYR_PASSWORD')

    @property
    def timeout(self) -> float:
        value = os.getenv('ZEPHYR_TIMEOUT')
        if not value:
            return 30
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Invalid ZEPHYR_TIMEOUT '{value}', using 30 seconds")
            return 30

    def is_configured(self) -> bool:
        """Check if all required configuration is present."""
        return not self.get_missing_config()

    def get_missing_config(self) -> List[str]:
        """Get list of missing required configuration values."""
        missing = []
        if self.deployment not in ('cloud', 'datacenter'):
            missing.append('ZEPHYR_DEPLOYMENT (cloud or datacenter)')
        if not self.base_url:
            missing.append('ZEPHYR_BASE_URL')
        if not self.token:
            if not self.username:
                missing.append('ZEPHYR_USERNAME' if self.password else 'ZEPHYR_API_TOKEN')
            elif not self.password:
                missing.append('ZEPHYR_PASSWORD')
        return missing

    def to_settings(self) -> Dict[str, Any]:
        """Settings dict accepted by ZephyrScaleConfiguration and the toolkit."""
        settings = {
            'base_url': self.base_url,
            'deployment': self.deployment,
            'timeout': self.timeout,
        }
        if self.token:
            settings['token'] = self.token
        if self.username:
            settings['username'] = self.username
        if self.password:
            settings['password'] = self.password
        return settings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (masks secrets)."""
        return {
            'base_url': self.base_url,
            'deployment': self.deployment,
            'token': '***' if self.token else None,
            'username': self.username,
            'password': '***' if self.password else None,
            'timeout': self.timeout,
            'env_file': self.env_file,
        }


def get_config(env_file: Optional[str] = None) -> CLIConfig:
    """
    Get CLI configuration instance.

    Args:
        env_file: Optional path to .env file

    Returns:
        CLIConfig instance
    """
    return CLIConfig(env_file=env_file)
