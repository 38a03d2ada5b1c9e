"""
Client configuration

Provides the validated client configuration and loaders for JSON documents,
JSON files and environment variables.
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from .exceptions import ConfigurationError
from .version import __version__

DEFAULT_CONFIG_SECTION = "gateway"
DEFAULT_ENV_PREFIX = "GATEWAY_"

# Accepted spellings of each configuration key
_KEY_ALIASES = {
    'base_url': ('base_url', 'baseUrl', 'base_uri', 'baseUri', 'BaseUri'),
    'access_id': ('access_id', 'accessId', 'AccessId'),
    'secret_key': ('secret_key', 'secretKey', 'SecretKey'),
    'timeout': ('timeout', 'timeout_seconds', 'timeoutSeconds', 'TimeoutSeconds'),
    'verify_ssl': ('verify_ssl', 'verifySsl'),
    'user_agent': ('user_agent', 'userAgent'),
    'token_buffer_seconds': ('token_buffer_seconds', 'tokenBufferSeconds'),
    'default_headers': ('default_headers', 'defaultHeaders'),
}


@dataclass
class ClientConfig:
    """Configuration for a gateway client."""
    base_url: str
    access_id: str
    secret_key: str = field(repr=False)
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = f"Gateway-Python-SDK/{__version__}"
    token_buffer_seconds: int = 60
    default_headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate client configuration."""
        if not self.base_url:
            raise ConfigurationError("Base URL cannot be empty")

        # Ensure base_url ends with /
        if not self.base_url.endswith('/'):
            self.base_url += '/'

        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"Invalid base URL format: {self.base_url}")

        if not self.access_id:
            raise ConfigurationError("Access ID cannot be empty")

        if not self.secret_key:
            raise ConfigurationError("Secret key cannot be empty")

        if self.timeout <= 0:
            raise ConfigurationError("Timeout must be positive")

        if self.token_buffer_seconds < 0:
            raise ConfigurationError("Token buffer seconds must be non-negative")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def load_client_config_from_dict(data: Mapping[str, Any], section: Optional[str] = None) -> ClientConfig:
    """
    Build a client configuration from a mapping.

    Args:
        data: Configuration mapping (snake_case or camelCase keys)
        section: Optional key of a nested section holding the settings

    Returns:
        ClientConfig: Validated configuration

    Raises:
        ConfigurationError: If the section is missing or values are invalid
    """
    if section is not None:
        if section not in data or not isinstance(data[section], Mapping):
            raise ConfigurationError(f"Configuration section '{section}' not found")
        data = data[section]

    values: Dict[str, Any] = {}
    for name, aliases in _KEY_ALIASES.items():
        for alias in aliases:
            if alias in data:
                values[name] = data[alias]
                break

    try:
        if 'timeout' in values:
            values['timeout'] = float(values['timeout'])
        if 'token_buffer_seconds' in values:
            values['token_buffer_seconds'] = int(values['token_buffer_seconds'])
        if 'verify_ssl' in values:
            values['verify_ssl'] = _parse_bool(values['verify_ssl'])
        if 'default_headers' in values:
            values['default_headers'] = dict(values['default_headers'])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration value: {e}")

    for required in ('base_url', 'access_id', 'secret_key'):
        values.setdefault(required, "")

    return ClientConfig(**values)


def load_client_config_from_json(json_string: str, section: Optional[str] = DEFAULT_CONFIG_SECTION) -> ClientConfig:
    """Load client configuration from a JSON string"""
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse configuration JSON: {e}", details={'code': 'PARSE_ERROR'})

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration JSON must be an object")

    return load_client_config_from_dict(data, section)


def load_client_config_from_file(
    path: Union[str, Path],
    section: Optional[str] = DEFAULT_CONFIG_SECTION
) -> ClientConfig:
    """Load client configuration from a JSON file"""
    config_path = Path(path)
    try:
        content = config_path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file {config_path}: {e}")

    return load_client_config_from_json(content, section)


def load_client_config_from_env(
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Optional[Mapping[str, str]] = None
) -> ClientConfig:
    """
    Load client configuration from environment variables.

    Variables are named after the configuration fields, upper-cased and
    prefixed, e.g. ``GATEWAY_BASE_URL``, ``GATEWAY_ACCESS_ID``,
    ``GATEWAY_SECRET_KEY`` and ``GATEWAY_TIMEOUT``.

    Args:
        prefix: Variable name prefix
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        ClientConfig: Validated configuration
    """
    environ = os.environ if environ is None else environ

    data = {}
    for config_field in fields(ClientConfig):
        if config_field.name == 'default_headers':
            continue
        env_name = f"{prefix}{config_field.name.upper()}"
        if env_name in environ:
            data[config_field.name] = environ[env_name]

    return load_client_config_from_dict(data)
