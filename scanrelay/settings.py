"""
Configuration loading.

Settings come from a YAML file, then environment variables, then command
line overrides; later sources win. The scanner device path and the HTTP
server address are required.
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List

import yaml

from .core.decoder import MAX_BARCODE_LENGTH, UnmappedPolicy, OverflowPolicy
from .core.dispatcher import BarcodeDispatcher
from .core.errors import ConfigError, MissingConfigurationError


# Environment variables for the required settings
ENV_DEVICE_PATH = 'SCANNER_DEVICE_PATH'
ENV_SERVER_ADDRESS = 'HTTP_SERVER_ADDRESS'

# Config paths to search when no explicit file is given
CONFIG_PATHS = [
    Path('settings.yaml'),
    Path('/etc/scanrelay/settings.yaml'),
]

logger = logging.getLogger(__name__)


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a top-level config section, which must be a mapping."""
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def load_config(path: Optional[str] = None) -> dict:
    """
    Load configuration from a YAML file.

    Args:
        path: Explicit settings file; searched paths are used if None

    Returns:
        Parsed configuration (empty if no file was found).

    Raises:
        ConfigError: If the explicit file is missing or a file cannot be parsed.
    """
    if path is not None:
        paths = [Path(path)]
        if not paths[0].exists():
            raise ConfigError(f"Config file not found: {path}")
    else:
        paths = CONFIG_PATHS

    for p in paths:
        if not p.exists():
            continue
        try:
            with open(p, 'r') as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {p}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Config file {p} must contain a mapping")

        logger.info("Loaded config from %s", p)
        return config

    return {}


@dataclass
class Settings:
    """Resolved relay settings."""
    device_path: Optional[str] = None
    server_address: Optional[str] = None
    http_timeout: float = BarcodeDispatcher.DEFAULT_TIMEOUT
    max_length: int = MAX_BARCODE_LENGTH
    unmapped_policy: UnmappedPolicy = UnmappedPolicy.DROP
    overflow_policy: OverflowPolicy = OverflowPolicy.INVALIDATE
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any],
                    environ: Optional[Dict[str, str]] = None) -> 'Settings':
        """
        Build settings from a config dict with environment overrides.

        Raises:
            ConfigError: On invalid values.
        """
        if environ is None:
            environ = os.environ

        scanner_cfg = _section(config, 'scanner')
        http_cfg = _section(config, 'http')
        decoder_cfg = _section(config, 'decoder')
        log_cfg = _section(config, 'logging')

        try:
            return cls(
                device_path=environ.get(ENV_DEVICE_PATH) or scanner_cfg.get('device_path'),
                server_address=environ.get(ENV_SERVER_ADDRESS) or http_cfg.get('server_address'),
                http_timeout=float(http_cfg.get('timeout', BarcodeDispatcher.DEFAULT_TIMEOUT)),
                max_length=int(decoder_cfg.get('max_length', MAX_BARCODE_LENGTH)),
                unmapped_policy=UnmappedPolicy(decoder_cfg.get('unmapped_policy', 'drop')),
                overflow_policy=OverflowPolicy(decoder_cfg.get('overflow_policy', 'invalidate')),
                log_level=str(log_cfg.get('level', 'INFO')).upper(),
                log_file=log_cfg.get('file'),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

    def validate(self) -> None:
        """
        Check required settings and value ranges.

        Raises:
            MissingConfigurationError: If a required setting is missing.
            ConfigError: On out-of-range values.
        """
        missing: List[str] = []
        if not self.device_path:
            missing.append(f"scanner.device_path ({ENV_DEVICE_PATH})")
        if not self.server_address:
            missing.append(f"http.server_address ({ENV_SERVER_ADDRESS})")
        if missing:
            raise MissingConfigurationError(missing)

        if self.max_length < 1:
            raise ConfigError(f"decoder.max_length must be positive, got {self.max_length}")
        if not math.isfinite(self.http_timeout) or self.http_timeout <= 0:
            raise ConfigError(f"http.timeout must be positive, got {self.http_timeout}")
