"""Identity gateway configuration."""

from .logging_config import LoggingConfig, get_logger, mask_identifier, setup_logging
from .settings import IdentitySettings, get_settings

__all__ = [
    "LoggingConfig",
    "get_logger",
    "mask_identifier",
    "setup_logging",
    "IdentitySettings",
    "get_settings",
]
