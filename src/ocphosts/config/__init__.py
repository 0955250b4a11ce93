"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_float, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .ocp import AUTH_HEADER, DEFAULT_OCP_ENDPOINT, OcpConfig, get_ocp_config

__all__ = [
    "AUTH_HEADER",
    "DEFAULT_OCP_ENDPOINT",
    "ConfigurationError",
    "MissingConfigurationError",
    "OcpConfig",
    "env_flag",
    "env_float",
    "get_ocp_config",
    "optional_env_var",
    "require_env_vars",
]
