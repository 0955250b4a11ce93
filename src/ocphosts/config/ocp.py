"""OCP API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_float, optional_env_var, require_env_vars

DEFAULT_OCP_ENDPOINT = "https://ocpportal.int.tieto.com/v2/graphql/"
DEFAULT_OCP_TIMEOUT_SECONDS = 30.0
AUTH_HEADER = "X-Auth-Token"


@dataclass(frozen=True, slots=True)
class OcpConfig:
    """Connection settings shared by every reconciler and lookup."""

    token: str
    endpoint: str = DEFAULT_OCP_ENDPOINT
    insecure_skip_verify: bool = True
    timeout_seconds: float = DEFAULT_OCP_TIMEOUT_SECONDS

    def __repr__(self) -> str:
        return (
            f"OcpConfig(endpoint={self.endpoint!r}, token='***', "
            f"insecure_skip_verify={self.insecure_skip_verify}, "
            f"timeout_seconds={self.timeout_seconds})"
        )


def get_ocp_config() -> OcpConfig:
    values = require_env_vars(("OCP_TOKEN",))
    return OcpConfig(
        token=values["OCP_TOKEN"],
        endpoint=optional_env_var("OCP_ENDPOINT", DEFAULT_OCP_ENDPOINT),
        insecure_skip_verify=env_flag("OCP_INSECURE_SKIP_VERIFY", default=True),
        timeout_seconds=env_float("OCP_TIMEOUT_SECONDS", default=DEFAULT_OCP_TIMEOUT_SECONDS),
    )
