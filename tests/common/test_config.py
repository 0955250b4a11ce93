from __future__ import annotations

import pytest

from ocphosts.config import (
    DEFAULT_OCP_ENDPOINT,
    ConfigurationError,
    MissingConfigurationError,
    env_flag,
    env_float,
    get_ocp_config,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "EXAMPLE_VAR"])

    assert str(exc.value) == "Missing configuration for: EXAMPLE_VAR, MISSING_VAR"


def test_ocp_config_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OCP_TOKEN", raising=False)

    with pytest.raises(MissingConfigurationError, match="OCP_TOKEN"):
        get_ocp_config()


def test_ocp_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OCP_TOKEN", "secret")
    for name in ("OCP_ENDPOINT", "OCP_INSECURE_SKIP_VERIFY", "OCP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    config = get_ocp_config()

    assert config.token == "secret"
    assert config.endpoint == DEFAULT_OCP_ENDPOINT
    assert config.insecure_skip_verify is True
    assert config.timeout_seconds == 30.0
    assert "secret" not in repr(config)


def test_ocp_config_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OCP_TOKEN", "secret")
    monkeypatch.setenv("OCP_ENDPOINT", " https://ocp.example.test/graphql/ ")
    monkeypatch.setenv("OCP_INSECURE_SKIP_VERIFY", "no")
    monkeypatch.setenv("OCP_TIMEOUT_SECONDS", "5.5")

    config = get_ocp_config()

    assert config.endpoint == "https://ocp.example.test/graphql/"
    assert config.insecure_skip_verify is False
    assert config.timeout_seconds == 5.5


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("TRUE", True), ("off", False)])
def test_env_flag_parses_common_spellings(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_flag("EXAMPLE_FLAG", default=not expected) is expected


def test_env_flag_rejects_unknown_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError, match="Invalid boolean"):
        env_flag("EXAMPLE_FLAG", default=True)


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_env_float_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("EXAMPLE_TIMEOUT", raw)

    with pytest.raises(ConfigurationError):
        env_float("EXAMPLE_TIMEOUT", default=1.0)
