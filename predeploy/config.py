"""
Loading of the action's YAML configuration file and its inputs.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import jsonschema
import yaml

from predeploy.actions import input_flag, resolve_action_input
from predeploy.errors import ConfigurationError
from predeploy.schemas import CONFIG_SCHEMA

logger = logging.getLogger("predeploy.config")

DEFAULT_CONFIG_FILE = ".lightstep.yml"
DEFAULT_HTTP_TIMEOUT = 10.0


@dataclass(frozen=True)
class PredeployConfig:
    conditions: list[str] = field(default_factory=list)
    organization: str | None = None
    project: str | None = None
    integrations: dict[str, dict[str, Any]] = field(default_factory=dict)

    def integration(self, name: str) -> dict[str, Any] | None:
        """Return the config section for an integration, or None when disabled."""
        section = self.integrations.get(name)
        return section or None


@dataclass(frozen=True)
class ActionInputs:
    lightstep_organization: str = ""
    lightstep_project: str = ""
    lightstep_api_key: str = ""
    config_file: str = DEFAULT_CONFIG_FILE
    rollbar_api_token: str = ""
    pagerduty_api_token: str = ""
    github_token: str = ""
    disable_comment: bool = False
    rollup: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ActionInputs":
        def get(name: str) -> str:
            return resolve_action_input(name, environ)

        return cls(
            lightstep_organization=get("lightstep_organization"),
            lightstep_project=get("lightstep_project"),
            lightstep_api_key=get("lightstep_api_key"),
            config_file=get("lightstep_config_file") or DEFAULT_CONFIG_FILE,
            rollbar_api_token=get("rollbar_api_token"),
            pagerduty_api_token=get("pagerduty_api_token"),
            github_token=get("github_token"),
            disable_comment=input_flag("disable_comment", environ),
            rollup=input_flag("rollup", environ),
        )

    def require(self, name: str) -> str:
        """Return a credential input, failing with the input's name when empty."""
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Input required and not supplied: {name}")
        return value


def parse_config(data: Any) -> PredeployConfig:
    if data is None:
        data = {}
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc.message}") from exc

    integrations = data.get("integrations") or {}
    return PredeployConfig(
        conditions=[str(c) for c in data.get("conditions") or []],
        organization=data.get("organization"),
        project=data.get("project"),
        integrations={k: dict(v) for k, v in integrations.items() if isinstance(v, dict) and v},
    )


def load_config(path: str | os.PathLike) -> PredeployConfig:
    """Read and validate the YAML configuration file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse {config_path}: {exc}") from exc
    config = parse_config(data)
    logger.info(
        '{"event":"config_loaded","path":"%s","conditions":%d,"integrations":"%s"}',
        config_path,
        len(config.conditions),
        ",".join(sorted(config.integrations)),
    )
    return config


def http_timeout() -> float:
    raw = os.environ.get("PREDEPLOY_HTTP_TIMEOUT")
    if raw is None or not raw.strip():
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid PREDEPLOY_HTTP_TIMEOUT: {raw!r} is not a number") from None
    if timeout <= 0:
        raise ConfigurationError(f"Invalid PREDEPLOY_HTTP_TIMEOUT: {raw!r} must be positive")
    return timeout


def mock_mode() -> bool:
    return os.environ.get("MOCK_MODE", "false").lower() in ("true", "1", "yes")
