"""
GitHub Actions runner I/O.

Inputs arrive as INPUT_<NAME> environment variables; outputs are appended to
the file named by GITHUB_OUTPUT using the heredoc-style delimiter syntax.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Mapping

from predeploy.errors import ConfigurationError

logger = logging.getLogger("predeploy.actions")

_failed = False


def _input_env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def resolve_action_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return the trimmed value of an action input, or "" when unset."""
    env = os.environ if environ is None else environ
    return env.get(_input_env_name(name), "").strip()


def assert_action_input(name: str, environ: Mapping[str, str] | None = None) -> None:
    if not resolve_action_input(name, environ):
        raise ConfigurationError(f"Input required and not supplied: {name}")


def input_flag(name: str, environ: Mapping[str, str] | None = None) -> bool:
    return resolve_action_input(name, environ).lower() == "true"


def set_output(name: str, value: str, environ: Mapping[str, str] | None = None) -> None:
    env = os.environ if environ is None else environ
    output_path = env.get("GITHUB_OUTPUT")
    if not output_path:
        logger.info('{"event":"output","name":"%s","bytes":%d}', name, len(value))
        return
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(output_path, "a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def set_failed(message: str) -> None:
    """Emit an error annotation and mark the step as failed."""
    logger.error('{"event":"action_failed","error":"%s"}', message)
    print(f"::error::{message}", flush=True)
    global _failed
    _failed = True


def has_failed() -> bool:
    return _failed
