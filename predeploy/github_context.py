"""
Explicit snapshot of the workflow run's repository, commit and PR/issue.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

logger = logging.getLogger("predeploy.github_context")


@dataclass(frozen=True)
class ExecutionContext:
    owner: str = ""
    repo: str = ""
    sha: str = ""
    issue_number: int | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExecutionContext":
        env = os.environ if environ is None else environ
        owner, _, repo = env.get("GITHUB_REPOSITORY", "").partition("/")
        event = _read_event(env.get("GITHUB_EVENT_PATH", ""))
        return cls(
            owner=owner,
            repo=repo,
            sha=env.get("GITHUB_SHA", ""),
            issue_number=_issue_number(event),
        )


def _read_event(path: str) -> dict:
    if not path or not Path(path).exists():
        return {}
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read event payload %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _issue_number(event: dict) -> int | None:
    for key in ("pull_request", "issue"):
        number = (event.get(key) or {}).get("number")
        if number:
            return int(number)
    # issue_comment and pull_request events also carry a top-level number
    number = event.get("number")
    return int(number) if number else None
