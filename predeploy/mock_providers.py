"""
Mock providers – return deterministic fixture summaries for local validation.

When MOCK_MODE=true, the orchestrator uses these instead of calling the
integration APIs. Each fixture in scripts/golden_outputs/ maps a scenario
name -> pre-built summaries; MOCK_SCENARIO selects one (default "_default").
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import jsonschema

from predeploy.errors import ConfigurationError
from predeploy.schemas import GOLDEN_SUMMARY_SCHEMA
from predeploy.status import ConditionResult, Status
from predeploy.summaries import (
    ConditionSummary,
    LightstepSummary,
    PagerDutyIncident,
    PagerDutySummary,
    RollbarItem,
    RollbarSummary,
)

logger = logging.getLogger("predeploy.mock")

_GOLDEN_DIR = Path(__file__).resolve().parent.parent / "scripts" / "golden_outputs"
_GOLDEN_SUMMARIES: dict[str, dict] = {}


def _load_golden_summaries(golden_dir: Path = _GOLDEN_DIR) -> None:
    if _GOLDEN_SUMMARIES:
        return
    if not golden_dir.exists():
        logger.warning("Golden output directory not found: %s", golden_dir)
        return
    for f in sorted(golden_dir.glob("*.json")):
        try:
            data = json.loads(f.read_text(encoding="utf-8"))
            jsonschema.validate(instance=data, schema=GOLDEN_SUMMARY_SCHEMA)
        except (ValueError, jsonschema.ValidationError) as exc:
            logger.warning("Failed to load %s: %s", f.name, exc)
            continue
        _GOLDEN_SUMMARIES[data["_scenario"]] = data
        logger.info("Loaded golden summaries for %s from %s", data["_scenario"], f.name)


def get_fixture(scenario: str | None = None) -> dict:
    """Return the fixture for a scenario, falling back to the "_default" one."""
    _load_golden_summaries()
    name = scenario or os.environ.get("MOCK_SCENARIO", "_default")
    data = _GOLDEN_SUMMARIES.get(name) or _GOLDEN_SUMMARIES.get("_default")
    if data is None:
        raise ConfigurationError(f"No mock fixture for scenario={name}")
    return data


def _section(name: str, scenario: str | None) -> dict[str, Any]:
    section = get_fixture(scenario).get(name)
    if section is None:
        raise ConfigurationError(f"Mock fixture has no {name} summary")
    return section


class MockProviders:
    """Drop-in replacement for the live provider functions."""

    def __init__(self, scenario: str | None = None):
        self.scenario = scenario

    def lightstep(self, *, organization: str, project: str, token: str, conditions: Any) -> LightstepSummary:
        data = _section("lightstep", self.scenario)
        return LightstepSummary(
            status=Status(data["status"]),
            organization=organization,
            project=project,
            conditions=tuple(
                ConditionSummary(
                    id=c["id"],
                    name=c.get("name", c["id"]),
                    state=ConditionResult.parse(c["state"]),
                    description=c.get("description", ""),
                    url=c.get("url", ""),
                )
                for c in data.get("conditions", [])
            ),
            project_url=data.get("project_url", ""),
        )

    def rollbar(self, *, token: str, yaml_config: dict) -> RollbarSummary:
        data = _section("rollbar", self.scenario)
        return RollbarSummary(
            status=Status(data["status"]),
            account=yaml_config.get("account", ""),
            project=yaml_config.get("project", ""),
            environment=yaml_config.get("environment", ""),
            items=tuple(RollbarItem(**item) for item in data.get("items", [])),
            project_url=data.get("project_url", ""),
        )

    def pagerduty(self, *, token: str, yaml_config: dict) -> PagerDutySummary:
        data = _section("pagerduty", self.scenario)
        return PagerDutySummary(
            status=Status(data["status"]),
            service_id=yaml_config.get("service", ""),
            service_name=data.get("service_name", ""),
            incidents=tuple(PagerDutyIncident(**inc) for inc in data.get("incidents", [])),
            service_url=data.get("service_url", ""),
        )
