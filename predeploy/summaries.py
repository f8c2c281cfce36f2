"""
Normalised per-integration summaries and the render context built from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from predeploy.status import ConditionResult, Status


@dataclass(frozen=True)
class ConditionSummary:
    id: str
    name: str
    state: ConditionResult
    description: str = ""
    url: str = ""


@dataclass(frozen=True)
class LightstepSummary:
    status: Status
    organization: str
    project: str
    conditions: tuple[ConditionSummary, ...] = ()
    project_url: str = ""


@dataclass(frozen=True)
class RollbarItem:
    id: int
    counter: int
    title: str
    level: str
    occurrences: int = 0
    url: str = ""


@dataclass(frozen=True)
class RollbarSummary:
    status: Status
    account: str
    project: str
    environment: str = ""
    items: tuple[RollbarItem, ...] = ()
    project_url: str = ""


@dataclass(frozen=True)
class PagerDutyIncident:
    id: str
    number: int
    title: str
    status: str
    urgency: str
    url: str = ""


@dataclass(frozen=True)
class PagerDutySummary:
    status: Status
    service_id: str
    service_name: str = ""
    incidents: tuple[PagerDutyIncident, ...] = ()
    service_url: str = ""


@dataclass(frozen=True)
class RenderContext:
    """Everything the report template needs. None marks an unconfigured integration."""

    status: Status
    lightstep: LightstepSummary
    is_rollup: bool = False
    rollbar: Optional[RollbarSummary] = None
    pagerduty: Optional[PagerDutySummary] = None
