"""
Lightstep provider – reads the current state of each configured alerting
condition and derives a traffic-light status from them.

  any condition firing ("true")      → error
  any condition indeterminate        → unknown
  no conditions configured           → unknown
  otherwise                          → ok
"""

from __future__ import annotations

import logging
import os
from typing import Iterable

import requests

from predeploy.integrations._http import get_json
from predeploy.status import ConditionResult, Status
from predeploy.summaries import ConditionSummary, LightstepSummary

logger = logging.getLogger("predeploy.lightstep")

INTEGRATION = "lightstep"
DEFAULT_API_URL = "https://api.lightstep.com"
APP_URL = "https://app.lightstep.com"


def _api_url() -> str:
    return os.environ.get("LIGHTSTEP_API_URL", DEFAULT_API_URL).rstrip("/")


def _attributes(payload: dict) -> dict:
    return (payload.get("data") or {}).get("attributes") or {}


def summary_status(conditions: Iterable[ConditionSummary]) -> Status:
    states = [c.state for c in conditions]
    if not states:
        return Status.UNKNOWN
    if ConditionResult.TRUE in states:
        return Status.ERROR
    if ConditionResult.INDETERMINATE in states:
        return Status.UNKNOWN
    return Status.OK


def _headers(token: str) -> dict[str, str]:
    return {"Authorization": f"bearer {token}", "Accept": "application/json"}


def get_condition(
    session: requests.Session, organization: str, project: str, condition_id: str, token: str
) -> ConditionSummary:
    base = f"{_api_url()}/public/v0.2/{organization}/projects/{project}/conditions/{condition_id}"
    headers = _headers(token)
    details = _attributes(get_json(session, INTEGRATION, base, headers=headers))
    state = _attributes(get_json(session, INTEGRATION, f"{base}/status", headers=headers))
    return ConditionSummary(
        id=condition_id,
        name=details.get("name") or condition_id,
        state=ConditionResult.parse(state.get("state")),
        description=state.get("description") or details.get("expression") or "",
        url=f"{APP_URL}/{project}/alerts/{condition_id}",
    )


def get_summary(
    *,
    organization: str,
    project: str,
    token: str,
    conditions: Iterable[str],
    session: requests.Session | None = None,
) -> LightstepSummary:
    """Fetch every configured condition and summarise them."""
    own_session = session is None
    if own_session:
        session = requests.Session()
    try:
        results = tuple(get_condition(session, organization, project, str(cid), token) for cid in conditions)
    finally:
        if own_session:
            session.close()

    status = summary_status(results)
    logger.info(
        '{"event":"lightstep_summary","project":"%s","conditions":%d,"status":"%s"}',
        project,
        len(results),
        status.value,
    )
    return LightstepSummary(
        status=status,
        organization=organization,
        project=project,
        conditions=results,
        project_url=f"{APP_URL}/{project}",
    )
