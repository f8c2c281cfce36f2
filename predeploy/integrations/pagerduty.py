"""
PagerDuty provider – open (triggered or acknowledged) incidents on one service.
"""

from __future__ import annotations

import logging
from typing import Iterable

import requests

from predeploy.integrations._http import get_json
from predeploy.status import Status
from predeploy.summaries import PagerDutyIncident, PagerDutySummary

logger = logging.getLogger("predeploy.pagerduty")

INTEGRATION = "pagerduty"
API_URL = "https://api.pagerduty.com"
OPEN_STATUSES = ("triggered", "acknowledged")
PAGE_LIMIT = 100


def summary_status(incidents: Iterable[PagerDutyIncident]) -> Status:
    urgencies = {i.urgency for i in incidents}
    if "high" in urgencies:
        return Status.ERROR
    if urgencies:
        return Status.WARN
    return Status.OK


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Token token={token}",
        "Accept": "application/vnd.pagerduty+json;version=2",
    }


def _list_open_incidents(session: requests.Session, service_id: str, headers: dict[str, str]) -> list[dict]:
    """Follow offset pagination while the API reports more results."""
    incidents: list[dict] = []
    offset = 0
    while True:
        params = [("service_ids[]", service_id)] + [("statuses[]", s) for s in OPEN_STATUSES]
        params += [("limit", PAGE_LIMIT), ("offset", offset)]
        payload = get_json(session, INTEGRATION, f"{API_URL}/incidents", params=params, headers=headers)
        batch = payload.get("incidents") or []
        incidents.extend(batch)
        if not payload.get("more") or not batch:
            return incidents
        offset += len(batch)


def get_summary(
    *,
    token: str,
    yaml_config: dict,
    session: requests.Session | None = None,
) -> PagerDutySummary:
    service_id = yaml_config["service"]
    headers = _headers(token)

    own_session = session is None
    if own_session:
        session = requests.Session()
    try:
        service = get_json(session, INTEGRATION, f"{API_URL}/services/{service_id}", headers=headers).get("service") or {}
        raw_incidents = _list_open_incidents(session, service_id, headers)
    finally:
        if own_session:
            session.close()

    incidents = tuple(
        PagerDutyIncident(
            id=raw.get("id", ""),
            number=int(raw.get("incident_number") or 0),
            title=raw.get("title") or raw.get("summary") or "",
            status=raw.get("status", ""),
            urgency=raw.get("urgency", "high"),
            url=raw.get("html_url", ""),
        )
        for raw in raw_incidents
        if raw.get("status") in OPEN_STATUSES
    )

    status = summary_status(incidents)
    logger.info(
        '{"event":"pagerduty_summary","service":"%s","open_incidents":%d,"status":"%s"}',
        service_id,
        len(incidents),
        status.value,
    )
    return PagerDutySummary(
        status=status,
        service_id=service_id,
        service_name=service.get("name") or service_id,
        incidents=incidents,
        service_url=service.get("html_url", ""),
    )
