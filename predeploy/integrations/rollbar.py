"""
Rollbar provider – lists active items for the project and rates them by level.

Returns a RollbarSummary whose status is error when any active item is
critical, warn when any is error-level, ok otherwise.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

from predeploy.errors import IntegrationError
from predeploy.integrations._http import get_json
from predeploy.status import Status
from predeploy.summaries import RollbarItem, RollbarSummary

logger = logging.getLogger("predeploy.rollbar")

INTEGRATION = "rollbar"
API_URL = "https://api.rollbar.com/api/1"
APP_URL = "https://rollbar.com"

# Rollbar returns at most this many items per page.
PAGE_SIZE = 100

# Numeric levels as returned by some Rollbar endpoints.
_LEVEL_NAMES = {10: "debug", 20: "info", 30: "warning", 40: "error", 50: "critical"}


def _level(value: Any) -> str:
    if isinstance(value, int):
        return _LEVEL_NAMES.get(value, str(value))
    return str(value or "").lower()


def summary_status(items: Iterable[RollbarItem]) -> Status:
    levels = {i.level for i in items}
    if "critical" in levels:
        return Status.ERROR
    if "error" in levels:
        return Status.WARN
    return Status.OK


def _list_active_items(session: requests.Session, token: str, environment: str) -> list[dict]:
    """Walk the items listing page by page until a short page comes back."""
    headers = {"X-Rollbar-Access-Token": token, "Accept": "application/json"}
    raw_items: list[dict] = []
    page = 1
    while True:
        params = {"status": "active", "page": page}
        if environment:
            params["environment"] = environment
        payload = get_json(session, INTEGRATION, f"{API_URL}/items", params=params, headers=headers)
        if not isinstance(payload, dict) or payload.get("err"):
            message = payload.get("message") if isinstance(payload, dict) else None
            raise IntegrationError(INTEGRATION, message or "unexpected response from items endpoint")

        batch = (payload.get("result") or {}).get("items") or []
        raw_items.extend(batch)
        if len(batch) < PAGE_SIZE:
            return raw_items
        page += 1


def get_summary(
    *,
    token: str,
    yaml_config: dict,
    session: requests.Session | None = None,
) -> RollbarSummary:
    account = yaml_config["account"]
    project = yaml_config["project"]
    environment = yaml_config.get("environment", "")
    project_url = f"{APP_URL}/{account}/{project}"

    own_session = session is None
    if own_session:
        session = requests.Session()
    try:
        raw_items = _list_active_items(session, token, environment)
    finally:
        if own_session:
            session.close()

    items = []
    for raw in raw_items:
        level = _level(raw.get("level"))
        if level not in ("error", "critical"):
            continue
        counter = int(raw.get("counter") or 0)
        items.append(
            RollbarItem(
                id=int(raw.get("id") or 0),
                counter=counter,
                title=raw.get("title") or "",
                level=level,
                occurrences=int(raw.get("total_occurrences") or 0),
                url=f"{project_url}/items/{counter}/",
            )
        )

    status = summary_status(items)
    logger.info(
        '{"event":"rollbar_summary","project":"%s","active_items":%d,"status":"%s"}',
        project,
        len(items),
        status.value,
    )
    return RollbarSummary(
        status=status,
        account=account,
        project=project,
        environment=environment,
        items=tuple(items),
        project_url=project_url,
    )
