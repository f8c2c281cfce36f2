"""Shared HTTP helper for the integration providers."""

from __future__ import annotations

import logging
from typing import Any

import requests

from predeploy.config import http_timeout
from predeploy.errors import IntegrationError

logger = logging.getLogger("predeploy.http")


def get_json(
    session: requests.Session,
    integration: str,
    url: str,
    *,
    params: Any = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET a JSON document, raising IntegrationError on transport, status or parse failure.

    Credentials travel in per-request ``headers`` so a caller-owned session
    is never modified.
    """
    try:
        r = session.get(url, params=params, headers=headers, timeout=http_timeout())
    except requests.RequestException as exc:
        logger.error('{"event":"http_failed","integration":"%s","error":"%s"}', integration, exc)
        raise IntegrationError(integration, f"request to {url} failed: {exc}") from exc

    if r.status_code != 200:
        logger.error(
            '{"event":"http_status","integration":"%s","status_code":%d}',
            integration,
            r.status_code,
        )
        raise IntegrationError(integration, f"HTTP {r.status_code} from {url}: {r.text[:200]}")

    try:
        return r.json()
    except ValueError as exc:
        raise IntegrationError(integration, f"response from {url} is not valid JSON") from exc
