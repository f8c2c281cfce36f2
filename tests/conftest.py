from __future__ import annotations

from typing import Any

import pytest

from predeploy import actions
from predeploy.status import ConditionResult, Status
from predeploy.summaries import (
    ConditionSummary,
    LightstepSummary,
    PagerDutySummary,
    RollbarSummary,
)


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: str | None = None):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes GETs by URL.

    A route may be a callable taking the request params, for paged endpoints.
    """

    def __init__(self, routes: dict[str, Any]):
        self.routes = routes
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, Any]] = []
        self.sent_headers: list[dict[str, str] | None] = []
        self.closed = False

    def get(
        self, url: str, params: Any = None, headers: dict[str, str] | None = None, timeout: float | None = None
    ) -> FakeResponse:
        self.calls.append((url, params))
        self.sent_headers.append(headers)
        if url not in self.routes:
            return FakeResponse({"error": "not found"}, status_code=404)
        route = self.routes[url]
        return route(params) if callable(route) else route

    def close(self) -> None:
        self.closed = True


class FakeProviders:
    """Records provider calls and returns canned summaries."""

    def __init__(self, lightstep=None, rollbar=None, pagerduty=None):
        self._lightstep = lightstep or make_lightstep()
        self._rollbar = rollbar or RollbarSummary(status=Status.OK, account="acme", project="web")
        self._pagerduty = pagerduty or PagerDutySummary(status=Status.OK, service_id="PSVC1")
        self.calls: list[tuple[str, dict]] = []

    def lightstep(self, **kwargs):
        self.calls.append(("lightstep", kwargs))
        return self._lightstep

    def rollbar(self, **kwargs):
        self.calls.append(("rollbar", kwargs))
        return self._rollbar

    def pagerduty(self, **kwargs):
        self.calls.append(("pagerduty", kwargs))
        return self._pagerduty


def make_lightstep(status: Status = Status.OK, states: tuple[str, ...] = ("false",)) -> LightstepSummary:
    return LightstepSummary(
        status=status,
        organization="acme",
        project="web",
        conditions=tuple(
            ConditionSummary(id=f"c{i}", name=f"Condition {i}", state=ConditionResult.parse(s))
            for i, s in enumerate(states)
        ),
        project_url="https://app.lightstep.com/web",
    )


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MOCK_MODE",
        "MOCK_SCENARIO",
        "GITHUB_OUTPUT",
        "GITHUB_REPOSITORY",
        "GITHUB_SHA",
        "GITHUB_EVENT_PATH",
        "LIGHTSTEP_API_URL",
        "PREDEPLOY_HTTP_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(actions, "_failed", False)
