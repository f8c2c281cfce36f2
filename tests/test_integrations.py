from __future__ import annotations

import pytest
import requests

from predeploy.errors import IntegrationError
from predeploy.integrations import lightstep, pagerduty, rollbar
from predeploy.status import ConditionResult, Status
from tests.conftest import FakeResponse, FakeSession

LS_BASE = "https://api.lightstep.com/public/v0.2/acme/projects/web/conditions"


def _condition_routes(cid: str, name: str, state: str) -> dict[str, FakeResponse]:
    return {
        f"{LS_BASE}/{cid}": FakeResponse({"data": {"id": cid, "attributes": {"name": name, "expression": "p99 > 5"}}}),
        f"{LS_BASE}/{cid}/status": FakeResponse({"data": {"attributes": {"state": state, "description": ""}}}),
    }


def _lightstep(session: FakeSession, conditions: list[str]):
    return lightstep.get_summary(
        organization="acme", project="web", token="ls-key", conditions=conditions, session=session
    )


def test_lightstep_all_clear() -> None:
    session = FakeSession({**_condition_routes("c1", "Latency", "false"), **_condition_routes("c2", "Errors", "false")})
    summary = _lightstep(session, ["c1", "c2"])

    assert summary.status is Status.OK
    assert [c.name for c in summary.conditions] == ["Latency", "Errors"]
    assert summary.conditions[0].description == "p99 > 5"
    assert summary.conditions[0].url == "https://app.lightstep.com/web/alerts/c1"
    assert all(h["Authorization"] == "bearer ls-key" for h in session.sent_headers)
    assert session.headers == {}
    assert session.closed is False


def test_lightstep_firing_condition_is_error() -> None:
    session = FakeSession({**_condition_routes("c1", "Latency", "true"), **_condition_routes("c2", "Errors", "x")})
    summary = _lightstep(session, ["c1", "c2"])
    assert summary.status is Status.ERROR
    assert summary.conditions[1].state is ConditionResult.INDETERMINATE


def test_lightstep_indeterminate_is_unknown() -> None:
    session = FakeSession(_condition_routes("c1", "Latency", "no data"))
    assert _lightstep(session, ["c1"]).status is Status.UNKNOWN


def test_lightstep_without_conditions_is_unknown() -> None:
    assert _lightstep(FakeSession({}), []).status is Status.UNKNOWN


def test_lightstep_api_url_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LIGHTSTEP_API_URL", "http://localhost:9000/")
    session = FakeSession({})
    with pytest.raises(IntegrationError):
        _lightstep(session, ["c1"])
    assert session.calls[0][0] == "http://localhost:9000/public/v0.2/acme/projects/web/conditions/c1"


def test_lightstep_http_error() -> None:
    session = FakeSession({f"{LS_BASE}/c1": FakeResponse("denied", status_code=403)})
    with pytest.raises(IntegrationError, match="lightstep: HTTP 403"):
        _lightstep(session, ["c1"])


def test_transport_error_wrapped() -> None:
    class Broken(FakeSession):
        def get(self, url, params=None, headers=None, timeout=None):
            raise requests.ConnectionError("refused")

    with pytest.raises(IntegrationError, match="request to"):
        _lightstep(Broken({}), ["c1"])


def test_invalid_json_wrapped() -> None:
    session = FakeSession({f"{LS_BASE}/c1": FakeResponse(ValueError("no json"))})
    with pytest.raises(IntegrationError, match="not valid JSON"):
        _lightstep(session, ["c1"])


ROLLBAR_ITEMS = "https://api.rollbar.com/api/1/items"


def _rollbar(items: list[dict], config: dict | None = None, err: int = 0):
    session = FakeSession({ROLLBAR_ITEMS: FakeResponse({"err": err, "result": {"items": items}})})
    summary = rollbar.get_summary(
        token="rb-token", yaml_config=config or {"account": "acme", "project": "web"}, session=session
    )
    return summary, session


def test_rollbar_no_items_is_ok() -> None:
    summary, session = _rollbar([])
    assert summary.status is Status.OK
    assert summary.project_url == "https://rollbar.com/acme/web"
    assert session.sent_headers[0]["X-Rollbar-Access-Token"] == "rb-token"
    assert session.headers == {}
    assert session.calls[0][1] == {"status": "active", "page": 1}


def test_rollbar_error_items_warn() -> None:
    summary, _ = _rollbar(
        [
            {"id": 1, "counter": 10, "title": "KeyError", "level": "error", "total_occurrences": 4},
            {"id": 2, "counter": 11, "title": "debug noise", "level": "info"},
        ]
    )
    assert summary.status is Status.WARN
    assert len(summary.items) == 1
    assert summary.items[0].url == "https://rollbar.com/acme/web/items/10/"
    assert summary.items[0].occurrences == 4


def test_rollbar_critical_items_error() -> None:
    summary, _ = _rollbar([{"id": 3, "counter": 12, "title": "OOM", "level": 50}])
    assert summary.status is Status.ERROR
    assert summary.items[0].level == "critical"


def test_rollbar_environment_filter() -> None:
    _, session = _rollbar([], {"account": "acme", "project": "web", "environment": "production"})
    assert session.calls[0][1] == {"status": "active", "page": 1, "environment": "production"}


def test_rollbar_api_error_flag() -> None:
    with pytest.raises(IntegrationError, match="rollbar"):
        _rollbar([], err=1)


PD_SERVICE = "https://api.pagerduty.com/services/PSVC1"
PD_INCIDENTS = "https://api.pagerduty.com/incidents"


def _pagerduty(incidents: list[dict]):
    session = FakeSession(
        {
            PD_SERVICE: FakeResponse({"service": {"id": "PSVC1", "name": "Web", "html_url": "https://x.pagerduty.com/s/PSVC1"}}),
            PD_INCIDENTS: FakeResponse({"incidents": incidents}),
        }
    )
    return pagerduty.get_summary(token="pd-token", yaml_config={"service": "PSVC1"}, session=session), session


def test_pagerduty_quiet_service_is_ok() -> None:
    summary, session = _pagerduty([])
    assert summary.status is Status.OK
    assert summary.service_name == "Web"
    assert session.sent_headers[1]["Authorization"] == "Token token=pd-token"
    assert session.headers == {}
    assert ("statuses[]", "triggered") in session.calls[1][1]
    assert ("service_ids[]", "PSVC1") in session.calls[1][1]


def test_pagerduty_high_urgency_is_error() -> None:
    summary, _ = _pagerduty(
        [
            {"id": "Q1", "incident_number": 7, "title": "5xx", "status": "triggered", "urgency": "high"},
            {"id": "Q2", "incident_number": 8, "title": "slow", "status": "acknowledged", "urgency": "low"},
        ]
    )
    assert summary.status is Status.ERROR
    assert [i.number for i in summary.incidents] == [7, 8]


def test_pagerduty_low_urgency_is_warn() -> None:
    summary, _ = _pagerduty(
        [
            {"id": "Q2", "incident_number": 8, "title": "slow", "status": "acknowledged", "urgency": "low"},
            {"id": "Q3", "incident_number": 9, "title": "old", "status": "resolved", "urgency": "high"},
        ]
    )
    assert summary.status is Status.WARN
    assert len(summary.incidents) == 1


def test_caller_session_headers_are_left_alone() -> None:
    session = FakeSession(_condition_routes("c1", "Latency", "false"))
    session.headers = {"User-Agent": "deploy-bot"}
    _lightstep(session, ["c1"])
    assert session.headers == {"User-Agent": "deploy-bot"}


def test_rollbar_reads_every_page() -> None:
    noise = [{"id": n, "counter": n, "title": "noise", "level": "info"} for n in range(rollbar.PAGE_SIZE)]
    pages = {
        1: noise,
        2: [{"id": 500, "counter": 500, "title": "OOM", "level": "critical"}],
    }
    session = FakeSession(
        {ROLLBAR_ITEMS: lambda params: FakeResponse({"err": 0, "result": {"items": pages.get(params["page"], [])}})}
    )
    summary = rollbar.get_summary(token="rb-token", yaml_config={"account": "acme", "project": "web"}, session=session)

    assert summary.status is Status.ERROR
    assert [i.counter for i in summary.items] == [500]
    assert [params["page"] for _, params in session.calls] == [1, 2]


def test_pagerduty_follows_more_flag() -> None:
    def incidents(params):
        offset = dict(params)["offset"]
        if offset == 0:
            return FakeResponse(
                {"incidents": [{"id": "Q1", "incident_number": 1, "status": "acknowledged", "urgency": "low"}], "more": True}
            )
        return FakeResponse(
            {"incidents": [{"id": "Q2", "incident_number": 2, "status": "triggered", "urgency": "high"}], "more": False}
        )

    session = FakeSession({PD_SERVICE: FakeResponse({"service": {"name": "Web"}}), PD_INCIDENTS: incidents})
    summary = pagerduty.get_summary(token="pd-token", yaml_config={"service": "PSVC1"}, session=session)

    assert summary.status is Status.ERROR
    assert [i.number for i in summary.incidents] == [1, 2]
    assert [dict(params)["offset"] for url, params in session.calls if url == PD_INCIDENTS] == [0, 1]
