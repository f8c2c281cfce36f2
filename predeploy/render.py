"""
Report rendering for the pre-deploy comment.

template_values() pre-resolves every placeholder (glyphs included) from a
RenderContext; render() is then plain substitution, so identical contexts
always produce identical markdown.
"""

from __future__ import annotations

from pathlib import Path
from string import Template

from predeploy.status import condition_glyph, status_glyph
from predeploy.summaries import (
    LightstepSummary,
    PagerDutySummary,
    RenderContext,
    RollbarSummary,
)

TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "pr.tmpl.md"
MAX_ROWS = 10

INTRO_SINGLE = "Health of the services this change deploys to, checked before rollout."
INTRO_ROLLUP = "Health of the services for this rollup deployment, covering every change it includes."


def load_template(path: str | Path | None = None) -> Template:
    return Template(Path(path or TEMPLATE_PATH).read_text(encoding="utf-8"))


def _cell(text: str) -> str:
    return " ".join(str(text).split()).replace("|", "\\|")


def _link(title: str, url: str) -> str:
    return f"[{_cell(title)}]({url})" if url else _cell(title)


def _overflow(total: int) -> list[str]:
    if total <= MAX_ROWS:
        return []
    return ["", f"_…and {total - MAX_ROWS} more._"]


def lightstep_section(summary: LightstepSummary) -> str:
    lines = [f"{status_glyph(summary.status).value} Project {_link(summary.project, summary.project_url)}"]
    if not summary.conditions:
        lines += ["", "_No conditions configured._"]
        return "\n".join(lines)

    lines += ["", "| | Condition | Description |", "|---|---|---|"]
    for c in summary.conditions[:MAX_ROWS]:
        lines.append(f"| {condition_glyph(c.state).value} | {_link(c.name, c.url)} | {_cell(c.description)} |")
    return "\n".join(lines + _overflow(len(summary.conditions)))


def rollbar_section(summary: RollbarSummary | None) -> str:
    if summary is None:
        return "_Rollbar is not configured._"
    env = f" ({_cell(summary.environment)})" if summary.environment else ""
    lines = [
        f"{status_glyph(summary.status).value} Project {_link(summary.project, summary.project_url)}{env}"
        f" has {len(summary.items)} active error item(s)."
    ]
    if summary.items:
        lines += ["", "| Level | Item | Occurrences |", "|---|---|---|"]
        for item in summary.items[:MAX_ROWS]:
            lines.append(f"| {item.level} | {_link(f'#{item.counter} {item.title}', item.url)} | {item.occurrences} |")
        lines += _overflow(len(summary.items))
    return "\n".join(lines)


def pagerduty_section(summary: PagerDutySummary | None) -> str:
    if summary is None:
        return "_PagerDuty is not configured._"
    lines = [
        f"{status_glyph(summary.status).value} Service {_link(summary.service_name, summary.service_url)}"
        f" has {len(summary.incidents)} open incident(s)."
    ]
    if summary.incidents:
        lines += ["", "| Urgency | Incident | Status |", "|---|---|---|"]
        for inc in summary.incidents[:MAX_ROWS]:
            lines.append(f"| {inc.urgency} | {_link(f'#{inc.number} {inc.title}', inc.url)} | {inc.status} |")
        lines += _overflow(len(summary.incidents))
    return "\n".join(lines)


def template_values(context: RenderContext) -> dict[str, str]:
    return {
        "status": context.status.value,
        "status_glyph": status_glyph(context.status).value,
        "intro": INTRO_ROLLUP if context.is_rollup else INTRO_SINGLE,
        "lightstep_section": lightstep_section(context.lightstep),
        "rollbar_section": rollbar_section(context.rollbar),
        "pagerduty_section": pagerduty_section(context.pagerduty),
    }


def render(template: Template, context: RenderContext) -> str:
    """Substitute the pre-resolved context into the template."""
    return template.substitute(template_values(context))
