"""
Pre-deploy flow: collect integration summaries, reduce them to one status,
render the report, set the action outputs and publish the comment.

Integrations are fetched sequentially (lightstep, rollbar, pagerduty). An
enabled optional integration without its credential input aborts the run
before any integration is contacted.
"""

from __future__ import annotations

import logging
from string import Template
from typing import Any, Callable, Mapping

from predeploy import actions, publisher
from predeploy.config import ActionInputs, PredeployConfig, load_config, mock_mode
from predeploy.github_context import ExecutionContext
from predeploy.integrations import lightstep, pagerduty, rollbar
from predeploy.mock_providers import MockProviders
from predeploy.render import load_template, render
from predeploy.status import reduce_status
from predeploy.summaries import RenderContext
from predeploy.telemetry import get_tracer, new_correlation_id

logger = logging.getLogger("predeploy.orchestrator")

STATUS_OUTPUT = "lightstep_predeploy_status"
MARKDOWN_OUTPUT = "lightstep_predeploy_md"

# Optional integrations in fetch order, with the input holding each one's credential.
OPTIONAL_INTEGRATIONS: tuple[tuple[str, str], ...] = (
    ("rollbar", "rollbar_api_token"),
    ("pagerduty", "pagerduty_api_token"),
)


class LiveProviders:
    """Provider functions backed by the real integration APIs."""

    def lightstep(self, **kwargs: Any):
        return lightstep.get_summary(**kwargs)

    def rollbar(self, **kwargs: Any):
        return rollbar.get_summary(**kwargs)

    def pagerduty(self, **kwargs: Any):
        return pagerduty.get_summary(**kwargs)


def default_providers() -> LiveProviders | MockProviders:
    return MockProviders() if mock_mode() else LiveProviders()


def _lightstep_settings(config: PredeployConfig, inputs: ActionInputs) -> tuple[str, str, str]:
    organization = config.organization or inputs.require("lightstep_organization")
    project = config.project or inputs.require("lightstep_project")
    return organization, project, inputs.require("lightstep_api_key")


def assemble(
    config: PredeployConfig,
    inputs: ActionInputs,
    *,
    is_rollup: bool = False,
    providers: LiveProviders | MockProviders | None = None,
) -> RenderContext:
    """Fetch every configured integration summary and compute the overall status."""
    providers = providers or default_providers()
    tracer = get_tracer()

    organization, project, api_key = _lightstep_settings(config, inputs)
    # Every enabled integration's credential is checked before anything is fetched.
    enabled: dict[str, tuple[str, dict]] = {}
    for name, token_input in OPTIONAL_INTEGRATIONS:
        section = config.integration(name)
        if section is not None:
            enabled[name] = (inputs.require(token_input), section)

    with tracer.start_as_current_span("fetch_lightstep", attributes={"project": project}):
        primary = providers.lightstep(
            organization=organization,
            project=project,
            token=api_key,
            conditions=config.conditions,
        )

    optional: dict[str, Any] = {name: None for name, _ in OPTIONAL_INTEGRATIONS}
    for name, (token, section) in enabled.items():
        with tracer.start_as_current_span(f"fetch_{name}"):
            optional[name] = getattr(providers, name)(token=token, yaml_config=section)

    status = reduce_status(
        [primary.status] + [s.status if s is not None else None for s in optional.values()]
    )
    return RenderContext(
        status=status,
        lightstep=primary,
        is_rollup=is_rollup,
        rollbar=optional["rollbar"],
        pagerduty=optional["pagerduty"],
    )


def run_predeploy(
    inputs: ActionInputs,
    context: ExecutionContext,
    *,
    config: PredeployConfig | None = None,
    providers: LiveProviders | MockProviders | None = None,
    template: Template | None = None,
    environ: Mapping[str, str] | None = None,
    client_factory: Callable[..., Any] = publisher.default_client_factory,
) -> RenderContext:
    """Run the whole flow. Outputs are set only once the report is rendered."""
    correlation_id = new_correlation_id()
    tracer = get_tracer()

    with tracer.start_as_current_span("predeploy", attributes={"correlation_id": correlation_id}) as span:
        if config is None:
            config = load_config(inputs.config_file)
        template = template or load_template()

        render_context = assemble(config, inputs, is_rollup=inputs.rollup, providers=providers)

        with tracer.start_as_current_span("render_report"):
            markdown = render(template, render_context)

        logger.info(
            '{"event":"report_rendered","correlation_id":"%s","status":"%s","rollup":%s}',
            correlation_id,
            render_context.status.value,
            str(render_context.is_rollup).lower(),
        )
        span.set_attribute("predeploy.status", render_context.status.value)

        actions.set_output(STATUS_OUTPUT, render_context.status.value, environ)
        actions.set_output(MARKDOWN_OUTPUT, markdown, environ)

        publisher.publish(
            markdown,
            context,
            token=inputs.github_token,
            disable_comment=inputs.disable_comment,
            client_factory=client_factory,
        )

    logger.info('{"event":"predeploy_complete","correlation_id":"%s"}', correlation_id)
    return render_context

