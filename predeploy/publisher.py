"""
Posts the rendered report as a pull request / issue comment via PyGithub.
"""

from __future__ import annotations

import logging
from typing import Callable

from github import Auth, Github

from predeploy.errors import PublishError
from predeploy.github_context import ExecutionContext
from predeploy.telemetry import get_tracer

logger = logging.getLogger("predeploy.publisher")


def default_client_factory(token: str) -> Github:
    return Github(auth=Auth.Token(token))


def publish(
    markdown: str,
    context: ExecutionContext,
    *,
    token: str,
    disable_comment: bool = False,
    client_factory: Callable[[str], Github] = default_client_factory,
) -> int | None:
    """Comment on the run's PR (or the PR of its commit). Returns the number commented on."""
    if disable_comment or not token:
        logger.info('{"event":"comment_skipped","disabled":%s,"token":%s}',
                    str(disable_comment).lower(), str(bool(token)).lower())
        return None

    try:
        gh = client_factory(token)
    except Exception as exc:
        raise PublishError(f"could not initialize github api client: {exc}") from exc

    if not context.issue_number and not context.sha:
        logger.info("could not find a SHA or issue number")
        return None

    with get_tracer().start_as_current_span("publish_comment", attributes={"repo": context.full_name}):
        repo = gh.get_repo(context.full_name, lazy=True)
        if context.issue_number:
            number = context.issue_number
        else:
            logger.info("attempting to find pr: %s@%s...", context.full_name, context.sha)
            first = next(iter(repo.get_commit(context.sha).get_pulls()), None)
            if first is None:
                logger.info("could not find a pull request associated with the git sha")
                return None
            number = first.number

        logger.info("commenting on pr #%d...", number)
        repo.get_issue(number).create_comment(markdown)
        return number
