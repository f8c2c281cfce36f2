"""Exception types surfaced by the pre-deploy action."""

from __future__ import annotations


class PredeployError(Exception):
    """Base class for failures that should fail the action step."""


class ConfigurationError(PredeployError):
    """A required input is missing or the config file is invalid."""


class IntegrationError(PredeployError):
    """An integration API call failed or returned an unusable payload."""

    def __init__(self, integration: str, message: str):
        super().__init__(f"{integration}: {message}")
        self.integration = integration


class PublishError(PredeployError):
    """The GitHub client could not be initialised."""
