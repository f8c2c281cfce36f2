"""
Integration summary providers for the pre-deploy report.

Each provider queries one service and returns a normalised summary:
  - Lightstep  → alerting condition states (required)
  - Rollbar    → active error/critical items (optional)
  - PagerDuty  → open incidents for a service (optional)

Providers raise IntegrationError on any API failure; the orchestrator does not
catch it.
"""
