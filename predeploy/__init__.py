"""
Pre-deploy status action.

Collects Lightstep, Rollbar and PagerDuty health signals, reduces them to one
traffic-light status and posts a markdown report on the pull request.
"""

__version__ = "0.1.0"
