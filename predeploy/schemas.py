"""
Configuration-file and fixture schemas for the pre-deploy action.
Used for validation when the YAML config and the mock-mode fixtures are loaded.
"""

from __future__ import annotations

STATUS_VALUES = ["ok", "warn", "error", "unknown"]

CONFIG_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "organization": {"type": "string"},
        "project": {"type": "string"},
        "conditions": {
            "type": "array",
            "items": {"type": ["string", "integer"]},
        },
        "integrations": {
            "type": ["object", "null"],
            "properties": {
                "rollbar": {
                    "type": ["object", "null"],
                    "required": ["account", "project"],
                    "properties": {
                        "account": {"type": "string"},
                        "project": {"type": "string"},
                        "environment": {"type": "string"},
                    },
                },
                "pagerduty": {
                    "type": ["object", "null"],
                    "required": ["service"],
                    "properties": {
                        "service": {"type": "string"},
                    },
                },
            },
        },
    },
}

# Shape of scripts/golden_outputs/*.json used by MOCK_MODE.
GOLDEN_SUMMARY_SCHEMA: dict = {
    "type": "object",
    "required": ["_scenario", "lightstep"],
    "properties": {
        "_scenario": {"type": "string"},
        "lightstep": {
            "type": "object",
            "required": ["status"],
            "properties": {
                "status": {"type": "string", "enum": STATUS_VALUES},
                "conditions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["id", "state"],
                        "properties": {
                            "id": {"type": "string"},
                            "name": {"type": "string"},
                            "state": {"type": "string"},
                        },
                    },
                },
            },
        },
        "rollbar": {
            "type": "object",
            "required": ["status"],
            "properties": {
                "status": {"type": "string", "enum": STATUS_VALUES},
                "items": {"type": "array", "items": {"type": "object"}},
            },
        },
        "pagerduty": {
            "type": "object",
            "required": ["status"],
            "properties": {
                "status": {"type": "string", "enum": STATUS_VALUES},
                "incidents": {"type": "array", "items": {"type": "object"}},
            },
        },
    },
}
