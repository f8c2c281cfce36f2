"""
validate.py – End-to-end local validation of the pre-deploy flow in MOCK_MODE.

Usage:
    python scripts/validate.py               # run all scenarios
    python scripts/validate.py --scenario 2  # run a specific scenario
    python scripts/validate.py --show        # print each rendered report

Runs the full flow with fixture summaries from scripts/golden_outputs/ and a
disabled comment step, then checks the status output (or the expected
configuration error) for each scenario in scripts/scenarios/.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SCENARIOS_DIR = ROOT / "scripts" / "scenarios"

sys.path.insert(0, str(ROOT))
from predeploy.config import ActionInputs, parse_config  # noqa: E402
from predeploy.errors import ConfigurationError  # noqa: E402
from predeploy.github_context import ExecutionContext  # noqa: E402
from predeploy.mock_providers import MockProviders  # noqa: E402
from predeploy.orchestrator import MARKDOWN_OUTPUT, STATUS_OUTPUT, run_predeploy  # noqa: E402
from predeploy.telemetry import configure_telemetry  # noqa: E402

DEFAULT_INPUTS = {
    "lightstep_organization": "demo-org",
    "lightstep_project": "demo",
    "lightstep_api_key": "mock-key",
    "rollbar_api_token": "mock-rollbar",
    "pagerduty_api_token": "mock-pagerduty",
}


def discover_scenarios(only: int | None = None) -> list[Path]:
    """Return sorted list of scenario JSON files."""
    files = sorted(SCENARIOS_DIR.glob("scenario_*.json"))
    if only is not None:
        files = [f for f in files if f"scenario_{only}_" in f.name]
    if not files:
        print(f"ERROR: No scenario files found in {SCENARIOS_DIR}")
        sys.exit(1)
    return files


def read_outputs(path: Path) -> dict[str, str]:
    """Parse a GITHUB_OUTPUT file written with name<<delimiter blocks."""
    outputs: dict[str, str] = {}
    lines = path.read_text(encoding="utf-8").splitlines()
    i = 0
    while i < len(lines):
        name, _, delimiter = lines[i].partition("<<")
        end = lines.index(delimiter, i + 1)
        outputs[name] = "\n".join(lines[i + 1:end])
        i = end + 1
    return outputs


def run_scenario(scenario_file: Path, show: bool = False) -> tuple[bool, str]:
    """Run one scenario. Returns (passed, message)."""
    scenario = json.loads(scenario_file.read_text(encoding="utf-8"))
    name = scenario_file.stem
    inputs = {k: v for k, v in DEFAULT_INPUTS.items() if k not in scenario.get("omit_inputs", [])}

    with tempfile.TemporaryDirectory() as tmp:
        output_file = Path(tmp) / "github_output"
        output_file.touch()
        try:
            run_predeploy(
                ActionInputs(disable_comment=True, **inputs),
                ExecutionContext(owner="demo", repo="checkout"),
                config=parse_config(scenario["config"]),
                providers=MockProviders(scenario.get("mock_scenario")),
                environ={"GITHUB_OUTPUT": str(output_file)},
            )
        except ConfigurationError as exc:
            expected = scenario.get("expected_error")
            if expected and expected in str(exc):
                if output_file.read_text(encoding="utf-8"):
                    return False, f"{name}: FAIL – outputs were set before the configuration error"
                return True, f"{name}: PASS (configuration error: {exc})"
            return False, f"{name}: FAIL – unexpected configuration error: {exc}"

        if "expected_error" in scenario:
            return False, f"{name}: FAIL – expected an error mentioning {scenario['expected_error']}"

        outputs = read_outputs(output_file)

    if show:
        print(outputs.get(MARKDOWN_OUTPUT, ""))
    status = outputs.get(STATUS_OUTPUT)
    if status != scenario["expected_status"]:
        return False, f"{name}: FAIL – status={status}, expected {scenario['expected_status']}"
    if not outputs.get(MARKDOWN_OUTPUT):
        return False, f"{name}: FAIL – empty markdown output"
    return True, f"{name}: PASS (status={status})"


def main():
    parser = argparse.ArgumentParser(description="Validate the pre-deploy flow locally")
    parser.add_argument("--scenario", type=int, help="Run only scenario N")
    parser.add_argument("--show", action="store_true", help="Print each rendered report")
    args = parser.parse_args()

    os.environ["MOCK_MODE"] = "true"
    configure_telemetry()
    scenarios = discover_scenarios(args.scenario)

    passed = 0
    failed = 0
    print(f"Running {len(scenarios)} scenario(s) ...\n")
    print("-" * 60)

    for sf in scenarios:
        ok, msg = run_scenario(sf, show=args.show)
        if ok:
            passed += 1
            print(f"  PASS  {msg}")
        else:
            failed += 1
            print(f"  FAIL  {msg}")

    print("-" * 60)
    print(f"\nResults: {passed} passed, {failed} failed, {passed + failed} total")

    if failed > 0:
        sys.exit(1)
    print("\nAll scenarios validated successfully!")


if __name__ == "__main__":
    main()
