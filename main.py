# Pre-deploy status action – entry point run by the GitHub Actions step.
#
# Reads the action inputs and workflow context from the environment, runs the
# pre-deploy flow and exits non-zero when the step should fail.

import logging
import sys

from predeploy import actions
from predeploy.config import ActionInputs
from predeploy.errors import PredeployError
from predeploy.github_context import ExecutionContext
from predeploy.orchestrator import run_predeploy
from predeploy.telemetry import configure_telemetry

logger = logging.getLogger("predeploy")


def main() -> int:
    configure_telemetry()
    inputs = ActionInputs.from_env()
    context = ExecutionContext.from_env()
    logger.info("Running pre-deploy checks for %s@%s", context.full_name, context.sha or "<no sha>")
    try:
        run_predeploy(inputs, context)
    except PredeployError as e:
        actions.set_failed(str(e))
    return 1 if actions.has_failed() else 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as e:
        print(f"[predeploy] FATAL: {e}", flush=True)
        import traceback
        traceback.print_exc()
        sys.exit(1)
