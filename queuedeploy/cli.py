"""queuedeploy CLI: deploy or remove a queue from the command line.

Usage examples::

    queuedeploy deploy --inputs '{"name": "orders", "functionRef": "fn-a"}'
    queuedeploy remove --key orders --state-dir .queuedeploy
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from pydantic import ValidationError

from queuedeploy.base.exceptions import QueueDeployError
from queuedeploy.base.logger import qd_logger


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``queuedeploy`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="queuedeploy",
        description="Deploy and remove a message queue with an optional function trigger",
    )
    parser.add_argument(
        "action",
        choices=["deploy", "remove", "outputs"],
        help="What to do with the queue",
    )
    parser.add_argument(
        "--provider", "-p",
        default="aws",
        choices=["aws"],
        help="Cloud provider",
    )
    parser.add_argument(
        "--inputs", "-i",
        type=str,
        default="{}",
        help='JSON inputs (e.g. \'{"name":"orders","region":"eu-central-1"}\')',
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON credential config (e.g. \'{"region_name":"us-east-1"}\')',
    )
    parser.add_argument(
        "--key", "-k",
        default="default",
        help="State key of the component instance",
    )
    parser.add_argument(
        "--state-dir",
        default=".queuedeploy",
        help="Directory holding local state files",
    )
    parser.add_argument(
        "--state-bucket",
        default=None,
        help="Keep state in this S3 bucket instead of --state-dir",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=1,
        help="Attempts per run when the provider is unavailable",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Verbosity of the JSON log written to stderr",
    )
    return parser


def _load_json(raw: str, flag: str) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Invalid {flag} JSON: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(value, dict):
        print(f"Invalid {flag} JSON: expected an object", file=sys.stderr)
        sys.exit(1)
    return value


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Builds a component via :func:`build_component`, runs the requested
    action and prints the result as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)
    qd_logger.set_level(ns.log_level)

    inputs = _load_json(ns.inputs, "--inputs")
    config = _load_json(ns.config, "--config")

    # Lazy-import to keep --help free of SDK imports
    from queuedeploy.base.config import AWSConfig
    from queuedeploy.base.retry import retry
    from queuedeploy.factory import build_component
    from queuedeploy.stores import FileStateStore

    try:
        if ns.state_bucket:
            from queuedeploy.aws.state_store import S3StateStore

            store = S3StateStore(AWSConfig(**config), ns.state_bucket)
        else:
            store = FileStateStore(ns.state_dir)
        component = build_component(ns.provider, config, store, key=ns.key)
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if ns.action == "outputs":
            result = component.outputs()
        else:
            run = retry(max_attempts=max(ns.retries, 1))(getattr(component, ns.action))
            result = run(inputs)
    except QueueDeployError as e:
        print(f"{ns.action} failed: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
