# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ocphosts.adapters.manifest import ManifestError
from ocphosts.app import (
    LookupKind,
    apply_manifest,
    destroy_resources,
    import_host,
    lookup,
    plan_manifest,
    refresh_state,
    show_state,
)
from ocphosts.common import configure_logging
from ocphosts.config import ConfigurationError
from ocphosts.domain.errors import DesiredStateError
from ocphosts.domain.model import HostKind
from ocphosts.domain.provisioning import Action

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from ocphosts.domain.model import StoredResource
    from ocphosts.domain.provisioning import Change, ProvisioningResult

log = logging.getLogger(__name__)

_ACTION_SYMBOLS: dict[Action, str] = {
    Action.CREATE: "+",
    Action.UPDATE: "~",
    Action.REPLACE: "-/+",
    Action.DELETE: "-",
    Action.NOOP: "=",
    Action.READ: "?",
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile OCP virtual hosts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("plan", help="Show what apply would change")
    plan.add_argument("manifest", help="Path to the JSON desired-state manifest")

    apply = subparsers.add_parser("apply", help="Create, update or delete hosts")
    apply.add_argument("manifest", help="Path to the JSON desired-state manifest")

    subparsers.add_parser("refresh", help="Re-read every stored host from OCP")

    destroy = subparsers.add_parser("destroy", help="Delete managed hosts")
    destroy.add_argument("names", nargs="*", help="Resource names to delete")
    destroy.add_argument(
        "--all",
        action="store_true",
        help="Delete every resource in the state store",
    )

    import_cmd = subparsers.add_parser("import", help="Adopt an existing host")
    import_cmd.add_argument("name", help="Resource name to store the host under")
    import_cmd.add_argument("kind", choices=[kind.value for kind in HostKind])
    import_cmd.add_argument("remote_id", help="OCP global id of the host")

    lookup_cmd = subparsers.add_parser("lookup", help="Resolve a name to an OCP id")
    lookup_cmd.add_argument("kind", choices=[kind.value for kind in LookupKind])
    lookup_cmd.add_argument(
        "name",
        help="Object name (the policy note for data_protection_policy)",
    )
    lookup_cmd.add_argument("--customer-id", type=str)
    lookup_cmd.add_argument("--project-id", type=str)
    lookup_cmd.add_argument("--region", type=str)
    lookup_cmd.add_argument(
        "--solution-type",
        type=str,
        help="Solution type filter (default: OCP)",
    )

    show = subparsers.add_parser("show", help="Print the stored state")
    show.add_argument("--json", action="store_true", help="Print machine-readable JSON")

    parsed = parser.parse_args(list(argv))
    if parsed.command == "destroy" and not parsed.names and not parsed.all:
        raise ValueError("destroy needs resource names or --all")
    if parsed.command == "destroy" and parsed.names and parsed.all:
        raise ValueError("destroy takes either resource names or --all, not both")
    return parsed


def _format_change(change: Change) -> str:
    line = f"{_ACTION_SYMBOLS[change.action]:>3} {change.name} ({change.kind}): {change.action}"
    if change.fields:
        line += f" [{', '.join(change.fields)}]"
    if change.reason:
        line += f" - {change.reason}"
    return line


def _print_plan(changes: Sequence[Change]) -> None:
    for change in changes:
        print(_format_change(change))
    pending = sum(change.action is not Action.NOOP for change in changes)
    print(f"{pending} of {len(changes)} resource(s) would change")


def _report(result: ProvisioningResult) -> None:
    for change in result.changes:
        print(_format_change(change))
    for failure in result.failures:
        print(f"  ! {failure.name}: {failure.action} failed: {failure.error}", file=sys.stderr)
    if not result.ok:
        sys.exit(1)


def _print_state(resources: Sequence[StoredResource], *, as_json: bool) -> None:
    if as_json:
        rows = [
            {
                "name": resource.name,
                "kind": resource.kind.value,
                "remote_id": resource.state.remote_id,
                "uuid": resource.state.uuid,
                "status": resource.state.status,
            }
            for resource in resources
        ]
        print(json.dumps(rows, indent=2))
        return
    for resource in resources:
        state = resource.state
        remote = state.remote_id or "<absent>"
        print(f"{resource.name}\t{resource.kind}\t{remote}\t{state.status}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "plan":
            _print_plan(plan_manifest(parsed_args.manifest))
        elif parsed_args.command == "apply":
            _report(apply_manifest(parsed_args.manifest))
        elif parsed_args.command == "refresh":
            _report(refresh_state())
        elif parsed_args.command == "destroy":
            _report(destroy_resources(None if parsed_args.all else parsed_args.names))
        elif parsed_args.command == "import":
            resource = import_host(
                parsed_args.name, HostKind(parsed_args.kind), parsed_args.remote_id
            )
            _print_state([resource], as_json=False)
        elif parsed_args.command == "lookup":
            node = lookup(
                LookupKind(parsed_args.kind),
                parsed_args.name,
                customer_id=parsed_args.customer_id,
                project_id=parsed_args.project_id,
                region=parsed_args.region,
                solution_type=parsed_args.solution_type,
            )
            print(node.id)
        elif parsed_args.command == "show":
            _print_state(show_state(), as_json=parsed_args.json)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except (ManifestError, DesiredStateError, ConfigurationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
