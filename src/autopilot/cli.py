"""Command-line interface for autopilot."""

from __future__ import annotations

import argparse
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .cf.models import DeploymentOptions
from .config import load_config
from .errors import AutopilotError, ConfigError, MissingManifestError, ValidationError
from .plans import ReplaceRequest
from .rewind import RewindFailure
from .workflow import AutopilotWorkflow, WorkflowResult

REPLACE_COMMANDS = ("deploy-replace", "zero-downtime-push")
ROLLBACK_COMMANDS = ("deploy-rollback", "zero-downtime-rollback")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cf-autopilot",
        description="Zero-downtime replace and rollback of Cloud Foundry applications.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file overriding defaults.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    replace_parser = subparsers.add_parser(
        REPLACE_COMMANDS[0],
        aliases=list(REPLACE_COMMANDS[1:]),
        help="Perform a zero-downtime push of an application over the top of an old one",
    )
    replace_parser.add_argument("app_name", help="Application to replace")
    # not required=True: a missing manifest is reported as a validation error, not a usage error
    replace_parser.add_argument("-f", dest="manifest", default=None, help="Path to an application manifest")
    replace_parser.add_argument("-p", dest="path", default=None, help="Path to application files")
    replace_parser.add_argument(
        "--keep-existing-app", action="store_true",
        help="Stop the previous version instead of deleting it (enables deploy-rollback)",
    )
    replace_parser.add_argument(
        "--unmap-routes", action="store_true",
        help="Unmap routes from the previous version instead of deleting it",
    )

    rollback_parser = subparsers.add_parser(
        ROLLBACK_COMMANDS[0],
        aliases=list(ROLLBACK_COMMANDS[1:]),
        help="Perform a zero-downtime rollback to the previous version of the application. "
        "Requires that the previous, 'venerable' version of the app still exists.",
    )
    rollback_parser.add_argument("app_name", help="Application to revert")

    return parser


def build_replace_request(args: argparse.Namespace) -> ReplaceRequest:
    if not args.manifest:
        raise MissingManifestError()
    return ReplaceRequest(
        app_name=args.app_name,
        manifest_path=args.manifest,
        app_path=args.path,
        options=DeploymentOptions(
            keep_existing=args.keep_existing_app,
            unmap_routes=args.unmap_routes,
        ),
    )


def _create_workflow(config_path: Optional[str]) -> AutopilotWorkflow:
    try:
        config = load_config(config_path)
    except (OSError, ValueError, TypeError) as exc:
        raise ConfigError(f"cannot load configuration: {exc}") from exc
    return AutopilotWorkflow(config)


def _print_success(console: Console, result: WorkflowResult) -> None:
    console.print()
    console.print(f"[bold green]{escape(result.success_message)}[/bold green]")
    console.print()
    if result.app_listing:
        console.print(result.app_listing.rstrip(), markup=False, highlight=False)


def _print_failure(console: Console, exc: AutopilotError) -> None:
    if isinstance(exc, RewindFailure):
        console.print(f"[bold red]error:[/bold red] {escape(str(exc.primary))}", highlight=False)
        for error in exc.unwind_errors:
            console.print(f"[red]rollback error:[/red] {escape(str(error))}", highlight=False)
        console.print(f"[yellow]{escape(exc.fallback_message)}[/yellow]", highlight=False)
    else:
        console.print(f"[bold red]error:[/bold red] {escape(str(exc))}", highlight=False)


def dispatch_command(
    args: argparse.Namespace,
    workflow: Optional[AutopilotWorkflow] = None,
    console: Optional[Console] = None,
) -> int:
    console = console or Console()
    try:
        if args.command in REPLACE_COMMANDS:
            request = build_replace_request(args)
            workflow = workflow or _create_workflow(args.config)
            result = workflow.run_replace(request)
        elif args.command in ROLLBACK_COMMANDS:
            workflow = workflow or _create_workflow(args.config)
            result = workflow.run_rollback(args.app_name)
        else:
            raise ValidationError(f"unknown command {args.command}")
    except AutopilotError as exc:
        _print_failure(console, exc)
        return 1

    _print_success(console, result)
    return 0


def run_cli(
    argv: Optional[list[str]] = None,
    workflow: Optional[AutopilotWorkflow] = None,
    console: Optional[Console] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return dispatch_command(args, workflow=workflow, console=console)
