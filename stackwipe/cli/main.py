"""Main CLI entry point using Typer."""

import logging
import sys
from typing import List, Optional

import typer
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.table import Table

from ..aws.client import create_session
from ..aws.credentials import CredentialValidationError, validate_credentials
from ..models.deletion_operation import DeletionOperation
from ..models.resource_kind import ResourceKind
from ..restore.audit import AuditStorage
from ..restore.cleaner import ResourceCleaner
from ..restore.deleter import ResourceDeleter
from ..restore.tasks import generate_tasks
from ..snapshot.catalog import Catalog, build_catalog
from ..utils.logging import setup_logging
from .config import Config, ConfigError
from .progress import console_progress_factory
from .selector import resource_table, select_resources

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="stackwipe",
    help="Wipe Lambda, API Gateway, S3, CloudFront, IAM and log resources after a failed deployment",
    add_completion=False,
)

# Create Rich console for output
console = Console()

# Global config
config: Optional[Config] = None

KIND_HELP = "Resource kind to include (repeatable): " + ", ".join(kind.value for kind in ResourceKind)


def parse_kinds(values: Optional[List[str]]) -> Optional[List[ResourceKind]]:
    """Convert --kind values to resource kinds, exiting on unknown ones."""
    if not values:
        return None

    kinds = []
    for value in values:
        kind = ResourceKind.from_value(value.strip().lower())
        if kind is None:
            console.print(f"✗ Unknown resource kind: {value}", style="bold red")
            console.print(f"  Valid kinds: {', '.join(k.value for k in ResourceKind)}", style="yellow")
            raise typer.Exit(code=1)
        kinds.append(kind)
    return kinds


def load_catalog(kinds: Optional[List[ResourceKind]]) -> tuple[dict, Catalog]:
    """Validate credentials and list resources."""
    console.print("🔐 Validating AWS credentials...")
    identity = validate_credentials(config.aws_profile, config.region)
    console.print(f"✓ Authenticated as: {identity['arn']}\n", style="green")

    session = create_session(config.aws_profile, config.region)
    with console.status(f"Listing resources in {config.region}..."):
        catalog = build_catalog(
            session,
            config.region,
            kinds=kinds,
            log_group_prefix=config.log_group_prefix,
            protected_role_prefixes=config.protected_role_prefixes,
        )
    return identity, catalog


def print_summary(operation: DeletionOperation) -> None:
    table = Table(show_header=True, title="Wipe summary")
    table.add_column("Task", style="cyan")
    table.add_column("Result")

    for task in operation.tasks:
        result = "[green]✓ done[/green]" if task.succeeded else f"[red]✗ {task.error_message}[/red]"
        table.add_row(task.title, result)

    console.print()
    console.print(table)
    console.print(
        f"  Deleted: {operation.deleted_count}  Disabled: {operation.disabled_count}  "
        f"Failed: {operation.failed_count}  Skipped: {operation.skipped_count}"
    )

    if operation.disabled_count:
        console.print(
            f"\n⚠️  {operation.disabled_count} CloudFront distribution(s) were disabled. "
            "Run stackwipe again once the change has propagated to delete them.",
            style="yellow",
        )


@app.callback()
def main(
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="AWS profile name"),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="AWS region (default: us-east-1 or $AWS_REGION)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """stackwipe - list and delete AWS resources left behind by a failed deployment."""
    global config

    # Load configuration
    try:
        config = Config.load()
    except ConfigError as e:
        console.print(f"✗ {e}", style="bold red")
        raise typer.Exit(code=1)

    # Override with CLI options
    if profile:
        config.aws_profile = profile
    if region:
        config.region = region

    # Setup logging
    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)

    # Disable colors if requested
    if no_color:
        console.no_color = True


@app.command()
def version():
    """Show version information."""
    import boto3

    from .. import __version__

    console.print(f"stackwipe version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"boto3 {boto3.__version__}")


@app.command("list")
def list_resources(
    kind: Optional[List[str]] = typer.Option(None, "--kind", "-k", help=KIND_HELP),
):
    """List resources of each kind, newest first."""
    try:
        kinds = parse_kinds(kind)
        _, catalog = load_catalog(kinds)

        for resource_kind, records in catalog.items():
            if not records:
                console.print(f"No {resource_kind.label} found.", style="dim")
                continue
            console.print(resource_table(resource_kind, records))

    except typer.Exit:
        raise
    except CredentialValidationError as e:
        console.print(f"✗ Error: {e}", style="bold red")
        raise typer.Exit(code=3)
    except (ClientError, BotoCoreError) as e:
        console.print(f"✗ Error listing resources: {e}", style="bold red")
        raise typer.Exit(code=2)
    except Exception as e:
        console.print(f"✗ Error listing resources: {e}", style="bold red")
        logger.exception("Error in list command")
        raise typer.Exit(code=2)


@app.command()
def wipe(
    kind: Optional[List[str]] = typer.Option(None, "--kind", "-k", help=KIND_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the final confirmation prompt"),
    no_audit: bool = typer.Option(False, "--no-audit", help="Do not write an audit log for this run"),
):
    """Select resources interactively and delete them.

    Deletes per kind, in this order:
    - Lambda functions
    - CloudWatch log groups (under /aws/ by default)
    - API Gateway REST APIs (throttled deletes are retried after 60s, then 120s)
    - S3 buckets (emptied first)
    - CloudFront distributions (disabled first; deleted on a later run)
    - IAM roles (inline policies deleted and managed policies detached first)

    There is no undo.
    """
    try:
        kinds = parse_kinds(kind)
        identity, catalog = load_catalog(kinds)

        if not any(catalog.values()):
            console.print("Nothing to delete.", style="yellow")
            raise typer.Exit(code=0)

        selection = select_resources(catalog, console)
        if not selection:
            console.print("Nothing selected.", style="yellow")
            raise typer.Exit(code=0)

        deleter = ResourceDeleter(aws_profile=config.aws_profile, region=config.region)
        tasks = generate_tasks(selection, deleter)

        console.print("\n[bold]About to run:[/bold]")
        for task in tasks:
            console.print(f"  • {task.title}")

        if not yes:
            console.print()
            confirm = typer.confirm("Delete the selected resources? This cannot be undone", default=False)
            if not confirm:
                console.print("Cancelled.")
                raise typer.Exit(code=0)

        audit_storage = None
        if config.audit_enabled and not no_audit:
            audit_storage = AuditStorage(config.audit_path)

        cleaner = ResourceCleaner(audit_storage=audit_storage)
        operation = cleaner.execute(
            tasks,
            progress_factory=console_progress_factory(console),
            region=config.region,
            account_id=identity["account_id"],
            aws_profile=config.aws_profile,
        )

        print_summary(operation)

        if operation.failed_tasks:
            raise typer.Exit(code=1)

    except typer.Exit:
        raise
    except CredentialValidationError as e:
        console.print(f"✗ Error: {e}", style="bold red")
        raise typer.Exit(code=3)
    except (ClientError, BotoCoreError) as e:
        console.print(f"✗ Error listing resources: {e}", style="bold red")
        raise typer.Exit(code=2)
    except Exception as e:
        console.print(f"✗ Error during wipe: {e}", style="bold red")
        logger.exception("Error in wipe command")
        raise typer.Exit(code=2)


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    cli_main()
