"""Main CLI entry point."""

import sys
from typing import Any, Optional

import click
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.panel import Panel

from storage_deploy.config.models import DeploymentSettings
from storage_deploy.config.parser import build_settings, parse_connection_string
from storage_deploy.orchestrator.executor import ItemResult
from storage_deploy.orchestrator.orchestrator import DeploymentOrchestrator
from storage_deploy.orchestrator.reports import CleanupReport, DeployReport
from storage_deploy.storage.s3 import S3ObjectStore
from storage_deploy.utils.aws_client import AWSClientManager
from storage_deploy.utils.errors import ConfigurationError, DeploymentError, ErrorContext, error_handler
from storage_deploy.utils.logging import setup_logging, get_logger

console = Console()
logger = get_logger(__name__)

CONNECTION_STRING_ENV = 'STORAGE_DEPLOY_CONNECTION_STRING'


@click.group()
@click.option('--log-level', default='info', type=click.Choice(['debug', 'info', 'warning', 'error']))
@click.option('--log-dir', type=click.Path(file_okay=False), help='Directory for JSON-lines log files')
@click.pass_context
def cli(ctx, log_level, log_dir):
    """Versioned static asset deployment for S3-compatible storage."""
    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level
    ctx.obj['log_dir'] = log_dir

    setup_logging(log_level, log_dir)


def deployment_options(func):
    """Options shared by deploy and cleanup."""
    options = [
        click.option('--current-version',
                     help='Version to be currently deployed, e.g. master.123 or 1.2.3. '
                          'Required unless set in the --config file'),
        click.option('--connection-string', envvar=CONNECTION_STRING_ENV,
                     help='Storage connection string (EndpointUrl=...;AccessKeyId=...;...)'),
        click.option('--container', help='Bucket to deploy to, defaults to the Bucket key of the connection string'),
        click.option('--chunk-size', type=int, help='Number of concurrent storage operations [default: 50]'),
        click.option('--retries', type=int, help='Number of attempts on operation failure [default: 3]'),
        click.option('--retry-delay', type=float, help='Seconds before the first retry [default: 0]'),
        click.option('--dry-run', is_flag=True, default=None, help='Do not perform uploads or deletes'),
        click.option('--verbose', is_flag=True, help='Enable verbose logging'),
        click.option('--config', 'config_path', type=click.Path(dir_okay=False),
                     help='YAML file with default settings'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def load_settings(config_path: Optional[str], **overrides: Any) -> DeploymentSettings:
    """Build validated settings, exiting on configuration errors."""
    try:
        return build_settings(overrides, config_path)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


def create_orchestrator(settings: DeploymentSettings) -> DeploymentOrchestrator:
    """Create deployment orchestrator bound to an S3 object store."""
    secret = settings.connection_string
    connection = parse_connection_string(secret.get_secret_value() if secret else None)

    container = settings.container or connection.bucket
    if not container:
        raise ConfigurationError(
            'No container given',
            suggestions=['Pass --container or add Bucket=<name> to the connection string']
        )

    client_manager = AWSClientManager(
        connection,
        max_pool_connections=settings.chunk_size,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout
    )
    try:
        client = client_manager.get_client('s3')
    except (BotoCoreError, ClientError) as e:
        raise error_handler.handle_exception(
            e,
            ErrorContext(container=container, operation='connect')
        ) from e
    store = S3ObjectStore(client, container)

    return DeploymentOrchestrator(settings).init(store)


def _enable_verbose(ctx, verbose: bool) -> None:
    if verbose:
        setup_logging('debug', ctx.obj.get('log_dir'))


def _progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True
    )


@cli.command()
@deployment_options
@click.option('--path', '-p', 'path', required=True,
              type=click.Path(exists=True, file_okay=False),
              help='Path to the directory being deployed')
@click.pass_context
def deploy(ctx, current_version, connection_string, container, chunk_size, retries,
           retry_delay, dry_run, verbose, config_path, path):
    """Deploy a folder to the storage container."""
    _enable_verbose(ctx, verbose)
    settings = load_settings(
        config_path,
        current_version=current_version,
        connection_string=connection_string,
        container=container,
        chunk_size=chunk_size,
        retries=retries,
        retry_delay=retry_delay,
        dry_run=dry_run
    )
    try:
        orchestrator = create_orchestrator(settings)

        with _progress() as progress:
            task_id = progress.add_task("[cyan]Uploading...", total=None)

            def on_item(result: ItemResult):
                progress.advance(task_id)

            report = orchestrator.deploy(path, progress_callback=on_item)

        _print_deploy_report(report, settings)

        if not report.is_success():
            sys.exit(1)

    except DeploymentError as e:
        error_handler.log_error(e)
        console.print(f"[red]Deployment error:[/red] {e.to_user_message()}")
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error during deployment")
        console.print(f"[red]Unexpected error:[/red] {e}")
        sys.exit(1)


@cli.command()
@deployment_options
@click.option('--max-pages', type=int, help='Number of pages loaded for cleanup [default: 50]')
@click.option('--fail-on-error', is_flag=True, help='Exit non-zero when any deletion fails')
@click.pass_context
def cleanup(ctx, current_version, connection_string, container, chunk_size, retries,
            retry_delay, dry_run, verbose, config_path, max_pages, fail_on_error):
    """Remove prior builds from the storage container."""
    _enable_verbose(ctx, verbose)
    settings = load_settings(
        config_path,
        current_version=current_version,
        connection_string=connection_string,
        container=container,
        chunk_size=chunk_size,
        retries=retries,
        retry_delay=retry_delay,
        max_pages=max_pages,
        dry_run=dry_run
    )
    try:
        orchestrator = create_orchestrator(settings)

        with _progress() as progress:
            task_id = progress.add_task("[cyan]Removing prior builds...", total=None)

            def on_item(result: ItemResult):
                progress.advance(task_id)

            report = orchestrator.cleanup(progress_callback=on_item)

        _print_cleanup_report(report)

        if fail_on_error and report.has_failures():
            sys.exit(1)

    except DeploymentError as e:
        error_handler.log_error(e)
        console.print(f"[red]Cleanup error:[/red] {e.to_user_message()}")
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error during cleanup")
        console.print(f"[red]Unexpected error:[/red] {e}")
        sys.exit(1)


def _print_deploy_report(report: DeployReport, settings: DeploymentSettings) -> None:
    action = 'Would have uploaded' if report.dry_run else 'Uploaded'
    border = 'green' if report.is_success() else 'red'

    console.print(Panel.fit(
        f"{action} {report.uploaded_files}/{report.total_files} files "
        f"to {settings.current_version}/ "
        f"({report.uploaded_bytes / 1024 / 1024:.2f}MB)\n"
        f"Completed in {report.duration:.2f}s.\n"
        f"{len(report.failed_uploads) or 'No'} files failed to upload.",
        title="Deployment Complete" if report.is_success() else "Deployment Failed",
        border_style=border
    ))

    if report.failed_uploads:
        console.print("\n[bold]Failed uploads:[/bold]")
        for failed in report.failed_uploads:
            console.print(f"  [red]x[/red] {failed.index}: {failed.path}: {failed.error.cause}")


def _print_cleanup_report(report: CleanupReport) -> None:
    action = 'Would have' if report.dry_run else 'Successfully'
    border = 'yellow' if report.has_failures() else 'green'

    console.print(Panel.fit(
        f"{action} removed {report.total_deleted_files} files "
        f"totaling {report.total_deleted_megabytes:.2f}MB.\n"
        f"{action} left {report.total_retained}.\n"
        f"Completed in {report.duration:.2f}s.\n"
        f"{len(report.failed_files) or 'No'} files failed to be removed.",
        title="Cleanup Complete",
        border_style=border
    ))

    if report.failed_files:
        console.print("\n[bold]Failed to remove:[/bold]")
        for entry in report.failed_files:
            console.print(f"  [red]x[/red] {entry.name}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
