from __future__ import annotations

import sys

import typer

from comment_sync.config import DB_HOST, get_settings, load_settings
from comment_sync.errors import SyncError
from comment_sync.orchestrator import DEFAULT_POLICY, available_policies, run_sync
from comment_sync.reporter import print_summary
from comment_sync.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Sync paginated comments from the upstream API into PostgreSQL.")

log = get_logger("comment_sync")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    try:
        settings = get_settings()
    except SyncError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    password = "***" if settings.pg_password else "(unset)"
    typer.echo(
        f"DB={settings.pg_user}@{DB_HOST}:{settings.pg_port}/{settings.pg_database_name} "
        f"password={password} | log_level={settings.log_level}"
    )


@app.command()
def policies() -> None:
    """
    List the available pagination policies.
    """
    typer.echo("Available policies: " + ", ".join(available_policies()))


@app.command()
def run(
    policy: str = typer.Option(
        DEFAULT_POLICY,
        "--policy",
        "-p",
        help="Pagination policy to run (open_ended or fixed_count).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON lines.",
    ),
) -> None:
    """
    Fetch every page with the chosen policy and load it into the comments table.
    """
    if policy not in available_policies():
        typer.echo(
            f"Unknown policy '{policy}'. Available: {', '.join(available_policies())}", err=True
        )
        raise typer.Exit(code=2)

    configure_logging(json_logs=json_logs)
    try:
        settings = load_settings()
        configure_logging(level=settings.log_level, json_logs=json_logs)
        result = run_sync(policy, settings)
    except SyncError as exc:
        # Single exit point for every fatal error; resources are already closed.
        log.error(f"Sync aborted: {exc}", extra={"error": exc.to_dict()})
        raise typer.Exit(code=1)

    print_summary(result)
    log.info("Sync finished successfully.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
