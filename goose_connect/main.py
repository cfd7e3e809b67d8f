"""goose-connect CLI: remote agent server and local task runs."""

import logging
from typing import Annotated

import typer
import uvicorn
from pydantic import ValidationError
from rich import print as rprint
from rich.logging import RichHandler
from rich.table import Table

from goose_connect.converter import github_to_proto
from goose_connect.errors import ConfigError, EventURLError, GooseConnectError
from goose_connect.factory import GooseAgentFactory
from goose_connect.goose import GooseGitHub
from goose_connect.models import ExecuteTaskRequest, ProviderInfo
from goose_connect.server import build_agent, create_app, execute_with_hooks
from goose_connect.settings import CONFIG_PATH, GooseConnectSettings, load_settings

app = typer.Typer(help="goose-connect: run goose agent tasks on behalf of a remote caller", no_args_is_help=True)

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )


def _settings_or_exit() -> GooseConnectSettings:
    try:
        return load_settings()
    except ConfigError as exc:
        rprint(f"[red]Failed to validate config: {exc}[/red]")
        rprint(f"Set GOOSECONNECT_GIT_USER / GOOSECONNECT_GIT_MAIL or git_user / git_mail in {CONFIG_PATH}")
        raise typer.Exit(1)


@app.command("remote")
def remote(
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to listen on (default: settings port)")] = None,
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "0.0.0.0",
) -> None:
    """Start the remote agent server."""
    settings = _settings_or_exit()
    setup_logging(settings.log_level)

    server_app = create_app(GooseAgentFactory(settings))
    listen_port = port or settings.port
    logger.info("Starting server on %d", listen_port)
    uvicorn.run(server_app, host=host, port=listen_port, log_config=None)


@app.command("run")
def run_cmd(
    repo: Annotated[str, typer.Option("--repo", "-r", help="Repository as org/name")],
    instruction: Annotated[str, typer.Option("--instruction", "-i", help="Prompt for the agent")],
    github_token: Annotated[str, typer.Option("--github-token", envvar="GITHUB_TOKEN", help="GitHub token")],
    api_key: Annotated[str, typer.Option("--api-key", envvar="GOOSE_API_KEY", help="LLM provider API key")],
    model: Annotated[str, typer.Option("--model", "-m", help="Model name")],
    provider: Annotated[str, typer.Option("--provider", help="openai, anthropic, openrouter, google, groq")] = "openai",
    session_id: Annotated[str, typer.Option("--session-id", "-s", help="Session id (directory name)")] = "local-session",
    event_url: Annotated[
        str | None, typer.Option("--event-url", "-e", help="PR or issue URL, e.g. https://github.com/org/repo/pull/1")
    ] = None,
    branch: Annotated[str, typer.Option("--branch", "-b", help="Branch to check out")] = "",
    labels: Annotated[bool, typer.Option("--labels/--no-labels", help="Add/remove the status label")] = False,
    clean: Annotated[bool, typer.Option("--clean", help="Remove the session directory afterwards")] = False,
) -> None:
    """Run one task locally, without the server."""
    settings = _settings_or_exit()
    setup_logging(settings.log_level)

    github = GooseGitHub(installation_token=github_token, repo=repo, branch_name=branch)
    if event_url:
        try:
            github.import_event_url(event_url)
        except EventURLError as exc:
            rprint(f"[red]{exc}[/red]")
            raise typer.Exit(1)

    request = ExecuteTaskRequest(
        provider=ProviderInfo(model_name=model, api_key=api_key, provider_name=provider),
        github=github_to_proto(github),
        instruction=instruction,
        session_id=session_id,
    )
    factory = GooseAgentFactory(settings)
    try:
        agent = build_agent(factory, request)
    except GooseConnectError as exc:
        rprint(f"[red]Failed to create agent: {exc}[/red]")
        raise typer.Exit(1)

    try:
        output = execute_with_hooks(factory, agent, request, with_hooks=labels)
    except GooseConnectError as exc:
        rprint(f"[red]Task failed: {exc}[/red]")
        raise typer.Exit(1)
    finally:
        if clean:
            agent.clean()

    typer.echo(output)


@app.command("config-show")
def config_show() -> None:
    """Show resolved configuration."""
    try:
        settings = GooseConnectSettings()
    except (ConfigError, ValidationError) as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    def show(val: str | None) -> str:
        return val if val else "[dim](not set)[/dim]"

    table = Table(title="goose-connect Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("port", str(settings.port))
    table.add_row("url", settings.url)
    table.add_row("base_dir", show(settings.base_dir))
    table.add_row("instruction_path", show(settings.instruction_path))
    table.add_row("execute_timeout", show(str(settings.execute_timeout) if settings.execute_timeout else None))
    table.add_row("git_user", show(settings.git_user))
    table.add_row("git_mail", show(settings.git_mail))
    table.add_row("label", settings.label)
    table.add_row("log_level", settings.log_level)
    table.add_row("config_file", str(CONFIG_PATH) + ("" if CONFIG_PATH.exists() else " [dim](missing)[/dim]"))

    rprint(table)

    try:
        settings.validate_required_values()
    except ConfigError as exc:
        rprint(f"[yellow]Warning:[/yellow] {exc}")
