"""jira-scp CLI — MCP server entry point plus the same lookups for humans."""

import json
import logging
from typing import Annotated

import tomlkit
import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from jira_scp.extract import compile_patterns, extract_issue_key
from jira_scp.git import resolve_workspace
from jira_scp.providers.jira import JiraProvider
from jira_scp.server import TRANSPORTS, run_server
from jira_scp.settings import CONFIG_PATH, _list_profiles, active_profile, get_settings
from jira_scp.tools import get_current_branch_name, get_jira_by_id, get_jira_info

app = typer.Typer(help="jira-scp: Jira issue for the current git branch, over MCP", no_args_is_help=True)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Profile name from ~/.config/jira-scp/config.toml"),
]


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout is reserved for the stdio transport."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("serve")
def serve(
    profile: ProfileOpt = None,
    transport: Annotated[
        str,
        typer.Option("--transport", "-t", help=f"MCP transport: {', '.join(TRANSPORTS)}"),
    ] = "stdio",
    host: Annotated[str, typer.Option("--host", help="Bind address for sse/streamable-http")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Port for sse/streamable-http")] = 8000,
) -> None:
    """Run the MCP server (stdio by default)."""
    if transport not in TRANSPORTS:
        typer.echo(f"Unknown transport '{transport}'. Valid: {', '.join(TRANSPORTS)}", err=True)
        raise typer.Exit(1)
    settings = get_settings(profile=profile)
    configure_logging(settings.log_level)
    run_server(settings, transport=transport, host=host, port=port)


@app.command("branch")
def branch_cmd(profile: ProfileOpt = None) -> None:
    """Show the current branch and the issue key extracted from it."""
    settings = get_settings(profile=profile, require_credentials=False)
    configure_logging(settings.log_level)
    response = get_current_branch_name(resolve_workspace(settings))
    if not response.success:
        rprint(f"[red]{response.message}[/red]")
        raise typer.Exit(1)

    branch = response.data.branch
    issue_key = extract_issue_key(branch, compile_patterns(settings.jira_branch_patterns))
    rprint(f"[bold]Branch:[/bold] {branch}")
    rprint(f"[bold]Issue:[/bold]  {issue_key or '[dim](no issue key)[/dim]'}")


@app.command("info")
def info_cmd(profile: ProfileOpt = None) -> None:
    """Print the getJiraInfo response for the current branch."""
    settings = get_settings(profile=profile)
    configure_logging(settings.log_level)
    response = get_jira_info(
        JiraProvider(settings),
        resolve_workspace(settings),
        compile_patterns(settings.jira_branch_patterns),
    )
    typer.echo(response.to_json())
    if not response.success:
        raise typer.Exit(1)


@app.command("get-issue")
def get_issue(
    issue_key: Annotated[str, typer.Argument(help="Issue key (e.g. ABC-123)")],
    profile: ProfileOpt = None,
) -> None:
    """Show details for an issue."""
    settings = get_settings(profile=profile)
    configure_logging(settings.log_level)
    response = get_jira_by_id(JiraProvider(settings), issue_key)
    if not response.success:
        rprint(f"[red]{response.message}[/red]")
        raise typer.Exit(1)

    data = response.data
    description = data.description
    if description is None:
        description = "_No description provided._"
    elif not isinstance(description, str):
        description = json.dumps(description, indent=2, ensure_ascii=False)

    table = Table(title=f"{issue_key}: {data.summary}")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Status", data.status)
    table.add_row("Priority", data.priority)
    table.add_row("Assignee", data.assignee)
    table.add_row("URL", data.url)
    table.add_row("Description", description)

    rprint(table)


@app.command("set-default")
def set_default(
    profile: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default profile in ~/.config/jira-scp/config.toml."""
    if not CONFIG_PATH.exists():
        rprint(f"[red]{CONFIG_PATH} does not exist. Add a [{profile}] table with your Jira settings first.[/red]")
        raise typer.Exit(1)

    doc = tomlkit.load(CONFIG_PATH.open())
    profiles = _list_profiles(doc)
    if profile not in profiles:
        rprint(f"[red]Profile '{profile}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}[/red]")
        raise typer.Exit(1)

    doc["default_profile"] = profile
    CONFIG_PATH.write_text(tomlkit.dumps(doc))
    rprint(f'[green]✓[/green] Default profile set to "{profile}" in {CONFIG_PATH}')


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings(profile=profile, require_credentials=False)

    def mask(val: str | None) -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    not_set = "[dim](not set)[/dim]"
    table = Table(title="jira-scp Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("profile", active_profile(profile) or not_set)
    table.add_row("jira_instance_url", settings.jira_instance_url or not_set)
    table.add_row("jira_user_email", settings.jira_user_email or not_set)
    table.add_row("jira_api_key", mask(settings.jira_api_key.get_secret_value() if settings.jira_api_key else None))
    table.add_row("jira_branch_patterns", settings.jira_branch_patterns or "[dim](defaults)[/dim]")
    table.add_row("workspace", str(resolve_workspace(settings)))
    table.add_row("log_level", settings.log_level)

    rprint(table)
