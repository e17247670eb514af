"""Interactive prompts for app credentials and scopes"""

from typing import FrozenSet, Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from settings import DEVELOPER_SETTINGS_URL
from github_oauth import (
    AppCredentials,
    ConfigurationError,
    DEFAULT_SCOPES,
    GITHUB_SCOPES,
    parse_scopes,
    validate_scopes,
)


def _ask(console: Console, question: str, **kwargs) -> str:
    try:
        return Prompt.ask(question, console=console, **kwargs)
    except EOFError:
        raise ConfigurationError(
            "Input is required but stdin is closed; run octopat from an interactive terminal"
        ) from None


def prompt_app_credentials(console: Console, alias: Optional[str] = None) -> AppCredentials:
    """Ask for the client id and secret of a GitHub OAuth App

    Raises:
        ConfigurationError: If either value is left empty or stdin is closed
    """
    console.print("\nWe'll need some credentials from a GitHub OAuth App to fetch a new token")
    console.print(f"Visit [cyan]{DEVELOPER_SETTINGS_URL}[/cyan] to find them or create a new application")
    console.print("[dim]Its callback URL must point at this machine, e.g. http://localhost:4567/[/dim]\n")

    client_id = _ask(console, "Your client id").strip()
    if not client_id:
        raise ConfigurationError("A client id is required")

    client_secret = _ask(console, "Your client secret", password=True).strip()
    if not client_secret:
        raise ConfigurationError("A client secret is required")

    return AppCredentials(client_id=client_id, client_secret=client_secret, alias=alias)


def display_scopes(console: Console) -> None:
    """Print the GitHub scopes in a compact table"""
    table = Table(show_header=False, box=None, padding=(0, 2))
    columns = 3
    for _ in range(columns):
        table.add_column(style="cyan")

    rows = [GITHUB_SCOPES[i:i + columns] for i in range(0, len(GITHUB_SCOPES), columns)]
    for row in rows:
        table.add_row(*row, *([""] * (columns - len(row))))

    console.print(table)


def prompt_scopes(console: Console) -> FrozenSet[str]:
    """Ask which permission scopes to request, re-asking on unknown names"""
    console.print("\n[bold]Select permission scopes[/bold]")
    display_scopes(console)

    while True:
        answer = _ask(console, "Scopes (comma separated)", default=",".join(DEFAULT_SCOPES))
        try:
            return validate_scopes(parse_scopes(answer))
        except ConfigurationError as e:
            console.print(f"[red]{e}[/red]")
