"""Main CLI application class for octopat"""

import asyncio
import logging
import webbrowser
from typing import Callable, FrozenSet, Optional

from rich.console import Console

import settings
from github_oauth import (
    AppCredentials,
    OctopatError,
    TokenResponse,
    dispense_token,
    validate_scopes,
)
from utils.clipboard import copy_token
from utils.credential_store import CredentialStore, KeyringCredentialStore
from utils.debug_console import SecretRedactingFilter
from cli.prompts import prompt_app_credentials, prompt_scopes

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INTERRUPTED = 130


class TokenDispenserCLI:
    """Interactive token dispenser"""

    def __init__(
        self,
        console: Optional[Console] = None,
        store: Optional[CredentialStore] = None,
        port: int = settings.PORT,
        alias: str = settings.ALIAS,
        timeout: float = settings.CALLBACK_TIMEOUT,
        open_browser: bool = True,
        redactor: Optional[SecretRedactingFilter] = None,
        copy: Callable[[str], None] = copy_token,
    ):
        self.console = console or Console()
        self.store = store or KeyringCredentialStore()
        self.port = port
        self.alias = alias
        self.timeout = timeout
        self.open_browser = open_browser
        self.redactor = redactor
        self.copy = copy

    def load_credentials(self, reset: bool = False) -> AppCredentials:
        """Read the app credentials for the alias, prompting and saving if missing"""
        if reset and self.store.delete(self.alias):
            self.console.print(f"[yellow]Forgot stored credentials for app '{self.alias}'[/yellow]")

        credentials = None if reset else self.store.get(self.alias)
        if credentials is None:
            credentials = prompt_app_credentials(self.console, alias=self.alias)
            self.store.set(self.alias, credentials)
            self.console.print(f"[green][OK][/green] Saved credentials for app '{self.alias}' to the keychain")

        self._protect(credentials.client_secret)
        return credentials

    def _protect(self, secret: Optional[str]) -> None:
        if self.redactor is not None:
            self.redactor.add_secret(secret)

    def _on_ready(self, url: str) -> None:
        self.console.print("\n[bold]🧭 Navigating to GitHub for authorization[/bold]")
        self.console.print(f"[dim]Waiting up to {self.timeout:g}s for GitHub to redirect to port {self.port}[/dim]")
        if not self.open_browser:
            self.console.print(f"Open this URL in your browser:\n{url}")

    def _on_browser_failure(self, url: str) -> None:
        self.console.print("[yellow]Could not open browser automatically[/yellow]")
        self.console.print(f"Please open this URL manually:\n{url}")

    async def dispense(self, credentials: AppCredentials, scopes: FrozenSet[str]) -> TokenResponse:
        """Run the browser flow and return the token"""
        return await dispense_token(
            credentials,
            scopes,
            port=self.port,
            timeout=self.timeout,
            open_browser=webbrowser.open if self.open_browser else None,
            on_ready=self._on_ready,
            on_browser_failure=self._on_browser_failure,
            on_code=self._protect,
        )

    def run(self, scopes: Optional[FrozenSet[str]] = None, reset: bool = False) -> int:
        """
        Dispense one token into the clipboard.

        Args:
            scopes: Scopes to request; prompted for when empty
            reset: Re-enter the app credentials for the alias

        Returns:
            Process exit code
        """
        try:
            credentials = self.load_credentials(reset=reset)
            requested = validate_scopes(scopes) if scopes else prompt_scopes(self.console)

            token = asyncio.run(self.dispense(credentials, requested))
            self._protect(token.access_token)

            self.console.print("👍 Received response from GitHub")
            self.copy(token.access_token)
            self.console.print("[bold]✨ Token copied to clipboard[/bold]")
            if token.scope:
                self.console.print(f"[dim]Granted scopes: {', '.join(sorted(token.scope))}[/dim]")
            return EXIT_OK

        except OctopatError as e:
            self.console.print(f"[red][ERROR][/red] {e}")
            logger.debug(f"Dispensing failed with {type(e).__name__}")
            return e.exit_code
        except KeyboardInterrupt:
            self.console.print("\n[yellow]Interrupted by user[/yellow]")
            return EXIT_INTERRUPTED
