"""Error taxonomy for the token dispensing flow

Every error carries the process exit code the CLI terminates with. Messages
are shown to the user verbatim, so they must never contain the client secret,
the authorization code or the access token.
"""

from typing import Optional


class OctopatError(Exception):
    """Base class for all classified failures"""

    exit_code = 1


class ConfigurationError(OctopatError):
    """Missing or invalid credentials, port, scopes or timeout"""

    exit_code = 2


class SecurityValidationError(OctopatError):
    """Callback with a mismatched state or without code/state

    Raised and absorbed inside the callback listener; it never ends the wait.
    """

    exit_code = 3


class ProviderDenialError(OctopatError):
    """GitHub reported an error, either on the redirect or in the exchange body"""

    exit_code = 4

    def __init__(self, error: str, description: Optional[str] = None):
        self.error = error
        self.description = description
        message = f"GitHub returned '{error}'"
        if description:
            message += f": {description}"
        super().__init__(message)


class NetworkError(OctopatError):
    """Transport failure talking to GitHub, after retries were exhausted"""

    exit_code = 5


class AuthorizationTimeoutError(OctopatError, TimeoutError):
    """No valid callback arrived before the deadline"""

    exit_code = 6

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"No authorization was received within {timeout:g} seconds. "
            "Run the command again to retry."
        )


class TokenExchangeError(OctopatError):
    """Non-2xx or malformed token endpoint response"""

    exit_code = 7


class ClipboardError(OctopatError):
    """The token could not be handed to the system clipboard"""

    exit_code = 8
