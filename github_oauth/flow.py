"""
Token dispensing flow

Sequences state generation, the authorization URL, the callback listener and
the token exchange for one invocation.
"""
import logging
import webbrowser
from typing import Callable, Iterable, Optional

from settings import BIND_ADDRESS, CALLBACK_TIMEOUT, PORT
from .authorization import build_redirect_uri, create_authorization_request
from .callback_server import CallbackListener
from .errors import ConfigurationError
from .models import AppCredentials, TokenResponse
from .token_exchange import exchange_code_for_token

logger = logging.getLogger(__name__)


def _validate_inputs(credentials: Optional[AppCredentials], scopes: frozenset, port, timeout) -> None:
    """Raise ConfigurationError before any socket or network activity"""
    if credentials is None or not credentials.client_id or not credentials.client_secret:
        raise ConfigurationError("GitHub app credentials (client id and client secret) are required")
    if not scopes:
        raise ConfigurationError("At least one scope must be requested")
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise ConfigurationError(f"Invalid port: {port!r} (expected 1-65535)")
    if timeout is None or timeout <= 0:
        raise ConfigurationError(f"Invalid timeout: {timeout!r} (expected a positive number of seconds)")


def _launch_browser(open_browser: Callable[[str], Optional[bool]], url: str) -> bool:
    """Hand the URL to the browser launcher; False if it could not open it"""
    try:
        opened = open_browser(url)
    except webbrowser.Error as e:
        logger.warning(f"Could not open browser: {e}")
        return False
    return opened is not False


async def dispense_token(
    credentials: AppCredentials,
    scopes: Iterable[str],
    port: int = PORT,
    timeout: float = CALLBACK_TIMEOUT,
    open_browser: Optional[Callable[[str], Optional[bool]]] = webbrowser.open,
    on_ready: Optional[Callable[[str], None]] = None,
    on_browser_failure: Optional[Callable[[str], None]] = None,
    on_code: Optional[Callable[[str], None]] = None,
    bind_address: str = BIND_ADDRESS,
) -> TokenResponse:
    """
    Run the OAuth web application flow once.

    Args:
        credentials: OAuth App credentials
        scopes: Scopes to request
        port: Local callback port
        timeout: Seconds to wait for the browser round trip
        open_browser: Browser launcher, None to skip launching
        on_ready: Called with the authorization URL once the listener is bound
        on_browser_failure: Called with the URL if the launcher could not open it
        on_code: Called with the verified authorization code before the exchange
        bind_address: Local address the listener binds

    Returns:
        TokenResponse for the caller to hand on; it is never stored or logged

    Raises:
        ConfigurationError: Invalid inputs or the port cannot be bound
        ProviderDenialError: The user or GitHub denied the authorization
        AuthorizationTimeoutError: No valid callback within the timeout
        NetworkError, TokenExchangeError: The exchange failed
    """
    requested = frozenset(scopes or ())
    _validate_inputs(credentials, requested, port, timeout)

    redirect_uri = build_redirect_uri(port)
    request = create_authorization_request(credentials, requested, redirect_uri)
    logger.debug(f"Authorization request created for scopes {sorted(request.scopes)}")

    async with CallbackListener(
        request.state,
        port=port,
        host=bind_address,
        client_id=credentials.client_id,
    ) as listener:
        if on_ready is not None:
            on_ready(request.url)

        if open_browser is not None and not _launch_browser(open_browser, request.url):
            if on_browser_failure is not None:
                on_browser_failure(request.url)

        result = await listener.wait(timeout)

    if on_code is not None:
        on_code(result.code)

    return await exchange_code_for_token(credentials, result.code, request.redirect_uri)
