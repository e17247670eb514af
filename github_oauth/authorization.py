"""
GitHub OAuth authorization request construction
"""
import secrets
from typing import Iterable
from urllib.parse import quote, urlencode

from settings import REDIRECT_HOST
from .constants import AUTHORIZE_URL, CALLBACK_PATH, SCOPE_DELIMITER
from .errors import ConfigurationError
from .models import AppCredentials, AuthorizationRequest


def create_state() -> str:
    """
    Generate random state parameter for CSRF protection.

    Returns:
        str: URL-safe string carrying 32 random bytes (256 bits)
    """
    return secrets.token_urlsafe(32)


def build_redirect_uri(port: int, host: str = REDIRECT_HOST, path: str = CALLBACK_PATH) -> str:
    """
    Build the callback address GitHub redirects the browser to.

    The result has to match the callback URL registered on the OAuth App.
    """
    return f"http://{host}:{port}{path}"


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[str],
    state: str,
    authorize_url: str = AUTHORIZE_URL,
) -> str:
    """
    Build the GitHub authorization URL.

    Args:
        client_id: OAuth App client id
        redirect_uri: Local callback address
        scopes: Requested scopes, joined with GitHub's delimiter
        state: Anti-CSRF correlation token

    Returns:
        str: Authorization URL with percent-encoded query parameters

    Raises:
        ConfigurationError: If client_id or state is empty
    """
    if not client_id or not client_id.strip():
        raise ConfigurationError("A client id is required to build the authorization URL")
    if not state:
        raise ConfigurationError("A state token is required to build the authorization URL")

    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": SCOPE_DELIMITER.join(sorted(set(scopes))),
        "state": state,
    }

    # quote (not quote_plus) so the scope delimiter is sent as %20
    return f"{authorize_url}?{urlencode(params, quote_via=quote)}"


def create_authorization_request(
    credentials: AppCredentials,
    scopes: Iterable[str],
    redirect_uri: str,
) -> AuthorizationRequest:
    """
    Create the single authorization request of one invocation.

    Generates a fresh state and the matching authorization URL.
    """
    state = create_state()
    requested = frozenset(scopes)
    url = build_authorization_url(credentials.client_id, redirect_uri, requested, state)
    return AuthorizationRequest(
        state=state,
        scopes=requested,
        redirect_uri=redirect_uri,
        client_id=credentials.client_id,
        url=url,
    )
