"""
GitHub OAuth web application flow
"""
from .constants import (
    AUTHORIZE_URL,
    TOKEN_URL,
    CALLBACK_PATH,
    SCOPE_DELIMITER,
)
from .errors import (
    OctopatError,
    ConfigurationError,
    SecurityValidationError,
    ProviderDenialError,
    NetworkError,
    AuthorizationTimeoutError,
    TokenExchangeError,
    ClipboardError,
)
from .models import (
    AppCredentials,
    AuthorizationRequest,
    CallbackResult,
    TokenResponse,
)
from .scopes import (
    GITHUB_SCOPES,
    DEFAULT_SCOPES,
    parse_scopes,
    validate_scopes,
)
from .authorization import (
    create_state,
    build_redirect_uri,
    build_authorization_url,
    create_authorization_request,
)
from .callback_server import (
    ListenerState,
    CallbackListener,
)
from .token_exchange import (
    exchange_code_for_token,
    parse_token_payload,
)
from .flow import dispense_token

__all__ = [
    # Constants
    "AUTHORIZE_URL",
    "TOKEN_URL",
    "CALLBACK_PATH",
    "SCOPE_DELIMITER",
    # Errors
    "OctopatError",
    "ConfigurationError",
    "SecurityValidationError",
    "ProviderDenialError",
    "NetworkError",
    "AuthorizationTimeoutError",
    "TokenExchangeError",
    "ClipboardError",
    # Models
    "AppCredentials",
    "AuthorizationRequest",
    "CallbackResult",
    "TokenResponse",
    # Scopes
    "GITHUB_SCOPES",
    "DEFAULT_SCOPES",
    "parse_scopes",
    "validate_scopes",
    # Authorization
    "create_state",
    "build_redirect_uri",
    "build_authorization_url",
    "create_authorization_request",
    # Callback Listener
    "ListenerState",
    "CallbackListener",
    # Token Exchange
    "exchange_code_for_token",
    "parse_token_payload",
    # Flow
    "dispense_token",
]
