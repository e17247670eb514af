"""
GitHub OAuth constants
"""
from settings import AUTHORIZE_URL, TOKEN_URL, APP_SETTINGS_URL

# Callback listener routes
CALLBACK_PATH = "/"
FAVICON_PATH = "/favicon.ico"

# GitHub separates requested scopes with spaces on the authorize URL and
# reports granted scopes comma separated in the token response
SCOPE_DELIMITER = " "
GRANTED_SCOPE_DELIMITER = ","

__all__ = [
    "AUTHORIZE_URL",
    "TOKEN_URL",
    "APP_SETTINGS_URL",
    "CALLBACK_PATH",
    "FAVICON_PATH",
    "SCOPE_DELIMITER",
    "GRANTED_SCOPE_DELIMITER",
]
