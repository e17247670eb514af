from config.loader import get_config_loader

config = get_config_loader()

# Callback listener configuration
# The port must match the callback URL registered on the GitHub OAuth App
PORT = config.get("OCTOPAT_PORT", 4567)
BIND_ADDRESS = config.get("OCTOPAT_BIND_ADDRESS", "127.0.0.1")
REDIRECT_HOST = config.get("OCTOPAT_REDIRECT_HOST", "localhost")
# Wall-clock deadline for the browser round trip, in seconds
CALLBACK_TIMEOUT = config.get("OCTOPAT_TIMEOUT", 120.0)

# App alias used when none is given on the command line
ALIAS = config.get("OCTOPAT_ALIAS", "default")

# GitHub endpoints
GITHUB_BASE_URL = config.get("OCTOPAT_GITHUB_URL", "https://github.com").rstrip("/")
AUTHORIZE_URL = f"{GITHUB_BASE_URL}/login/oauth/authorize"
TOKEN_URL = f"{GITHUB_BASE_URL}/login/oauth/access_token"
APP_SETTINGS_URL = f"{GITHUB_BASE_URL}/settings/connections/applications"
DEVELOPER_SETTINGS_URL = f"{GITHUB_BASE_URL}/settings/developers"

# Token exchange configuration
# Retries apply to transport failures only, never to provider responses
EXCHANGE_RETRIES = config.get("OCTOPAT_EXCHANGE_RETRIES", 2)
EXCHANGE_BACKOFF = config.get("OCTOPAT_EXCHANGE_BACKOFF", 0.5)
EXCHANGE_TIMEOUT = config.get("OCTOPAT_EXCHANGE_TIMEOUT", 30.0)

# Logging
LOG_LEVEL = config.get("OCTOPAT_LOG_LEVEL", "warning")
DEBUG_LOG_FILE = config.get("OCTOPAT_DEBUG_LOG", "octopat_debug.log")

# Keychain service name (hardcoded - entries from older installs use it)
KEYRING_SERVICE = "octopat"
