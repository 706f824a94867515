"""High-value constants for the Oura MCP package."""

# Package metadata
PACKAGE_VERSION = "1.0.0"
SERVER_NAME = "oura-provider"
USER_AGENT = f"oura-mcp/{PACKAGE_VERSION}"

# External API contract consts
DEFAULT_BASE_URL = "https://api.ouraring.com/v2"
USERCOLLECTION_PATH = "/usercollection"
DEFAULT_TOKEN_URL = "https://api.ouraring.com/oauth/token"
AUTHORIZE_URL = "https://cloud.ouraring.com/oauth/authorize"
DEFAULT_REDIRECT_URI = "http://localhost:3000/callback"
DEFAULT_SCOPES = (
    "email",
    "personal",
    "daily",
    "heartrate",
    "workout",
    "tag",
    "session",
    "spo2",
)
RESOURCE_SCHEME = "oura"
TOOL_PREFIX = "get_"

# Business logic consts
TOKEN_REFRESH_BUFFER_SECONDS = 60  # refresh 1min early
DEFAULT_TOKEN_EXPIRY_SECONDS = 86400  # 24 hours
TRAILING_WINDOW_DAYS = 7  # today inclusive
