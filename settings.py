from pathlib import Path

from config.loader import get_config_loader, resolve_oidc_verify

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 8081)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "0.0.0.0")

APP_NAME = "Amazon Q to OpenAI API Bridge"
APP_VERSION = "2.0.0"

# Model configuration
DEFAULT_MODEL = config.get("DEFAULT_MODEL", "claude-sonnet-4.5")

# Anthropic-compatible responses advertise this API version
ANTHROPIC_VERSION = config.get("ANTHROPIC_VERSION", "2023-06-01")

# Upstream endpoints
AMAZONQ_ENDPOINT = config.get("AMAZONQ_ENDPOINT", "https://codewhisperer.us-east-1.amazonaws.com")
SSO_OIDC_ENDPOINT = config.get("SSO_OIDC_ENDPOINT", "https://oidc.us-east-1.amazonaws.com")
OIDC_VERIFY = resolve_oidc_verify(config)

# Timeout configuration
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Read timeout: Time between receiving data chunks, detects stalled streams
READ_TIMEOUT = config.get("READ_TIMEOUT", 60.0)
# Request timeout: Total timeout for a single upstream or token call
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 120.0)

# Token lifecycle
TOKEN_REFRESH_MARGIN = config.get("TOKEN_REFRESH_MARGIN", 300)
# JSON credentials blob used only when the credential store is empty
AMAZONQ_CREDENTIALS = config.get("AMAZONQ_CREDENTIALS", "")

# Credential storage
CREDENTIALS_FILE = config.get("CREDENTIALS_FILE", str(Path.home() / ".amazonq-gateway" / "credentials.json"))
CREDENTIALS_KEY = config.get("CREDENTIALS_KEY", "amazonq-credentials")

# Stream translation
STREAM_CHUNK_SIZE = config.get("STREAM_CHUNK_SIZE", 1024)
STREAM_QUEUE_SIZE = config.get("STREAM_QUEUE_SIZE", 64)
BUFFER_MAX_SIZE = config.get("BUFFER_MAX_SIZE", 10240)
# "truncate" keeps the newest bytes, "reject" fails the stream
BUFFER_OVERFLOW_POLICY = config.get("BUFFER_OVERFLOW_POLICY", "truncate")

# Logging switches
LOG_REQUESTS = config.get("LOG_REQUESTS", True)
LOG_RESPONSES = config.get("LOG_RESPONSES", True)
LOG_TOKEN_REFRESH = config.get("LOG_TOKEN_REFRESH", True)
MAX_LOG_LENGTH = config.get("MAX_LOG_LENGTH", 500)
