"""Core constants for cross-module use."""

JSONRPC_VERSION = "2.0"
USER_AGENT = "StreamableMCPClient/1.0"

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_CHUNK_SIZE = 50
DEFAULT_CHUNK_DELAY_SECONDS = 0.01

DEFAULT_SERVER_NAME = "aws-knowledge-mcp-server"
DEFAULT_SERVER_URL = "https://knowledge-mcp.global.api.aws"
