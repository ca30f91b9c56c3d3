"""Centralized configuration for the MCP client and the assistant.

Settings come from an optional `config.json` (servers, client and LLM
sections) and environment variables, which take precedence. A
`.env` file is honoured through python-dotenv.

Other modules should import Settings via `get_settings()` and avoid
reading environment variables or the config file directly.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from .constants import (
    DEFAULT_CHUNK_DELAY_SECONDS,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SERVER_NAME,
    DEFAULT_SERVER_URL,
    DEFAULT_TIMEOUT_SECONDS,
)
from .schemas import ConfigFile, ServerEntry


# Load env once at import (idempotent if already loaded elsewhere)
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SERVERS: Tuple[ServerEntry, ...] = (
    ServerEntry(
        name=DEFAULT_SERVER_NAME,
        url=DEFAULT_SERVER_URL,
        description="AWS Knowledge and Documentation Server",
    ),
)


@dataclass(frozen=True)
class Settings:
    # MCP servers: name -> base URL (enabled entries only)
    servers: Dict[str, str] = field(default_factory=dict)
    default_server: Optional[str] = None

    # Networking
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES

    # Streaming
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_delay_seconds: float = DEFAULT_CHUNK_DELAY_SECONDS

    # Bedrock / LLM
    bedrock_region: str = "us-east-1"
    llm_model_id: str = "us.anthropic.claude-sonnet-4-5-20250929-v1:0"
    llm_fallback_model_id: str = "anthropic.claude-3-5-sonnet-20240620-v1:0"


_cached_settings: Optional[Settings] = None


def _read_config_file(path: Path, *, explicit: bool = False) -> ConfigFile:
    if not path.exists():
        if explicit:
            logger.warning("Config file %s not found, using defaults", path)
        return ConfigFile()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return ConfigFile.model_validate(json.load(f))
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Could not load %s, using defaults: %s", path, e)
        return ConfigFile()


def _env_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return default


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """Build Settings from the config file and environment (uncached)."""
    given = path or os.getenv("MCP_CONFIG_PATH")
    config_path = Path(given or Path.cwd() / "config.json")
    file_cfg = _read_config_file(config_path, explicit=bool(given))

    entries = file_cfg.mcp_servers if file_cfg.mcp_servers is not None else list(DEFAULT_SERVERS)
    servers = {entry.name: entry.url for entry in entries if entry.enabled}

    client = file_cfg.client
    timeout_s = client.timeout_ms / 1000.0 if client.timeout_ms else DEFAULT_TIMEOUT_SECONDS
    max_retries = client.max_retries if client.max_retries is not None else DEFAULT_MAX_RETRIES
    chunk_size = client.streaming_chunk_size or DEFAULT_CHUNK_SIZE
    delay_s = (
        client.streaming_delay_ms / 1000.0
        if client.streaming_delay_ms is not None
        else DEFAULT_CHUNK_DELAY_SECONDS
    )

    delay_ms_env = _env_number("MCP_CHUNK_DELAY_MS", float, None)
    defaults = Settings()
    llm = file_cfg.llm

    default_server = os.getenv("MCP_DEFAULT_SERVER") or next(iter(servers), None)

    return Settings(
        servers=servers,
        default_server=default_server,
        timeout_seconds=_env_number("MCP_TIMEOUT_SECONDS", float, timeout_s),
        max_retries=_env_number("MCP_MAX_RETRIES", int, max_retries),
        chunk_size=_env_number("MCP_CHUNK_SIZE", int, chunk_size),
        chunk_delay_seconds=delay_ms_env / 1000.0 if delay_ms_env is not None else delay_s,
        bedrock_region=os.getenv("BEDROCK_REGION") or llm.region or defaults.bedrock_region,
        llm_model_id=os.getenv("LLM_MODEL_ID") or llm.model or defaults.llm_model_id,
        llm_fallback_model_id=(
            os.getenv("LLM_FALLBACK_MODEL_ID") or llm.fallback_model or defaults.llm_fallback_model_id
        ),
    )


def get_settings() -> Settings:
    """Return cached settings to be used across modules."""
    global _cached_settings
    if _cached_settings is not None:
        return _cached_settings
    _cached_settings = load_settings()
    return _cached_settings


def reset_settings() -> None:
    global _cached_settings
    _cached_settings = None


def use_config_file(path: str | Path) -> Settings:
    """Load settings from `path` and make them the cached settings."""
    global _cached_settings
    _cached_settings = load_settings(path)
    return _cached_settings
