from __future__ import annotations

import time
from typing import List

import pytest

from streamable_mcp.core import config


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep tests independent of a local config.json, .env values and the settings cache."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "MCP_CONFIG_PATH",
        "MCP_TIMEOUT_SECONDS",
        "MCP_MAX_RETRIES",
        "MCP_CHUNK_SIZE",
        "MCP_CHUNK_DELAY_MS",
        "MCP_DEFAULT_SERVER",
        "BEDROCK_REGION",
        "LLM_MODEL_ID",
        "LLM_FALLBACK_MODEL_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def sleeps(monkeypatch) -> List[float]:
    recorded: List[float] = []
    monkeypatch.setattr(time, "sleep", recorded.append)
    return recorded
