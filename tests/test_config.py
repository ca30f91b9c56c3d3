from __future__ import annotations

import json

from streamable_mcp.core import config
from streamable_mcp.core.constants import DEFAULT_SERVER_NAME, DEFAULT_SERVER_URL


def _write_config(tmp_path, data) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_defaults_without_config_file(tmp_path):
    s = config.load_settings(tmp_path / "missing.json")
    assert s.servers == {DEFAULT_SERVER_NAME: DEFAULT_SERVER_URL}
    assert s.default_server == DEFAULT_SERVER_NAME
    assert s.timeout_seconds == 30.0
    assert s.max_retries == 3
    assert s.chunk_size == 50
    assert s.chunk_delay_seconds == 0.01


def test_config_file_servers_and_client_options(tmp_path):
    path = _write_config(tmp_path, {
        "mcpServers": [
            {"name": "docs", "url": "http://docs.local", "enabled": True},
            {"name": "old", "url": "http://old.local", "enabled": False},
        ],
        "client": {"timeout": 5000, "maxRetries": 1, "streamingChunkSize": 20},
        "llm": {"model": "my-model", "region": "eu-west-1"},
    })
    s = config.load_settings(path)
    assert s.servers == {"docs": "http://docs.local"}
    assert s.timeout_seconds == 5.0
    assert s.max_retries == 1
    assert s.chunk_size == 20
    assert s.llm_model_id == "my-model"
    assert s.bedrock_region == "eu-west-1"


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = _write_config(tmp_path, {"client": {"maxRetries": 1}})
    monkeypatch.setenv("MCP_MAX_RETRIES", "5")
    monkeypatch.setenv("MCP_CHUNK_DELAY_MS", "0")
    monkeypatch.setenv("MCP_TIMEOUT_SECONDS", "2.5")
    s = config.load_settings(path)
    assert s.max_retries == 5
    assert s.chunk_delay_seconds == 0.0
    assert s.timeout_seconds == 2.5


def test_zero_retries_in_file_is_respected(tmp_path):
    s = config.load_settings(_write_config(tmp_path, {"client": {"maxRetries": 0}}))
    assert s.max_retries == 0


def test_invalid_file_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level("WARNING"):
        s = config.load_settings(path)
    assert s.servers == {DEFAULT_SERVER_NAME: DEFAULT_SERVER_URL}
    assert "Could not load" in caplog.text


def test_get_settings_reads_config_json_from_cwd_and_caches(tmp_path):
    _write_config(tmp_path, {"mcpServers": [{"name": "local", "url": "http://localhost:8000/mcp"}]})
    first = config.get_settings()
    assert first.servers == {"local": "http://localhost:8000/mcp"}
    assert config.get_settings() is first


def test_use_config_file_replaces_cached_settings(tmp_path):
    config.get_settings()
    path = _write_config(tmp_path, {"mcpServers": [{"name": "a", "url": "http://a"}]})
    assert config.use_config_file(path).servers == {"a": "http://a"}
    assert config.get_settings().servers == {"a": "http://a"}


def test_missing_explicit_config_file_is_logged(tmp_path, caplog):
    with caplog.at_level("WARNING"):
        s = config.load_settings(tmp_path / "typo.json")
    assert s.servers == {DEFAULT_SERVER_NAME: DEFAULT_SERVER_URL}
    assert "typo.json not found" in caplog.text


def test_missing_config_path_from_environment_is_logged(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("MCP_CONFIG_PATH", str(tmp_path / "nowhere.json"))
    with caplog.at_level("WARNING"):
        config.load_settings()
    assert "nowhere.json not found" in caplog.text


def test_missing_implicit_config_json_is_silent(caplog):
    with caplog.at_level("WARNING"):
        s = config.load_settings()
    assert s.servers == {DEFAULT_SERVER_NAME: DEFAULT_SERVER_URL}
    assert caplog.text == ""
