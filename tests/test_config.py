from __future__ import annotations

import pytest

from agency.config import DEFAULT_API_ENDPOINT, ClientConfig, load_config
from agency.errors import ConfigError


def test_missing_file_uses_defaults(tmp_path, clean_env, caplog):
    cfg = load_config(tmp_path / "nope.yaml")
    assert cfg == {"llm": {"api_endpoint": DEFAULT_API_ENDPOINT}}
    assert "Config file not found" in caplog.text


def test_yaml_file_and_env_overrides(tmp_path, clean_env, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("llm:\n  api_endpoint: http://a.test/v1\n  model: phi3\n", encoding="utf-8")
    monkeypatch.setenv("AGENCY__LLM__API_ENDPOINT", "http://b.test:8080/v1/chat/completions")
    monkeypatch.setenv("AGENCY__LLM__TIMEOUT", "2.5")

    cfg = load_config(str(path))
    assert cfg["llm"] == {
        "api_endpoint": "http://b.test:8080/v1/chat/completions",
        "model": "phi3",
        "timeout": 2.5,
    }


def test_config_path_from_env(tmp_path, clean_env, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("llm:\n  model: qwen\n", encoding="utf-8")
    monkeypatch.setenv("AGENCY_CONFIG", str(path))
    assert load_config()["llm"]["model"] == "qwen"


def test_malformed_yaml_raises(tmp_path, clean_env):
    bad = tmp_path / "bad.yaml"
    bad.write_text("llm: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)

    not_a_dict = tmp_path / "list.yaml"
    not_a_dict.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(not_a_dict)


def test_client_config_from_section():
    assert ClientConfig.from_config({}) == ClientConfig()
    assert ClientConfig.from_config(None).api_endpoint == DEFAULT_API_ENDPOINT

    cc = ClientConfig.from_config(
        {"agent": {"api_endpoint": "http://x.test", "extraction": "json", "timeout": 10}},
        section="agent",
    )
    assert cc == ClientConfig(api_endpoint="http://x.test", model="llama3", extraction="json", timeout=10.0)


def test_default_yaml_is_valid(project_root, clean_env):
    cfg = load_config(project_root / "config" / "default.yaml")
    assert ClientConfig.from_config(cfg) == ClientConfig()
