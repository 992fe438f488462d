"""Tests for endpoint configuration parsing and validation."""

import dataclasses
import json

import pytest

from pteropower import ConfigError, EndpointConfig, load_config


def make_data(**overrides):
    data = {
        "pterodactyl": {"url": "https://panel.example.com", "token": "ptlc_abc"},
        "servers": {
            "lobby": {"id": "abc123"},
            "survival": {"id": "def456", "autostop": 300},
        },
    }
    data.update(overrides)
    return data


class TestFromDict:
    """Building a config from persisted data."""

    def test_valid(self):
        config = EndpointConfig.from_dict(make_data())
        assert config.base_url == "https://panel.example.com"
        assert config.token == "ptlc_abc"
        assert dict(config.servers) == {"lobby": "abc123", "survival": "def456"}
        assert config.request_timeout is None

    def test_request_timeout(self):
        config = EndpointConfig.from_dict(make_data(request_timeout="2.5"))
        assert config.request_timeout == 2.5

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError):
            EndpointConfig.from_dict(make_data(request_timeout=0))

    def test_no_servers(self):
        data = make_data()
        del data["servers"]
        assert dict(EndpointConfig.from_dict(data).servers) == {}
        assert dict(EndpointConfig.from_dict(make_data(servers=None)).servers) == {}

    def test_missing_token(self):
        with pytest.raises(ConfigError, match="token"):
            EndpointConfig.from_dict(make_data(pterodactyl={"url": "https://panel.example.com"}))

    def test_empty_token(self):
        with pytest.raises(ConfigError):
            EndpointConfig.from_dict(
                make_data(pterodactyl={"url": "https://panel.example.com", "token": ""})
            )

    @pytest.mark.parametrize("url", ["not a url", "ftp://panel.example.com", ""])
    def test_bad_url(self, url):
        with pytest.raises(ConfigError):
            EndpointConfig.from_dict(make_data(pterodactyl={"url": url, "token": "t"}))

    def test_server_without_id(self):
        with pytest.raises(ConfigError):
            EndpointConfig.from_dict(make_data(servers={"lobby": {"autostop": 5}}))

    def test_not_a_dict(self):
        with pytest.raises(ConfigError):
            EndpointConfig.from_dict(["pterodactyl"])


class TestImmutability:
    """A config can be shared between threads."""

    def test_mapping_is_read_only(self):
        config = EndpointConfig("https://panel.example.com", "t", {"lobby": "abc123"})
        with pytest.raises(TypeError):
            config.servers["lobby"] = "other"

    def test_mapping_is_copied(self):
        servers = {"lobby": "abc123"}
        config = EndpointConfig("https://panel.example.com", "t", servers)
        servers["lobby"] = "changed"
        assert config.servers["lobby"] == "abc123"

    def test_frozen(self):
        config = EndpointConfig("https://panel.example.com", "t")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.token = "other"

    def test_token_not_in_repr(self):
        config = EndpointConfig("https://panel.example.com", "ptlc_secret")
        assert "ptlc_secret" not in repr(config)


class TestLoadConfig:
    """Reading configuration files."""

    def test_load(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(make_data()), encoding="utf-8")
        config = load_config(str(path))
        assert config.servers["lobby"] == "abc123"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))
