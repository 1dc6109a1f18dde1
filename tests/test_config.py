"""Unit tests for configuration loading"""
import json

import pytest

from prometheus_query import ConfigManager


class TestConfigManager:
    """Loading and validating config.json"""

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"prometheusConfig": {"baseUrl": "http://prom:9090", "queryTimeout": "30s1m"}}))

        cm = ConfigManager.load(str(path))

        assert cm.base_url == "http://prom:9090"
        assert cm.prometheus.queryTimeout == "1m30s"
        assert cm.prometheus.usePost is False

    def test_load_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "prom.json"
        path.write_text(json.dumps({"prometheusConfig": {"baseUrl": "http://env:9090"}}))
        monkeypatch.setenv("PROM_CONFIG_PATH", str(path))

        assert ConfigManager.load().base_url == "http://env:9090"

    def test_missing_base_url(self):
        with pytest.raises(RuntimeError):
            ConfigManager.from_dict({"prometheusConfig": {}})

    def test_invalid_timeout(self):
        with pytest.raises(RuntimeError):
            ConfigManager.from_dict({"prometheusConfig": {"baseUrl": "http://prom:9090", "queryTimeout": "soon"}})
