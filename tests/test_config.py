"""Tests for config models and YAML loader."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from cloudera_exporter.config.loader import (
    _interpolate_env,
    _interpolate_recursive,
    apply_overrides,
    find_config_file,
    load_config,
    load_config_or_default,
    parse_listen_address,
)
from cloudera_exporter.config.models import (
    DEFAULT_STATIC_SERVICES,
    ClouderaConfig,
    ExporterConfig,
    MetricsConfig,
    RegistryMode,
    WebConfig,
)

# ─── Model tests ───


class TestDefaults:
    def test_exporter_defaults(self):
        cfg = ExporterConfig()
        assert cfg.web.listen_address == ":9107"
        assert cfg.web.telemetry_path == "/metrics"
        assert cfg.cloudera.uri == "http://localhost:7180"
        assert cfg.cloudera.user == "admin"
        assert cfg.cloudera.password == ""
        assert cfg.cloudera.cluster_name == "Cluster 1"
        assert cfg.poll.interval == 10.0
        assert cfg.metrics.mode == RegistryMode.DYNAMIC
        assert cfg.log_level == "INFO"

    def test_static_services_default(self):
        cfg = MetricsConfig()
        assert cfg.services == DEFAULT_STATIC_SERVICES
        assert {"hdfs", "impala", "yarn", "spark_on_yarn", "hive", "zookeeper", "hue", "oozie"} <= set(cfg.services)

    def test_services_default_not_shared(self):
        a = MetricsConfig()
        a.services.append("extra")
        assert "extra" not in MetricsConfig().services


class TestValidation:
    def test_telemetry_path_needs_slash(self):
        with pytest.raises(ValueError):
            WebConfig(telemetry_path="metrics")

    @pytest.mark.parametrize("path", ["/", "/health"])
    def test_telemetry_path_reserved(self, path: str):
        with pytest.raises(ValueError):
            WebConfig(telemetry_path=path)

    def test_timeout_positive(self):
        with pytest.raises(ValueError):
            ClouderaConfig(timeout=0)

    def test_log_level_normalised(self):
        assert ExporterConfig(log_level="debug").log_level == "DEBUG"

    def test_log_level_unknown(self):
        with pytest.raises(ValueError):
            ExporterConfig(log_level="chatty")

    def test_mode_from_string(self):
        assert MetricsConfig(mode="static").mode == RegistryMode.STATIC


# ─── Env interpolation ───


class TestInterpolation:
    def test_simple_var(self):
        with patch.dict(os.environ, {"CM_PASS": "hunter2"}):
            assert _interpolate_env("${CM_PASS}") == "hunter2"

    def test_missing_var_kept(self):
        env = {k: v for k, v in os.environ.items() if k != "CM_MISSING"}
        with patch.dict(os.environ, env, clear=True):
            assert _interpolate_env("${CM_MISSING}") == "${CM_MISSING}"

    def test_default(self):
        env = {k: v for k, v in os.environ.items() if k != "CM_MISSING"}
        with patch.dict(os.environ, env, clear=True):
            assert _interpolate_env("${CM_MISSING:-fallback}") == "fallback"

    def test_recursive(self):
        with patch.dict(os.environ, {"CM_HOST": "cm01"}):
            data = {"cloudera": {"uri": "http://${CM_HOST}:7180"}, "list": ["${CM_HOST}", 3]}
            out = _interpolate_recursive(data)
            assert out["cloudera"]["uri"] == "http://cm01:7180"
            assert out["list"] == ["cm01", 3]


# ─── Loader ───


class TestLoadConfig:
    def test_load_file(self, config_file: Path):
        cfg = load_config(config_file)
        assert cfg.cloudera.uri == "http://cm.example.com:7180"
        assert cfg.cloudera.timeout == 2.0

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / ".cloudera_exporter.yaml"
        path.write_text("poll:\n  interval: -1\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / ".cloudera_exporter.yaml"
        path.write_text("")
        assert load_config(path) == ExporterConfig()

    def test_find_config_walks_up(self, config_file: Path):
        nested = config_file.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config_file

    def test_default_when_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        with patch("cloudera_exporter.config.loader.find_config_file", return_value=None):
            assert load_config_or_default() == ExporterConfig()

    def test_explicit_missing_path_is_error(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config_or_default(tmp_path / "missing.yaml")


class TestOverrides:
    def test_apply(self, sample_config: ExporterConfig):
        cfg = apply_overrides(sample_config, uri="http://other:7180", interval=30, mode="static", password=None)
        assert cfg.cloudera.uri == "http://other:7180"
        assert cfg.poll.interval == 30
        assert cfg.metrics.mode == RegistryMode.STATIC
        assert cfg.cloudera.password == "secret"
        assert sample_config.cloudera.uri == "http://cm.example.com:7180"

    def test_unknown_key(self, sample_config: ExporterConfig):
        with pytest.raises(KeyError):
            apply_overrides(sample_config, colour="blue")

    def test_invalid_value(self, sample_config: ExporterConfig):
        with pytest.raises(ValueError, match="Invalid option"):
            apply_overrides(sample_config, telemetry_path="nope")


class TestListenAddress:
    @pytest.mark.parametrize(
        ("address", "expected"),
        [
            (":9107", ("0.0.0.0", 9107)),
            ("127.0.0.1:8080", ("127.0.0.1", 8080)),
            ("[::]:9107", ("::", 9107)),
        ],
    )
    def test_valid(self, address: str, expected: tuple[str, int]):
        assert parse_listen_address(address) == expected

    @pytest.mark.parametrize("address", ["9107", "host:", "host:port"])
    def test_invalid(self, address: str):
        with pytest.raises(ValueError):
            parse_listen_address(address)
