"""
Tests for config_manager module.
"""

import logging
import os
from unittest.mock import patch

import pytest

from diagram_analyzer.config_manager import (
    DetectionConfig,
    DiagramAnalyzerConfig,
    LoggingConfig,
    PolicyConfig,
    create_config_from_env,
    setup_logging,
)
from diagram_analyzer.exceptions import ConfigurationError


class TestDetectionConfig:
    """Test cases for DetectionConfig."""

    def test_default_gate(self):
        """Test the accuracy gate defaults to 0.8."""
        with patch.dict(os.environ, {}, clear=True):
            config = DetectionConfig()
            assert config.accuracy_gate == 0.8

    def test_gate_from_environment(self):
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_ACCURACY_GATE": "0.65"}):
            config = DetectionConfig()
            assert config.accuracy_gate == 0.65

    @pytest.mark.parametrize("value", ["0", "1.5", "-0.2"])
    def test_gate_out_of_range(self, value):
        """Test validation fails for gates outside (0, 1]."""
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_ACCURACY_GATE": value}):
            with pytest.raises(ConfigurationError, match="Accuracy gate"):
                DetectionConfig()

    def test_gate_not_a_number(self):
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_ACCURACY_GATE": "high"}):
            with pytest.raises(ConfigurationError, match="must be a number"):
                DetectionConfig()


class TestPolicyConfig:
    """Test cases for PolicyConfig."""

    def test_default_values(self):
        with patch.dict(os.environ, {}, clear=True):
            config = PolicyConfig()
            assert config.policies_dir == "policies"
            assert config.cache_ttl_seconds == 300

    def test_environment_values(self):
        with patch.dict(
            os.environ,
            {
                "DIAGRAM_ANALYZER_POLICIES_DIR": "/etc/policies",
                "DIAGRAM_ANALYZER_POLICY_CACHE_TTL": "0",
            },
        ):
            config = PolicyConfig()
            assert config.policies_dir == "/etc/policies"
            assert config.cache_ttl_seconds == 0

    def test_negative_ttl(self):
        """Test validation fails for a negative cache TTL."""
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_POLICY_CACHE_TTL": "-1"}):
            with pytest.raises(ConfigurationError, match="non-negative"):
                PolicyConfig()

    def test_ttl_not_an_integer(self):
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_POLICY_CACHE_TTL": "5m"}):
            with pytest.raises(ConfigurationError) as exc_info:
                PolicyConfig()
            assert exc_info.value.error_code == "INVALID_CONFIG"

    def test_empty_directory(self):
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_POLICIES_DIR": ""}):
            with pytest.raises(ConfigurationError, match="Policies directory"):
                PolicyConfig()


class TestLoggingConfig:
    """Test cases for LoggingConfig."""

    def test_default_values(self):
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig()
            assert config.level == "INFO"
            assert config.file_output is None

    def test_level_normalized(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            config = LoggingConfig()
            assert config.level == "DEBUG"
            assert config.get_log_level() == logging.DEBUG

    def test_invalid_level(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "VERBOSE"}):
            with pytest.raises(ConfigurationError, match="Log level must be one of"):
                LoggingConfig()


class TestDiagramAnalyzerConfig:
    """Test cases for the aggregated configuration."""

    def test_from_environment_overrides(self):
        with patch.dict(os.environ, {}, clear=True):
            config = DiagramAnalyzerConfig.from_environment(
                policies_dir="./custom-policies", log_level="warning"
            )
            assert config.policies.policies_dir == "./custom-policies"
            assert config.logging.level == "WARNING"

    def test_to_dict(self):
        with patch.dict(os.environ, {}, clear=True):
            data = DiagramAnalyzerConfig().to_dict()

        assert data == {
            "detection": {"accuracy_gate": 0.8},
            "policies": {"policies_dir": "policies", "cache_ttl_seconds": 300},
            "logging": {"level": "INFO", "file_output": None},
        }

    def test_validate_all_rejects_bad_override(self):
        """Test an invalid override is caught by create_config_from_env."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError):
                create_config_from_env(log_level="chatty")

    def test_create_config_from_env(self):
        with patch.dict(os.environ, {"DIAGRAM_ANALYZER_ACCURACY_GATE": "0.9"}):
            config = create_config_from_env(policies_dir="p")
            assert config.detection.accuracy_gate == 0.9
            assert config.policies.policies_dir == "p"

    def test_log_configuration_summary(self, caplog):
        with patch.dict(os.environ, {}, clear=True):
            config = DiagramAnalyzerConfig()
        with caplog.at_level(logging.INFO, logger="diagram_analyzer.config_manager"):
            config.log_configuration_summary()

        assert "Accuracy gate: 0.8" in caplog.text


class TestSetupLogging:
    """Test root logger setup."""

    def test_level_and_file_handler(self, tmp_path):
        log_file = tmp_path / "analyzer.log"
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING", "LOG_FILE": str(log_file)}):
            config = LoggingConfig()

        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(config)
            assert root.level == logging.WARNING
            assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
