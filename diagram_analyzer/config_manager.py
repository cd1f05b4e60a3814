import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables
load_dotenv(override=False)

"""
Configuration Management for Azure Diagram Analyzer

Centralized configuration with environment variable handling and validation.
The detection thresholds themselves are fixed business rules and live beside
the code that applies them; only caller-side knobs are configurable here.
"""

logger = logging.getLogger(__name__)


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}", cause=e
        ) from e


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", cause=e
        ) from e


@dataclass
class DetectionConfig:
    """Configuration for how callers consume detection output."""

    accuracy_gate: float = field(
        default_factory=lambda: _env_float("DIAGRAM_ANALYZER_ACCURACY_GATE", "0.8")
    )

    def __post_init__(self) -> None:
        """Validate detection configuration."""
        if not 0.0 < self.accuracy_gate <= 1.0:
            raise ConfigurationError(
                "Accuracy gate must be in (0, 1]", config_section="detection"
            )


@dataclass
class PolicyConfig:
    """Configuration for manual policy loading."""

    policies_dir: str = field(
        default_factory=lambda: os.getenv("DIAGRAM_ANALYZER_POLICIES_DIR", "policies")
    )
    cache_ttl_seconds: int = field(
        default_factory=lambda: _env_int("DIAGRAM_ANALYZER_POLICY_CACHE_TTL", "300")
    )

    def __post_init__(self) -> None:
        """Validate policy configuration."""
        if not self.policies_dir:
            raise ConfigurationError(
                "Policies directory is required", config_section="policies"
            )
        if self.cache_ttl_seconds < 0:
            raise ConfigurationError(
                "Policy cache TTL must be non-negative", config_section="policies"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(log_color)s%(levelname)s:%(name)s:%(message)s"
        )
    )
    file_output: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ConfigurationError(
                f"Log level must be one of: {valid_levels}", config_section="logging"
            )
        self.level = self.level.upper()

    def get_log_level(self) -> int:
        """Convert string log level to logging constant."""
        level_attr = getattr(logging, self.level, None)
        if level_attr is None:
            raise ConfigurationError(f"Invalid log level: {self.level}")
        return int(level_attr)


@dataclass
class DiagramAnalyzerConfig:
    """Main configuration class that aggregates all configuration sections."""

    detection: DetectionConfig = field(default_factory=DetectionConfig)
    policies: PolicyConfig = field(default_factory=PolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_environment(
        cls,
        policies_dir: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "DiagramAnalyzerConfig":
        """
        Create configuration from environment variables.

        Args:
            policies_dir: Optional override for the policy directory
            log_level: Optional override for the log level

        Returns:
            DiagramAnalyzerConfig: Configured instance
        """
        config = cls()
        if policies_dir is not None:
            config.policies.policies_dir = policies_dir
        if log_level is not None:
            config.logging.level = log_level.upper()
        return config

    def validate_all(self) -> None:
        """Validate all configuration sections."""
        try:
            self.detection.__post_init__()
            self.policies.__post_init__()
            self.logging.__post_init__()
            logger.debug("Configuration validation successful")
        except ConfigurationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def log_configuration_summary(self) -> None:
        """Log a summary of the current configuration."""
        logger.info("=" * 60)
        logger.info("AZURE DIAGRAM ANALYZER CONFIGURATION")
        logger.info("=" * 60)
        logger.info(f"Accuracy gate: {self.detection.accuracy_gate}")
        logger.info(f"Policies directory: {self.policies.policies_dir}")
        logger.info(f"Policy cache TTL: {self.policies.cache_ttl_seconds}s")
        logger.info(f"Logging level: {self.logging.level}")
        if self.logging.file_output:
            logger.info(f"Log file: {self.logging.file_output}")
        logger.info("=" * 60)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "detection": {"accuracy_gate": self.detection.accuracy_gate},
            "policies": {
                "policies_dir": self.policies.policies_dir,
                "cache_ttl_seconds": self.policies.cache_ttl_seconds,
            },
            "logging": {
                "level": self.logging.level,
                "file_output": self.logging.file_output,
            },
        }


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup logging configuration based on config.
    """
    try:
        import colorlog

        use_colorlog = True
        colorlog_available = colorlog
    except ImportError:
        use_colorlog = False
        colorlog_available = None

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(config.get_log_level())

    console_handler: logging.Handler
    if use_colorlog and colorlog_available:
        console_handler = colorlog_available.StreamHandler()
        console_formatter: logging.Formatter = colorlog_available.ColoredFormatter(
            config.format
        )
    else:
        console_handler = logging.StreamHandler()
        # Drop color placeholders when colorlog is not available
        simple_format = config.format.replace("%(log_color)s", "").replace(
            "%(reset)s", ""
        )
        console_formatter = logging.Formatter(simple_format)

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if config.file_output:
        file_handler = logging.FileHandler(config.file_output)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s:%(name)s:%(message)s"
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    logger.debug(
        f"Logging configured: level={config.level}, file={config.file_output or 'console'}"
    )


def create_config_from_env(
    policies_dir: Optional[str] = None,
    log_level: Optional[str] = None,
) -> DiagramAnalyzerConfig:
    """
    Factory function to create and validate configuration from environment.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config = DiagramAnalyzerConfig.from_environment(policies_dir, log_level)
    config.validate_all()
    return config
