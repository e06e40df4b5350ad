"""Configuration models and loading."""

from apexlog.config.loader import load_config
from apexlog.config.models import ApexLogConfig, LoggingConfig, ParserConfig, ReportConfig

__all__ = ["ApexLogConfig", "LoggingConfig", "ParserConfig", "ReportConfig", "load_config"]
