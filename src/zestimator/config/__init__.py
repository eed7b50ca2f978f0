"""Configuration models and loading."""

from .config import Config, ExtractionSettings, HttpConfig, MonitoringConfig, load_config

__all__ = ["Config", "ExtractionSettings", "HttpConfig", "MonitoringConfig", "load_config"]
