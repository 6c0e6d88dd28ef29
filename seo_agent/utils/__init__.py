"""Configuration and logging helpers."""

from .config_loader import ConfigError, load_competitors_config
from .logging import StepTimer, configure_logging, get_logger, log_event
from .pipeline_config import PipelineConfig

__all__ = [
    "ConfigError",
    "load_competitors_config",
    "StepTimer",
    "configure_logging",
    "get_logger",
    "log_event",
    "PipelineConfig",
]
