"""Core app services for settings, logging, and diagnostics."""

from .config import AppConfig, config_path, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .logging_setup import configure_logging, get_logger

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "build_doctor_payload",
    "config_path",
    "configure_logging",
    "get_logger",
    "load_config",
    "save_config",
]
