"""Configuration management for docslice."""

from docslice.config.loader import load_config
from docslice.config.models import (
    DocsliceConfig,
    OutputConfig,
    RenderConfig,
    ScanConfig,
    SliceConfig,
)

__all__ = [
    "DocsliceConfig",
    "OutputConfig",
    "RenderConfig",
    "ScanConfig",
    "SliceConfig",
    "load_config",
]
