"""Configuration loading utilities for limbscan."""

from .schema import (
    PipelineConfig,
    load_config,
)

__all__ = ["PipelineConfig", "load_config"]
