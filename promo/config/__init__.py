"""Run configuration: defaults, YAML loading and schema validation."""

from .loader import load_config, validate_config

__all__ = ["load_config", "validate_config"]
