"""Load, merge and validate the YAML run configuration."""

from __future__ import annotations

import copy
import json
import os
from typing import Any, Dict, Optional

import yaml
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError

from promo.config.constants import DEFAULT_CONFIG
from promo.utils import load_file

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "schemas", "config.schema.json")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def validate_config(cfg: dict):
    schema = json.loads(load_file(SCHEMA_PATH))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ValueError(f"Config validation error: {e.message} at {list(e.path)}") from e


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Return the defaults, overlaid with the YAML file at ``path`` if given."""
    user_cfg: Dict[str, Any] = {}
    if path:
        user_cfg = yaml.safe_load(load_file(path)) or {}
        if not isinstance(user_cfg, dict):
            raise ValueError(f"Config validation error: top level of {path} must be a mapping")
    cfg = _deep_merge(DEFAULT_CONFIG, user_cfg)
    validate_config(cfg)
    return cfg
