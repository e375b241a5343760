import os
from functools import lru_cache
from typing import Dict, Optional

import yaml
from jinja2 import Environment, StrictUndefined

from promo.config.constants import ORGANIZATIONS
from promo.models import MeetingType

DEFAULT_PROMPT_FILE = os.path.join(os.path.dirname(os.path.dirname(__file__)), "prompts", "stages.yaml")


@lru_cache(maxsize=8)
def load_prompts(prompt_file: Optional[str] = None) -> Dict[str, str]:
    with open(prompt_file or DEFAULT_PROMPT_FILE, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if "persona" not in data:
        raise ValueError(f"prompt file {prompt_file or DEFAULT_PROMPT_FILE} has no 'persona' template")
    return data


def render_system_prompt(stage: str, meeting_type: MeetingType, prompt_file: Optional[str] = None,
                         tool_name: str = "") -> str:
    """Persona for the meeting's organization followed by the stage instructions."""
    data = load_prompts(prompt_file)
    if stage not in data:
        raise ValueError(f"prompt file has no template for stage '{stage}'")
    env = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True, undefined=StrictUndefined)
    org = ORGANIZATIONS[MeetingType(meeting_type).value]
    ctx = {"org": org, "meeting_type": MeetingType(meeting_type).value, "tool_name": tool_name}
    persona = env.from_string(data["persona"]).render(**ctx)
    task = env.from_string(data[stage]).render(**ctx)
    return (persona.strip() + "\n" + task.strip()).strip()
