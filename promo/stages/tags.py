import logging
import re
from typing import List

from promo.llm import Generator
from promo.models import Meeting, MeetingType, Presentation, TagResponse
from promo.rendering.presentation import presentation_to_prompt
from promo.rendering.prompt_loader import render_system_prompt
from .base import StageSettings, fan_out, stage_context

STAGE = "tags"
TOOL_NAME = "tagTool"
TOOL_DESCRIPTION = "Call this function to create tags or categories this presentation should be filed under."


def normalize_tag(tag: str) -> str:
    """lower-kebab-case; applying it twice changes nothing."""
    return re.sub(r"\s+", "-", tag.strip()).lower()


def normalize_tags(tags: List[str]) -> List[str]:
    return [t for t in (normalize_tag(tag) for tag in tags) if t]


def generate_tags(generator: Generator, presentation: Presentation, meeting_type: MeetingType,
                  settings: StageSettings, log: logging.Logger) -> Presentation:
    log.info("Calling OpenAI API to generate tags for presentation: %s", presentation.title)
    system = render_system_prompt(STAGE, meeting_type, settings.prompt_file, tool_name=TOOL_NAME)
    with stage_context(STAGE):
        result = generator.structured_generate(
            system, presentation_to_prompt(presentation), TagResponse, TOOL_NAME, TOOL_DESCRIPTION
        )
    return presentation.model_copy(update={"tags": normalize_tags(result.tags)})


def add_tags(generator: Generator, meeting: Meeting, settings: StageSettings,
             log: logging.Logger) -> Meeting:
    presentations = fan_out(
        lambda p: generate_tags(generator, p, meeting.meeting_type, settings, log),
        meeting.presentations,
        settings.max_workers,
    )
    return meeting.model_copy(update={"presentations": presentations})
