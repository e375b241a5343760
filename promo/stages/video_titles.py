import logging
from typing import List

from promo.llm import Generator
from promo.models import Meeting, VideoTitleResponse
from promo.rendering.prompt_loader import render_system_prompt
from .base import StageSettings, fan_out, plan_prompts, stage_context

STAGE = "video_titles"
TOOL_NAME = "videoTitleTool"
TOOL_DESCRIPTION = "Call this function to finalize three titles for the YouTube video of the presentation(s)."


def decorate_title(title: str, meeting: Meeting, title_format: str) -> str:
    return title_format.format(
        title=title.strip(),
        meeting_type=meeting.meeting_type.value,
        meeting_date=meeting.date_str,
    )


def generate_video_titles(generator: Generator, prompt: str, meeting: Meeting,
                          settings: StageSettings, log: logging.Logger) -> List[str]:
    log.info("Calling OpenAI API to generate YouTube Titles.")
    system = render_system_prompt(STAGE, meeting.meeting_type, settings.prompt_file, tool_name=TOOL_NAME)
    with stage_context(STAGE):
        result = generator.structured_generate(system, prompt, VideoTitleResponse, TOOL_NAME, TOOL_DESCRIPTION)
    return [decorate_title(t, meeting, settings.title_format) for t in result.titles]


def add_video_titles(generator: Generator, meeting: Meeting, settings: StageSettings,
                     log: logging.Logger) -> Meeting:
    batches = fan_out(
        lambda prompt: generate_video_titles(generator, prompt, meeting, settings, log),
        plan_prompts(meeting),
        settings.max_workers,
    )
    titles = [title for batch in batches for title in batch]
    return meeting.model_copy(update={"video_titles": titles})
