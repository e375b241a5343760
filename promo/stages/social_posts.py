import logging
from typing import Dict, List, Optional

from promo.llm import Generator
from promo.models import Meeting, Presentation, SocialPostResponse
from promo.rendering.presentation import presentation_to_prompt
from promo.rendering.prompt_loader import render_system_prompt
from .base import StageSettings, fan_out, stage_context

STAGE = "social_posts"
TOOL_NAME = "postTool"
TOOL_DESCRIPTION = "Call this function to finalize three social media posts about the presentation."


def append_link(post: str, link: Optional[str]) -> str:
    return f"{post} {link or ''}".rstrip()


def resolve_post_link(meeting: Meeting, fallback_links: Optional[Dict[str, str]] = None) -> str:
    """The meetup page if known, else the configured fallback for the meeting type, else nothing."""
    if meeting.meetup_url:
        return meeting.meetup_url
    return (fallback_links or {}).get(meeting.meeting_type.value, "")


def generate_social_posts(generator: Generator, presentation: Presentation, meeting: Meeting,
                          settings: StageSettings, log: logging.Logger) -> List[str]:
    log.info("Calling OpenAI API to generate social posts for presentation: %s", presentation.title)
    system = render_system_prompt(STAGE, meeting.meeting_type, settings.prompt_file, tool_name=TOOL_NAME)
    prompt = presentation_to_prompt(presentation, include_presenters=True, meeting_date=meeting.meeting_date)
    with stage_context(STAGE):
        result = generator.structured_generate(system, prompt, SocialPostResponse, TOOL_NAME, TOOL_DESCRIPTION)
    return result.posts


def add_social_posts(generator: Generator, meeting: Meeting, settings: StageSettings,
                     log: logging.Logger) -> Meeting:
    link = resolve_post_link(meeting, settings.fallback_links)
    if not link:
        log.info("No meetup or fallback link configured; posts are left without a link")

    def one(presentation: Presentation) -> Presentation:
        posts = generate_social_posts(generator, presentation, meeting, settings, log)
        return presentation.model_copy(update={"social_posts": [append_link(p, link) for p in posts]})

    presentations = fan_out(one, meeting.presentations, settings.max_workers)
    return meeting.model_copy(update={"presentations": presentations})
