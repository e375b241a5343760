"""Image design ideas and image materialization.

Design ideas are free text from the chat model. Each idea is turned into an
image by the image model, downloaded from its short-lived URL, resized and
kept in memory until the publisher writes it next to the meeting JSON.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from promo.imaging import resize_and_compress
from promo.llm import Generator
from promo.models import GeneratedImage, Meeting, MeetingType
from promo.net import download_bytes, retry_session
from promo.rendering.prompt_loader import render_system_prompt
from promo.utils import slugify
from .base import StageSettings, fan_out, plan_prompts, stage_context

DESIGN_STAGE = "image_design"
IMAGE_STAGE = "images"


@dataclass(frozen=True)
class ImageFile:
    image: GeneratedImage
    data: bytes

    @property
    def file_name(self) -> str:
        return self.image.src[2:] if self.image.src.startswith("./") else self.image.src


def generate_design_idea(generator: Generator, prompt: str, meeting_type: MeetingType,
                         settings: StageSettings, log: logging.Logger) -> str:
    log.info("Calling OpenAI API to generate a design idea for the image.")
    system = render_system_prompt(DESIGN_STAGE, meeting_type, settings.prompt_file)
    with stage_context(DESIGN_STAGE):
        return generator.generate_text(system, prompt)


def generate_design_ideas(generator: Generator, meeting: Meeting, settings: StageSettings,
                          log: logging.Logger) -> List[str]:
    return fan_out(
        lambda prompt: generate_design_idea(generator, prompt, meeting.meeting_type, settings, log),
        plan_prompts(meeting),
        settings.max_workers,
    )


def image_file_name(prefix: str, description: str, max_chars: int = 60) -> str:
    slug = slugify(description, max_chars) or "image"
    return f"{prefix}_{slug}.png"


def _dedupe_names(names: List[str]) -> List[str]:
    taken = set()
    out = []
    for name in names:
        stem = name[: -len(".png")]
        candidate = name
        count = 1
        while candidate in taken:
            count += 1
            candidate = f"{stem}-{count}.png"
        taken.add(candidate)
        out.append(candidate)
    return out


def materialize_image(generator: Generator, design: str, index: int, settings: StageSettings,
                      log: logging.Logger) -> Tuple[str, bytes]:
    """Returns the (possibly revised) description and the final PNG bytes."""
    log.info("Calling OpenAI API to generate image %d.", index)
    with stage_context(IMAGE_STAGE):
        result = generator.generate_image(design)
        session = retry_session(total=settings.download_retries)
        try:
            raw = download_bytes(session, result.url, timeout=settings.download_timeout)
        finally:
            session.close()
        data = resize_and_compress(raw, settings.image_spec)
    log.info("Image %d resized to %dx%d (%d bytes)", index, settings.image_spec.width,
             settings.image_spec.height, len(data))
    return result.revised_prompt, data


def add_images(generator: Generator, meeting: Meeting, designs: List[str], settings: StageSettings,
               log: logging.Logger) -> Tuple[Meeting, List[ImageFile]]:
    rendered = fan_out(
        lambda pair: materialize_image(generator, pair[1], pair[0], settings, log),
        list(enumerate(designs)),
        settings.max_workers,
    )
    prefix = meeting.file_name_prefix()
    names = _dedupe_names([image_file_name(prefix, alt, settings.filename_chars) for alt, _ in rendered])
    files = [
        ImageFile(GeneratedImage(src=f"./{name}", alt=alt), data)
        for name, (alt, data) in zip(names, rendered)
    ]
    return meeting.model_copy(update={"images": [f.image for f in files]}), files
