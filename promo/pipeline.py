"""Runs the enrichment stages over a validated meeting in a fixed order."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from promo.llm import Generator
from promo.models import Meeting
from promo.stages import (
    ImageFile,
    StageSettings,
    add_images,
    add_social_posts,
    add_tags,
    add_video_titles,
    generate_design_ideas,
)
from promo.utils import get_logger

logger = get_logger(__name__)


@dataclass
class EnrichmentResult:
    meeting: Meeting
    images: List[ImageFile] = field(default_factory=list)


def _dump_state(log: logging.Logger, label: str, meeting: Meeting) -> None:
    if log.isEnabledFor(logging.DEBUG):
        log.debug("%s:\n%s", label, json.dumps(meeting.to_json_dict(), ensure_ascii=False, indent=2))


def run_enrichment(generator: Generator, meeting: Meeting, settings: Optional[StageSettings] = None,
                   log: Optional[logging.Logger] = None) -> EnrichmentResult:
    """tags -> social posts -> video titles -> image ideas -> images.

    Any stage failure propagates immediately; nothing is returned for a
    partially enriched meeting.
    """
    settings = settings or StageSettings()
    log = log or logger
    _dump_state(log, "meetingFromFile", meeting)

    t0 = time.monotonic()
    meeting = add_tags(generator, meeting, settings, log)
    log.info("tags done took_ms=%d", int((time.monotonic() - t0) * 1000))
    _dump_state(log, "meetingWithTags", meeting)

    t1 = time.monotonic()
    meeting = add_social_posts(generator, meeting, settings, log)
    log.info("social posts done took_ms=%d", int((time.monotonic() - t1) * 1000))
    _dump_state(log, "meetingWithSocialPosts", meeting)

    t2 = time.monotonic()
    meeting = add_video_titles(generator, meeting, settings, log)
    log.info("video titles=%d took_ms=%d", len(meeting.video_titles or []), int((time.monotonic() - t2) * 1000))
    _dump_state(log, "meetingWithVideoTitles", meeting)

    t3 = time.monotonic()
    designs = generate_design_ideas(generator, meeting, settings, log)
    log.info("design ideas=%d took_ms=%d", len(designs), int((time.monotonic() - t3) * 1000))
    log.debug("designIdeas:\n%s", "\n---\n".join(designs))

    t4 = time.monotonic()
    meeting, images = add_images(generator, meeting, designs, settings, log)
    log.info("images=%d took_ms=%d", len(images), int((time.monotonic() - t4) * 1000))
    _dump_state(log, "meetingWithImages", meeting)

    return EnrichmentResult(meeting=meeting, images=images)
