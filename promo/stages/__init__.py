"""Enrichment stages, run in order by ``promo.pipeline``."""

from .base import StageSettings, fan_out, plan_prompts
from .images import ImageFile, add_images, generate_design_ideas
from .social_posts import add_social_posts, append_link, resolve_post_link
from .tags import add_tags, normalize_tag
from .video_titles import add_video_titles, decorate_title

__all__ = [
    "ImageFile",
    "StageSettings",
    "add_images",
    "add_social_posts",
    "add_tags",
    "add_video_titles",
    "append_link",
    "decorate_title",
    "fan_out",
    "generate_design_ideas",
    "normalize_tag",
    "plan_prompts",
    "resolve_post_link",
]
