"""Generative API access."""

from .registry import Generator, ImageResult, OpenAIGenerator, build_generator, require_api_key

__all__ = ["Generator", "ImageResult", "OpenAIGenerator", "build_generator", "require_api_key"]
