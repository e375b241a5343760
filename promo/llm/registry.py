"""Generative API client with structured (tool-call) output support."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from promo.errors import GenerationContractViolation, MissingCredentialError
from promo.models import format_validation_errors
from promo.utils import get_logger, redact_secrets
from .schema_adapter import forced_tool_choice, to_openai_tool

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ImageResult:
    url: str
    revised_prompt: str


class Generator(Protocol):
    """What the enrichment stages need from a generative API."""

    def structured_generate(self, system: str, prompt: str, response_model: Type[T],
                            tool_name: str, description: str = "") -> T: ...

    def generate_text(self, system: str, prompt: str) -> str: ...

    def generate_image(self, prompt: str) -> ImageResult: ...


def require_api_key(env_var: str = "OPENAI_API_KEY") -> str:
    api_key = os.getenv(env_var)
    if not api_key:
        raise MissingCredentialError(f"Environment Variable: {env_var} not found.")
    return api_key


def _messages(system: str, prompt: str) -> list:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": [{"type": "text", "text": prompt}]},
    ]


def parse_tool_arguments(arguments: Optional[str], response_model: Type[T], tool_name: str) -> T:
    if not arguments:
        raise GenerationContractViolation(f"{tool_name} was called without arguments")
    try:
        return response_model.model_validate_json(arguments)
    except ValidationError as e:
        details = "; ".join(format_validation_errors(e))
        raise GenerationContractViolation(f"{tool_name} arguments invalid: {details}") from e


class OpenAIGenerator:
    """OpenAI chat completions + images behind the ``Generator`` interface."""

    def __init__(self, api_key: str, llm_cfg: dict, client=None):
        from openai import OpenAI

        self.cfg = llm_cfg
        if client is None:
            base_url = llm_cfg.get("base_url") or os.getenv("OPENAI_BASE_URL")
            client = OpenAI(api_key=api_key, base_url=base_url) if base_url else OpenAI(api_key=api_key)
        self.client = client.with_options(timeout=float(llm_cfg.get("timeout", 120)))

    def _completion(self, system: str, prompt: str, max_tokens: int, **extra):
        return self.client.chat.completions.create(
            model=self.cfg["text_model"],
            messages=_messages(system, prompt),
            temperature=float(self.cfg.get("temperature", 1.0)),
            max_tokens=max_tokens,
            top_p=1,
            frequency_penalty=0,
            presence_penalty=0,
            **extra,
        )

    def structured_generate(self, system: str, prompt: str, response_model: Type[T],
                            tool_name: str, description: str = "") -> T:
        resp = self._completion(
            system,
            prompt,
            int(self.cfg.get("max_tokens", 256)),
            tools=[to_openai_tool(response_model, tool_name, description)],
            tool_choice=forced_tool_choice(tool_name),
        )
        message = resp.choices[0].message if resp.choices else None
        calls = [c for c in (getattr(message, "tool_calls", None) or []) if c.function.name == tool_name]
        if not calls:
            logger.error("model did not call %s: %s", tool_name,
                         redact_secrets(getattr(message, "content", None) or ""))
            raise GenerationContractViolation(f"OpenAI did not call the tool {tool_name}.")
        return parse_tool_arguments(calls[-1].function.arguments, response_model, tool_name)

    def generate_text(self, system: str, prompt: str) -> str:
        resp = self._completion(system, prompt, int(self.cfg.get("design_max_tokens", 768)))
        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            raise GenerationContractViolation("OpenAI returned no text content.")
        return content.strip()

    def generate_image(self, prompt: str) -> ImageResult:
        resp = self.client.images.generate(
            model=self.cfg["image_model"],
            prompt=prompt,
            n=1,
            size=self.cfg["image_size"],
        )
        data = resp.data[0] if resp.data else None
        if data is None or not data.url:
            raise GenerationContractViolation("No image url returned from OpenAI.")
        if not data.revised_prompt:
            raise GenerationContractViolation("No revised prompt returned from OpenAI.")
        return ImageResult(url=data.url, revised_prompt=data.revised_prompt)


def build_generator(llm_cfg: dict) -> OpenAIGenerator:
    """Check the credential, then construct the client. No network traffic happens here."""
    api_key = require_api_key(llm_cfg.get("api_key_env", "OPENAI_API_KEY"))
    return OpenAIGenerator(api_key, llm_cfg)
