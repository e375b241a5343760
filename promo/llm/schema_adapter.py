"""Minimal schema adapter for LLM providers."""

from typing import Type

from pydantic import BaseModel


def to_openai(schema: dict) -> dict:
    """Prepare schema for OpenAI (drop $schema and the top-level title)."""
    return {k: v for k, v in schema.items() if k not in ("$schema", "title")}


def to_openai_tool(model: Type[BaseModel], name: str, description: str = "") -> dict:
    """Function-tool definition whose parameters are ``model``'s JSON schema.

    Forcing the model to call this tool is how structured output is requested;
    validation of the returned arguments is done separately with ``model``.
    """
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": to_openai(model.model_json_schema(by_alias=True)),
        },
    }


def forced_tool_choice(name: str) -> dict:
    return {"type": "function", "function": {"name": name}}
