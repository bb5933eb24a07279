"""
Structured generation capability consumed by the workflow stages.

A generator turns a prompt and a pydantic schema into a validated instance of
that schema. Stages depend only on the ``StructuredGenerator`` protocol; the
Ollama implementation below is the one wired into the API.
"""

import json
import logging
from typing import Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.components.base.exceptions import ComponentError, GenerationError
from app.utils.json_repair import parse_llm_json
from app.utils.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

TSchema = TypeVar("TSchema", bound=BaseModel)

STRUCTURED_SYSTEM_PROMPT = """You are a presales engineering assistant.
Respond with a single JSON object that conforms exactly to the requested schema.
Use the field names of the schema verbatim. Do not add commentary or markdown."""


class StructuredGenerator(Protocol):
    """Anything that can produce a schema-conformant value from a prompt."""

    async def generate(self, prompt: str, schema: Type[TSchema]) -> TSchema:
        ...


def describe_validation_error(error: ValidationError, limit: int = 3) -> str:
    """Compact one-line summary of the first few validation problems."""
    problems = []
    for item in error.errors()[:limit]:
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    more = error.error_count() - limit
    if more > 0:
        problems.append(f"... {more} more")
    return "; ".join(problems)


class OllamaStructuredGenerator:
    """Structured generation backed by Ollama's schema-constrained output."""

    def __init__(
        self,
        client: Optional[OllamaClient] = None,
        system_prompt: str = STRUCTURED_SYSTEM_PROMPT,
    ):
        self.client = client or OllamaClient()
        self.system_prompt = system_prompt

    async def generate(self, prompt: str, schema: Type[TSchema]) -> TSchema:
        component = schema.__name__
        try:
            raw, metadata = await self.client.generate(
                user_prompt=prompt,
                system_prompt=self.system_prompt,
                format=schema.model_json_schema(by_alias=True),
            )
        except ComponentError as e:
            raise GenerationError(e.message, component=component, details=e.to_dict())

        logger.info(f"[{component}] generation finished in {metadata.duration_ms}ms")

        try:
            parsed = parse_llm_json(raw, component_name=component)
        except json.JSONDecodeError as e:
            raise GenerationError(f"malformed JSON output: {e}", component=component)

        try:
            return schema.model_validate(parsed)
        except ValidationError as e:
            raise GenerationError(
                f"output does not match schema: {describe_validation_error(e)}",
                component=component,
            )
