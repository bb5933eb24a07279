import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol

import aiofiles
from pydantic import TypeAdapter

from app.components.base.config import get_settings
from .models import PromptTemplate

logger = logging.getLogger(__name__)

_TEMPLATE_LIST = TypeAdapter(List[PromptTemplate])


class TemplateSource(Protocol):
    """Prompt template lookup used by the generation stages."""

    async def get_prompt_template(
        self, stage_kind: str, industry: Optional[str] = None
    ) -> Optional[str]:
        ...


class TemplateService:
    """Read prompt templates from ``<templates_path>/templates.json``.

    The file holds a list of PromptTemplate records. Lookup picks the active
    template with the highest version, preferring an industry-specific one
    and falling back to the general template (no industry).
    """

    FILENAME = "templates.json"

    def __init__(self, templates_path: Optional[str] = None):
        self.templates_path = Path(templates_path or get_settings().templates_path)

    async def load_templates(self) -> List[PromptTemplate]:
        filepath = self.templates_path / self.FILENAME
        if not filepath.exists():
            return []
        async with aiofiles.open(filepath, "r", encoding="utf-8") as f:
            return _TEMPLATE_LIST.validate_json(await f.read())

    async def save_templates(self, templates: List[PromptTemplate]) -> Path:
        self.templates_path.mkdir(parents=True, exist_ok=True)
        filepath = self.templates_path / self.FILENAME
        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(json.dumps([t.model_dump() for t in templates], indent=2, ensure_ascii=False))
        return filepath

    async def get_active_template(
        self, template_type: str, industry: Optional[str] = None
    ) -> Optional[PromptTemplate]:
        candidates = [
            t for t in await self.load_templates()
            if t.template_type == template_type and t.is_active and t.industry == industry
        ]
        if candidates:
            return max(candidates, key=lambda t: t.version)
        if industry:
            return await self.get_active_template(template_type)
        return None

    async def get_prompt_template(
        self, stage_kind: str, industry: Optional[str] = None
    ) -> Optional[str]:
        template = await self.get_active_template(stage_kind, industry)
        if template is None:
            return None
        logger.info(f"Using stored template '{template.template_name}' v{template.version} for {stage_kind}")
        return template.prompt_content


async def resolve_template(
    source: Optional[TemplateSource],
    stage_kind: str,
    default: str,
    industry: Optional[str] = None,
) -> str:
    """Stored template for ``stage_kind`` or ``default``.

    A failing lookup is logged and answered with the default; it never fails
    the stage.
    """
    if source is None:
        return default
    try:
        template = await source.get_prompt_template(stage_kind, industry)
    except Exception as e:
        logger.warning(f"Template lookup for {stage_kind} failed, using default: {e}")
        return default
    return template or default
