from pydantic import BaseModel, Field
from typing import Literal, Optional

TemplateType = Literal[
    "requirement_analysis",
    "function_breakdown",
    "effort_estimation",
]


class PromptTemplate(BaseModel):
    """A stored prompt template for one workflow stage."""
    template_name: str
    template_type: TemplateType
    industry: Optional[str] = None
    version: int = Field(default=1, ge=1)
    is_active: bool = True
    prompt_content: str
