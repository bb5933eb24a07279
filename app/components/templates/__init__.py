from .models import PromptTemplate, TemplateType
from .service import TemplateService, TemplateSource, resolve_template

__all__ = ["PromptTemplate", "TemplateType", "TemplateService", "TemplateSource", "resolve_template"]
