from .component import BaseComponent
from .config import CostParameters, Settings, get_settings
from .exceptions import ComponentError
from .logging import configure_logging, get_logger

__all__ = [
    "BaseComponent",
    "CostParameters",
    "Settings",
    "get_settings",
    "ComponentError",
    "configure_logging",
    "get_logger",
]
