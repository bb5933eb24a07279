from typing import Optional, Dict, Any


class ComponentError(Exception):
    """Base exception for all component errors."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        component: str = "unknown",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.component = component
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "details": self.details,
        }


# Stage Exceptions
class EmptyInputError(ComponentError):
    pass


class MissingPreconditionError(ComponentError):
    status_code = 500


class GenerationError(ComponentError):
    status_code = 502


class EmptyResultError(ComponentError):
    status_code = 502


# Numeric Derivation Exceptions
class InvalidConfigError(ComponentError):
    status_code = 500


class InvalidStateError(ComponentError):
    status_code = 500


# Project Component Exceptions
class MissingParameterError(ComponentError):
    pass


class ProjectNotFoundError(ComponentError):
    status_code = 404


class RequirementNotFoundError(ComponentError):
    status_code = 404


class WorkflowFailedError(ComponentError):
    status_code = 500


# External Service Exceptions
class OllamaUnavailableError(ComponentError):
    status_code = 503


class OllamaTimeoutError(ComponentError):
    status_code = 504


def error_reason(error: Exception) -> str:
    """Human-readable reason for an exception, for state and API payloads."""
    if isinstance(error, ComponentError):
        return error.message
    return str(error) or error.__class__.__name__
