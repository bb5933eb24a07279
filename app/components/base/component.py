from abc import ABC, abstractmethod
from typing import Generic, TypeVar
from pydantic import BaseModel

TRequest = TypeVar("TRequest", bound=BaseModel)
TResponse = TypeVar("TResponse", bound=BaseModel)


class BaseComponent(ABC, Generic[TRequest, TResponse]):
    """Abstract base for the workflow stages and service components.

    - component_name: identifier used in errors and log records
    - process(): main async entry point; raises ComponentError subclasses
    """

    @property
    @abstractmethod
    def component_name(self) -> str:
        """Unique identifier for this component."""

    @abstractmethod
    async def process(self, request: TRequest) -> TResponse:
        """Main processing entry point."""

    async def __call__(self, request: TRequest) -> TResponse:
        return await self.process(request)
