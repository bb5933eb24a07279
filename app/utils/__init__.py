from .ollama_client import OllamaClient
from .structured_generation import OllamaStructuredGenerator, StructuredGenerator

__all__ = ["OllamaClient", "OllamaStructuredGenerator", "StructuredGenerator"]
