import httpx
from typing import Any, Dict, Optional, Tuple, Union
from dataclasses import dataclass, asdict
from datetime import datetime
from app.components.base.config import Settings, get_settings
from app.components.base.exceptions import OllamaUnavailableError, OllamaTimeoutError


@dataclass
class LLMRequestMetadata:
    """Metadata recorded for every generation request sent to Ollama."""
    model: str
    system_prompt: Optional[str]
    user_prompt: str
    temperature: float
    max_tokens: int
    format: Optional[Union[str, Dict[str, Any]]]
    timeout: int
    base_url: str
    timestamp: str  # ISO 8601 format
    duration_ms: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


class OllamaClient:
    """Async client for the Ollama generate API."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.base_url = settings.ollama_base_url
        self.gen_model = settings.ollama_gen_model
        self.timeout = settings.ollama_timeout_seconds
        self.temperature = settings.ollama_temperature
        self.max_tokens = settings.ollama_max_tokens

    async def generate(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        format: Optional[Union[str, Dict[str, Any]]] = None,
    ) -> Tuple[str, LLMRequestMetadata]:
        """Generate text and return it with the request metadata.

        ``format`` is either ``"json"`` or a JSON schema dict; Ollama then
        constrains the output to that shape.
        """
        metadata = LLMRequestMetadata(
            model=self.gen_model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            format=format,
            timeout=self.timeout,
            base_url=self.base_url,
            timestamp=datetime.now().isoformat(),
        )

        payload: Dict[str, Any] = {
            "model": self.gen_model,
            "prompt": user_prompt,
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }
        if system_prompt:
            payload["system"] = system_prompt
        if format:
            payload["format"] = format

        started = datetime.now()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/api/generate", json=payload
                )
                response.raise_for_status()
                metadata.duration_ms = int((datetime.now() - started).total_seconds() * 1000)
                return response.json().get("response", ""), metadata
        except httpx.TimeoutException:
            raise OllamaTimeoutError(
                f"Ollama request timed out after {self.timeout}s", component="ollama"
            )
        except httpx.HTTPError as e:
            raise OllamaUnavailableError(f"Ollama unavailable: {e}", component="ollama")

    async def verify_connection(self) -> bool:
        """Verify Ollama is accessible."""
        try:
            async with httpx.AsyncClient(timeout=5) as client:
                response = await client.get(f"{self.base_url}/api/tags")
                return response.status_code == 200
        except httpx.HTTPError:
            return False
