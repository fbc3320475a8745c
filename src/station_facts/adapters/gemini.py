"""Gemini adapter built on the google-genai SDK."""

from collections.abc import Mapping
import logging
from typing import Any

from google import genai
from google.genai import types

log = logging.getLogger(__name__)


def _thaw(value: Any) -> Any:
    """Recursively copy mappings/sequences into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): _thaw(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_thaw(v) for v in value]
    return value


def to_genai_config(config: Mapping[str, object]) -> types.GenerateContentConfig:
    """Translate the library-owned tool configuration to SDK types."""
    return types.GenerateContentConfig.model_validate(_thaw(config))


class GeminiAdapter:
    """Calls ``models.generate_content`` through the SDK's async client."""

    def __init__(self, api_key: str, *, client: Any | None = None) -> None:
        """Create an adapter.

        Args:
            api_key: Gemini API key.
            client: Optional pre-built ``genai.Client`` (or test double).
        """
        self._client = client if client is not None else genai.Client(api_key=api_key)

    async def generate(
        self,
        *,
        model_name: str,
        prompt: str,
        config: Mapping[str, object],
    ) -> Mapping[str, Any]:
        genai_config = to_genai_config(config)
        log.debug(
            "Calling %s with %d tools (location bias: %s)",
            model_name,
            len(genai_config.tools or ()),
            genai_config.tool_config is not None,
        )
        response = await self._client.aio.models.generate_content(
            model=model_name,
            contents=prompt,
            config=genai_config,
        )
        if hasattr(response, "model_dump"):
            return response.model_dump(mode="json", exclude_none=True)
        return response
