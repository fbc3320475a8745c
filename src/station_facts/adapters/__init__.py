"""Backend adapters for the generative model call."""

from .base import GenerationAdapter
from .gemini import GeminiAdapter, to_genai_config

__all__ = ["GeminiAdapter", "GenerationAdapter", "to_genai_config"]
