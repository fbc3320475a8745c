"""Adapter protocol for the single outbound backend call."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class GenerationAdapter(Protocol):
    """Anything that can turn a prompt into a raw reply mapping.

    ``config`` is the library-owned tool configuration from
    ``PromptPayload.config``; adapters translate it to provider types. The
    returned mapping follows the Gemini ``GenerateContentResponse`` shape in
    either snake_case or camelCase. Exceptions propagate unchanged; the
    orchestrator wraps them.
    """

    async def generate(
        self,
        *,
        model_name: str,
        prompt: str,
        config: Mapping[str, object],
    ) -> Mapping[str, Any]: ...
