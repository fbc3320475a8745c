"""Pipeline stages that turn a backend reply into a trusted response.

Stages run in order: prompt building, reply parsing, field normalization,
disambiguation and grounding extraction. Each stage is stateless and can be
used on its own.
"""

from .grounding import GroundingExtractor
from .normalizer import FREE_TEXT_FIELDS, FieldNormalizer
from .prompt_builder import PromptBuilder
from .resolver import DisambiguationResolver
from .response_parser import ResponseParser, unwrap_code_fence
from .sanitizer import strip_citations

__all__ = [
    "FREE_TEXT_FIELDS",
    "DisambiguationResolver",
    "FieldNormalizer",
    "GroundingExtractor",
    "PromptBuilder",
    "ResponseParser",
    "strip_citations",
    "unwrap_code_fence",
]
