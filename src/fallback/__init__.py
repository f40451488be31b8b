"""
Synthesized offline responses.

Example:
    >>> from src.fallback import api_offline_placeholder
    >>> api_offline_placeholder().content_type
    'application/json'
"""

from src.fallback.synthesizer import (
    FallbackSynthesizer,
    api_offline_placeholder,
    generic_unavailable,
    html_offline_page,
    synthesizer,
)

__all__ = [
    "FallbackSynthesizer",
    "synthesizer",
    "api_offline_placeholder",
    "html_offline_page",
    "generic_unavailable",
]
