"""
Inference Module

Hosting-layer helpers around the transliteration engine:
- Live-typing session with stale-result discarding
- Command-line interface
"""

from .session import TranslationRequest, TranslationResponse, TranslationSession

__all__ = [
    "TranslationRequest",
    "TranslationResponse",
    "TranslationSession",
]
