"""
Singlish → Sinhala transliteration.

Exports:
    TransliterationEngine — per-call pipeline over immutable tables
    EngineConfig          — frozen runtime configuration
    translate             — translate with the shared default engine
    segment_word          — diagnostics for the segmenter
    get_engine            — singleton default engine accessor
"""

import threading
from typing import List, Optional

from .models import (
    SegmentationCandidate,
    TranslationResult,
    TranslationWarning,
    WarningKind,
)
from .rules import RuleEntry, RuleKind, RuleTable
from .phonetic import PhoneticTransliterator
from .tables import (
    AbbreviationEntry,
    Lexicon,
    LexiconEntry,
    TableError,
    TransliterationTables,
    load_tables,
)
from .segmenter import Segmenter
from .composer import Composer
from .engine import EngineConfig, TransliterationEngine

_default_engine: Optional[TransliterationEngine] = None
_default_engine_lock = threading.Lock()


def get_engine() -> TransliterationEngine:
    """
    Return (or create) the default singleton engine.

    Tables are loaded once; the engine is immutable afterwards.
    """
    global _default_engine
    if _default_engine is None:
        with _default_engine_lock:
            if _default_engine is None:
                _default_engine = TransliterationEngine.from_config(EngineConfig())
    return _default_engine


def translate(text: str) -> TranslationResult:
    return get_engine().translate(text)


def segment_word(word: str) -> List[str]:
    return get_engine().segment_word(word)


__all__ = [
    "SegmentationCandidate",
    "TranslationResult",
    "TranslationWarning",
    "WarningKind",
    "RuleEntry",
    "RuleKind",
    "RuleTable",
    "PhoneticTransliterator",
    "AbbreviationEntry",
    "Lexicon",
    "LexiconEntry",
    "TableError",
    "TransliterationTables",
    "load_tables",
    "Segmenter",
    "Composer",
    "EngineConfig",
    "TransliterationEngine",
    "get_engine",
    "translate",
    "segment_word",
]
