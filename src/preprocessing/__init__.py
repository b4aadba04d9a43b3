"""
Preprocessing module for text normalization, script detection and tokenization.

Exports:
    TextNormalizer  — multi-stage normalization pipeline with raw index map
    ScriptDetector  — Unicode script classification
    Tokenizer       — typed token partition of normalized text
"""

from .script_detector import (
    CharClass,
    ScriptDetector,
    char_class,
    is_punctuation,
)
from .text_normalizer import (
    TextNormalizer,
    NormalizedText,
    DespacingNormalizer,
    WhitespaceNormalizer,
    PunctuationNormalizer,
)
from .tokenizer import Token, TokenKind, Tokenizer

__all__ = [
    "CharClass",
    "ScriptDetector",
    "char_class",
    "is_punctuation",
    "TextNormalizer",
    "NormalizedText",
    "DespacingNormalizer",
    "WhitespaceNormalizer",
    "PunctuationNormalizer",
    "Token",
    "TokenKind",
    "Tokenizer",
]
