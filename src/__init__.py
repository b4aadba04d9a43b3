"""
Singlish Transliteration Engine

Real-time conversion of Singlish (romanized, phonetically spelled Sinhala
mixed with English) into Sinhala script.
"""

__version__ = "0.1.0"
__author__ = "Singlish Transliterator Contributors"

__all__ = []
