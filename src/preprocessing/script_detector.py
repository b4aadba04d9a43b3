"""
Script Detection Module

Unicode-based character and token classification used by the normalizer
and tokenizer.

Two questions are answered here:
    1. Which character class does a character belong to while scanning
       (newline, space, digit, punctuation, text)?
    2. Which script does a token use, and is that script one the engine
       recognizes (Latin input, Sinhala output) or one that should be
       flagged as unrecognized (emoji, other scripts, stray symbols)?
"""

import re
import unicodedata
from enum import Enum
from typing import Dict, List, Optional, Tuple


class CharClass(Enum):
    """Scanner character classes."""
    NEWLINE = "newline"
    SPACE = "space"
    DIGIT = "digit"
    PUNCTUATION = "punctuation"
    TEXT = "text"


# Characters that may join two letter runs into a single word ("e-mail", "don't")
WORD_SEPARATORS = frozenset("'-")

# Zero-width joiners; they belong to whichever script surrounds them
SCRIPT_JOINERS = frozenset("\u200c\u200d")


def is_punctuation(ch: str) -> bool:
    """ASCII punctuation/symbols plus any Unicode punctuation (category P*)."""
    if ch.isascii():
        return not ch.isalnum() and not ch.isspace()
    return unicodedata.category(ch).startswith("P")


def char_class(ch: str) -> CharClass:
    """Classify a single character for the tokenizer scan."""
    if ch in "\r\n":
        return CharClass.NEWLINE
    if ch.isspace():
        return CharClass.SPACE
    if "0" <= ch <= "9":
        return CharClass.DIGIT
    if is_punctuation(ch):
        return CharClass.PUNCTUATION
    return CharClass.TEXT


class ScriptDetector:
    """
    Detects Unicode script for tokens using character-level analysis.

    Extremely fast (no ML); handles emoji, Sinhala, Latin and the
    neighbouring South-Asian scripts people paste into chat.
    """

    # Regex patterns for script families
    SCRIPT_PATTERNS: Dict[str, re.Pattern] = {
        "Sinhala":    re.compile(r"[඀-෿‌‍]"),
        "Tamil":      re.compile(r"[஀-௿]"),
        "Devanagari": re.compile(r"[ऀ-ॿ]"),
        "Arabic":     re.compile(r"[؀-ۿݐ-ݿ]"),
        "CJK":        re.compile(r"[一-鿿㐀-䶿]"),
        "Cyrillic":   re.compile(r"[Ѐ-ӿ]"),
        "Greek":      re.compile(r"[Ͱ-Ͽ]"),
        "Latin":      re.compile(r"[a-zA-ZÀ-ÖØ-öø-ÿ]"),
        "Emoji":      re.compile(
            r"[\U0001F300-\U0001F9FF\U00002600-\U000027BF"
            r"\U0001FA00-\U0001FAFF\U00002702-\U000027B0️]"
        ),
    }

    # Scripts that pass through without a warning
    RECOGNIZED_SCRIPTS = frozenset({"Latin", "Sinhala"})

    @classmethod
    def detect_char(cls, ch: str) -> str:
        """Return the script name of a single character, or 'Unknown'."""
        for script_name, pattern in cls.SCRIPT_PATTERNS.items():
            if pattern.match(ch):
                return script_name
        return "Unknown"

    @classmethod
    def detect_script(cls, token: str) -> str:
        """
        Detect dominant Unicode script in a token.

        Args:
            token: Input token string

        Returns:
            Script name string (e.g., 'Sinhala', 'Latin', 'Unknown')
        """
        if not token.strip():
            return "Unknown"

        script_votes: Dict[str, int] = {}
        for script_name, pattern in cls.SCRIPT_PATTERNS.items():
            matches = len(pattern.findall(token))
            if matches > 0:
                script_votes[script_name] = matches

        if not script_votes:
            return "Unknown"

        return max(script_votes, key=script_votes.get)

    @classmethod
    def unrecognized_runs(cls, token: str) -> List[Tuple[int, int]]:
        """
        Locate runs of characters the engine cannot interpret.

        Punctuation is always accepted; everything else must belong to a
        recognized script.

        Returns:
            List of (start, end) offsets relative to the token
        """
        runs: List[Tuple[int, int]] = []
        start: Optional[int] = None
        for i, ch in enumerate(token):
            ok = cls.is_recognized_char(ch)
            if not ok and start is None:
                start = i
            elif ok and start is not None:
                runs.append((start, i))
                start = None
        if start is not None:
            runs.append((start, len(token)))
        return runs

    @classmethod
    def is_recognized(cls, token: str) -> bool:
        """True when every character of the token is interpretable."""
        return not cls.unrecognized_runs(token)

    @classmethod
    def is_recognized_char(cls, ch: str) -> bool:
        return is_punctuation(ch) or cls.detect_char(ch) in cls.RECOGNIZED_SCRIPTS
