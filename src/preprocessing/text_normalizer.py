"""
Text Normalization Pipeline

Multi-stage cleanup for live-typed Singlish before tokenization.
Each stage is independently configurable and only ever REMOVES characters,
so every normalized character can be traced back to the raw input.

Stages:
    1. Despacing            ("m a m a" → "mama")
    2. Whitespace collapse  ("mama     oyaata" → "mama oyaata")
    3. Punctuation tightening (". . . ." → "....", "? !" → "?!")

Design decisions:
    - Every stage reports the raw indices it wants removed; the union is
      applied in one pass and the surviving indices form the index map.
    - Newlines are never touched; they carry line structure to the output.
    - Leading/trailing whitespace is kept so a trailing space round-trips.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from preprocessing.script_detector import is_punctuation

logger = get_logger("text_normalizer")


@dataclass(frozen=True)
class NormalizedText:
    """Normalized text plus a map from each normalized char to its raw index."""
    text: str
    index_map: Tuple[int, ...]
    source_length: int = 0

    def to_source_span(self, start: int, end: int) -> Tuple[int, int]:
        """Map a normalized [start, end) span to the raw chars it was built from."""
        if start >= end:
            raw = self.index_map[start] if start < len(self.index_map) else (
                self.index_map[-1] + 1 if self.index_map else 0
            )
            return raw, raw
        return self.index_map[start], self.index_map[end - 1] + 1

    def source_boundary(self, index: int) -> int:
        """
        Raw offset of the boundary before normalized char ``index``.

        Removed raw chars belong to the span ending at the next kept char,
        so adjacent spans built from these boundaries tile the raw input.
        """
        if index <= 0:
            return 0
        if index >= len(self.index_map):
            return self.source_length
        return self.index_map[index]


# ─────────────────────────────────────────────
# Individual Normalizer Stages
# ─────────────────────────────────────────────

class DespacingNormalizer:
    """
    Merge runs of single letters separated by exactly one space.

    Examples:
        "m a m a p a n s a l"  → "mamapansal"
        "mu h ud"              → unchanged (no run of single letters)
    """

    def __init__(self, min_letters: int = 2):
        if min_letters < 2:
            raise ValueError("min_letters must be >= 2")
        self.min_letters = min_letters
        self._pattern = re.compile(
            r"(?<![A-Za-z0-9])[A-Za-z](?: [A-Za-z](?![A-Za-z0-9])){"
            + str(min_letters - 1) + r",}"
        )

    def removals(self, text: str) -> Set[int]:
        removed: Set[int] = set()
        for match in self._pattern.finditer(text):
            removed.update(
                i for i in range(match.start(), match.end()) if text[i] == " "
            )
        return removed


class WhitespaceNormalizer:
    """Collapse runs of spaces to one; newlines are left alone."""

    MULTI_SPACE = re.compile(r" {2,}")

    def removals(self, text: str) -> Set[int]:
        removed: Set[int] = set()
        for match in self.MULTI_SPACE.finditer(text):
            removed.update(range(match.start() + 1, match.end()))
        return removed


class PunctuationNormalizer:
    """
    Remove spaces inside a run of repeated or sentence-final punctuation.

    Examples:
        "a . . . . b"     → "a .... b"
        "yanavaa ? !"     → "yanavaa ?!"
        "(mama) (oya)"    → unchanged (different marks)
        "CPU , GPU"       → unchanged (letters on the outer sides)
        '"mama" "oya"'    → unchanged (quotes)
    """

    SPACE_RUN = re.compile(r" +")
    SENTENCE_FINAL = frozenset(".!?")
    # quotes and brackets open or close separate spans
    PAIRED = frozenset("\"'()[]{}<>")

    def removals(self, text: str) -> Set[int]:
        removed: Set[int] = set()
        for match in self.SPACE_RUN.finditer(text):
            start, end = match.span()
            if start == 0 or end == len(text):
                continue
            if self.joins(text[start - 1], text[end]):
                removed.update(range(start, end))
        return removed

    def joins(self, left: str, right: str) -> bool:
        """True when the space between ``left`` and ``right`` is dropped."""
        if not (is_punctuation(left) and is_punctuation(right)):
            return False
        if left == right:
            return left not in self.PAIRED
        return left in self.SENTENCE_FINAL and right in self.SENTENCE_FINAL


# ─────────────────────────────────────────────
# Master Pipeline
# ─────────────────────────────────────────────

class TextNormalizer:
    """
    Orchestrates all normalization stages.

    Each stage can be individually enabled/disabled via config.

    Usage:
        normalizer = TextNormalizer.from_config(cfg["normalization"])
        normalized = normalizer.normalize(raw_text)
        normalized.text, normalized.index_map
    """

    def __init__(
        self,
        despacing_normalizer:   Optional[DespacingNormalizer]   = None,
        whitespace_normalizer:  Optional[WhitespaceNormalizer]  = None,
        punctuation_normalizer: Optional[PunctuationNormalizer] = None,
    ):
        # Store stages (None means skip)
        self._stages = [
            ("despacing",   despacing_normalizer),
            ("whitespace",  whitespace_normalizer),
            ("punctuation", punctuation_normalizer),
        ]

    @classmethod
    def default(cls) -> "TextNormalizer":
        """Create a TextNormalizer with all stages enabled using default settings."""
        return cls(
            despacing_normalizer=DespacingNormalizer(min_letters=2),
            whitespace_normalizer=WhitespaceNormalizer(),
            punctuation_normalizer=PunctuationNormalizer(),
        )

    @classmethod
    def from_config(cls, config: dict) -> "TextNormalizer":
        """
        Instantiate TextNormalizer from a normalization config dict.

        Args:
            config: normalization sub-dict from engine_config.yaml

        Returns:
            Configured TextNormalizer instance
        """
        config = config or {}

        despacing = (
            DespacingNormalizer(min_letters=config.get("despace_min_letters", 2))
            if config.get("despace", True) else None
        )
        whitespace = (
            WhitespaceNormalizer() if config.get("collapse_spaces", True) else None
        )
        punctuation = (
            PunctuationNormalizer() if config.get("tighten_punctuation", True) else None
        )

        return cls(
            despacing_normalizer=despacing,
            whitespace_normalizer=whitespace,
            punctuation_normalizer=punctuation,
        )

    def normalize(self, text: str) -> NormalizedText:
        """
        Run the full normalization pipeline on input text.

        Args:
            text: Raw input string

        Returns:
            NormalizedText with the cleaned string and its raw index map
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected str, got {type(text).__name__}")

        removed: Set[int] = set()
        for stage_name, stage in self._stages:
            if stage is None:
                continue
            stage_removals = stage.removals(text)
            if stage_removals:
                logger.debug(
                    f"Stage '{stage_name}' removes {len(stage_removals)} chars"
                )
            removed |= stage_removals

        kept = tuple(i for i in range(len(text)) if i not in removed)
        return NormalizedText(
            text="".join(text[i] for i in kept),
            index_map=kept,
            source_length=len(text),
        )

    def normalize_text(self, text: str) -> str:
        """Normalize and return only the cleaned string."""
        return self.normalize(text).text

    def active_stages(self) -> List[str]:
        """Return names of active (non-None) pipeline stages."""
        return [name for name, stage in self._stages if stage is not None]
