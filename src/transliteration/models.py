"""
Result and intermediate data structures for the transliteration engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class WarningKind(str, Enum):
    UNRECOGNIZED_CHARACTER = "unrecognized-character"
    SEGMENTATION_FALLBACK = "segmentation-fallback"


@dataclass(frozen=True)
class TranslationWarning:
    """
    Non-fatal diagnostic attached to a translation.

    Attributes:
        kind: What went wrong
        span: [start, end) in raw-input coordinates
        text: The raw substring the warning refers to
    """
    kind: WarningKind
    span: Tuple[int, int]
    text: str = ""

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "span": list(self.span), "text": self.text}


@dataclass(frozen=True)
class TranslationResult:
    text: str
    warnings: Tuple[TranslationWarning, ...] = ()

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class SegmentationCandidate:
    """A decomposition of a word into dictionary-known segments."""
    segments: Tuple[str, ...]
    matches: int

    @property
    def score(self) -> Tuple[int, int]:
        """Higher is better: more matches, then fewer segments."""
        return self.matches, -len(self.segments)
