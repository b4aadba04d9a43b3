"""
Word Segmenter

Splits long unspaced Singlish ("mamapansalyanavaa") into dictionary-known
words using memoized dynamic programming over start indices.

Scoring of a full decomposition:
    1. More dictionary matches
    2. Fewer segments
    3. Left-most greedy (longest first segment) on remaining ties
"""

from pathlib import Path
from typing import List, Optional, Tuple

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from transliteration.models import SegmentationCandidate
from transliteration.tables import Lexicon

logger = get_logger("segmenter")


class Segmenter:
    """
    Dictionary-driven segmentation of a single word.

    Args:
        lexicon:            Known words; the only allowed segments
        min_word_length:    Words shorter than this are never segmented
        min_segment_length: Shortest dictionary key usable as a segment
    """

    def __init__(
        self,
        lexicon: Lexicon,
        min_word_length: int = 10,
        min_segment_length: int = 3,
    ):
        if min_word_length < 2:
            raise ValueError("min_word_length must be >= 2")
        if min_segment_length < 1:
            raise ValueError("min_segment_length must be >= 1")
        self.lexicon = lexicon
        self.min_word_length = min_word_length
        self.min_segment_length = min_segment_length

    def should_segment(self, word: str) -> bool:
        """Only long, separator-free words the lexicon does not know."""
        return (
            len(word) >= self.min_word_length
            and word.isalpha()
            and word not in self.lexicon
        )

    def segment(self, word: str) -> Optional[SegmentationCandidate]:
        """
        Return the best full decomposition of ``word``, or None.

        best[i] holds (matches, -segments, next start) for the best
        decomposition of word[i:]. Each start index tries at most
        ``lexicon.max_key_length`` prefixes, so time grows linearly with
        len(word) and memory holds one small tuple per index. The segment
        strings are cut from the word once, after the table is filled.
        """
        n = len(word)
        max_len = self.lexicon.max_key_length
        best: List[Optional[Tuple[int, int, int]]] = [None] * (n + 1)
        best[n] = (0, 0, n)

        for start in range(n - 1, -1, -1):
            chosen: Optional[Tuple[int, int, int]] = None
            upper = min(n, start + max_len)
            # Longest prefix first; later prefixes replace only on a strictly better score
            for end in range(upper, start + self.min_segment_length - 1, -1):
                rest = best[end]
                if rest is None or word[start:end] not in self.lexicon:
                    continue
                score = (rest[0] + 1, rest[1] - 1)
                if chosen is None or score > chosen[:2]:
                    chosen = score + (end,)
            best[start] = chosen

        if best[0] is None:
            logger.debug(f"No decomposition for '{word}'")
            return None

        segments: List[str] = []
        start = 0
        while start < n:
            end = best[start][2]
            segments.append(word[start:end])
            start = end
        return SegmentationCandidate(segments=tuple(segments), matches=best[0][0])

    def segment_word(self, word: str) -> List[str]:
        """Segments of ``word``, or ``[word]`` when no decomposition exists."""
        candidate = self.segment(word) if word else None
        if candidate is None:
            return [word]
        return list(candidate.segments)
