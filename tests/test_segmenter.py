"""
Test suite for dictionary-driven word segmentation
"""

import sys
import time
import tracemalloc
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from transliteration.segmenter import Segmenter
from transliteration.tables import Lexicon, LexiconEntry, load_tables


def make_lexicon(*words):
    return Lexicon(LexiconEntry(key=w, value=w.upper()) for w in words)


# ═══════════════════════════════════════════════════════════
# SECTION 1 — Packaged lexicon
# ═══════════════════════════════════════════════════════════

class TestSegmenterWithTables:

    @classmethod
    def setup_class(cls):
        cls.segmenter = Segmenter(load_tables().lexicon)

    def test_three_word_compound(self):
        assert self.segmenter.segment_word("mamapansalyanavaa") == ["mama", "pansal", "yanavaa"]

    def test_four_word_compound(self):
        assert self.segmenter.segment_word("matakoththuvakkannaooni") == [
            "mata", "koththuvak", "kanna", "ooni",
        ]

    def test_long_question(self):
        word = "apiokkomanaendhalaagegedharagiyothvaeleethiyenaredhitikagannekavdha"
        assert self.segmenter.segment_word(word) == [
            "api", "okkoma", "naendhalaage", "gedhara", "giyoth", "vaelee",
            "thiyena", "redhi", "tika", "ganne", "kavdha",
        ]

    def test_short_segments_allowed_when_in_lexicon(self):
        assert self.segmenter.segment_word("mamapooyatapansalgihinsilganayanava") == [
            "mama", "pooyata", "pansal", "gihin", "sil", "gana", "yanava",
        ]

    def test_no_decomposition(self):
        assert self.segmenter.segment("mamagameeyanavaa") is None
        assert self.segmenter.segment_word("mamagameeyanavaa") == ["mamagameeyanavaa"]

    def test_case_insensitive_segments_keep_input_case(self):
        assert self.segmenter.segment_word("MamaPansalYanavaa") == ["Mama", "Pansal", "Yanavaa"]

    def test_empty_word(self):
        assert self.segmenter.segment_word("") == [""]

    @pytest.mark.parametrize("word,expected", [
        ("mamapansalyanavaa", True),
        ("abcdefghij", True),
        ("abcdefghi", False),          # below the length threshold
        ("yanavaa", False),
        ("siravatama", False),         # known whole word
        ("mama-pansal-yanavaa", False),
        ("mamapansal2yanavaa", False),
    ])
    def test_should_segment(self, word, expected):
        assert self.segmenter.should_segment(word) is expected

    def test_adversarial_input_is_bounded(self):
        word = "a" * 400 + "mamapansalyanavaa" * 20
        start = time.perf_counter()
        self.segmenter.segment(word)
        assert time.perf_counter() - start < 5.0

    def test_long_decomposable_input_uses_linear_memory(self):
        segmenter = Segmenter(make_lexicon("mama"), min_segment_length=3)
        word = "mama" * 8000
        tracemalloc.start()
        try:
            start = time.perf_counter()
            candidate = segmenter.segment(word)
            elapsed = time.perf_counter() - start
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()
        assert len(candidate.segments) == 8000
        assert "".join(candidate.segments) == word
        assert peak < 10 * 1024 * 1024
        assert elapsed < 5.0


# ═══════════════════════════════════════════════════════════
# SECTION 2 — Scoring
# ═══════════════════════════════════════════════════════════

class TestSegmentationScoring:

    def test_more_dictionary_matches_wins(self):
        segmenter = Segmenter(make_lexicon("abcdef", "gh", "abc", "def"), min_segment_length=2)
        candidate = segmenter.segment("abcdefgh")
        assert candidate.segments == ("abc", "def", "gh")
        assert candidate.matches == 3

    def test_tie_goes_to_longest_first_segment(self):
        segmenter = Segmenter(make_lexicon("abcd", "ef", "abc", "def"), min_segment_length=2)
        assert segmenter.segment_word("abcdef") == ["abcd", "ef"]

    def test_min_segment_length_excludes_short_keys(self):
        lexicon = make_lexicon("ab", "cdef", "abcd", "ef")
        assert Segmenter(lexicon, min_segment_length=3).segment("abcdef") is None
        assert Segmenter(lexicon, min_segment_length=2).segment_word("abcdef") == ["abcd", "ef"]

    def test_score_orders_candidates(self):
        segmenter = Segmenter(make_lexicon("abc", "def"), min_segment_length=3)
        candidate = segmenter.segment("abcdef")
        assert candidate.score == (2, -2)

    def test_empty_lexicon(self):
        assert Segmenter(make_lexicon()).segment("abcdefghijkl") is None

    @pytest.mark.parametrize("kwargs", [
        {"min_word_length": 1},
        {"min_segment_length": 0},
    ])
    def test_invalid_thresholds(self, kwargs):
        with pytest.raises(ValueError):
            Segmenter(make_lexicon("abc"), **kwargs)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
