"""
Evaluation Metrics Module

Output-quality metrics for transliteration.

Metrics Categories:
    1. Exact Match: output identical to the expected Sinhala
    2. Character Error Rate (CER): Levenshtein distance / reference length
    3. Per-Category Breakdown: which kinds of input are hard

Rationale:
    - Exact match is the regression criterion for golden cases
    - CER shows how close a near-miss is (one missing virama vs. garbage)
"""

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import numpy as np
from collections import defaultdict

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger

logger = get_logger("metrics")


# ═══════════════════════════════════════════════════════════
# String Metrics
# ═══════════════════════════════════════════════════════════

class TranslationMetrics:
    """
    Compare produced Sinhala against expected Sinhala, code point by code point.
    """

    @staticmethod
    def edit_distance(hypothesis: str, reference: str) -> int:
        """
        Levenshtein distance via a (len(h)+1) x (len(r)+1) DP matrix.

        Args:
            hypothesis: Produced text
            reference:  Expected text

        Returns:
            Minimum number of insertions, deletions and substitutions
        """
        rows, cols = len(hypothesis) + 1, len(reference) + 1
        dp = np.zeros((rows, cols), dtype=np.int64)
        dp[:, 0] = np.arange(rows)
        dp[0, :] = np.arange(cols)

        for i in range(1, rows):
            for j in range(1, cols):
                cost = 0 if hypothesis[i - 1] == reference[j - 1] else 1
                dp[i, j] = min(
                    dp[i - 1, j] + 1,        # deletion
                    dp[i, j - 1] + 1,        # insertion
                    dp[i - 1, j - 1] + cost, # substitution
                )

        return int(dp[-1, -1])

    @staticmethod
    def character_error_rate(hypothesis: str, reference: str) -> float:
        """CER = edit distance / len(reference); 0.0 for two empty strings."""
        if not reference:
            return 0.0 if not hypothesis else 1.0
        return TranslationMetrics.edit_distance(hypothesis, reference) / len(reference)

    @staticmethod
    def exact_match(hypothesis: str, reference: str) -> bool:
        return hypothesis == reference

    @staticmethod
    def aggregate(pairs: Sequence[Tuple[str, str]]) -> Dict[str, float]:
        """
        Aggregate metrics over (hypothesis, reference) pairs.

        Returns:
            Dict with exact_match rate, mean/max CER and corpus CER
            (total edits / total reference length)
        """
        if not pairs:
            return {"n": 0, "exact_match": 0.0, "mean_cer": 0.0, "max_cer": 0.0, "corpus_cer": 0.0}

        cers = np.array([TranslationMetrics.character_error_rate(h, r) for h, r in pairs])
        exact = np.array([h == r for h, r in pairs], dtype=float)
        edits = sum(TranslationMetrics.edit_distance(h, r) for h, r in pairs)
        ref_chars = sum(len(r) for _, r in pairs)

        return {
            "n":           len(pairs),
            "exact_match": float(exact.mean()),
            "mean_cer":    float(cers.mean()),
            "max_cer":     float(cers.max()),
            "corpus_cer":  edits / ref_chars if ref_chars else 0.0,
        }


# ═══════════════════════════════════════════════════════════
# Per-Category Metrics
# ═══════════════════════════════════════════════════════════

class PerCategoryMetrics:
    """
    Break down metrics by input category (e.g. "mixed-english",
    "adversarial-spacing") to see which kinds of input regress.
    """

    @staticmethod
    def compute(
        hypotheses: List[str],
        references: List[str],
        categories: List[str],
        min_samples: int = 1,
    ) -> Dict[str, Dict[str, float]]:
        """
        Args:
            hypotheses:  Produced texts
            references:  Expected texts
            categories:  Category label per sample
            min_samples: Skip categories with fewer samples

        Returns:
            Dict[category, aggregate metrics]
        """
        if not (len(hypotheses) == len(references) == len(categories)):
            raise ValueError("hypotheses, references and categories must be the same length")

        grouped: Dict[str, List[Tuple[str, str]]] = defaultdict(list)
        for hyp, ref, cat in zip(hypotheses, references, categories):
            grouped[cat].append((hyp, ref))

        results = {}
        for category, pairs in sorted(grouped.items()):
            if len(pairs) < min_samples:
                logger.debug(f"Skipping category '{category}' ({len(pairs)} samples)")
                continue
            results[category] = TranslationMetrics.aggregate(pairs)

        return results
