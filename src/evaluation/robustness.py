"""
Robustness Testing Module

Tests transliteration stability under the noisy ways people actually type.

Test Categories:
    1. Letter Spacing: "m a m a" obfuscation of whole words
    2. Extra Spaces: runs of spaces between words
    3. Spaced Punctuation: "...." typed as ". . . ."
    4. Joined Words: spaces dropped between words
    5. Emoji Addition: emoji appended to the sentence

Rationale:
    - Live-typed Singlish is rarely clean
    - Spacing noise should not change the Sinhala output at all
    - Joined words exercise dictionary segmentation; drops there are expected
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional
import random
import re

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from evaluation.metrics import TranslationMetrics

logger = get_logger("robustness")

LATIN_WORD = re.compile(r"^[A-Za-z]+$")
EMOJI_PATTERN = re.compile(
    "["
    "\U0001F300-\U0001FAFF"
    "\U00002600-\U000027BF"
    "\U00002702-\U000027B0"
    "]+",
    flags=re.UNICODE
)


# ═══════════════════════════════════════════════════════════
# Perturbations
# ═══════════════════════════════════════════════════════════

class TextPerturbations:
    """
    Apply typing-noise perturbations to Singlish text.

    Every method takes an optional ``rng`` so runs can be reproduced.
    """

    @staticmethod
    def letter_spacing(text: str, prob: float = 0.3, rng: Optional[random.Random] = None) -> str:
        """
        Spread the letters of random words apart ("mama" → "m a m a").

        Args:
            text: Input string
            prob: Probability per word

        Returns:
            Perturbed text
        """
        rng = rng or random
        words = text.split(" ")
        spaced = []
        for word in words:
            if len(word) > 1 and LATIN_WORD.match(word) and rng.random() < prob:
                word = " ".join(word)
            spaced.append(word)
        return " ".join(spaced)

    @staticmethod
    def extra_spaces(text: str, max_spaces: int = 8, rng: Optional[random.Random] = None) -> str:
        """Replace each single space with a run of 1..max_spaces spaces."""
        rng = rng or random
        return re.sub(r" ", lambda m: " " * rng.randint(1, max_spaces), text)

    @staticmethod
    def spaced_punctuation(text: str) -> str:
        """Insert spaces inside punctuation runs ("...." → ". . . .")."""
        return re.sub(r"[.!?,]{2,}", lambda m: " ".join(m.group()), text)

    @staticmethod
    def join_words(text: str, prob: float = 0.5, rng: Optional[random.Random] = None) -> str:
        """Drop the space between two Latin words with probability ``prob``."""
        rng = rng or random
        words = text.split(" ")
        if not words:
            return text
        joined = [words[0]]
        for word in words[1:]:
            if LATIN_WORD.match(joined[-1]) and LATIN_WORD.match(word) and rng.random() < prob:
                joined[-1] += word
            else:
                joined.append(word)
        return " ".join(joined)

    @staticmethod
    def add_random_emoji(text: str, num_emoji: int = 1, rng: Optional[random.Random] = None) -> str:
        """Append emoji to text."""
        rng = rng or random
        emoji_pool = ["😀", "😂", "😍", "😁", "🙄", "😤", "👍", "🔥", "💯", "🙏"]
        added = rng.sample(emoji_pool, min(num_emoji, len(emoji_pool)))
        return text + " " + " ".join(added)

    @staticmethod
    def remove_emoji(text: str) -> str:
        return EMOJI_PATTERN.sub("", text)


# ═══════════════════════════════════════════════════════════
# Robustness Test Suite
# ═══════════════════════════════════════════════════════════

class RobustnessTestSuite:
    """
    Applies perturbations to Singlish inputs and measures how far the
    output drifts from the clean-input output.

    Usage:
        suite = RobustnessTestSuite(seed=13)
        results = suite.run_tests(texts, translate_fn=lambda t: engine.translate(t).text)
        summary = suite.summarize(results)
    """

    def __init__(self, seed: int = 42):
        self.rng = random.Random(seed)
        self.perturbations: Dict[str, Callable[[str], str]] = {
            "letter_spacing":     lambda t: TextPerturbations.letter_spacing(t, 0.3, self.rng),
            "extra_spaces":       lambda t: TextPerturbations.extra_spaces(t, 8, self.rng),
            "spaced_punctuation": TextPerturbations.spaced_punctuation,
            "joined_words":       lambda t: TextPerturbations.join_words(t, 0.5, self.rng),
            "add_random_emoji":   lambda t: TextPerturbations.add_random_emoji(t, 1, self.rng),
        }
        logger.info(f"RobustnessTestSuite: {len(self.perturbations)} perturbations")

    def apply_perturbation(self, texts: List[str], perturbation_name: str) -> List[str]:
        """
        Apply a perturbation to all texts.

        Args:
            texts:              List of input strings
            perturbation_name:  Name from self.perturbations

        Returns:
            Perturbed texts
        """
        if perturbation_name not in self.perturbations:
            raise ValueError(f"Unknown perturbation: {perturbation_name}")

        perturb_fn = self.perturbations[perturbation_name]
        return [perturb_fn(text) for text in texts]

    @staticmethod
    def _comparable(output: str) -> str:
        # emoji and spacing differences are expected, not regressions
        return " ".join(TextPerturbations.remove_emoji(output).split())

    def run_tests(
        self,
        texts: List[str],
        translate_fn: Callable[[str], str],
    ) -> Dict[str, Dict]:
        """
        Run all robustness tests.

        Args:
            texts:        Clean Singlish inputs
            translate_fn: Function str → Sinhala str

        Returns:
            Dict[perturbation_name, {score, drop, drop_pct, mean_cer}]
        """
        baseline = [self._comparable(translate_fn(t)) for t in texts]
        results = {"baseline": {"score": 1.0, "drop": 0.0, "drop_pct": 0.0, "mean_cer": 0.0}}

        for name in self.perturbations:
            perturbed_texts = self.apply_perturbation(texts, name)
            outputs = [self._comparable(translate_fn(t)) for t in perturbed_texts]
            metrics = TranslationMetrics.aggregate(list(zip(outputs, baseline)))

            score = metrics["exact_match"]
            results[name] = {
                "score":    score,
                "drop":     1.0 - score,
                "drop_pct": (1.0 - score) * 100,
                "mean_cer": metrics["mean_cer"],
            }

            logger.info(
                f"  {name:20s}: score={score:.4f}, mean_cer={metrics['mean_cer']:.4f}"
            )

        return results

    def summarize(self, results: Dict[str, Dict]) -> Dict[str, float]:
        """
        Compute summary statistics across all perturbations.

        Returns:
            avg_drop, max_drop, robust_score (1 - avg_drop)
        """
        drops = [r["drop"] for name, r in results.items() if name != "baseline"]
        avg_drop = sum(drops) / len(drops) if drops else 0.0

        summary = {
            "avg_drop":     avg_drop,
            "max_drop":     max(drops) if drops else 0.0,
            "robust_score": results["baseline"]["score"] - avg_drop,
        }

        logger.info(
            f"Robustness summary: avg_drop={summary['avg_drop']:.4f}, "
            f"max_drop={summary['max_drop']:.4f}"
        )

        return summary
