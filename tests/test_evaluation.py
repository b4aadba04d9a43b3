"""
Test suite for evaluation: metrics, golden cases, robustness
"""

import random
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from evaluation.metrics import PerCategoryMetrics, TranslationMetrics
from evaluation.golden import GoldenEvaluator
from evaluation.robustness import RobustnessTestSuite, TextPerturbations
from transliteration import TransliterationEngine
from transliteration.models import TranslationResult


@pytest.fixture(scope="module")
def engine():
    return TransliterationEngine.from_config()


# ═══════════════════════════════════════════════════════════
# SECTION 1 — Metrics
# ═══════════════════════════════════════════════════════════

class TestTranslationMetrics:

    def test_edit_distance(self):
        assert TranslationMetrics.edit_distance("kitten", "sitting") == 3
        assert TranslationMetrics.edit_distance("", "abc") == 3
        assert TranslationMetrics.edit_distance("මම", "මම") == 0

    def test_missing_virama_is_one_edit(self):
        assert TranslationMetrics.edit_distance("මචන", "මචන්") == 1

    def test_cer(self):
        assert TranslationMetrics.character_error_rate("abcd", "abcd") == 0.0
        assert TranslationMetrics.character_error_rate("abce", "abcd") == pytest.approx(0.25)

    def test_cer_empty_reference(self):
        assert TranslationMetrics.character_error_rate("", "") == 0.0
        assert TranslationMetrics.character_error_rate("x", "") == 1.0

    def test_aggregate(self):
        metrics = TranslationMetrics.aggregate([("ab", "ab"), ("ax", "ab")])
        assert metrics["n"] == 2
        assert metrics["exact_match"] == pytest.approx(0.5)
        assert metrics["mean_cer"] == pytest.approx(0.25)
        assert metrics["max_cer"] == pytest.approx(0.5)
        assert metrics["corpus_cer"] == pytest.approx(0.25)

    def test_aggregate_empty(self):
        assert TranslationMetrics.aggregate([])["n"] == 0


class TestPerCategoryMetrics:

    def test_grouping(self):
        results = PerCategoryMetrics.compute(
            ["a", "b", "c"], ["a", "x", "c"], ["one", "two", "one"]
        )
        assert results["one"]["exact_match"] == 1.0
        assert results["two"]["exact_match"] == 0.0

    def test_min_samples(self):
        results = PerCategoryMetrics.compute(
            ["a", "b", "c"], ["a", "b", "c"], ["one", "two", "one"], min_samples=2
        )
        assert list(results) == ["one"]

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            PerCategoryMetrics.compute(["a"], ["a", "b"], ["one"])


# ═══════════════════════════════════════════════════════════
# SECTION 2 — Golden evaluation
# ═══════════════════════════════════════════════════════════

class TestGoldenEvaluator:

    @pytest.fixture
    def temp_dir(self):
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    def _write(self, path, cases):
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump({"cases": cases}, f, allow_unicode=True)

    def test_packaged_cases_all_pass(self, engine):
        evaluator = GoldenEvaluator.from_file(Path(__file__).parent.parent / "data" / "golden_cases.yaml")
        report = evaluator.evaluate(engine.translate)
        failed = report[~report["passed"]]
        assert failed.empty, failed[["id", "expected", "actual"]].to_string()

    def test_report_and_summary(self, engine, temp_dir):
        path = temp_dir / "golden.yaml"
        self._write(path, [
            {"id": "ok", "category": "phrase", "input": "mama", "expected": "මම"},
            {"id": "bad", "category": "phrase", "input": "mama", "expected": "මමා", "status": "accepted"},
            {"id": "emoji", "category": "other", "input": "😁", "expected": "😁"},
        ])
        evaluator = GoldenEvaluator.from_file(path)
        report = evaluator.evaluate(engine.translate)

        assert list(report.columns) == GoldenEvaluator.REPORT_COLUMNS
        assert report["passed"].tolist() == [True, False, True]
        assert report.loc[2, "warnings"] == "unrecognized-character"

        summary = GoldenEvaluator.summarize(report)
        assert summary["total"] == 3
        assert summary["passed"] == 2
        assert summary["by_status"] == {"accepted": 0.0, "exact": 1.0}
        assert summary["by_category"]["other"] == 1.0

    def test_defaults_for_optional_fields(self, temp_dir):
        path = temp_dir / "golden.yaml"
        self._write(path, [{"id": "a", "input": "mama", "expected": "මම"}])
        case = GoldenEvaluator.from_file(path).cases[0]
        assert case.status == "exact"
        assert case.category == "general"

    def test_unknown_status(self, temp_dir):
        path = temp_dir / "golden.yaml"
        self._write(path, [{"id": "a", "input": "x", "expected": "x", "status": "maybe"}])
        with pytest.raises(ValueError, match="unknown status"):
            GoldenEvaluator.from_file(path)

    def test_missing_field(self, temp_dir):
        path = temp_dir / "golden.yaml"
        self._write(path, [{"id": "a", "input": "x"}])
        with pytest.raises(ValueError, match="missing"):
            GoldenEvaluator.from_file(path)

    def test_duplicate_ids(self, temp_dir):
        path = temp_dir / "golden.yaml"
        self._write(path, [
            {"id": "a", "input": "x", "expected": "x"},
            {"id": "a", "input": "y", "expected": "y"},
        ])
        with pytest.raises(ValueError, match="unique"):
            GoldenEvaluator.from_file(path)

    def test_cases_must_be_list(self, temp_dir):
        path = temp_dir / "golden.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump({"cases": {"id": "a"}}, f)
        with pytest.raises(ValueError):
            GoldenEvaluator.from_file(path)

    def test_empty_summary(self):
        evaluator = GoldenEvaluator([])
        report = evaluator.evaluate(lambda text: TranslationResult(text=text))
        assert GoldenEvaluator.summarize(report)["total"] == 0


# ═══════════════════════════════════════════════════════════
# SECTION 3 — Robustness
# ═══════════════════════════════════════════════════════════

class TestTextPerturbations:

    def test_letter_spacing_all_words(self):
        assert TextPerturbations.letter_spacing("mama yanavaa", prob=1.0) == "m a m a y a n a v a a"

    def test_letter_spacing_skips_non_words(self):
        assert TextPerturbations.letter_spacing("8.30 mama.", prob=1.0) == "8.30 mama."

    def test_extra_spaces(self):
        out = TextPerturbations.extra_spaces("a b c", max_spaces=4, rng=random.Random(0))
        assert out.split() == ["a", "b", "c"]

    def test_spaced_punctuation(self):
        assert TextPerturbations.spaced_punctuation("ehema....") == "ehema. . . ."

    def test_join_words(self):
        assert TextPerturbations.join_words("mama pansal yanavaa", prob=1.0) == "mamapansalyanavaa"
        assert TextPerturbations.join_words("mama 5 yanavaa", prob=1.0) == "mama 5 yanavaa"

    def test_emoji_add_and_remove(self):
        out = TextPerturbations.add_random_emoji("mama", rng=random.Random(1))
        assert out != "mama"
        assert TextPerturbations.remove_emoji(out).strip() == "mama"


class TestRobustnessSuite:

    def test_unknown_perturbation(self):
        with pytest.raises(ValueError):
            RobustnessTestSuite().apply_perturbation(["mama"], "shout")

    def test_spacing_noise_does_not_change_output(self, engine):
        texts = ["mama gedhara yanavaa.", "api heta pansal yanavaa"]
        suite = RobustnessTestSuite(seed=3)
        results = suite.run_tests(texts, lambda t: engine.translate(t).text)

        assert results["baseline"]["score"] == 1.0
        assert results["extra_spaces"]["score"] == 1.0
        assert results["add_random_emoji"]["score"] == 1.0

        summary = suite.summarize(results)
        assert 0.0 <= summary["avg_drop"] <= summary["max_drop"] <= 1.0

    def test_same_seed_same_results(self, engine):
        texts = ["mama oyaata godak aadhareyi.", "api gedhara yanavaa"]
        translate = lambda t: engine.translate(t).text
        first = RobustnessTestSuite(seed=7).run_tests(texts, translate)
        second = RobustnessTestSuite(seed=7).run_tests(texts, translate)
        assert first == second


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
