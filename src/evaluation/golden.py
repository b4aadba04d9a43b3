"""
Golden-Case Evaluation

Regression check against a curated list of literal input → output pairs.

Each case has a status:
    exact     the expected value is the linguistically correct Sinhala
    accepted  the expected value is the engine's documented, deterministic
              output for adversarial input (imperfect, but must not drift)

Both statuses must match exactly to pass; the status only changes how a
failure should be read.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import pandas as pd

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from utils.config_loader import ConfigLoader
from evaluation.metrics import TranslationMetrics
from transliteration.models import TranslationResult

logger = get_logger("golden")

VALID_STATUSES = ("exact", "accepted")


@dataclass(frozen=True)
class GoldenCase:
    id: str
    category: str
    input: str
    expected: str
    status: str = "exact"


class GoldenEvaluator:
    """
    Usage:
        evaluator = GoldenEvaluator.from_file("data/golden_cases.yaml")
        report = evaluator.evaluate(engine.translate)
        evaluator.summarize(report)
    """

    REPORT_COLUMNS = [
        "id", "category", "status", "input", "expected", "actual",
        "passed", "cer", "warnings",
    ]

    def __init__(self, cases: List[GoldenCase]):
        ids = [c.id for c in cases]
        if len(set(ids)) != len(ids):
            raise ValueError("Golden case ids must be unique")
        self.cases = cases

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "GoldenEvaluator":
        """
        Load cases from YAML: ``cases: [{id, category, input, expected, status}]``.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError:        If a case is malformed
        """
        data = ConfigLoader.load_config(path, validate=False)
        raw_cases = data.get("cases")
        if not isinstance(raw_cases, list):
            raise ValueError(f"{path}: expected a 'cases' list")

        cases = [cls._parse_case(raw, i) for i, raw in enumerate(raw_cases)]
        logger.info(f"Loaded {len(cases)} golden cases from {path}")
        return cls(cases)

    @staticmethod
    def _parse_case(raw: Any, index: int) -> GoldenCase:
        if not isinstance(raw, dict):
            raise ValueError(f"Golden case #{index} must be a mapping")
        missing = [k for k in ("id", "input", "expected") if k not in raw]
        if missing:
            raise ValueError(f"Golden case #{index} is missing {missing}")
        status = raw.get("status", "exact")
        if status not in VALID_STATUSES:
            raise ValueError(f"Golden case {raw['id']}: unknown status '{status}'")
        return GoldenCase(
            id=str(raw["id"]),
            category=str(raw.get("category", "general")),
            input=str(raw["input"]),
            expected=str(raw["expected"]),
            status=status,
        )

    def evaluate(self, translate_fn: Callable[[str], TranslationResult]) -> pd.DataFrame:
        """Translate every case and return one report row per case."""
        rows: List[Dict[str, Any]] = []
        for case in self.cases:
            result = translate_fn(case.input)
            passed = TranslationMetrics.exact_match(result.text, case.expected)
            if not passed:
                logger.warning(
                    f"Golden case {case.id} ({case.status}) failed: "
                    f"expected {case.expected!r}, got {result.text!r}"
                )
            rows.append({
                "id":       case.id,
                "category": case.category,
                "status":   case.status,
                "input":    case.input,
                "expected": case.expected,
                "actual":   result.text,
                "passed":   passed,
                "cer":      TranslationMetrics.character_error_rate(result.text, case.expected),
                "warnings": ",".join(w.kind.value for w in result.warnings),
            })
        return pd.DataFrame(rows, columns=self.REPORT_COLUMNS)

    @staticmethod
    def summarize(report: pd.DataFrame) -> Dict[str, Any]:
        """
        Returns:
            total, passed, pass_rate, mean_cer, and pass rates per status
            and per category
        """
        total = len(report)
        passed = int(report["passed"].sum()) if total else 0
        summary = {
            "total":       total,
            "passed":      passed,
            "pass_rate":   passed / total if total else 0.0,
            "mean_cer":    float(report["cer"].mean()) if total else 0.0,
            "by_status":   report.groupby("status")["passed"].mean().to_dict() if total else {},
            "by_category": report.groupby("category")["passed"].mean().to_dict() if total else {},
        }
        logger.info(
            f"Golden summary: {passed}/{total} passed, mean CER {summary['mean_cer']:.4f}"
        )
        return summary
