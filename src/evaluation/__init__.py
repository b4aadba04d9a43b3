"""Evaluation module — golden cases, output metrics, and robustness testing."""

from .metrics import (
    TranslationMetrics,
    PerCategoryMetrics,
)
from .robustness import (
    TextPerturbations,
    RobustnessTestSuite,
)
from .golden import (
    GoldenCase,
    GoldenEvaluator,
)

__all__ = [
    "TranslationMetrics",
    "PerCategoryMetrics",
    "TextPerturbations",
    "RobustnessTestSuite",
    "GoldenCase",
    "GoldenEvaluator",
]
