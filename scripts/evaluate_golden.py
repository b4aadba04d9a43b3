"""
Golden-Case Evaluation Script
==============================
Runs the engine over the golden cases and the robustness perturbations,
producing a full evaluation report.

Usage:
    python scripts/evaluate_golden.py
    python scripts/evaluate_golden.py --cases data/golden_cases.yaml
    python scripts/evaluate_golden.py --config config/engine_config.yaml --csv logs/golden.csv

Output:
    logs/golden_report.json  — summary, per-category metrics, failures
    logs/golden_report.csv   — one row per case (optional, --csv)
    Terminal                 — formatted human-readable summary

Report Contents:
    ├── Golden cases
    │   ├── Pass rate overall / per status / per category
    │   ├── Mean CER
    │   └── Failing cases with expected vs. actual
    └── Robustness
        ├── Exact-match score per perturbation
        └── Average / max drop
"""

import argparse
import json
import sys
from pathlib import Path
from datetime import datetime

# ── Path setup ────────────────────────────────────────────────────────────────
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))

from utils.logger import get_logger
from transliteration import EngineConfig, TransliterationEngine
from evaluation.golden import GoldenEvaluator
from evaluation.metrics import PerCategoryMetrics
from evaluation.robustness import RobustnessTestSuite

logger = get_logger("evaluate_golden")


def print_report(report: dict):
    print("\n" + "═" * 65)
    print("  SINGLISH → SINHALA — GOLDEN EVALUATION REPORT")
    print("═" * 65)

    g = report["golden"]
    print(f"\n  Passed:     {g['passed']}/{g['total']} ({g['pass_rate']:.2%})")
    print(f"  Mean CER:   {g['mean_cer']:.4f}")
    print(f"\n  {'Category':<20} {'Pass rate':>10} {'Mean CER':>10} {'N':>5}")
    print("  " + "─" * 48)
    for name, m in report["per_category"].items():
        print(f"  {name:<20} {m['exact_match']:>10.2%} {m['mean_cer']:>10.4f} {m['n']:>5}")

    if report["failures"]:
        print("\n  Failures:")
        for f in report["failures"]:
            print(f"    [{f['id']}] ({f['status']})")
            print(f"      expected: {f['expected']}")
            print(f"      actual:   {f['actual']}")

    r = report["robustness"]
    print("\n  Robustness (exact match vs. clean output):")
    for name, m in r["results"].items():
        if name == "baseline":
            continue
        print(f"    {name:<20} score={m['score']:.4f}  mean_cer={m['mean_cer']:.4f}")
    print(f"    avg_drop={r['summary']['avg_drop']:.4f}  max_drop={r['summary']['max_drop']:.4f}")
    print("═" * 65)


def parse_args():
    p = argparse.ArgumentParser(description="Evaluate the engine on golden cases")
    p.add_argument("--cases",  default=str(ROOT / "data" / "golden_cases.yaml"))
    p.add_argument("--config", default=None, help="engine_config.yaml (defaults if omitted)")
    p.add_argument("--output", default=str(ROOT / "logs" / "golden_report.json"))
    p.add_argument("--csv",    default=None, help="Also write the per-case table as CSV")
    p.add_argument("--seed",   type=int, default=42)
    return p.parse_args()


def main():
    args = parse_args()

    config = EngineConfig.from_file(args.config) if args.config else EngineConfig()
    engine = TransliterationEngine.from_config(config)

    evaluator = GoldenEvaluator.from_file(args.cases)
    table = evaluator.evaluate(engine.translate)
    summary = evaluator.summarize(table)

    per_category = PerCategoryMetrics.compute(
        table["actual"].tolist(),
        table["expected"].tolist(),
        table["category"].tolist(),
    )

    suite = RobustnessTestSuite(seed=args.seed)
    clean_inputs = table.loc[table["status"] == "exact", "input"].tolist()
    robustness = suite.run_tests(clean_inputs, lambda t: engine.translate(t).text)

    failures = table.loc[~table["passed"], ["id", "status", "expected", "actual"]]

    report = {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "cases_file":   str(args.cases),
        "golden":       summary,
        "per_category": per_category,
        "failures":     failures.to_dict(orient="records"),
        "robustness":   {"results": robustness, "summary": suite.summarize(robustness)},
    }

    print_report(report)

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2, default=float)
    print(f"\nFull report: {out_path}")

    if args.csv:
        table.to_csv(args.csv, index=False)
        print(f"Per-case table: {args.csv}")

    return 0 if summary["passed"] == summary["total"] else 1


if __name__ == "__main__":
    sys.exit(main())
