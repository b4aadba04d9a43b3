#!/usr/bin/env python3
"""
CLI Tool for Singlish → Sinhala Transliteration

Usage:
    singlish-translate "mama gedhara yanavaa"
    singlish-translate --file input.txt --output results.json
    singlish-translate --interactive --warnings
    singlish-translate --golden data/golden_cases.yaml
"""

import argparse
import json
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))


def print_result(result, show_warnings: bool = False):
    """Print a TranslationResult and, optionally, its warnings."""
    print(result.text)
    if show_warnings:
        for warning in result.warnings:
            start, end = warning.span
            print(f"  ! {warning.kind.value} [{start}:{end}] {warning.text!r}")


def translate_file(engine, path: str, output_file=None, show_warnings: bool = False):
    """Translate a whole file, line structure preserved."""
    with open(path, encoding="utf-8") as f:
        text = f.read()
    result = engine.translate(text)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        print(f"✓ Saved to {output_file}")
    else:
        print_result(result, show_warnings)


def interactive_mode(engine, show_warnings: bool = False):
    """Interactive REPL; every line is sent through a live-typing session."""
    from inference.session import TranslationSession

    session = TranslationSession(engine.translate)

    print("\n" + "=" * 60)
    print("Interactive Singlish → Sinhala")
    print("=" * 60)
    print("Type Singlish (or 'quit' to exit)\n")

    while True:
        try:
            text = input(">>> ")
        except (KeyboardInterrupt, EOFError):
            break
        if text.strip().lower() in ("quit", "exit", "q"):
            break
        result = session.submit(text)
        if result is not None:
            print_result(result, show_warnings)


def run_golden(engine, golden_path: str, output_file=None) -> int:
    """Evaluate golden cases; returns a process exit code."""
    from evaluation.golden import GoldenEvaluator

    evaluator = GoldenEvaluator.from_file(golden_path)
    report = evaluator.evaluate(engine.translate)
    summary = evaluator.summarize(report)

    print(report[["id", "category", "status", "passed", "cer"]].to_string(index=False))
    print()
    print(f"Passed {summary['passed']}/{summary['total']} "
          f"(pass rate {summary['pass_rate']:.2%}, mean CER {summary['mean_cer']:.4f})")

    if output_file:
        report.to_csv(output_file, index=False)
        print(f"✓ Saved to {output_file}")

    return 0 if summary["passed"] == summary["total"] else 1


def load_engine_config(args):
    """EngineConfig from --config, with command-line flags merged over it."""
    from transliteration import EngineConfig

    overrides = {}
    if args.min_word_length is not None:
        overrides["segmentation"] = {"min_word_length": args.min_word_length}
    if args.no_despace:
        overrides["normalization"] = {"despace": False}

    if args.config:
        return EngineConfig.from_file(args.config, overrides)
    return EngineConfig.from_config(overrides)


def main():
    parser = argparse.ArgumentParser(description="Singlish → Sinhala transliteration CLI")
    parser.add_argument("text", nargs="?", help="Singlish text to transliterate")
    parser.add_argument("--file", "-f", help="Input file (translated as a whole)")
    parser.add_argument("--output", "-o", help="Output file (JSON for --file, CSV for --golden)")
    parser.add_argument("--interactive", "-i", action="store_true")
    parser.add_argument("--warnings", "-w", action="store_true", help="Show warnings")
    parser.add_argument("--config", "-c", help="Path to engine_config.yaml")
    parser.add_argument("--golden", "-g", help="Evaluate a golden-case YAML file")
    parser.add_argument("--min-word-length", type=int, help="Segment unknown words at least this long")
    parser.add_argument("--no-despace", action="store_true", help="Keep \"m a m a\" letter runs apart")

    args = parser.parse_args()

    if not any([args.text, args.file, args.interactive, args.golden]):
        parser.error("Provide text, --file, --interactive, or --golden")

    try:
        from transliteration import TransliterationEngine
        config = load_engine_config(args)
        engine = TransliterationEngine.from_config(config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration or tables: {e}", file=sys.stderr)
        sys.exit(1)

    if args.golden:
        sys.exit(run_golden(engine, args.golden, args.output))
    elif args.interactive:
        interactive_mode(engine, args.warnings)
    elif args.file:
        translate_file(engine, args.file, args.output, args.warnings)
    else:
        print_result(engine.translate(args.text), args.warnings)


if __name__ == "__main__":
    main()
