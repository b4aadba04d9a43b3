#!/usr/bin/env python3
"""
Installation Verification Script

Checks that all components are properly installed and the tables load.
"""

import sys
from pathlib import Path
import importlib
import importlib.util

# Color codes for terminal output
GREEN = '\033[92m'
RED = '\033[91m'
YELLOW = '\033[93m'
RESET = '\033[0m'

def print_status(message, status='info'):
    """Print colored status message."""
    if status == 'success':
        print(f"{GREEN}✓{RESET} {message}")
    elif status == 'error':
        print(f"{RED}✗{RESET} {message}")
    elif status == 'warning':
        print(f"{YELLOW}⚠{RESET} {message}")
    else:
        print(f"  {message}")

def check_python_version():
    """Check Python version."""
    print("\n1. Checking Python version...")
    version = sys.version_info
    version_str = f"{version.major}.{version.minor}.{version.micro}"

    if version >= (3, 8):
        print_status(f"Python {version_str} (>= 3.8 required)", 'success')
        return True
    else:
        print_status(f"Python {version_str} (3.8+ required)", 'error')
        return False

def check_dependencies():
    """Check that the runtime dependencies import, and report their versions."""
    print("\n2. Checking dependencies...")

    all_installed = True
    for module_name, dist_name in [('yaml', 'PyYAML'), ('numpy', 'NumPy'), ('pandas', 'pandas')]:
        if importlib.util.find_spec(module_name) is None:
            print_status(f"{dist_name} not found (pip install -r requirements.txt)", 'error')
            all_installed = False
            continue
        version = getattr(importlib.import_module(module_name), '__version__', 'unknown')
        print_status(f"{dist_name} {version}", 'success')

    return all_installed

def check_data_files():
    """Check the config, golden cases and every packaged table."""
    print("\n3. Checking data files...")

    tables_dir = Path('src/transliteration/data')
    required = [Path('config/engine_config.yaml'), Path('data/golden_cases.yaml')]
    required += [tables_dir / name for name in (
        'rules.yaml', 'lexicon.yaml', 'abbreviations.yaml', 'preserve_words.yaml',
    )]

    missing = [path for path in required if not path.exists()]
    for path in required:
        print_status(f"{path} {'missing' if path in missing else 'exists'}",
                     'error' if path in missing else 'success')

    return not missing

def check_module_imports():
    """Check if project modules can be imported."""
    print("\n4. Checking module imports...")

    sys.path.insert(0, 'src')

    modules = [
        ('utils.config_loader', 'ConfigLoader'),
        ('utils.logger', 'Logger'),
        ('preprocessing', 'TextNormalizer'),
        ('transliteration', 'TransliterationEngine'),
        ('inference.session', 'TranslationSession'),
        ('evaluation.golden', 'GoldenEvaluator'),
    ]

    all_imported = True
    for module_name, class_name in modules:
        try:
            module = importlib.import_module(module_name)
            getattr(module, class_name)
            print_status(f"{module_name}.{class_name} imported", 'success')
        except (ImportError, AttributeError) as e:
            print_status(f"{module_name}.{class_name} import failed: {e}", 'error')
            all_imported = False

    return all_imported

def check_engine():
    """Load config and tables, then run the golden cases."""
    print("\n5. Testing engine...")

    sys.path.insert(0, 'src')

    from transliteration import EngineConfig, TransliterationEngine
    from evaluation.golden import GoldenEvaluator

    config = EngineConfig.from_file('config/engine_config.yaml')
    print_status("Engine config loaded successfully", 'success')

    engine = TransliterationEngine.from_config(config)
    print_status("Tables loaded successfully", 'success')

    print_status(f"Sample translation: {engine.translate('mama gedhara yanavaa').text}", 'info')

    evaluator = GoldenEvaluator.from_file('data/golden_cases.yaml')
    report = evaluator.evaluate(engine.translate)
    failed = report.loc[~report['passed'], 'id'].tolist()
    if failed:
        print_status(f"Golden cases failing: {', '.join(failed)}", 'error')
        return False
    print_status(f"All {len(report)} golden cases pass", 'success')
    return True

def main():
    """Run all verification checks."""
    print("=" * 60)
    print("Singlish Transliterator - Installation Verification")
    print("=" * 60)

    checks = [
        check_python_version,
        check_dependencies,
        check_data_files,
        check_module_imports,
        check_engine,
    ]

    results = []
    for check in checks:
        try:
            result = check()
            results.append(result)
        except Exception as e:
            print_status(f"Check failed with exception: {e}", 'error')
            results.append(False)

    # Summary
    print("\n" + "=" * 60)
    print("VERIFICATION SUMMARY")
    print("=" * 60)

    passed = sum(results)
    total = len(results)

    if all(results):
        print_status(f"All checks passed ({passed}/{total})", 'success')
        print("\n✓ System is ready!")
        print("\nNext steps:")
        print("  1. Try: singlish-translate \"mama gedhara yanavaa\"")
        print("  2. Run the golden cases: python scripts/evaluate_golden.py")
        return 0
    else:
        print_status(f"{passed}/{total} checks passed", 'warning')
        print("\n⚠ Please fix the errors above before proceeding.")
        return 1

if __name__ == "__main__":
    sys.exit(main())
