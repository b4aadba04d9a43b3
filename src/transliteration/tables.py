"""
Transliteration Tables

Loads and validates the immutable process-wide data the engine reads:

    rules.yaml           ordered phonetic rule records
    lexicon.yaml         `words` vocabulary (values derived from the rules)
                         plus explicit `overrides`
    abbreviations.yaml   chat abbreviation → Singlish expansion
    preserve_words.yaml  English/brand words passed through verbatim

Any missing or malformed file is fatal: load_tables raises and no engine is
constructed.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Union

import yaml

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from transliteration.rules import RuleEntry, RuleKind, RuleTable
from transliteration.phonetic import PhoneticTransliterator

logger = get_logger("tables")

DEFAULT_TABLES_DIR = Path(__file__).parent / "data"

LATIN_KEY_PATTERN = re.compile(r"[A-Za-z]+")


class TableError(ValueError):
    """Raised when a table file is structurally invalid."""


@dataclass(frozen=True)
class LexiconEntry:
    key: str
    value: str


@dataclass(frozen=True)
class AbbreviationEntry:
    key: str
    expansion: str


class Lexicon:
    """Case-insensitive, read-only word → Sinhala mapping."""

    def __init__(self, entries: Iterable[LexiconEntry]):
        self._entries: Mapping[str, LexiconEntry] = MappingProxyType(
            {entry.key.lower(): entry for entry in entries}
        )
        self.max_key_length = max((len(k) for k in self._entries), default=0)

    def lookup(self, word: str) -> Optional[str]:
        entry = self._entries.get(word.lower())
        return entry.value if entry is not None else None

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


@dataclass(frozen=True)
class TransliterationTables:
    rules: RuleTable
    lexicon: Lexicon
    abbreviations: Mapping[str, AbbreviationEntry]
    preserve_words: FrozenSet[str]

    def abbreviation(self, word: str) -> Optional[AbbreviationEntry]:
        return self.abbreviations.get(word.lower())

    def is_known(self, word: str) -> bool:
        """True for lexicon or abbreviation keys (case-insensitive)."""
        return word in self.lexicon or word.lower() in self.abbreviations


# ─────────────────────────────────────────────
# Parsing helpers
# ─────────────────────────────────────────────

def _read_yaml(path: Path) -> Any:
    if not path.exists():
        logger.error(f"Table file not found: {path}")
        raise FileNotFoundError(f"Table file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Malformed YAML in {path}: {e}")
            raise


def _fail(path: Path, message: str) -> None:
    logger.error(f"{path.name}: {message}")
    raise TableError(f"{path.name}: {message}")


def _require_str(path: Path, value: Any, what: str, allow_empty: bool = False) -> str:
    if not isinstance(value, str) or (not allow_empty and not value):
        _fail(path, f"{what} must be a {'string' if allow_empty else 'non-empty string'}")
    return value


def parse_rules(data: Any, path: Path) -> RuleTable:
    """Validate raw rules.yaml content and build a RuleTable."""
    if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
        _fail(path, "expected a mapping with a 'rules' list")

    entries: List[RuleEntry] = []
    seen = set()
    for i, raw in enumerate(data["rules"]):
        where = f"rule #{i}"
        if not isinstance(raw, dict):
            _fail(path, f"{where} must be a mapping")

        pattern = _require_str(path, raw.get("pattern"), f"{where} pattern")
        if not LATIN_KEY_PATTERN.fullmatch(pattern):
            _fail(path, f"{where} pattern '{pattern}' must be ASCII letters")
        output = _require_str(path, raw.get("output"), f"{where} output")

        try:
            kind = RuleKind(raw.get("kind", "consonant"))
        except ValueError:
            _fail(path, f"{where} has unknown kind '{raw.get('kind')}'")

        case_sensitive = raw.get("case_sensitive", False)
        if not isinstance(case_sensitive, bool):
            _fail(path, f"{where} case_sensitive must be a boolean")
        priority = raw.get("priority", 0)
        if not isinstance(priority, int) or isinstance(priority, bool):
            _fail(path, f"{where} priority must be an integer")

        sign = raw.get("sign")
        conjunct = raw.get("conjunct")
        if kind is RuleKind.VOWEL:
            sign = _require_str(path, sign, f"{where} sign", allow_empty=True)
        elif sign is not None:
            _fail(path, f"{where} only vowels may carry a sign")
        if conjunct is not None:
            if kind is not RuleKind.CONSONANT:
                _fail(path, f"{where} only consonants may carry a conjunct")
            conjunct = _require_str(path, conjunct, f"{where} conjunct")

        key = (pattern if case_sensitive else pattern.lower(), case_sensitive)
        if key in seen:
            _fail(path, f"duplicate rule for pattern '{pattern}'")
        seen.add(key)

        entries.append(RuleEntry(
            pattern=pattern,
            output=output,
            case_sensitive=case_sensitive,
            priority=priority,
            kind=kind,
            sign=sign,
            conjunct=conjunct,
        ))

    return RuleTable(entries)


def parse_lexicon(data: Any, path: Path, phonetic: PhoneticTransliterator) -> Lexicon:
    """
    Build the lexicon from a `words` vocabulary and `overrides` mapping.

    Vocabulary values are derived once, here, by the rule transliterator;
    overrides win over derived values.
    """
    if not isinstance(data, dict):
        _fail(path, "expected a mapping with 'words' and/or 'overrides'")

    words = data.get("words") or []
    overrides = data.get("overrides") or {}
    if not isinstance(words, list):
        _fail(path, "'words' must be a list")
    if not isinstance(overrides, dict):
        _fail(path, "'overrides' must be a mapping")

    values: Dict[str, LexiconEntry] = {}
    for word in words:
        word = _require_str(path, word, "vocabulary word")
        if not LATIN_KEY_PATTERN.fullmatch(word):
            _fail(path, f"vocabulary word '{word}' must be ASCII letters")
        if word.lower() in values:
            _fail(path, f"duplicate vocabulary word '{word}'")
        values[word.lower()] = LexiconEntry(word, phonetic.transliterate(word))

    for key, value in overrides.items():
        key = _require_str(path, key, "override key")
        if not LATIN_KEY_PATTERN.fullmatch(key):
            _fail(path, f"override key '{key}' must be ASCII letters")
        values[key.lower()] = LexiconEntry(key, _require_str(path, value, f"override '{key}'"))

    return Lexicon(values.values())


def parse_abbreviations(data: Any, path: Path) -> Mapping[str, AbbreviationEntry]:
    if not isinstance(data, dict) or not isinstance(data.get("abbreviations"), dict):
        _fail(path, "expected a mapping with an 'abbreviations' mapping")

    entries: Dict[str, AbbreviationEntry] = {}
    for key, expansion in data["abbreviations"].items():
        key = _require_str(path, key, "abbreviation key")
        if not LATIN_KEY_PATTERN.fullmatch(key):
            _fail(path, f"abbreviation key '{key}' must be ASCII letters")
        expansion = _require_str(path, expansion, f"expansion of '{key}'")
        entries[key.lower()] = AbbreviationEntry(key, expansion)
    return MappingProxyType(entries)


def parse_preserve_words(data: Any, path: Path) -> FrozenSet[str]:
    if not isinstance(data, dict) or not isinstance(data.get("words"), list):
        _fail(path, "expected a mapping with a 'words' list")
    return frozenset(_require_str(path, w, "preserve word") for w in data["words"])


# ─────────────────────────────────────────────
# Loader
# ─────────────────────────────────────────────

def load_tables(
    tables_dir: Optional[Union[str, Path]] = None,
    rules_file: str = "rules.yaml",
    lexicon_file: str = "lexicon.yaml",
    abbreviations_file: str = "abbreviations.yaml",
    preserve_words_file: str = "preserve_words.yaml",
) -> TransliterationTables:
    """
    Load every table from ``tables_dir`` (the packaged data by default).

    Raises:
        FileNotFoundError: A table file is missing
        yaml.YAMLError:    A table file is not valid YAML
        TableError:        A table file has the wrong structure
    """
    base = Path(tables_dir) if tables_dir is not None else DEFAULT_TABLES_DIR

    rules_path = base / rules_file
    rules = parse_rules(_read_yaml(rules_path), rules_path)
    phonetic = PhoneticTransliterator(rules)

    lexicon_path = base / lexicon_file
    lexicon = parse_lexicon(_read_yaml(lexicon_path), lexicon_path, phonetic)

    abbreviations_path = base / abbreviations_file
    abbreviations = parse_abbreviations(_read_yaml(abbreviations_path), abbreviations_path)

    preserve_path = base / preserve_words_file
    preserve_words = parse_preserve_words(_read_yaml(preserve_path), preserve_path)

    logger.info(
        f"Loaded tables from {base}: {len(rules)} rules, {len(lexicon)} lexicon entries, "
        f"{len(abbreviations)} abbreviations, {len(preserve_words)} preserve words"
    )

    return TransliterationTables(
        rules=rules,
        lexicon=lexicon,
        abbreviations=abbreviations,
        preserve_words=preserve_words,
    )
