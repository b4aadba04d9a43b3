"""
Transliteration Engine

End-to-end per-call pipeline:

    raw text
      → TextNormalizer   (despacing, space collapse, punctuation tightening)
      → Tokenizer        (typed partition)
      → per WORD token:  abbreviation → lexicon → segmentation / rules
      → Composer         (TranslationResult + warnings in raw coordinates)

The engine holds only immutable state built at construction, so one
instance can serve any number of concurrent translate() calls.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import Logger, get_logger
from utils.config_loader import ConfigLoader
from preprocessing.script_detector import ScriptDetector
from preprocessing.text_normalizer import TextNormalizer
from preprocessing.tokenizer import TokenKind, Tokenizer
from transliteration.composer import Composer
from transliteration.models import TranslationResult, TranslationWarning, WarningKind
from transliteration.phonetic import PhoneticTransliterator
from transliteration.segmenter import Segmenter
from transliteration.tables import TransliterationTables, load_tables

logger = get_logger("engine")


@dataclass(frozen=True)
class EngineConfig:
    """Frozen runtime configuration; EngineConfig() gives the defaults."""

    # tables
    tables_dir: Optional[str] = None
    rules_file: str = "rules.yaml"
    lexicon_file: str = "lexicon.yaml"
    abbreviations_file: str = "abbreviations.yaml"
    preserve_words_file: str = "preserve_words.yaml"

    # normalization
    despace: bool = True
    despace_min_letters: int = 2
    collapse_spaces: bool = True
    tighten_punctuation: bool = True

    # segmentation
    min_word_length: int = 10
    min_segment_length: int = 3
    joiner: str = " "

    # logging section, applied by from_file
    logging: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, hash=False
    )

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "EngineConfig":
        """
        Build from an engine_config.yaml dict (all sections optional).

        Args:
            config: Parsed engine configuration

        Returns:
            EngineConfig with unspecified fields left at their defaults

        Raises:
            ValueError: If the dict fails ConfigLoader.validate_engine_config
        """
        config = config or {}
        ConfigLoader.validate_engine_config(config)
        tables = config.get("tables") or {}
        normalization = config.get("normalization") or {}
        segmentation = config.get("segmentation") or {}
        defaults = cls()

        return cls(
            tables_dir=tables.get("dir", defaults.tables_dir),
            rules_file=tables.get("rules_file", defaults.rules_file),
            lexicon_file=tables.get("lexicon_file", defaults.lexicon_file),
            abbreviations_file=tables.get("abbreviations_file", defaults.abbreviations_file),
            preserve_words_file=tables.get("preserve_words_file", defaults.preserve_words_file),
            despace=normalization.get("despace", defaults.despace),
            despace_min_letters=normalization.get("despace_min_letters", defaults.despace_min_letters),
            collapse_spaces=normalization.get("collapse_spaces", defaults.collapse_spaces),
            tighten_punctuation=normalization.get("tighten_punctuation", defaults.tighten_punctuation),
            min_word_length=segmentation.get("min_word_length", defaults.min_word_length),
            min_segment_length=segmentation.get("min_segment_length", defaults.min_segment_length),
            joiner=segmentation.get("joiner", defaults.joiner),
            logging=MappingProxyType(dict(config.get("logging") or {})),
        )

    @classmethod
    def from_file(
        cls,
        config_path: Union[str, Path],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "EngineConfig":
        """
        Load, validate and apply an engine_config.yaml file.

        Args:
            config_path: Path to the YAML file
            overrides:   Partial config deep-merged over the file's values
        """
        config = ConfigLoader.load_config(config_path)
        if overrides:
            config = ConfigLoader.merge_configs(config, overrides)
        engine_config = cls.from_config(config)
        if engine_config.logging:
            Logger.configure(engine_config.logging)
        return engine_config

    def normalization_config(self) -> Dict[str, Any]:
        return {
            "despace": self.despace,
            "despace_min_letters": self.despace_min_letters,
            "collapse_spaces": self.collapse_spaces,
            "tighten_punctuation": self.tighten_punctuation,
        }


class TransliterationEngine:
    """
    Singlish → Sinhala transliteration over immutable tables.

    Usage:
        engine = TransliterationEngine.from_config()
        result = engine.translate("mama gedhara yanavaa")
        result.text       # "මම ගෙදර යනවා"
        result.warnings   # ()
    """

    def __init__(
        self,
        tables: TransliterationTables,
        config: Optional[EngineConfig] = None,
    ):
        self.tables = tables
        self.config = config or EngineConfig()

        self.normalizer = TextNormalizer.from_config(self.config.normalization_config())
        self.tokenizer = Tokenizer(
            preserve_words=tables.preserve_words,
            is_known_word=tables.is_known,
        )
        self.phonetic = PhoneticTransliterator(tables.rules)
        self.segmenter = Segmenter(
            tables.lexicon,
            min_word_length=self.config.min_word_length,
            min_segment_length=self.config.min_segment_length,
        )
        self.composer = Composer()

        logger.info(
            f"Engine ready (stages={self.normalizer.active_stages()}, "
            f"segment >= {self.config.min_word_length} chars)"
        )

    @classmethod
    def from_config(cls, config: Optional[EngineConfig] = None) -> "TransliterationEngine":
        """Load the tables named by ``config`` and build an engine."""
        config = config or EngineConfig()
        tables = load_tables(
            tables_dir=config.tables_dir,
            rules_file=config.rules_file,
            lexicon_file=config.lexicon_file,
            abbreviations_file=config.abbreviations_file,
            preserve_words_file=config.preserve_words_file,
        )
        return cls(tables, config)

    # ─────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────

    def translate(self, text: str) -> TranslationResult:
        """
        Transliterate a full input (any number of lines).

        Args:
            text: Raw Singlish input exactly as typed

        Returns:
            TranslationResult; never raises for str input

        Raises:
            TypeError: If ``text`` is not a str
        """
        normalized = self.normalizer.normalize(text)
        tokens = self.tokenizer.tokenize(normalized)

        rendered: Dict[int, str] = {}
        warnings: List[TranslationWarning] = []

        for index, token in enumerate(tokens):
            if token.kind is TokenKind.WORD:
                value, fell_back = self.render_word(token.text)
                rendered[index] = value
                if fell_back:
                    warnings.append(self._warning(
                        WarningKind.SEGMENTATION_FALLBACK, token.source_span, text
                    ))
            elif token.kind is TokenKind.PRESERVE_WORD:
                offset = token.span[0]
                for start, end in ScriptDetector.unrecognized_runs(token.text):
                    warnings.append(self._warning(
                        WarningKind.UNRECOGNIZED_CHARACTER,
                        normalized.to_source_span(offset + start, offset + end),
                        text,
                    ))

        result = self.composer.compose(tokens, rendered, warnings)
        logger.debug(
            f"Translated {len(text)} chars ({len(tokens)} tokens, "
            f"{len(result.warnings)} warnings)"
        )
        return result

    def segment_word(self, word: str) -> List[str]:
        """Dictionary segments of ``word`` (``[word]`` when none exist)."""
        return self.segmenter.segment_word(word)

    def render_word(self, word: str) -> Tuple[str, bool]:
        """
        Sinhala form of a single WORD token.

        Returns:
            (sinhala, fell_back) where fell_back marks a failed segmentation
        """
        abbreviation = self.tables.abbreviation(word)
        if abbreviation is not None:
            pieces = [self._resolve(piece) for piece in abbreviation.expansion.split()]
            return " ".join(p[0] for p in pieces), any(p[1] for p in pieces)
        return self._resolve(word)

    # ─────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────

    def _resolve(self, word: str) -> Tuple[str, bool]:
        value = self.tables.lexicon.lookup(word)
        if value is not None:
            return value, False

        if self.segmenter.should_segment(word):
            candidate = self.segmenter.segment(word)
            if candidate is None:
                logger.debug(f"Segmentation fallback for '{word}'")
                return self.phonetic.transliterate(word), True
            return self.config.joiner.join(
                self.tables.lexicon.lookup(segment) for segment in candidate.segments
            ), False

        return self.phonetic.transliterate(word), False

    @staticmethod
    def _warning(kind: WarningKind, span: Tuple[int, int], raw: str) -> TranslationWarning:
        start, end = span
        return TranslationWarning(kind=kind, span=(start, end), text=raw[start:end])
