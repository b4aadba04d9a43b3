"""
Tokenizer

Single left-to-right scan that partitions normalized text into typed tokens.
Concatenating the token texts always reproduces the input exactly, and when
the input is a NormalizedText the tokens' source spans tile the raw input.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Tuple, Union

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from preprocessing.script_detector import (
    CharClass,
    SCRIPT_JOINERS,
    WORD_SEPARATORS,
    ScriptDetector,
    char_class,
)
from preprocessing.text_normalizer import NormalizedText

logger = get_logger("tokenizer")


class TokenKind(Enum):
    WORD = "word"
    PRESERVE_WORD = "preserve_word"
    NUMBER = "number"
    CURRENCY = "currency"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"
    NEWLINE = "newline"


@dataclass(frozen=True)
class Token:
    """
    A typed slice of the tokenizer input.

    Attributes:
        text:        The token's characters
        kind:        Token class
        span:        [start, end) in the tokenized (normalized) text
        source_span: [start, end) in the raw input, including any chars
                     normalization removed from inside or after the token
    """
    text: str
    kind: TokenKind
    span: Tuple[int, int]
    source_span: Tuple[int, int]


class Tokenizer:
    """
    Classify maximal character runs into tokens.

    A text run becomes a PRESERVE_WORD when it is a configured English/brand
    word, an all-uppercase acronym the tables do not know, or when it holds
    characters outside the ASCII letters the phonetic rules cover. Text runs
    end where recognized and unrecognized scripts meet, so an emoji typed
    straight after a word is a token of its own.

    Usage:
        tokenizer = Tokenizer(preserve_words={"office"}, is_known_word=tables.is_known)
        tokens = tokenizer.tokenize("mama office yanavaa")
    """

    CURRENCY_PATTERN = re.compile(r"Rs\.[0-9]+(?:[.:][0-9]+)*")
    NUMBER_PATTERN = re.compile(r"[0-9]+(?:[.:][0-9]+)*")
    LATIN_WORD_PATTERN = re.compile(r"[A-Za-z]+(?:['\-][A-Za-z]+)*")
    ACRONYM_PATTERN = re.compile(r"[A-Z]{2,}")

    def __init__(
        self,
        preserve_words: Iterable[str] = (),
        is_known_word: Callable[[str], bool] = lambda word: False,
    ):
        self.preserve_words: FrozenSet[str] = frozenset(preserve_words)
        self.is_known_word = is_known_word

    def tokenize(self, source: Union[str, NormalizedText]) -> List[Token]:
        """
        Partition ``source`` into tokens.

        Args:
            source: Plain text, or normalizer output whose index map gives
                    each token's raw-input span

        Returns:
            Tokens in order; their texts concatenate to the scanned text
        """
        normalized = source if isinstance(source, NormalizedText) else None
        text = normalized.text if normalized is not None else source
        tokens: List[Token] = []
        pos = 0
        n = len(text)

        while pos < n:
            cls = char_class(text[pos])

            if cls is CharClass.NEWLINE:
                end = pos + 2 if text.startswith("\r\n", pos) else pos + 1
                kind = TokenKind.NEWLINE
            elif cls is CharClass.SPACE:
                end = self._scan_class(text, pos, CharClass.SPACE)
                kind = TokenKind.WHITESPACE
            elif cls is CharClass.DIGIT:
                end = self.NUMBER_PATTERN.match(text, pos).end()
                kind = TokenKind.NUMBER
            elif cls is CharClass.PUNCTUATION:
                end = self._scan_class(text, pos, CharClass.PUNCTUATION)
                kind = TokenKind.PUNCTUATION
            else:
                currency = self.CURRENCY_PATTERN.match(text, pos)
                if currency:
                    end = currency.end()
                    kind = TokenKind.CURRENCY
                else:
                    end = self._scan_text(text, pos)
                    kind = self._classify_text(text[pos:end])

            if normalized is None:
                source_span = (pos, end)
            else:
                source_span = (normalized.source_boundary(pos), normalized.source_boundary(end))
            tokens.append(Token(text[pos:end], kind, (pos, end), source_span))
            pos = end

        logger.debug(f"Tokenized {n} chars into {len(tokens)} tokens")
        return tokens

    @staticmethod
    def _scan_class(text: str, pos: int, cls: CharClass) -> int:
        end = pos + 1
        while end < len(text) and char_class(text[end]) is cls:
            end += 1
        return end

    @staticmethod
    def _scan_text(text: str, pos: int) -> int:
        """Scan a same-script text run, allowing a single separator between text chars."""
        n = len(text)
        recognized = ScriptDetector.is_recognized_char(text[pos])

        def continues(ch: str) -> bool:
            return char_class(ch) is CharClass.TEXT and (
                ch in SCRIPT_JOINERS or ScriptDetector.is_recognized_char(ch) == recognized
            )

        end = pos + 1
        while end < n:
            if continues(text[end]):
                end += 1
            elif (
                text[end] in WORD_SEPARATORS
                and end + 1 < n
                and continues(text[end + 1])
            ):
                end += 2
            else:
                break
        return end

    def _classify_text(self, run: str) -> TokenKind:
        if not self.LATIN_WORD_PATTERN.fullmatch(run):
            return TokenKind.PRESERVE_WORD
        if run in self.preserve_words:
            return TokenKind.PRESERVE_WORD
        if self.ACRONYM_PATTERN.fullmatch(run) and not self.is_known_word(run):
            return TokenKind.PRESERVE_WORD
        return TokenKind.WORD
