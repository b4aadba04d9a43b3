"""
Reassemble typed tokens into the final Sinhala output.
"""

from pathlib import Path
from typing import Iterable, Mapping, Sequence

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from preprocessing.tokenizer import Token, TokenKind
from transliteration.models import TranslationResult, TranslationWarning


class Composer:
    """
    Per-kind emission of tokens.

    WORD tokens use their rendered Sinhala form, WHITESPACE becomes a single
    space, and everything else is emitted exactly as tokenized.
    """

    VERBATIM_KINDS = frozenset({
        TokenKind.PRESERVE_WORD,
        TokenKind.NUMBER,
        TokenKind.CURRENCY,
        TokenKind.PUNCTUATION,
        TokenKind.NEWLINE,
    })

    def compose(
        self,
        tokens: Sequence[Token],
        rendered: Mapping[int, str],
        warnings: Iterable[TranslationWarning] = (),
    ) -> TranslationResult:
        """
        Args:
            tokens:   Token partition of the normalized text
            rendered: Sinhala text for each WORD token, keyed by token index
            warnings: Diagnostics collected while rendering, in token order
        """
        parts = []
        for index, token in enumerate(tokens):
            if token.kind is TokenKind.WORD:
                parts.append(rendered[index])
            elif token.kind is TokenKind.WHITESPACE:
                parts.append(" ")
            elif token.kind in self.VERBATIM_KINDS:
                parts.append(token.text)
            else:
                raise ValueError(f"Unhandled token kind: {token.kind}")

        return TranslationResult(text="".join(parts), warnings=tuple(warnings))
