"""
Rule-based phonetic transliteration of a single Singlish word.
"""

from pathlib import Path
from typing import List, Optional

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from transliteration.rules import RuleKind, RuleTable

# Sinhala virama (al-lakuna)
HAL = "්"


class PhoneticTransliterator:
    """
    Longest-match-first transliteration driven by a RuleTable.

    A consonant is held as "pending" until the next rule decides its form:
    a following vowel attaches its sign, anything else closes it with the
    virama. Characters no rule covers are emitted unchanged.

    Usage:
        phonetic = PhoneticTransliterator(tables.rules)
        phonetic.transliterate("yanavaa")   # "යනවා"
    """

    def __init__(self, rules: RuleTable):
        self.rules = rules

    def transliterate(self, word: str) -> str:
        out: List[str] = []
        pending: Optional[str] = None
        pos = 0
        n = len(word)

        while pos < n:
            rule = self.rules.match(word, pos)

            if rule is None:
                if pending is not None:
                    out.append(pending + HAL)
                    pending = None
                out.append(word[pos])
                pos += 1
                continue

            nxt = pos + len(rule.pattern)

            if rule.kind is RuleKind.VOWEL:
                if pending is not None:
                    out.append(pending + (rule.sign or ""))
                    pending = None
                else:
                    out.append(rule.output)
            elif rule.kind is RuleKind.ANUSVARA:
                if pending is not None:
                    out.append(pending)
                    pending = None
                out.append(rule.output)
            elif pending is not None and rule.conjunct and self._vowel_at(word, nxt):
                # rakaransaya / yansaya joins onto the held consonant
                pending += rule.conjunct
            else:
                if pending is not None:
                    out.append(pending + HAL)
                pending = rule.output

            pos = nxt

        if pending is not None:
            out.append(pending + HAL)

        return "".join(out)

    def _vowel_at(self, word: str, pos: int) -> bool:
        if pos >= len(word):
            return False
        rule = self.rules.match(word, pos)
        return rule is not None and rule.kind is RuleKind.VOWEL
