"""
Phonetic Rule Table

Ordered Singlish→Sinhala rule records and the longest-match lookup over them.

Selection order at a given position:
    1. Longest pattern
    2. Case-sensitive before case-insensitive (equal length)
    3. Higher priority
    4. Declaration order
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence, Tuple


class RuleKind(str, Enum):
    CONSONANT = "consonant"
    VOWEL = "vowel"
    ANUSVARA = "anusvara"


@dataclass(frozen=True)
class RuleEntry:
    """
    A single phonetic mapping.

    Attributes:
        pattern:        Latin letters matched at the current position
        output:         Sinhala letter (independent form for vowels)
        case_sensitive: Match the pattern's exact case only
        priority:       Tie-breaker between equal-length rules
        kind:           consonant, vowel or anusvara
        sign:           Dependent vowel sign used after a consonant
        conjunct:       Joined form used after another consonant (e.g. "්‍ර")
    """
    pattern: str
    output: str
    case_sensitive: bool = False
    priority: int = 0
    kind: RuleKind = RuleKind.CONSONANT
    sign: Optional[str] = None
    conjunct: Optional[str] = None

    def matches(self, text: str, pos: int) -> bool:
        candidate = text[pos:pos + len(self.pattern)]
        if self.case_sensitive:
            return candidate == self.pattern
        return candidate.lower() == self.pattern.lower()


class RuleTable:
    """
    Immutable, pre-sorted index of rule entries keyed by first letter.

    Example:
        >>> table = RuleTable([RuleEntry("k", "ක"), RuleEntry("a", "අ", kind=RuleKind.VOWEL, sign="")])
        >>> table.match("ka", 0).output
        'ක'
    """

    def __init__(self, rules: Sequence[RuleEntry]):
        self._rules: Tuple[RuleEntry, ...] = tuple(rules)

        ordered = sorted(
            enumerate(self._rules),
            key=lambda item: (
                -len(item[1].pattern),
                not item[1].case_sensitive,
                -item[1].priority,
                item[0],
            ),
        )

        index: Dict[str, List[RuleEntry]] = {}
        for _, rule in ordered:
            index.setdefault(rule.pattern[0].lower(), []).append(rule)

        self._index = MappingProxyType({k: tuple(v) for k, v in index.items()})
        self.max_pattern_length = max((len(r.pattern) for r in self._rules), default=0)

    def match(self, text: str, pos: int) -> Optional[RuleEntry]:
        """Return the best rule matching ``text`` at ``pos``, or None."""
        for rule in self._index.get(text[pos].lower(), ()):
            if rule.matches(text, pos):
                return rule
        return None

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[RuleEntry]:
        return iter(self._rules)
