"""
Live-Typing Session

Sequence-numbered wrapper around translate() for an editor that sends a
request on every edit. Requests may complete out of order (worker threads,
async hosts); a completion is applied only if it is newer than the result
already shown, so a slow stale translation never overwrites a fresh one.

Usage:
    session = TranslationSession(engine.translate)
    request = session.begin("mama yan")
    response = session.run(request)      # may happen on another thread
    if session.accept(response):
        show(session.current.text)
"""

import itertools
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from utils.logger import get_logger
from transliteration.models import TranslationResult

logger = get_logger("session")


@dataclass(frozen=True)
class TranslationRequest:
    seq: int
    text: str


@dataclass(frozen=True)
class TranslationResponse:
    seq: int
    text: str
    result: TranslationResult


class TranslationSession:
    """
    Caller-side cancellation by sequence number.

    The only shared state is the request counter and the latest applied
    response, both guarded by one lock.
    """

    def __init__(self, translate_fn: Callable[[str], TranslationResult]):
        self.translate_fn = translate_fn
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._latest: Optional[TranslationResponse] = None
        self.discarded = 0

    def begin(self, text: str) -> TranslationRequest:
        """Register a new edit and stamp it with the next sequence number."""
        with self._lock:
            seq = next(self._counter)
        return TranslationRequest(seq=seq, text=text)

    def run(self, request: TranslationRequest) -> TranslationResponse:
        """Translate a request; safe to call from any thread, no lock held."""
        return TranslationResponse(
            seq=request.seq,
            text=request.text,
            result=self.translate_fn(request.text),
        )

    def accept(self, response: TranslationResponse) -> bool:
        """Apply ``response`` if it is newer than the current one."""
        with self._lock:
            if self._latest is not None and response.seq <= self._latest.seq:
                self.discarded += 1
                logger.debug(
                    f"Discarding stale response #{response.seq} "
                    f"(showing #{self._latest.seq})"
                )
                return False
            self._latest = response
            return True

    def submit(self, text: str) -> Optional[TranslationResult]:
        """begin + run + accept in one call; None when superseded meanwhile."""
        response = self.run(self.begin(text))
        return response.result if self.accept(response) else None

    @property
    def current(self) -> Optional[TranslationResult]:
        with self._lock:
            return self._latest.result if self._latest is not None else None

    @property
    def current_text(self) -> Optional[str]:
        """Input text whose translation is currently shown."""
        with self._lock:
            return self._latest.text if self._latest is not None else None
