"""
Test suite for the live-typing translation session
"""

import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from inference.session import TranslationSession
from transliteration import TransliterationEngine


@pytest.fixture(scope="module")
def engine():
    return TransliterationEngine.from_config()


class TestTranslationSession:

    def test_sequence_numbers_increase(self, engine):
        session = TranslationSession(engine.translate)
        seqs = [session.begin(t).seq for t in ("m", "ma", "mam")]
        assert seqs == [1, 2, 3]

    def test_nothing_shown_initially(self, engine):
        session = TranslationSession(engine.translate)
        assert session.current is None
        assert session.current_text is None

    def test_submit_applies_result(self, engine):
        session = TranslationSession(engine.translate)
        result = session.submit("mama yanavaa")
        assert result.text == "මම යනවා"
        assert session.current == result
        assert session.current_text == "mama yanavaa"

    def test_stale_response_discarded(self, engine):
        session = TranslationSession(engine.translate)
        old = session.begin("mama yan")
        new = session.begin("mama yanavaa")

        assert session.accept(session.run(new))
        assert not session.accept(session.run(old))
        assert session.current.text == "මම යනවා"
        assert session.discarded == 1

    def test_duplicate_response_discarded(self, engine):
        session = TranslationSession(engine.translate)
        response = session.run(session.begin("mama"))
        assert session.accept(response)
        assert not session.accept(response)

    def test_rapid_edits_out_of_order(self, engine):
        """Every prefix of the final text is typed; completions arrive reversed."""
        final = "mama yanavaa"
        session = TranslationSession(engine.translate)
        requests = [session.begin(final[:i]) for i in range(1, len(final) + 1)]
        responses = [session.run(r) for r in requests]

        accepted = [session.accept(r) for r in reversed(responses)]

        assert accepted[0] is True
        assert not any(accepted[1:])
        assert session.current.text == "මම යනවා"
        assert session.discarded == len(final) - 1

    def test_rapid_edits_in_order(self, engine):
        final = "mama yanavaa"
        session = TranslationSession(engine.translate)
        for i in range(1, len(final) + 1):
            session.submit(final[:i])
        assert session.current.text == "මම යනවා"
        assert session.discarded == 0

    def test_concurrent_edits_latest_wins(self, engine):
        final = "api heta gedhara enavaa"
        session = TranslationSession(engine.translate)
        requests = [session.begin(final[:i]) for i in range(1, len(final) + 1)]

        def slow_translate(request):
            # earlier edits finish later
            time.sleep(0.001 * (len(requests) - request.seq))
            return session.accept(session.run(request))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(slow_translate, requests))

        assert session.current_text == final
        assert session.current.text == "අපි හෙට ගෙදර එනවා"

    def test_begin_is_thread_safe(self, engine):
        session = TranslationSession(engine.translate)
        seqs = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                seq = session.begin("x").seq
                with lock:
                    seqs.append(seq)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(seqs) == list(range(1, 201))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
