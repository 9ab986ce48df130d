"""Rhyme suggestions from an external language model.

Providers never raise: transport errors, empty replies and malformed JSON all
come back as an empty list. :class:`SuggestionDispatcher` runs requests in the
background and only delivers the answer to the most recent one.
"""
from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from .config import MAX_SUGGESTIONS, Settings
from .models import Completion, Suggestion
from .phonetics import clean_word, count_syllables, extract_rhyme_key, vowel_pattern

LOGGER = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Jesteś ekspertem od polskiej fonetyki w rapie. Szukasz rymów dla słowa: "{word}".
{vocabulary}
ZASADA RYMU (polski akcent paroksytoniczny):
1. Samogłoski to: a, e, i, o, u, y, ą, ę, ó.
2. Słowa o co najmniej dwóch sylabach rymują się od PRZEDOSTATNIEJ samogłoski do końca słowa.
   Przykład: "chmura" -> "ura", pasują "dziura", "kura", "fura".
3. Słowa jednosylabowe rymują się od pierwszej samogłoski.
   Przykład: "kot" -> "ot", pasują "płot", "splot".

Układ samogłosek słowa "{word}": {pattern}.

ZADANIE:
- Podaj dokładnie {limit} rymów do słowa "{word}" zgodnie z powyższą zasadą.
- Wybieraj słowa o podobnej liczbie sylab (około {syllables}).
- Slang, marki i współczesny język są mile widziane, aliteracja jest dozwolona.

Zwróć wyłącznie tablicę JSON ze stringami."""

VOCABULARY_TEMPLATE = """
PREFEROWANE SŁOWNICTWO:
{words}
"""

RESPONSE_SCHEMA = types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING))


def load_lexicon(path: Path | str) -> List[str]:
    """Read a word list, one entry per line; blank lines and ``#`` comments are skipped."""

    words: List[str] = []
    with Path(path).open("r", encoding="utf8") as handle:
        for line in handle:
            entry = line.strip()
            if not entry or entry.startswith("#"):
                continue
            words.append(entry)
    return words


def build_prompt(
    word: str,
    pattern: str,
    syllable_count: int,
    vocabulary: Sequence[str] = (),
    limit: int = MAX_SUGGESTIONS,
) -> str:
    vocabulary_block = VOCABULARY_TEMPLATE.format(words=", ".join(vocabulary)) if vocabulary else ""
    return PROMPT_TEMPLATE.format(
        word=word,
        pattern=pattern,
        syllables=syllable_count,
        vocabulary=vocabulary_block,
        limit=limit,
    )


def parse_suggestions(text: Optional[str], limit: int = MAX_SUGGESTIONS) -> List[str]:
    """Decode a JSON array of strings, returning ``[]`` for anything else."""

    if not text:
        return []
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError) as exc:
        LOGGER.warning("Could not parse suggestion response: %s", exc)
        return []
    if not isinstance(payload, list):
        LOGGER.warning("Suggestion response is not a JSON array")
        return []
    words = [item.strip() for item in payload if isinstance(item, str) and item.strip()]
    return words[:limit]


def to_suggestions(words: Iterable[str]) -> List[Suggestion]:
    """Attach the vowel pattern and syllable count to each suggested word."""

    return [
        Suggestion(word=word, pattern=vowel_pattern(word), syllables=count_syllables(word))
        for word in words
    ]


class SuggestionProvider(ABC):
    """Source of rhyme candidates for a word.

    Implementations return at most the requested number of words and an empty
    list on failure; they never raise.
    """

    @abstractmethod
    def suggest(self, word: str, pattern: str, syllable_count: int, context: str) -> List[str]:
        raise NotImplementedError


class GeminiSuggestionProvider(SuggestionProvider):
    """Ask a Gemini model for rhymes through ``google-genai``."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[genai.Client] = None,
        vocabulary: Optional[Sequence[str]] = None,
    ):
        self.settings = settings
        self.client = client if client is not None else genai.Client(api_key=settings.require_api_key())
        if vocabulary is None and settings.lexicon_path is not None:
            vocabulary = load_lexicon(settings.lexicon_path)
        self.vocabulary: Tuple[str, ...] = tuple(vocabulary or ())

    def suggest(self, word: str, pattern: str, syllable_count: int, context: str) -> List[str]:
        limit = self.settings.max_suggestions
        prompt = build_prompt(word, pattern, syllable_count, self.vocabulary, limit)
        if context.strip():
            prompt += f"\n\nKontekst tekstu:\n{context}"
        LOGGER.debug("Requesting rhymes for %r from %s", word, self.settings.model)
        try:
            response = self.client.models.generate_content(
                model=self.settings.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
            text = response.text
        except Exception:
            LOGGER.exception("Suggestion request for %r failed", word)
            return []
        return parse_suggestions(text, limit)


class StaticSuggestionProvider(SuggestionProvider):
    """Offline provider choosing rhymes from a fixed vocabulary."""

    def __init__(self, vocabulary: Iterable[str], limit: int = MAX_SUGGESTIONS):
        self.vocabulary = [clean_word(word) for word in vocabulary if clean_word(word)]
        self.limit = limit

    def suggest(self, word: str, pattern: str, syllable_count: int, context: str) -> List[str]:
        key = extract_rhyme_key(word)
        target = word.lower()
        seen = set()
        matches: List[str] = []
        for candidate in self.vocabulary:
            lowered = candidate.lower()
            if lowered == target or lowered in seen:
                continue
            if extract_rhyme_key(candidate) != key:
                continue
            seen.add(lowered)
            matches.append(candidate)
        matches.sort(key=lambda candidate: abs(count_syllables(candidate) - syllable_count))
        return matches[: self.limit]


ResultCallback = Callable[[Completion, List[Suggestion]], None]


class SuggestionDispatcher:
    """Run suggestion requests in the background, keeping only the newest answer."""

    def __init__(self, provider: SuggestionProvider, max_workers: int = 4):
        self.provider = provider
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="rhyme-lab")
        self._lock = threading.Lock()
        self._delivery_lock = threading.Lock()
        self._sequence = 0
        self._latest: Optional[Tuple[Completion, List[Suggestion]]] = None

    @property
    def sequence(self) -> int:
        with self._lock:
            return self._sequence

    @property
    def latest(self) -> Optional[Tuple[Completion, List[Suggestion]]]:
        with self._lock:
            return self._latest

    def submit(self, completion: Completion, callback: Optional[ResultCallback] = None) -> "Future[bool]":
        """Schedule ``completion``; the future resolves to whether it was delivered."""

        with self._lock:
            self._sequence += 1
            request = completion.with_sequence(self._sequence)
        return self._executor.submit(self._run, request, callback)

    def _run(self, request: Completion, callback: Optional[ResultCallback]) -> bool:
        words = self.provider.suggest(request.word, request.pattern, request.syllables, request.context)
        suggestions = to_suggestions(words)
        # Deliveries are serialized so an older callback cannot finish after a newer one.
        with self._delivery_lock:
            with self._lock:
                if request.sequence != self._sequence:
                    LOGGER.debug(
                        "Discarding stale suggestions for %r (request %s, latest %s)",
                        request.word,
                        request.sequence,
                        self._sequence,
                    )
                    return False
                self._latest = (request, suggestions)
            if callback is not None:
                callback(request, suggestions)
        return True

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "SuggestionDispatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ProgressTicker:
    """Cosmetic "searching" counter that advances on a timer.

    The counter is unrelated to the real request: it climbs to ``cap`` while a
    search is outstanding, jumps to ``maximum`` once :meth:`finish` is called
    and is cleared ``linger`` seconds later.
    """

    def __init__(
        self,
        interval: float = 0.12,
        cap: int = MAX_SUGGESTIONS - 1,
        maximum: int = MAX_SUGGESTIONS,
        linger: float = 0.3,
        on_change: Optional[Callable[[int], None]] = None,
    ):
        self.interval = interval
        self.cap = cap
        self.maximum = maximum
        self.linger = linger
        self.on_change = on_change
        self.value = 0
        self.active = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    def start(self) -> None:
        self.stop()
        self._generation += 1
        self._stop = threading.Event()
        self.value = 0
        self.active = True
        self._notify()
        self._thread = threading.Thread(target=self._loop, args=(self._stop,), daemon=True)
        self._thread.start()

    def tick(self) -> int:
        if self.value < self.cap:
            self.value += 1
            self._notify()
        return self.value

    def finish(self) -> None:
        self.stop()
        self.value = self.maximum
        self._notify()
        if self.linger > 0:
            self._timer = threading.Timer(self.linger, self._clear, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()
        else:
            self._clear(self._generation)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def _loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self.tick()

    def _clear(self, generation: int) -> None:
        # A restarted search owns the indicator now.
        if generation == self._generation:
            self.active = False

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.value)
