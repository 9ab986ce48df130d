"""Command line interface for the rhyme lab."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO

from tabulate import tabulate
from tqdm import tqdm

from .config import MAX_SUGGESTIONS, ConfigurationError, Settings
from .editor import EditorState, make_completion
from .models import Completion, RhymeGroup, Suggestion, TextStats
from .phonetics import PolishWord, tokens
from .rhymes import BASE_COLOR, highlight_text
from .suggestions import (
    GeminiSuggestionProvider,
    ProgressTicker,
    StaticSuggestionProvider,
    SuggestionDispatcher,
    SuggestionProvider,
    load_lexicon,
)

LOGGER = logging.getLogger("rhyme_lab")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Polish rhyme highlighter and suggestion helper")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--api-key", help="Gemini API key (defaults to GEMINI_API_KEY)")
    parser.add_argument("--model", help="Gemini model used for suggestions")
    parser.add_argument("--lexicon", help="Word list (one per line) of preferred vocabulary")
    parser.add_argument(
        "--offline",
        action="store_true",
        default=None,
        help="Suggest rhymes from the lexicon and the text itself instead of calling the model",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    key_parser = subparsers.add_parser("key", help="Show rhyme keys and vowel patterns for words")
    key_parser.add_argument("words", nargs="+", help="Words to inspect")

    groups_parser = subparsers.add_parser("groups", help="List rhyme groups found in a text")
    groups_parser.add_argument("file", nargs="?", help="Text file to analyse (defaults to stdin)")
    groups_parser.add_argument("--color", action="store_true", help="Print the text with rhymes highlighted")

    suggest_parser = subparsers.add_parser("suggest", help="Ask for words that rhyme with WORD")
    suggest_parser.add_argument("word", help="Word to rhyme with")
    suggest_parser.add_argument("--context", help="Text file passed to the model as context")

    subparsers.add_parser("write", help="Type lines on stdin; each finished line fetches rhymes")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    settings = Settings.from_env().override(
        api_key=args.api_key,
        model=args.model,
        lexicon_path=args.lexicon,
        offline=args.offline,
    )

    if args.command == "key":
        _print_keys(args.words)
    elif args.command == "groups":
        text = _read_text(args.file)
        state = EditorState.from_text(text)
        if args.color:
            print(render_ansi(text, state.groups))
            print()
        _print_groups(state.groups)
        _print_stats(state.stats)
    elif args.command == "suggest":
        context = _read_text(args.context) if args.context else ""
        completion = make_completion(args.word, context)
        if completion is None:
            parser.error(f"'{args.word}' is too short to rhyme with")
        try:
            provider = create_provider(settings, context)
        except ConfigurationError as exc:
            parser.error(str(exc))
        with SuggestionDispatcher(provider) as dispatcher:
            _print_suggestions(completion, fetch_with_progress(dispatcher, completion))
    elif args.command == "write":
        try:
            provider = create_provider(settings)
        except ConfigurationError as exc:
            parser.error(str(exc))
        with SuggestionDispatcher(provider) as dispatcher:
            run_session(sys.stdin, dispatcher)


def create_provider(settings: Settings, context: str = "") -> SuggestionProvider:
    """Return the provider selected by ``settings``."""

    if settings.offline:
        vocabulary: List[str] = []
        if settings.lexicon_path is not None:
            vocabulary.extend(load_lexicon(settings.lexicon_path))
        vocabulary.extend(tokens(context))
        LOGGER.debug("Offline suggestions from %s words", len(vocabulary))
        return StaticSuggestionProvider(vocabulary, limit=settings.max_suggestions)
    return GeminiSuggestionProvider(settings)


def fetch_with_progress(dispatcher: SuggestionDispatcher, completion: Completion) -> List[Suggestion]:
    """Fetch suggestions while a progress bar ticks along."""

    results: List[Suggestion] = []

    def _collect(_request: Completion, suggestions: List[Suggestion]) -> None:
        results.extend(suggestions)

    with tqdm(total=MAX_SUGGESTIONS, desc="Searching rhymes", unit="found", leave=False) as bar:

        def _update(value: int) -> None:
            bar.n = value
            bar.refresh()

        ticker = ProgressTicker(on_change=_update, linger=0)
        ticker.start()
        try:
            dispatcher.submit(completion, _collect).result()
        finally:
            ticker.finish()
    return results


def run_session(stream: TextIO, dispatcher: SuggestionDispatcher) -> EditorState:
    """Feed lines from ``stream`` through the editor, fetching rhymes per line."""

    state = EditorState()
    for raw in stream:
        line = raw.rstrip("\n")
        state = state.change_text(state.text + line)
        typed_completion = state.completion
        state = state.press_enter()
        completion = state.completion or typed_completion
        print(render_ansi(state.text.rstrip("\n"), state.groups))
        _print_groups(state.groups)
        if completion is not None:
            _print_suggestions(completion, fetch_with_progress(dispatcher, completion))
    _print_stats(state.stats)
    return state


def render_ansi(text: str, groups: Sequence[RhymeGroup]) -> str:
    """Render ``text`` with rhyme groups as 24-bit ANSI background colours."""

    lines: List[str] = []
    for parts in highlight_text(text, groups):
        rendered: List[str] = []
        for part in parts:
            if part.highlighted:
                r, g, b = _hex_to_rgb(part.color)
                rendered.append(f"\x1b[30;48;2;{r};{g};{b}m{part.original}\x1b[0m")
            elif part.clean:
                r, g, b = _hex_to_rgb(BASE_COLOR)
                rendered.append(f"\x1b[38;2;{r};{g};{b}m{part.original}\x1b[0m")
            else:
                rendered.append(part.original)
        lines.append("".join(rendered))
    return "\n".join(lines)


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _read_text(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf8")


def _print_keys(words: Iterable[str]) -> None:
    rows = []
    for word in words:
        info = PolishWord(word)
        rows.append([word, info.clean, info.rhyme_key, info.vowel_pattern, info.syllable_count])
    print(tabulate(rows, headers=["Word", "Clean", "Rhyme key", "Vowels", "Syllables"]))


def _print_groups(groups: Sequence[RhymeGroup]) -> None:
    if not groups:
        print("No rhyme groups found")
        return
    rows = [
        [group.key.upper(), group.color, group.occurrences, ", ".join(sorted(group.words))]
        for group in groups
    ]
    print(tabulate(rows, headers=["Pattern", "Color", "Count", "Words"]))


def _print_stats(stats: TextStats) -> None:
    print(f"L: {stats.lines}  W: {stats.words}  SYLLABLES: {stats.last_word_syllables}")


def _print_suggestions(completion: Completion, suggestions: Sequence[Suggestion]) -> None:
    if not suggestions:
        print(f"No rhymes found for {completion.word}")
        return
    print(f"Rhymes for {completion.word} ({completion.pattern}, {completion.syllables} syllables):")
    rows = [[suggestion.word, f"{suggestion.syllables}s", suggestion.pattern] for suggestion in suggestions]
    print(tabulate(rows, headers=["Word", "Syllables", "Vowels"]))


if __name__ == "__main__":  # pragma: no cover
    main()
