"""Rhyme lab package for Polish rhyme highlighting and suggestions."""

from .editor import EditorState
from .phonetics import PolishWord, clean_word, count_syllables, extract_rhyme_key, vowel_pattern
from .rhymes import RHYME_COLORS, group_rhymes, highlight_text, text_stats
from .suggestions import GeminiSuggestionProvider, SuggestionDispatcher, SuggestionProvider

__all__ = [
    "EditorState",
    "GeminiSuggestionProvider",
    "PolishWord",
    "RHYME_COLORS",
    "SuggestionDispatcher",
    "SuggestionProvider",
    "clean_word",
    "count_syllables",
    "extract_rhyme_key",
    "group_rhymes",
    "highlight_text",
    "text_stats",
    "vowel_pattern",
]
