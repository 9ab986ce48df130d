"""Rhyme grouping and highlighting built on top of the phonetic helpers."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Set

from .models import RhymeGroup, TextStats, WordData
from .phonetics import clean_word, count_syllables, extract_rhyme_key, last_token, tokens

RHYME_COLORS = (
    "#FF0000",  # red
    "#FF8C00",  # orange
    "#FFD700",  # yellow
    "#32CD32",  # green
    "#1E90FF",  # blue
    "#9370DB",  # purple
    "#FF1493",  # pink
    "#00CED1",  # cyan
)

BASE_COLOR = "#20C20E"

_WHITESPACE_SPLIT_RE = re.compile(r"(\s+)")


class _KeyStats:
    __slots__ = ("count", "words")

    def __init__(self) -> None:
        self.count = 0
        self.words: Set[str] = set()


def group_rhymes(text: str, palette: Sequence[str] = RHYME_COLORS) -> List[RhymeGroup]:
    """Group the words of ``text`` by rhyme key.

    Only keys seen at least twice are kept, counting raw occurrences, so a
    word repeated on its own still forms a group. Groups come back in the
    order their key was first seen and take colours from ``palette`` in turn.
    """

    if not palette:
        raise ValueError("palette must contain at least one colour")
    stats: Dict[str, _KeyStats] = {}
    for line in text.split("\n"):
        for token in tokens(line):
            cleaned = clean_word(token)
            if len(cleaned) <= 1:
                continue
            key = extract_rhyme_key(cleaned)
            if not key:
                continue
            entry = stats.get(key)
            if entry is None:
                entry = stats[key] = _KeyStats()
            entry.count += 1
            entry.words.add(cleaned.lower())

    active = [(key, entry) for key, entry in stats.items() if entry.count >= 2]
    return [
        RhymeGroup(
            key=key,
            words=frozenset(entry.words),
            color=palette[index % len(palette)],
            occurrences=entry.count,
        )
        for index, (key, entry) in enumerate(active)
    ]


def highlight_line(line: str, groups: Sequence[RhymeGroup]) -> List[WordData]:
    """Split ``line`` into tokens and whitespace runs and colour each one."""

    index_by_key = {group.key: index for index, group in enumerate(groups)}
    parts: List[WordData] = []
    for part in _WHITESPACE_SPLIT_RE.split(line):
        if not part:
            continue
        cleaned = clean_word(part)
        key: Optional[str] = extract_rhyme_key(cleaned) if cleaned else None
        group_index = index_by_key.get(key) if key else None
        color = groups[group_index].color if group_index is not None else BASE_COLOR
        parts.append(
            WordData(original=part, clean=cleaned, key=key, group_index=group_index, color=color)
        )
    return parts


def highlight_text(text: str, groups: Optional[Sequence[RhymeGroup]] = None) -> List[List[WordData]]:
    """Return highlighted tokens for every line of ``text``."""

    if groups is None:
        groups = group_rhymes(text)
    return [highlight_line(line, groups) for line in text.split("\n")]


def text_stats(text: str) -> TextStats:
    """Return line, word and trailing syllable counts for a footer display."""

    lines = sum(1 for line in text.split("\n") if line.strip())
    words = len(tokens(text))
    last = clean_word(last_token(text))
    return TextStats(lines=lines, words=words, last_word_syllables=count_syllables(last))
