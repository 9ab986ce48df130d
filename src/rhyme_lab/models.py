"""Dataclasses representing analysis results."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class RhymeGroup:
    key: str
    words: FrozenSet[str]
    color: str
    occurrences: int = 0


@dataclass(frozen=True)
class WordData:
    original: str
    clean: str
    key: Optional[str]
    group_index: Optional[int]
    color: str

    @property
    def highlighted(self) -> bool:
        return self.group_index is not None


@dataclass(frozen=True)
class Suggestion:
    word: str
    pattern: str
    syllables: int


@dataclass(frozen=True)
class TextStats:
    lines: int
    words: int
    last_word_syllables: int


@dataclass(frozen=True)
class Completion:
    """A finished line waiting for rhyme suggestions."""

    word: str
    pattern: str
    syllables: int
    context: str
    sequence: int = 0

    def with_sequence(self, sequence: int) -> "Completion":
        return replace(self, sequence=sequence)
