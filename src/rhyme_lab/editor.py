"""Immutable editor snapshots and the text update cycle.

Every edit produces a new :class:`EditorState`; rhyme groups are derived from
the full text each time, and a finished line yields a :class:`Completion`
that the caller hands to a suggestion dispatcher.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .models import Completion, RhymeGroup, TextStats
from .phonetics import clean_word, count_syllables, last_token, vowel_pattern
from .rhymes import group_rhymes, text_stats

LOGGER = logging.getLogger(__name__)

LINE_END = "."


def make_completion(word: str, context: str) -> Optional[Completion]:
    """Build a suggestion request for ``word`` or ``None`` if it is too short."""

    cleaned = clean_word(word)
    if len(cleaned) <= 1:
        return None
    return Completion(
        word=cleaned,
        pattern=vowel_pattern(cleaned),
        syllables=count_syllables(cleaned),
        context=context,
    )


def detect_completion(text: str) -> Optional[Completion]:
    """Return a completion when ``text`` ends a line with a period."""

    if not text.endswith(LINE_END):
        return None
    word = last_token(text.strip()).replace(LINE_END, "")
    return make_completion(word, text)


@dataclass(frozen=True)
class EditorState:
    """Snapshot of the editor: text, cursor and the values derived from them."""

    text: str = ""
    cursor: int = 0
    groups: Tuple[RhymeGroup, ...] = field(default=())
    completion: Optional[Completion] = None

    @classmethod
    def from_text(cls, text: str) -> "EditorState":
        return cls(text=text, cursor=len(text), groups=tuple(group_rhymes(text)))

    @property
    def stats(self) -> TextStats:
        return text_stats(self.text)

    def change_text(self, text: str, cursor: Optional[int] = None) -> "EditorState":
        """Replace the text, regroup it and check for a completed line."""

        completion = detect_completion(text)
        if completion is not None:
            LOGGER.debug("Line completed with %r", completion.word)
        return replace(
            self,
            text=text,
            cursor=len(text) if cursor is None else cursor,
            groups=tuple(group_rhymes(text)),
            completion=completion,
        )

    def press_enter(self, cursor: Optional[int] = None) -> "EditorState":
        """Insert a line break at ``cursor``.

        A non-empty line that is not already terminated gets a period before
        the break, and its last word becomes a completion.
        """

        position = self.cursor if cursor is None else cursor
        position = max(0, min(position, len(self.text)))
        before = self.text[:position]
        after = self.text[position:]
        current_line = before.split("\n")[-1].strip()

        if not current_line or current_line.endswith(LINE_END):
            text = before + "\n" + after
            return replace(
                self,
                text=text,
                cursor=position + 1,
                groups=tuple(group_rhymes(text)),
                completion=None,
            )

        text = before + LINE_END + "\n" + after
        completion = make_completion(last_token(current_line), text)
        LOGGER.debug("Auto-terminated line %r", current_line)
        return replace(
            self,
            text=text,
            cursor=position + 2,
            groups=tuple(group_rhymes(text)),
            completion=completion,
        )
