"""Utilities for working with Polish spelling as a stand-in for pronunciation."""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import List

POLISH_VOWELS = frozenset("aeiouyąęó")

# Diacritic and spelling variants folded onto the vowel they sound like.
VOWEL_REPLACEMENTS = {
    "y": "i",
    "ó": "u",
    "ą": "o",
    "ę": "e",
}

PUNCTUATION = ".,/#!$%^&*;:{}=-_`~()"
_PUNCTUATION_RE = re.compile("[" + re.escape(PUNCTUATION) + "]")


@dataclass(frozen=True)
class PolishWord:
    """Structured view of a single word token."""

    text: str

    @property
    def clean(self) -> str:
        """Return the token with punctuation removed."""

        return clean_word(self.text)

    @property
    def rhyme_key(self) -> str:
        """Return the rhyme key of the cleaned token."""

        return extract_rhyme_key(self.clean)

    @property
    def vowel_pattern(self) -> str:
        """Return the canonical vowel sequence of the cleaned token."""

        return vowel_pattern(self.clean)

    @property
    def syllable_count(self) -> int:
        """Number of syllables, one per vowel letter."""

        return len(self.vowel_pattern)


def clean_word(token: str) -> str:
    """Strip punctuation and surrounding whitespace from ``token``.

    Case is preserved. Returns an empty string for punctuation-only input.
    """

    return _PUNCTUATION_RE.sub("", token).strip()


def is_vowel(char: str) -> bool:
    """Return ``True`` if the character is a Polish vowel letter."""

    return char in POLISH_VOWELS


def vowel_indices(word: str) -> List[int]:
    """Return the positions of vowel letters in ``word``."""

    return [index for index, char in enumerate(word) if is_vowel(char)]


def extract_rhyme_key(word: str) -> str:
    """Return the part of ``word`` from its penultimate vowel onward.

    Polish stress falls on the second-to-last syllable, so the rhyme-bearing
    tail starts there. Single-vowel words are keyed from their only vowel and
    words without vowels are keyed on the whole (lowercased) word.
    """

    lowered = word.lower().strip()
    indices = vowel_indices(lowered)
    if len(indices) < 2:
        return lowered[indices[0] :] if indices else lowered
    return lowered[indices[-2] :]


def vowel_pattern(word: str) -> str:
    """Return the canonical vowel sequence of ``word``.

    ``y``, ``ó``, ``ą`` and ``ę`` are folded to ``i``, ``u``, ``o`` and ``e``;
    consonants are dropped.
    """

    normalized = unicodedata.normalize("NFC", word.lower())
    return "".join(VOWEL_REPLACEMENTS.get(char, char) for char in normalized if is_vowel(char))


def count_syllables(word: str) -> int:
    """Return the number of syllables, counting every vowel letter as one."""

    return len(vowel_pattern(word))


def tokens(text: str) -> List[str]:
    """Split text into whitespace separated tokens."""

    return [part for part in text.split() if part]


def last_token(text: str) -> str:
    """Return the final whitespace separated token or an empty string."""

    parts = tokens(text)
    return parts[-1] if parts else ""


def rhymes_with(left: str, right: str) -> bool:
    """Return ``True`` if the two tokens are rhyme-linked."""

    left_key = extract_rhyme_key(clean_word(left))
    return bool(left_key) and left_key == extract_rhyme_key(clean_word(right))
