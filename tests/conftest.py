from __future__ import annotations

import threading
from types import SimpleNamespace

import _bootstrap  # noqa: F401
import pytest

from rhyme_lab.suggestions import SuggestionProvider


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeClient:
    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)


class GatedProvider(SuggestionProvider):
    """Provider whose answers are held back until a test releases them."""

    def __init__(self):
        self.gates: dict[str, threading.Event] = {}

    def gate(self, word: str) -> threading.Event:
        return self.gates.setdefault(word, threading.Event())

    def suggest(self, word, pattern, syllable_count, context):
        if not self.gate(word).wait(timeout=5):
            return []
        return [f"{word}-rym"]


@pytest.fixture()
def fake_client():
    return FakeClient


@pytest.fixture()
def gated_provider():
    return GatedProvider()


@pytest.fixture()
def sample_text():
    return "Płynie chmura nad miastem,\nkot śpi, a dziura w płocie.\nKura patrzy na płot."


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("GEMINI_API_KEY", "API_KEY", "RHYME_LAB_MODEL", "RHYME_LAB_LEXICON"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
