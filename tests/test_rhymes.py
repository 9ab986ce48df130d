import _bootstrap  # noqa: F401

import pytest

from rhyme_lab.rhymes import (
    BASE_COLOR,
    RHYME_COLORS,
    group_rhymes,
    highlight_line,
    highlight_text,
    text_stats,
)


def test_group_rhymes_keeps_shared_keys():
    groups = group_rhymes("kura dziura but")
    assert len(groups) == 1
    assert groups[0].key == "ura"
    assert groups[0].words == {"kura", "dziura"}
    assert groups[0].color == RHYME_COLORS[0]


def test_repeated_word_forms_group():
    groups = group_rhymes("kot kot")
    assert [group.key for group in groups] == ["ot"]
    assert groups[0].words == {"kot"}
    assert groups[0].occurrences == 2


def test_groups_follow_first_discovery_order():
    groups = group_rhymes("kot kura\npłot dziura")
    assert [group.key for group in groups] == ["ot", "ura"]
    assert [group.color for group in groups] == list(RHYME_COLORS[:2])


def test_palette_cycles():
    groups = group_rhymes("kot płot kura dziura lis bis", palette=("a", "b"))
    assert [(group.key, group.color) for group in groups] == [("ot", "a"), ("ura", "b"), ("is", "a")]


def test_grouping_is_deterministic():
    text = "kot płot\nkura dziura\nlis bis"
    assert group_rhymes(text) == group_rhymes(text)


def test_short_and_punctuation_tokens_are_skipped():
    assert group_rhymes("a a w w , , ...") == []


def test_grouping_ignores_case_and_punctuation():
    groups = group_rhymes("Kot, kot. płot!")
    assert groups[0].words == {"kot", "płot"}
    assert groups[0].occurrences == 3


def test_empty_palette_is_rejected():
    with pytest.raises(ValueError):
        group_rhymes("kot kot", palette=())


def test_highlight_line_colours_grouped_tokens():
    groups = group_rhymes("kura dziura but")
    parts = highlight_line("kura  but,", groups)
    assert [part.original for part in parts] == ["kura", "  ", "but,"]
    kura, space, but = parts
    assert kura.group_index == 0 and kura.color == RHYME_COLORS[0]
    assert space.key is None and space.color == BASE_COLOR
    assert but.key == "ut" and not but.highlighted


def test_highlight_text_splits_lines():
    lines = highlight_text("kot\npłot")
    assert len(lines) == 2
    assert all(part.highlighted for line in lines for part in line)


def test_text_stats():
    stats = text_stats("Ala ma kota\n\n  rytm.")
    assert stats.lines == 2
    assert stats.words == 4
    assert stats.last_word_syllables == 1
    assert text_stats("").last_word_syllables == 0
