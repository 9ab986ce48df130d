import _bootstrap  # noqa: F401

from rhyme_lab.editor import EditorState, detect_completion, make_completion


def test_enter_terminates_line_and_requests_rhymes():
    state = EditorState.from_text("rytm").press_enter()
    assert state.text == "rytm.\n"
    assert state.cursor == 6
    completion = state.completion
    assert completion.word == "rytm"
    assert completion.pattern == "i"
    assert completion.syllables == 1
    assert completion.context == "rytm.\n"


def test_enter_after_period_inserts_plain_break():
    state = EditorState.from_text("kot.").press_enter()
    assert state.text == "kot.\n"
    assert state.completion is None


def test_enter_on_blank_line():
    state = EditorState().press_enter()
    assert state.text == "\n"
    assert state.cursor == 1
    assert state.completion is None


def test_enter_in_middle_of_text():
    state = EditorState.from_text("kot\npłot").press_enter(cursor=3)
    assert state.text == "kot.\n\npłot"
    assert state.cursor == 5
    assert state.completion.word == "kot"


def test_typing_period_completes_line():
    state = EditorState().change_text("ala ma kota.")
    assert state.completion.word == "kota"
    assert state.completion.pattern == "oa"
    assert state.completion.context == "ala ma kota."


def test_change_text_regroups_and_clears_completion():
    state = EditorState().change_text("kura dziura.")
    assert [group.key for group in state.groups] == ["ura"]
    state = state.change_text("kura dziura. but")
    assert state.completion is None
    assert state.cursor == len("kura dziura. but")


def test_short_words_do_not_complete():
    assert detect_completion("a.") is None
    assert make_completion("(x)", "") is None
    assert EditorState.from_text("w").press_enter().completion is None


def test_states_are_snapshots():
    first = EditorState.from_text("kot")
    second = first.press_enter()
    assert first.text == "kot"
    assert second is not first


def test_detect_completion_needs_trailing_period():
    assert detect_completion("ala ma kota") is None
    completion = detect_completion("kura i dziura.")
    assert completion.word == "dziura"
    assert completion.syllables == 3
