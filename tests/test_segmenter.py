from doctranslate.conversion.segmenter import protect_blanks, restore_blanks, segment_line, segment_text


def _plain(runs):
    return [(run.text, run.bold, run.italic) for run in runs]


def test_plain_line_is_single_run():
    assert _plain(segment_line("Just some text.")) == [("Just some text.", False, False)]


def test_bold_label_yields_three_runs():
    assert _plain(segment_line("**Name**: John Smith")) == [
        ("Name", True, False),
        (": ", False, False),
        ("John Smith", False, False),
    ]


def test_bold_label_with_empty_rest_still_three_runs():
    runs = segment_line("**Note**:")
    assert len(runs) == 3
    assert runs[0].bold and runs[0].text == "Note"
    assert runs[2].text == ""


def test_bold_and_italic_spans_in_order():
    assert _plain(segment_line("Plain **bold** and *it*")) == [
        ("Plain ", False, False),
        ("bold", True, False),
        (" and ", False, False),
        ("it", False, True),
    ]


def test_italic_nested_in_bold():
    assert _plain(segment_line("**bold *both* end**")) == [
        ("bold ", True, False),
        ("both", True, True),
        (" end", True, False),
    ]


def test_underscore_italic_needs_word_boundaries():
    assert _plain(segment_line("see _this_ now")) == [
        ("see ", False, False),
        ("this", False, True),
        (" now", False, False),
    ]
    assert _plain(segment_line("snake_case_name")) == [("snake_case_name", False, False)]


def test_blank_runs_survive_segmentation():
    runs = segment_line("Fill in ___ and _this_ then _____")
    assert "".join(run.text for run in runs) == "Fill in ___ and this then _____"
    assert not any(run.italic for run in runs if "___" in run.text)


def test_blank_only_line():
    assert _plain(segment_line("Answer: ______")) == [("Answer: ______", False, False)]


def test_placeholders_round_trip():
    text = "a ___ b _______"
    assert "_" not in protect_blanks(text)
    assert restore_blanks(protect_blanks(text)) == text


def test_segment_text_inserts_line_breaks():
    runs = segment_text("first line\\\nsecond **line**")
    assert [run.line_break for run in runs] == [False, True, False, False]
    assert runs[0].text == "first line"
    assert runs[3].bold


def test_fill_in_blank_stays_plain():
    assert _plain(segment_line("Fill in: ____ here")) == [("Fill in: ____ here", False, False)]


def test_nested_emphasis_three_runs():
    assert _plain(segment_line("**bold and *italic* together**")) == [
        ("bold and ", True, False),
        ("italic", True, True),
        (" together", True, False),
    ]


def test_bold_italic_span_is_one_run():
    assert _plain(segment_line("***Note***")) == [("Note", True, True)]


def test_bold_label_of_italic_line():
    assert _plain(segment_line("***Label**: rest*")) == [
        ("Label", True, True),
        (": ", False, True),
        ("rest", False, True),
    ]
