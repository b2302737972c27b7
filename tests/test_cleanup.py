import pytest

from doctranslate.conversion.cleanup import (
    PDF_CLEANUP_RULES,
    WORD_CLEANUP_RULES,
    apply_rules,
    cleanup_markup,
    collapse_blank_runs,
    isolate_block_lines,
    renumber_ordered_markers,
    strip_bullet_number_conflicts,
)

SAMPLES = [
    "# Title\nBody line\n- item\n- item two\nafter   \n\n\n\n\nend",
    "plain text only",
    "## Heading\n\n\n---\n\nText\n1. one\n2. two",
    "   \n\n# A\n\n\n\n\n\n## B\nline\nline\n",
    "  - item\nbody",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_cleanup_is_idempotent(text):
    once = cleanup_markup(text)
    assert cleanup_markup(once) == once


@pytest.mark.parametrize("rule", PDF_CLEANUP_RULES, ids=lambda rule: rule.name)
def test_each_pdf_rule_is_idempotent(rule):
    for text in SAMPLES:
        once = rule.apply(text)
        assert rule.apply(once) == once


def test_block_lines_get_blank_lines_around_them():
    assert isolate_block_lines("intro\n# Head\ntext") == "intro\n\n# Head\n\ntext"
    assert isolate_block_lines("- a\n- b") == "- a\n\n- b"


def test_collapse_blank_runs_keeps_three_newlines():
    assert collapse_blank_runs("a\n\n\n\n\n\nb") == "a\n\n\nb"
    assert collapse_blank_runs("a\n\n\nb") == "a\n\n\nb"


def test_cleanup_strips_trailing_whitespace_and_edges():
    assert cleanup_markup("\n\nline   \nnext\t\n\n") == "line\nnext"


def test_bullet_number_conflicts_keep_the_numeral():
    assert strip_bullet_number_conflicts("- 3. Item") == "3. Item"
    assert strip_bullet_number_conflicts("2. - Item") == "2. Item"
    assert strip_bullet_number_conflicts("**bold** text") == "**bold** text"


def test_renumber_counts_prior_markers():
    assert renumber_ordered_markers("1. a\n1. b\ntext\n1. c") == "1. a\n2. b\ntext\n3. c"
    assert renumber_ordered_markers("  1. nested") == "  1. nested"


def test_word_chain_drops_fences_and_asterisk_runs():
    text = "```\ncode\n```\n***strong***\r\nnext"
    assert apply_rules(text, WORD_CLEANUP_RULES) == "**strong**\n\nnext"


def test_indented_first_line_is_isolated_once_stripped():
    once = cleanup_markup("  - item\nbody")
    assert once == "- item\n\nbody"
    assert cleanup_markup(once) == once
