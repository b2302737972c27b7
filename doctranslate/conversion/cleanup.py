"""Named, ordered rewrite rules applied to normalized markup.

Each rule is a plain ``str -> str`` function registered with a name so it can
be tested on its own; ``apply_rules`` runs a chain in order. The PDF chain is
idempotent: running it on its own output changes nothing.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, NamedTuple

logger = logging.getLogger(__name__)

HEADING_LINE = re.compile(r"^#{1,6} \S")
LIST_LINE = re.compile(r"^(?:[-*+] |\d+\. )")
RULE_LINE = re.compile(r"^---$")
ORDERED_MARKER = re.compile(r"^\d+\.[ \t]+", re.MULTILINE)


class RewriteRule(NamedTuple):
    name: str
    apply: Callable[[str], str]


def apply_rules(text: str, rules: Iterable[RewriteRule]) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


def normalize_line_endings(text: str) -> str:
    return re.sub(r"\r\n?", "\n", text)


def trim_trailing_whitespace(text: str) -> str:
    return re.sub(r"[ \t]+$", "", text, flags=re.MULTILINE)


def is_block_line(line: str) -> bool:
    return bool(HEADING_LINE.match(line) or LIST_LINE.match(line) or RULE_LINE.match(line))


def isolate_block_lines(text: str) -> str:
    """Put exactly one blank line before and after headings, list lines and rules."""
    output: List[str] = []
    need_blank = False
    for line in text.split("\n"):
        blank = not line.strip()
        if blank:
            output.append(line)
            need_blank = False
            continue
        block = is_block_line(line)
        if (block or need_blank) and output and output[-1].strip():
            output.append("")
        output.append(line)
        need_blank = block
    return "\n".join(output)


def collapse_blank_runs(text: str) -> str:
    """Collapse four or more newlines to three (at most two blank lines)."""
    return re.sub(r"\n{4,}", "\n\n\n", text)


def strip_edges(text: str) -> str:
    return text.strip()


def drop_code_fences(text: str) -> str:
    return re.sub(r"```[^`]*```", "", text)


def collapse_asterisk_runs(text: str) -> str:
    return re.sub(r"\*{3,}", "**", text)


def strip_bullet_number_conflicts(text: str) -> str:
    """Keep the numeral when a line carries both a bullet and a number prefix."""
    text = re.sub(r"^[-*•]+[ \t]*(\d+\.)(?=[ \t])", r"\1", text, flags=re.MULTILINE)
    return re.sub(r"^(\d+\.)[ \t]*[-*•]+[ \t]+", r"\1 ", text, flags=re.MULTILINE)


def renumber_ordered_markers(text: str) -> str:
    """Number each ordered marker after the count of markers that precede it."""
    counter = 0

    def replace(match: re.Match) -> str:
        nonlocal counter
        counter += 1
        return f"{counter}. "

    return ORDERED_MARKER.sub(replace, text)


def space_headings(text: str) -> str:
    return re.sub(r"^(#{1,6} .*?)$", r"\n\n\1\n\n", text, flags=re.MULTILINE)


def merge_orphan_newlines(text: str) -> str:
    return re.sub(r"(?<=[^\n])\n(?=[^\n])", "\n\n", text)


PDF_CLEANUP_RULES: List[RewriteRule] = [
    # An indented first line only becomes a block line once the edges are stripped.
    RewriteRule("strip_edges", strip_edges),
    RewriteRule("trim_trailing_whitespace", trim_trailing_whitespace),
    RewriteRule("isolate_block_lines", isolate_block_lines),
    RewriteRule("collapse_blank_runs", collapse_blank_runs),
    RewriteRule("strip_edges", strip_edges),
]

WORD_CLEANUP_RULES: List[RewriteRule] = [
    RewriteRule("normalize_line_endings", normalize_line_endings),
    RewriteRule("drop_code_fences", drop_code_fences),
    RewriteRule("collapse_asterisk_runs", collapse_asterisk_runs),
    RewriteRule("strip_bullet_number_conflicts", strip_bullet_number_conflicts),
    RewriteRule("renumber_ordered_markers", renumber_ordered_markers),
    RewriteRule("trim_trailing_whitespace", trim_trailing_whitespace),
    RewriteRule("space_headings", space_headings),
    RewriteRule("merge_orphan_newlines", merge_orphan_newlines),
    RewriteRule("collapse_blank_runs", collapse_blank_runs),
    RewriteRule("strip_edges", strip_edges),
]


def cleanup_markup(text: str) -> str:
    """Run the PDF cleanup chain."""
    cleaned = apply_rules(text, PDF_CLEANUP_RULES)
    logger.debug("Cleanup reduced markup from %s to %s characters", len(text), len(cleaned))
    return cleaned
