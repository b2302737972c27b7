"""Split one line of normalized markup into bold/italic styled runs."""

from __future__ import annotations

import re
from typing import List

from doctranslate.models.markup import StyledRun

BLANK_RUN = re.compile(r"_{3,}")
PLACEHOLDER = re.compile("\ue000(\\d+)\ue001")
BOLD_ITALIC_LABEL = re.compile(r"^\*\*\*([^*]+)\*\*\s*:\s*(.*?)\*$")
BOLD_LABEL = re.compile(r"^\*\*([^*]+)\*\*\s*:\s*(.*)$")
BOLD_SPAN = re.compile(r"(\*\*\*.+?\*\*\*|\*\*.+?\*\*)")
ITALIC_SPAN = re.compile(r"(\*[^*]+?\*|(?<![\w_])_[^_]+?_(?![\w_]))")


def protect_blanks(text: str) -> str:
    """Replace answer-blank underscore runs with placeholders carrying their length."""
    return BLANK_RUN.sub(lambda m: f"\ue000{len(m.group(0))}\ue001", text)


def restore_blanks(text: str) -> str:
    return PLACEHOLDER.sub(lambda m: "_" * int(m.group(1)), text)


def _is_italic_span(part: str) -> bool:
    return len(part) > 2 and (
        (part.startswith("*") and part.endswith("*"))
        or (part.startswith("_") and part.endswith("_"))
    )


def _split_italic(text: str, bold: bool) -> List[StyledRun]:
    runs: List[StyledRun] = []
    for part in ITALIC_SPAN.split(text):
        if not part:
            continue
        if _is_italic_span(part):
            runs.append(StyledRun(text=part[1:-1], bold=bold, italic=True))
        else:
            runs.append(StyledRun(text=part, bold=bold))
    return runs


def segment_line(line: str) -> List[StyledRun]:
    """Return the styled runs of ``line`` in source order."""
    protected = protect_blanks(line)

    italic_label = BOLD_ITALIC_LABEL.match(protected)
    label = BOLD_LABEL.match(protected)
    if italic_label:
        # Bold label of an italic line: "***Label**: rest*".
        runs = [
            StyledRun(text=italic_label.group(1), bold=True, italic=True),
            StyledRun(text=": ", italic=True),
            StyledRun(text=italic_label.group(2), italic=True),
        ]
    elif label:
        runs = [
            StyledRun(text=label.group(1), bold=True),
            StyledRun(text=": "),
            StyledRun(text=label.group(2)),
        ]
    elif "*" not in protected and "_" not in protected:
        runs = [StyledRun(text=protected)]
    else:
        runs = []
        for part in BOLD_SPAN.split(protected):
            if not part:
                continue
            if len(part) > 6 and part.startswith("***") and part.endswith("***"):
                runs.append(StyledRun(text=part[3:-3], bold=True, italic=True))
            elif len(part) > 4 and part.startswith("**") and part.endswith("**"):
                runs.extend(_split_italic(part[2:-2], bold=True))
            else:
                runs.extend(_split_italic(part, bold=False))
        if not runs:
            runs = [StyledRun(text=protected)]

    for run in runs:
        run.text = restore_blanks(run.text)
    return runs


def segment_text(text: str) -> List[StyledRun]:
    """Segment multi-line content, separating lines with line-break runs."""
    runs: List[StyledRun] = []
    for index, line in enumerate(text.split("\n")):
        if index:
            runs.append(StyledRun(line_break=True))
        line = line.rstrip()
        if line.endswith("\\"):
            line = line[:-1].rstrip()
        if line:
            runs.extend(segment_line(line))
    return runs
