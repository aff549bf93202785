"""
Structural (line and block level) Backlog notation: headings, tables,
ordered and unordered lists, rules and escapes.

Every rule works on the whole document, in the order given by
``build_layout_rules``. The table rules are several passes on purpose:
each one expects the row shapes left by the previous one.
"""

import re

from .constants import ALIGNMENT_SEGMENT, LIST_INDENT
from .inline import convert_inline
from .replacers import Rule, literal

# From "\n|" up to the first "|\n" that is not followed by another row
TABLE_BLOCK = r"\n\|(?P<body>[\s\S]*?)\|\n(?!\|)"
ORDERED_LIST_BLOCK = r"\n\+(?P<body>[\s\S]*?)\n\n"


def _heading(match):
    level = "#" * len(match.group("markers"))
    return f"\n{level} {convert_inline(match.group('text').strip())}\n"


# --- Tables ---

def _alignment_row(columns):
    return ALIGNMENT_SEGMENT * columns + "|"


def _clean_cells(cells):
    """Normalise row-header markers and empty cells of a row's inner text."""
    cells = re.sub(r"\|~", "|", cells)
    cells = re.sub(r"^~", "", cells)
    cells = re.sub(r"\|\|", "| |", cells)
    cells = re.sub(r"^\|", " |", cells)
    cells = re.sub(r"\|$", "| ", cells)
    return cells


def _separate_table(match):
    return f"\n|{match.group('body')}|\n\n"


def _add_missing_alignment_row(match):
    body = match.group("body")
    if "|h\n" in body:
        return f"\n|{body}|\n"

    first_row = f"|{body}|".split("\n")[0].rstrip()
    columns = first_row.count("|") - 1
    return f"\n{_alignment_row(columns)}\n|{body}|\n"


def _table_row(match):
    return f"|{_clean_cells(match.group('cells'))}|{match.group('tail')}"


def _table_header_row(match):
    cells = match.group("cells")
    alignment = _alignment_row(len(cells.split("|")))
    return f"\n|{_clean_cells(cells)}|\n{alignment}"


def _convert_table_cells(match):
    return f"\n|{convert_inline(match.group('body'))}|\n\n{match.group('next')}"


def _surround_table(match):
    return f"\n\n|{match.group('body')}|\n\n"


def _missing_header(promote_first_row):
    """Fix a table that got an alignment row but no header line above it."""

    def replace(match):
        alignment = match.group("alignment")
        first_row = match.group("row")
        if promote_first_row:
            return f"\n{first_row}\n{alignment}"
        empty_header = re.sub(r":-*", "", alignment)
        return f"\n{empty_header}\n{alignment}\n{first_row}"

    return replace


# --- Lists ---

class ListCounters:
    """Item numbers per nesting level, for one ordered list only.

    Leaving a level for a shallower one resets the level being left, so a
    sub-list starts again at 1 when it is entered next. Shallower levels keep
    counting across their sub-lists.
    """

    def __init__(self):
        self.counts = {}
        self.level = 0

    def next(self, level):
        # Backlog's own numbering: a jump of several levels only resets the one left
        if level < self.level:
            self.counts[self.level] = 0
        self.level = level
        self.counts[level] = self.counts.get(level, 0) + 1
        return self.counts[level]


def _space_after_markers(match):
    return f"{match.group('markers')} {match.group('text').strip()}"


def _indent_markers(match):
    return LIST_INDENT * len(match.group("markers")) + match.group("text")


def _separate_ordered_list(match):
    return f"\n+{match.group('body')}\n\n\n"


def _ordered_list(match):
    body = "\n+" + match.group("body").strip()
    body = re.sub(r"^(?P<markers>\++)(?P<text>.*)$", _space_after_markers, body, flags=re.MULTILINE)
    body = body.strip()

    counters = ListCounters()
    lines = []
    for line in body.split("\n"):
        number = counters.next(len(line.split(" ")[0]))
        lines.append(convert_inline(line.replace("+ ", f"{number}. ", 1)))
    body = "\n".join(lines) + "\n"

    # markers left over on nested items become indentation
    body = re.sub(r"^(?P<markers>\++)(?P<text>.*)", _indent_markers, body, flags=re.MULTILINE)
    return f"\n{body}\n"


def _unordered_list(match):
    markers = match.group("markers")
    text = match.group("text")
    if not text:
        # horizontal rule
        return markers
    indent = LIST_INDENT * (len(markers) - 1)
    return f"{indent}- {convert_inline(text).strip()}"


def build_layout_rules(promote_first_row=False):
    """Return the ordered structural rules for one conversion."""
    return [
        # leftover carriage returns
        literal(r"\n\r", "\n"),
        literal(r"\r", "\n"),

        Rule(r"^(?P<markers>\*+)(?P<text>.*)$", _heading, re.MULTILINE),

        # tables without a header row get an alignment row above them
        Rule(TABLE_BLOCK, _separate_table),
        Rule(TABLE_BLOCK, _add_missing_alignment_row),
        # data rows, then header rows ("|...|h")
        Rule(r"^\|(?P<cells>.*)\|(?P<tail>\s?)$", _table_row, re.MULTILINE),
        Rule(r"^\|(?P<cells>.*)\|h\s?$", _table_header_row, re.MULTILINE),
        Rule(r"\n\|(?P<body>[\s\S]*?)\|\n(?P<next>[^|])", _convert_table_cells),
        Rule(TABLE_BLOCK, _surround_table),
        # blank line, alignment row, first row
        Rule(r"^\n(?P<alignment>\|:.*)\n(?P<row>.*$)", _missing_header(promote_first_row), re.MULTILINE),

        Rule(ORDERED_LIST_BLOCK, _separate_ordered_list),
        Rule(ORDERED_LIST_BLOCK, _ordered_list),

        Rule(r"^(?P<markers>-+)(?P<text>.*)$", _unordered_list, re.MULTILINE),

        # Markdown in Backlog ignores <br>
        literal(r"&br;", " <br>"),
        # last, entities emitted above are left alone
        literal(r"&(?!(?:[A-Za-z]+|#(?:\d+|[xX][0-9A-Fa-f]+));)", "&amp;"),
    ]
