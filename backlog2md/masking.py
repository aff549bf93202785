"""
Masking of block constructs behind placeholder tokens.

Code blocks, quote blocks and plain paragraph lines are swapped for
``{{KIND-<index>}}`` tokens before the structural rules run, so those rules
never see their content. The originals are kept in a ``PlaceholderStore``
and put back by ``unmask_blocks``.
"""

import logging
import re

from .constants import (
    CODE_CLOSE,
    CODE_FENCE,
    CODE_KIND,
    CODE_OPEN,
    PARAGRAPH_KIND,
    QUOTE_CLOSE,
    QUOTE_KIND,
    QUOTE_OPEN,
    QUOTE_PREFIX,
    STRUCTURAL_PREFIXES,
)
from .inline import convert_inline

logger = logging.getLogger(__name__)

KINDS = (CODE_KIND, QUOTE_KIND, PARAGRAPH_KIND)


class PlaceholderStore:
    """Ordered, append-only storage of masked blocks, one list per kind."""

    def __init__(self):
        self.blocks = {kind: [] for kind in KINDS}

    def add(self, kind, content):
        """Store ``content`` and return the token that stands for it."""
        self.blocks[kind].append(content)
        return token_for(kind, len(self.blocks[kind]) - 1)

    def get(self, kind, index):
        blocks = self.blocks[kind]
        if 0 <= index < len(blocks):
            return blocks[index]
        return None

    def count(self, kind):
        return len(self.blocks[kind])


def token_for(kind, index):
    return "{{" + f"{kind}-{index}" + "}}"


def token_pattern(kind):
    return r"\{\{" + kind + r"-(?P<index>\d+)\}\}"


def _delimited_block_pattern(opening, closing):
    # the closing newline is not consumed, it may open the next block
    return r"\n" + re.escape(opening) + r"(?P<body>[\s\S]*?)" + re.escape(closing) + r"(?=\n)"


def _is_paragraph(line):
    if not line or line[0] in STRUCTURAL_PREFIXES or line[0].isspace():
        return False
    return not (line.startswith("{{" + CODE_KIND) or line.startswith("{{" + QUOTE_KIND))


def mask_blocks(text, store):
    """Replace code, quote and paragraph blocks of ``text`` with tokens."""
    text = re.sub(
        _delimited_block_pattern(CODE_OPEN, CODE_CLOSE),
        lambda m: f"\n{store.add(CODE_KIND, m.group('body'))}",
        text,
    )
    text = re.sub(
        _delimited_block_pattern(QUOTE_OPEN, QUOTE_CLOSE),
        lambda m: f"\n{store.add(QUOTE_KIND, m.group('body'))}",
        text,
    )

    def mask_paragraph(match):
        line = match.group(0)
        if _is_paragraph(line):
            return store.add(PARAGRAPH_KIND, line)
        return line

    text = re.sub(r"^.*$", mask_paragraph, text, flags=re.MULTILINE)

    # A run of paragraphs ends with a blank line
    text = re.sub(
        r"\n\{\{" + PARAGRAPH_KIND + r"-.*?\}\}\n(?!\{\{)",
        lambda m: m.group(0) + "\n",
        text,
    )

    logger.debug(
        "Masked %d code, %d quote and %d paragraph blocks",
        store.count(CODE_KIND), store.count(QUOTE_KIND), store.count(PARAGRAPH_KIND),
    )
    return text


def render_code(content):
    content = content.strip()
    if not content:
        return f"\n{CODE_FENCE}\n{CODE_FENCE}\n"
    return f"\n{CODE_FENCE}\n{content}\n{CODE_FENCE}\n"


def _restore(kind, text, store, render):
    """
    Replace the ``kind`` tokens of ``text`` with their rendered blocks.

    Blank line cleanup already ran, so a padding newline of the rendered
    block is dropped where a blank line is already there.
    """
    result = ""
    last = 0
    for match in re.finditer(token_pattern(kind), text):
        result += text[last:match.start()]
        last = match.end()

        content = store.get(kind, int(match.group("index")))
        if content is None:
            # Token-like text from the source, not one of ours
            result += match.group(0)
            continue

        rendered = render(content)
        if rendered.startswith("\n") and result.endswith("\n\n"):
            rendered = rendered[1:]
        if rendered.endswith("\n") and text.startswith("\n\n", match.end()):
            rendered = rendered[:-1]
        result += rendered

    return result + text[last:]


def unmask_blocks(text, store):
    """Put the masked blocks back: code, then quote, then paragraph."""

    def render_quote(content):
        content = convert_inline(content.strip())
        # code blocks nested in a quote were masked into the quote itself
        content = _restore(CODE_KIND, content, store, render_code)
        content = content.replace("\n", "\n" + QUOTE_PREFIX)
        return f"\n{QUOTE_PREFIX}{content}\n"

    text = _restore(CODE_KIND, text, store, render_code)
    text = _restore(QUOTE_KIND, text, store, render_quote)
    text = _restore(PARAGRAPH_KIND, text, store, lambda content: convert_inline(content.strip()))
    return text
