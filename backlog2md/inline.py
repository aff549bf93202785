"""
Inline (text level) Backlog notation: emphasis, links, colors and embeds.

The rules run on the text of a single paragraph, quote, heading, table or
list item. Escaping ``<`` must stay at the top of ``INLINE_RULES``: the rules
below it emit literal tags (``<span>``) that would otherwise be escaped too.
"""

import re

from .replacers import Rule, apply_rules, literal


def _strong(match):
    return f" **{match.group('text').strip()}** "


def _emphasis(match):
    return f" *{match.group('text').strip()}* "


def _strike(match):
    return f" ~~{match.group('text').strip()}~~ "


def _link(match):
    return f"[{match.group('label').strip()}]({match.group('target')})"


def _color(match):
    return f'<span style="color: {match.group("color")};">{match.group("text")}</span>'


def _image(match):
    return f"![{match.group('name')}]"


def _attachment(match):
    return f"[{match.group('label')}][{match.group('target')}]"


INLINE_RULES = [
    # <tag> written as text
    Rule(r"<(?P<inner>.*?)>", r"&lt;\g<inner>&gt;"),
    # stray <, > is used by links so it stays
    literal(r"<", "&lt;"),

    # strong must run before em, '' is also a pair of '
    Rule(r"''(?P<text>.*?)''", _strong),
    Rule(r"'(?P<text>.*?)'", _emphasis),
    Rule(r"%%(?P<text>.*?)%%", _strike),

    Rule(r"\[\[(?P<label>.*?)[:>](?P<target>.*?)\]\]", _link),

    # no color in Markdown, emit inline html instead
    Rule(r"&color\((?P<color>.*?)\)(?P<space>\s+)?\{(?P<text>.*?)\}", _color, re.IGNORECASE),

    Rule(r"#image\((?P<name>.*?)\)", _image),
    Rule(r"#thumbnail\((?P<name>.*?)\)", _image),
    Rule(r"#attach\((?P<label>.*?):(?P<target>.*?)\)", _attachment),

    # the rules above pad their output with spaces
    literal(r" {2}", " "),
]


def convert_inline(text):
    """Convert the inline Backlog notation of ``text`` to Markdown."""
    return apply_rules(INLINE_RULES, text)
