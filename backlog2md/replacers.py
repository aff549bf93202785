"""
Regex rewrite rules and helpers to apply ordered rule lists.
"""

import re
from typing import Callable, Iterable, NamedTuple, Union

Replacement = Union[str, Callable[[re.Match], str]]


class Rule(NamedTuple):
    """A single (pattern, replacement) rewrite over the whole text."""

    pattern: str
    replacement: Replacement
    flags: int = 0

    def apply(self, text: str) -> str:
        return re.sub(self.pattern, self.replacement, text, flags=self.flags)


def literal(pattern: str, value: str, flags: int = 0) -> Rule:
    """Build a rule whose replacement is inserted as-is, without group expansion."""
    return Rule(pattern, lambda match: value, flags)


def apply_rules(rules: Iterable[Rule], text: str) -> str:
    """Run every rule once, in order, each on the previous rule's output."""
    for rule in rules:
        text = rule.apply(text)
    return text


def collapse_until_stable(text: str, pattern: str, value: str) -> str:
    """Replace ``pattern`` with ``value`` until the text no longer contains it."""
    while re.search(pattern, text):
        text = re.sub(pattern, value, text)
    return text
