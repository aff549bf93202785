"""
Unit tests for the structural rules.
"""

import pytest

from backlog2md.layout import ListCounters, build_layout_rules
from backlog2md.replacers import apply_rules


def rewrite(text, promote_first_row=False):
    return apply_rules(build_layout_rules(promote_first_row), text)


class TestListCounters:
    """Tests for ListCounters."""

    def test_flat_list_counts_up(self):
        counters = ListCounters()
        assert [counters.next(1) for _ in range(5)] == [1, 2, 3, 4, 5]

    def test_outer_level_continues_after_sub_list(self):
        counters = ListCounters()
        assert [counters.next(level) for level in (1, 2, 1)] == [1, 1, 2]

    def test_sub_list_restarts_when_revisited(self):
        counters = ListCounters()
        assert [counters.next(level) for level in (1, 2, 2, 1, 2)] == [1, 1, 2, 2, 1]

    def test_only_the_level_left_is_reset(self):
        # Backlog numbering: level 2 was left towards level 3, so only level 3 is reset
        counters = ListCounters()
        assert [counters.next(level) for level in (1, 2, 3, 1, 2)] == [1, 1, 1, 2, 2]


class TestHeadings:
    """Tests for the heading rule."""

    def test_markers_become_hashes(self):
        assert rewrite("\n*** Title\n") == "\n\n### Title\n\n"

    def test_heading_text_is_converted(self):
        assert rewrite("\n* a <b>\n") == "\n\n# a &lt;b&gt;\n\n"


class TestTables:
    """Tests for the table rules."""

    def test_header_row(self):
        result = rewrite("\n|~Name|~Age|h\n|Bob|3|\n\n")
        assert "\n|Name|Age|\n|:--|:--|\n|Bob|3|\n" in result

    def test_missing_header_gets_empty_header_row(self):
        result = rewrite("\n|a|b|\n|1|2|\n\n")
        assert "\n|||\n|:--|:--|\n|a|b|\n|1|2|\n" in result

    def test_missing_header_promotes_first_row(self):
        result = rewrite("\n|a|b|\n|1|2|\n\n", promote_first_row=True)
        assert "\n|a|b|\n|:--|:--|\n|1|2|\n" in result

    def test_empty_cells_are_explicit(self):
        result = rewrite("\n||b||\n|1|2|3|\n\n", promote_first_row=True)
        assert "\n| |b| |\n|:--|:--|:--|\n|1|2|3|\n" in result

    def test_row_header_cells_lose_their_marker(self):
        result = rewrite("\n|~Key|value|\n\n", promote_first_row=True)
        assert "\n|Key|value|\n|:--|:--|\n" in result

    def test_cells_are_converted(self):
        result = rewrite("\n|''x''|y|\n|1|2|\n\n", promote_first_row=True)
        assert "\n| **x** |y|\n|:--|:--|\n" in result


class TestLists:
    """Tests for the list rules."""

    def test_ordered_list_is_numbered(self):
        result = rewrite("\n+ one\n++ two\n+three\n\n")
        assert "\n1. one\n    1. two\n2. three\n" in result

    def test_unordered_list_is_indented(self):
        assert rewrite("\n- a\n-- b\n--- ''c''\n") == "\n- a\n    - b\n        - **c**\n"

    def test_horizontal_rule_is_kept(self):
        assert rewrite("\n----\n") == "\n----\n"


class TestEscapes:
    """Tests for line breaks and ampersands."""

    def test_line_break(self):
        assert rewrite("\n- a&br;b\n") == "\n- a <br>b\n"

    def test_ampersand_is_escaped(self):
        assert rewrite("\n- Q&A\n") == "\n- Q&amp;A\n"

    def test_entities_are_not_escaped_twice(self):
        assert rewrite("\n- &lt;x&gt;\n") == "\n- &lt;x&gt;\n"

    @pytest.mark.parametrize("entity", ["&#38;", "&#x26;", "&#X2F;"])
    def test_numeric_references_are_not_escaped(self, entity):
        assert rewrite(f"\n- AT{entity}T\n") == f"\n- AT{entity}T\n"

    def test_carriage_returns_become_newlines(self):
        assert rewrite("\n\r\r") == "\n\n"
