"""
Module for updating links between converted Markdown files.

A Backlog link ``[[Label>Page]]`` becomes ``[Label](Page)``. When ``Page``
was converted in the same batch, the link is pointed at its Markdown file.
"""

import logging
import os
import re

from slugify import slugify

from .constants import MARKDOWN_EXTENSION

logger = logging.getLogger(__name__)

# [text](target), but not images
LINK_PATTERN = r"(?<!!)\[(?P<text>[^\]]*)\]\((?P<target>[^)\n]+)\)"
# http:, mailto:, ... and in-page anchors are never page names
EXTERNAL_TARGET_PATTERN = r"^(?:[A-Za-z][A-Za-z0-9+.-]*:|#)"
# code fence line, possibly inside a quote
FENCE_PATTERN = r"^(?:> ?)*```"


def split_code_fences(content):
    """
    Split Markdown into (is_code, text) segments.

    Fence lines belong to their code segment. Joining the texts gives back
    ``content`` unchanged.
    """
    segments = []
    in_code = False
    for line in content.splitlines(keepends=True):
        is_fence = re.match(FENCE_PATTERN, line) is not None
        is_code = in_code or is_fence
        if segments and segments[-1][0] == is_code:
            segments[-1][1].append(line)
        else:
            segments.append((is_code, [line]))
        if is_fence:
            in_code = not in_code
    return [(is_code, "".join(lines)) for is_code, lines in segments]


def resolve_page_link(target, processed_items):
    """Return the Markdown file of the page named ``target``, or None."""
    target = target.strip()
    if not target or re.match(EXTERNAL_TARGET_PATTERN, target):
        return None

    # processed_items is keyed by slug, an exact title wins over a slug match
    item = next((i for i in processed_items.values() if i["title"] == target), None)
    if item is None:
        item = processed_items.get(slugify(target))
    if item is None:
        return None
    return f"{item['slug']}{MARKDOWN_EXTENSION}"


def update_markdown_links(filepath, processed_items):
    """Update links to converted pages in the Markdown file. Returns the number changed."""
    try:
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except OSError as e:
        logger.warning("Error reading file %s: %s", filepath, e)
        return 0

    changed = 0

    def replace_page_link(match):
        nonlocal changed
        page_file = resolve_page_link(match.group("target"), processed_items)
        if page_file is None:
            return match.group(0)  # not a converted page, leave the link alone
        changed += 1
        return f"[{match.group('text')}]({page_file})"

    # code blocks are verbatim, links in them stay as written
    updated_content = "".join(
        text if is_code else re.sub(LINK_PATTERN, replace_page_link, text)
        for is_code, text in split_code_fences(content)
    )
    if not changed:
        return 0

    try:
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            f.write(updated_content)
    except OSError as e:
        logger.warning("Error writing updated file %s: %s", filepath, e)
        return 0
    return changed


def update_all_markdown_links(output_dir, processed_items):
    """Update links in all generated Markdown files."""
    total = 0
    for item in processed_items.values():
        page_path = os.path.join(output_dir, f"{item['slug']}{MARKDOWN_EXTENSION}")
        total += update_markdown_links(page_path, processed_items)
    return total
