"""
Module for converting Backlog notation into Markdown.
"""

import logging
import os
import re

from slugify import slugify

from .config import ConversionOptions
from .constants import CONTENTS_LINE, MARKDOWN_EXTENSION, TOC_DIRECTIVE
from .exceptions import ConversionError
from .layout import build_layout_rules
from .masking import PlaceholderStore, mask_blocks, unmask_blocks
from .replacers import apply_rules, collapse_until_stable

logger = logging.getLogger(__name__)


def normalize(text):
    """Use "\\n" line endings and pad the text so anchored patterns match at its edges."""
    text = text.replace("\r\n", "\n")
    text = "\n" + text + "\n\n"
    return re.sub(
        r"^" + re.escape(CONTENTS_LINE) + r"$",
        lambda match: TOC_DIRECTIVE + "\n",
        text,
        flags=re.MULTILINE,
    )


def cleanup_blank_lines(text):
    """Collapse every run of blank lines to a single one."""
    return collapse_until_stable(text, "\n\n\n", "\n\n")


def finish_line_endings(text, use_crlf):
    if use_crlf:
        return text.replace("\n", "\r\n")
    return text


class BacklogConverter:
    """Converts Backlog notation documents to Markdown."""

    def __init__(self, options=None):
        self.options = options or ConversionOptions()

    def to_markdown(self, source):
        """
        Convert a Backlog notation string to Markdown.

        Never raises: malformed notation is converted on a best-effort basis.
        """
        store = PlaceholderStore()

        result = normalize(source)
        result = mask_blocks(result, store)
        result = apply_rules(build_layout_rules(self.options.promote_first_row), result)
        result = cleanup_blank_lines(result)
        result = unmask_blocks(result, store)

        return finish_line_endings(result.strip(), self.options.use_crlf)


def convert(source, options=None):
    """Convert a Backlog notation string to Markdown."""
    return BacklogConverter(options).to_markdown(source)


def unique_slug(title, taken_slugs):
    """Slug of ``title``, suffixed with -1, -2, ... while already in ``taken_slugs``."""
    base = slugify(title) or "untitled"
    slug = base
    counter = 1
    while slug in taken_slugs:
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def convert_file_to_markdown(source_path, output_dir, options=None, taken_slugs=None):
    """
    Convert a Backlog notation file into a Markdown file in ``output_dir``.

    ``taken_slugs`` holds the slugs already written in the same batch; the
    new one is added to it, so two sources never write the same file.
    """
    title = os.path.splitext(os.path.basename(source_path))[0] or "Untitled"

    try:
        with open(source_path, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConversionError(f"Error reading {source_path}: {e}")

    markdown = convert(source, options)

    if taken_slugs is None:
        taken_slugs = set()
    slug = unique_slug(title, taken_slugs)
    if slug != (slugify(title) or "untitled"):
        logger.warning("Output name of %s already used, writing %s%s", source_path, slug, MARKDOWN_EXTENSION)

    os.makedirs(output_dir, exist_ok=True)
    output_file = os.path.join(output_dir, f"{slug}{MARKDOWN_EXTENSION}")
    try:
        # newline="" keeps the "\r\n" endings exactly as converted
        with open(output_file, "w", encoding="utf-8", newline="") as f:
            f.write(markdown + ("\r\n" if options and options.use_crlf else "\n"))
    except OSError as e:
        raise ConversionError(f"Error writing Markdown for {source_path}: {e}")
    taken_slugs.add(slug)

    logger.debug("Converted %s to %s", source_path, output_file)
    return slug, title
