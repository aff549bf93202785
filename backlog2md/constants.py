"""
Constants and fixed values for the Backlog to Markdown converter.
"""

# Placeholder kinds used while masking block constructs
CODE_KIND = "BACKLOG2MD_CODE"
QUOTE_KIND = "BACKLOG2MD_QUOTE"
PARAGRAPH_KIND = "BACKLOG2MD_PARAGRAPH"

# A line starting with one of these is structural, never a paragraph
STRUCTURAL_PREFIXES = "*|-+>)`"

# Backlog block delimiters
CODE_OPEN, CODE_CLOSE = "{code}", "{/code}"
QUOTE_OPEN, QUOTE_CLOSE = "{quote}", "{/quote}"

# Table of contents line and its Markdown directive
CONTENTS_LINE = "#contents"
TOC_DIRECTIVE = "[toc]"

# Markdown formatting
LIST_INDENT = "    "
ALIGNMENT_SEGMENT = "|:--"
CODE_FENCE = "```"
QUOTE_PREFIX = "> "

# File conversion
SUPPORTED_EXTENSIONS = {".txt", ".backlog"}
DEFAULT_OUTPUT_DIR = "markdown_output"
MARKDOWN_EXTENSION = ".md"
