"""
Package backlog2md: conversion of Backlog notation to Markdown.
"""

from .config import ConversionOptions, load_options, ensure_directories
from .markdown_converter import BacklogConverter, convert, convert_file_to_markdown
from .link_processor import update_markdown_links, update_all_markdown_links
from .exceptions import Backlog2MdError, ConfigurationError, ConversionError

__version__ = "1.0.0"

__all__ = [
    'ConversionOptions',
    'load_options',
    'ensure_directories',
    'BacklogConverter',
    'convert',
    'convert_file_to_markdown',
    'update_markdown_links',
    'update_all_markdown_links',
    'Backlog2MdError',
    'ConfigurationError',
    'ConversionError',
]
