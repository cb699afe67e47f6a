"""Markdown parsing and rendering for agent answers.

Module structure:
- nodes.py: Block and inline node types (tagged unions)
- inline.py: Inline span parsing
- parser.py: Block parsing and incremental reparse
- render.py: Rich renderables for nodes and result tables
"""

from .inline import parse_inline
from .nodes import (
    Blockquote,
    Bold,
    BoldItalic,
    Code,
    CodeBlock,
    Heading,
    InlineSpan,
    Italic,
    ListBlock,
    MarkdownNode,
    Paragraph,
    Plain,
    Rule,
    Spacer,
    Strikethrough,
    TableBlock,
    plain_text,
)
from .parser import IncrementalMarkdownParser, parse_markdown, split_table_row
from .render import STREAMING_CURSOR, render_markdown, render_node, render_rows

__all__ = [
    "Blockquote",
    "Bold",
    "BoldItalic",
    "Code",
    "CodeBlock",
    "Heading",
    "IncrementalMarkdownParser",
    "InlineSpan",
    "Italic",
    "ListBlock",
    "MarkdownNode",
    "Paragraph",
    "Plain",
    "Rule",
    "STREAMING_CURSOR",
    "Spacer",
    "Strikethrough",
    "TableBlock",
    "parse_inline",
    "parse_markdown",
    "plain_text",
    "render_markdown",
    "render_node",
    "render_rows",
    "split_table_row",
]
