"""Rich rendering of parsed markdown nodes and result tables.

Hides the details of how nodes map onto terminal renderables.
"""

from typing import Any

from rich.console import Group, RenderableType
from rich.padding import Padding
from rich.rule import Rule as RichRule
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

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
)

STREAMING_CURSOR = "▍"

_SPAN_STYLES = {
    Bold: "bold",
    Italic: "italic",
    BoldItalic: "bold italic",
    Strikethrough: "strike",
}

_HEADING_STYLES = {
    1: "bold underline",
    2: "bold",
    3: "bold italic",
}


def render_inline(spans: list[InlineSpan], style: str = "") -> Text:
    """Render inline spans into a single styled Text."""
    text = Text(style=style, overflow="fold")
    for span in spans:
        if isinstance(span, Plain):
            text.append(span.text)
        elif isinstance(span, Code):
            text.append(span.text, style="bold magenta")
        else:
            text.append_text(render_inline(span.children, _SPAN_STYLES[type(span)]))
    return text


def _render_list(node: ListBlock) -> Text:
    lines = []
    for number, item in enumerate(node.items, 1):
        marker = f"{number}. " if node.ordered else "• "
        line = Text(marker, style="cyan")
        line.append_text(render_inline(item))
        lines.append(line)
    return Text("\n").join(lines)


def _render_table(node: TableBlock) -> Table:
    table = Table(show_header=True, header_style="bold cyan", expand=False)
    for header in node.headers:
        table.add_column(header)
    width = len(node.headers)
    for row in node.rows:
        # Pad or truncate to the header count; the parser keeps rows as written
        cells = [render_inline(cell) for cell in row[:width]]
        cells.extend(Text("") for _ in range(width - len(cells)))
        table.add_row(*cells)
    return table


def render_node(node: MarkdownNode) -> RenderableType:
    """Render one block node."""
    if isinstance(node, Heading):
        return render_inline(node.children, _HEADING_STYLES[node.level])
    if isinstance(node, Paragraph):
        return render_inline(node.children)
    if isinstance(node, ListBlock):
        return _render_list(node)
    if isinstance(node, TableBlock):
        return _render_table(node)
    if isinstance(node, CodeBlock):
        return Syntax("\n".join(node.lines), node.language or "text", word_wrap=True)
    if isinstance(node, Blockquote):
        quote = Text("▌ ", style="dim")
        quote.append_text(render_inline(node.children, "italic"))
        return Padding(quote, (0, 0, 0, 1))
    if isinstance(node, Rule):
        return RichRule(style="dim")
    if isinstance(node, Spacer):
        return Text("")
    raise TypeError(f"Unknown markdown node: {node!r}")


def render_markdown(nodes: list[MarkdownNode], streaming: bool = False) -> Group:
    """Render block nodes, optionally followed by a streaming cursor.

    Args:
        nodes: Parsed block nodes
        streaming: Append a blinking cursor after the last node

    Returns:
        Rich Group of renderables
    """
    renderables: list[RenderableType] = [render_node(node) for node in nodes]
    if streaming:
        cursor = Text(STREAMING_CURSOR, style="blink")
        if renderables and isinstance(renderables[-1], Text):
            last = renderables[-1].copy()
            last.append_text(cursor)
            renderables[-1] = last
        else:
            renderables.append(cursor)
    return Group(*renderables)


def render_rows(
    rows: list[dict[str, Any]],
    title: str | None = None,
    limit: int | None = None,
) -> Table:
    """Render row dicts as a table whose columns come from the first row.

    Args:
        rows: Row mappings (first row defines the columns)
        title: Optional table title
        limit: Maximum number of rows to show

    Returns:
        Rich Table with an item-count caption
    """
    columns = list(rows[0].keys()) if rows else []
    count = len(rows)
    table = Table(
        title=title,
        caption=f"{count} {'item' if count == 1 else 'items'}",
        show_header=True,
        header_style="bold cyan",
    )
    for column in columns:
        table.add_column(str(column))
    shown = rows if limit is None else rows[:limit]
    for row in shown:
        table.add_row(*(_format_cell(row.get(column)) for column in columns))
    return table


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)
