"""Block-level markdown parsing for agent answers.

Hidden design decisions:
- A constrained dialect (headings 1-3, lists, pipe tables, fences, quotes,
  rules) parsed in one left-to-right pass with constant lookahead
- Row/column count mismatches in tables are kept as-is
- Incremental reuse of already-closed blocks while text streams in
"""

import re
from dataclasses import dataclass

from .inline import parse_inline
from .nodes import (
    Blockquote,
    CodeBlock,
    Heading,
    ListBlock,
    MarkdownNode,
    Paragraph,
    Rule,
    Spacer,
    TableBlock,
)

_RULE = re.compile(r"^-{3,}$")
_HEADINGS = (
    (3, re.compile(r"^###\s+(.*)$")),
    (2, re.compile(r"^##\s+(.*)$")),
    (1, re.compile(r"^#\s+(.*)$")),
)
_FENCE_OPEN = re.compile(r"^```\s*([^\s`]*)")
_FENCE_CLOSE = re.compile(r"^```\s*$")
_BULLET = re.compile(r"^[-*+]\s+(.*)$")
_NUMBERED = re.compile(r"^\d+\.\s+(.*)$")
_CELL_DELIMITER = re.compile(r"(?<!\\)\|")


@dataclass(frozen=True)
class ParsedBlock:
    """A block node with the half-open line range it was parsed from."""

    node: MarkdownNode
    start: int
    end: int


def split_lines(text: str) -> list[str]:
    """Split text into lines the way the block parser sees them."""
    return text.replace("\r\n", "\n").split("\n")


def split_table_row(line: str) -> list[str]:
    """Split a pipe table row into trimmed cells on unescaped pipes."""
    body = line.strip()
    if body.startswith("|"):
        body = body[1:]
    if body.endswith("|") and not body.endswith("\\|"):
        body = body[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_DELIMITER.split(body)]


def _list_kind(stripped: str) -> bool | None:
    """Return True for numbered items, False for bullets, None otherwise."""
    if _NUMBERED.match(stripped):
        return True
    if _BULLET.match(stripped):
        return False
    return None


def _list_item(stripped: str, ordered: bool) -> str:
    pattern = _NUMBERED if ordered else _BULLET
    return pattern.match(stripped).group(1)


def _parse_table(run: list[str]) -> TableBlock:
    headers = split_table_row(run[0])
    rows = [
        [parse_inline(cell) for cell in split_table_row(line)]
        for line in run[2:]
    ]
    return TableBlock(headers=headers, rows=rows)


def parse_blocks(lines: list[str], offset: int = 0) -> list[ParsedBlock]:
    """Parse lines into blocks, recording the lines each block consumed.

    Args:
        lines: Lines of the document (see split_lines)
        offset: Line number of lines[0] within the whole document

    Returns:
        Parsed blocks in document order
    """
    blocks: list[ParsedBlock] = []
    index = 0
    total = len(lines)

    def emit(node: MarkdownNode, start: int, end: int) -> None:
        blocks.append(ParsedBlock(node=node, start=start + offset, end=end + offset))

    while index < total:
        line = lines[index]
        stripped = line.strip()
        start = index

        if not stripped:
            emit(Spacer(), start, index + 1)
            index += 1
            continue

        if _RULE.match(stripped):
            emit(Rule(), start, index + 1)
            index += 1
            continue

        heading = next(
            ((level, match) for level, pattern in _HEADINGS if (match := pattern.match(stripped))),
            None,
        )
        if heading:
            level, match = heading
            emit(Heading(level=level, children=parse_inline(match.group(1).strip())), start, index + 1)
            index += 1
            continue

        fence = _FENCE_OPEN.match(stripped)
        if fence:
            language = fence.group(1) or None
            index += 1
            code_lines = []
            while index < total and not _FENCE_CLOSE.match(lines[index].strip()):
                code_lines.append(lines[index])
                index += 1
            if index < total:
                index += 1  # closing fence
            emit(CodeBlock(language=language, lines=code_lines), start, index)
            continue

        if stripped.startswith("|"):
            run = []
            while index < total and lines[index].strip().startswith("|"):
                run.append(lines[index])
                index += 1
            emit(_parse_table(run), start, index)
            continue

        ordered = _list_kind(stripped)
        if ordered is not None:
            items = []
            while index < total and _list_kind(lines[index].strip()) is ordered:
                items.append(parse_inline(_list_item(lines[index].strip(), ordered)))
                index += 1
            emit(ListBlock(ordered=ordered, items=items), start, index)
            continue

        if stripped == ">" or stripped.startswith("> "):
            emit(Blockquote(children=parse_inline(stripped[2:].strip())), start, index + 1)
            index += 1
            continue

        emit(Paragraph(children=parse_inline(stripped)), start, index + 1)
        index += 1

    return blocks


def parse_markdown(text: str) -> list[MarkdownNode]:
    """Parse accumulated answer text into block nodes.

    Pure function of its input: calling it twice on the same text yields
    equal trees.

    Args:
        text: Complete accumulated text

    Returns:
        Block nodes in document order (empty for empty text)
    """
    if not text:
        return []
    return [block.node for block in parse_blocks(split_lines(text))]


class IncrementalMarkdownParser:
    """Markdown parser that reuses blocks closed by a top-level blank line.

    A blank line outside any fence resets all block state, so every block
    before it is final once a later line exists. Only the lines after the
    last such blank line are reparsed; the result always equals
    parse_markdown() on the same text.
    """

    def __init__(self) -> None:
        self._prefix: list[str] = []
        self._blocks: list[ParsedBlock] = []

    def reset(self) -> None:
        """Drop cached blocks."""
        self._prefix = []
        self._blocks = []

    def parse(self, text: str) -> list[MarkdownNode]:
        """Parse text, reusing cached blocks when the text extends the cache."""
        if not text:
            self.reset()
            return []

        lines = split_lines(text)
        cached = len(self._prefix)
        if cached and cached < len(lines) and lines[:cached] == self._prefix:
            blocks = self._blocks + parse_blocks(lines[cached:], offset=cached)
        else:
            blocks = parse_blocks(lines)

        self._remember(lines, blocks)
        return [block.node for block in blocks]

    def _remember(self, lines: list[str], blocks: list[ParsedBlock]) -> None:
        # The last line may still grow, so only spacers before it are stable
        for position in range(len(blocks) - 1, -1, -1):
            block = blocks[position]
            if isinstance(block.node, Spacer) and block.end < len(lines):
                self._prefix = lines[:block.end]
                self._blocks = blocks[:position + 1]
                return
        self.reset()
