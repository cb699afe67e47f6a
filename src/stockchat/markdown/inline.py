"""Inline span parsing.

One ordered alternation scanned left to right; earlier alternatives win, so
code spans beat bold-italic, which beats bold, which beats italic, which
beats strikethrough. Matches never overlap.
"""

import re

from .nodes import Bold, BoldItalic, Code, InlineSpan, Italic, Plain, Strikethrough

_INLINE_PATTERN = re.compile(
    r"`(?P<code>[^`]+)`"
    r"|\*\*\*(?P<bold_italic>.+?)\*\*\*"
    r"|\*\*(?P<bold>.+?)\*\*"
    r"|__(?P<bold_underscore>.+?)__"
    r"|\*(?P<italic>[^*\s](?:[^*]*?[^*\s])?)\*"
    r"|(?<![\w])_(?P<italic_underscore>[^_\s](?:[^_]*?[^_\s])?)_(?![\w])"
    r"|~~(?P<strikethrough>.+?)~~"
)


def _span_for(match: re.Match[str]) -> InlineSpan:
    group = match.lastgroup
    content = match.group(group)
    if group == "code":
        return Code(text=content)
    if group == "bold_italic":
        return BoldItalic(children=parse_inline(content))
    if group in ("bold", "bold_underscore"):
        return Bold(children=parse_inline(content))
    if group in ("italic", "italic_underscore"):
        return Italic(children=parse_inline(content))
    return Strikethrough(children=parse_inline(content))


def parse_inline(text: str) -> list[InlineSpan]:
    """Parse a line of text into inline spans.

    Args:
        text: Text of one block (heading, paragraph, list item, cell, quote)

    Returns:
        Spans in reading order; unmatched runs become Plain spans
    """
    spans: list[InlineSpan] = []
    position = 0
    for match in _INLINE_PATTERN.finditer(text):
        if match.start() > position:
            spans.append(Plain(text=text[position:match.start()]))
        spans.append(_span_for(match))
        position = match.end()
    if position < len(text):
        spans.append(Plain(text=text[position:]))
    return spans
