"""Readable text from the agent's card markup ("jsx") snapshots.

The agent may answer with a small, fixed vocabulary of card elements instead
of plain text, for example:

    <Card>
      <Title>Inventory Summary</Title>
      <Stat title="Total products" value={42} />
      <Description>Stock levels are healthy.</Description>
    </Card>

Hidden design decisions:
- Regex scanning over a tag vocabulary, not a full JSX parser
- Attribute values may be double-quoted, single-quoted or {expressions}
- Description blocks are de-duplicated against earlier lines by a
  30-character normalized prefix
"""

import html
import re

from ..scanning import split_quoted

TITLE_TAGS = ("Title", "CardTitle", "Heading", "h1", "h2", "h3")
DESCRIPTION_TAGS = ("Description", "CardDescription", "Text", "Paragraph", "p")
DEDUP_PREFIX_LENGTH = 30

_TAG_PATTERN = re.compile(r"<[^<>]*>")
_ELEMENT_PATTERN = re.compile(r"<([A-Za-z][\w.]*)((?:[^<>\"'{}]|\"[^\"]*\"|'[^']*'|\{[^{}]*\})*?)(/?)>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_EQUALS_PATTERN = re.compile(r"\s*=\s*")


def _block_pattern(tags: tuple[str, ...]) -> re.Pattern[str]:
    names = "|".join(re.escape(tag) for tag in tags)
    return re.compile(rf"<({names})(?:\s[^<>]*)?>(.*?)</\1\s*>", re.DOTALL)


_TITLE_BLOCK = _block_pattern(TITLE_TAGS)
_DESCRIPTION_BLOCK = _block_pattern(DESCRIPTION_TAGS)


def strip_tags(markup: str) -> str:
    """Remove all tags, unescape entities and collapse whitespace."""
    text = _TAG_PATTERN.sub(" ", markup)
    return _WHITESPACE_PATTERN.sub(" ", html.unescape(text)).strip()


def _normalize(text: str) -> str:
    return strip_tags(text).lower()


def parse_attributes(attribute_text: str) -> dict[str, str]:
    """Parse element attributes into a name -> value mapping.

    Boolean attributes (no value) map to an empty string.
    """
    cleaned = _EQUALS_PATTERN.sub("=", attribute_text.strip().rstrip("/"))
    attributes: dict[str, str] = {}
    for token in split_quoted(cleaned, delimiter=str.isspace, quotes="\"'"):
        if not token:
            continue
        name, _, value = token.partition("=")
        if value.startswith("{") and value.endswith("}"):
            value = value[1:-1].strip()
        attributes[name] = html.unescape(value)
    return attributes


def _is_duplicate(candidate: str, lines: list[str]) -> bool:
    prefix = _normalize(candidate)[:DEDUP_PREFIX_LENGTH]
    if not prefix:
        return True
    return any(prefix in _normalize(line) for line in lines)


def jsx_to_text(markup: str) -> str:
    """Derive readable text from a card markup snapshot.

    Order of output lines:
    1. The first title block, verbatim
    2. Every title/value attribute pair, as "title: value"
    3. Descriptions (blocks and description= attributes) in document
       order, unless already covered by an earlier line

    Falls back to tag stripping when no structural block is found.

    Args:
        markup: Markup string from the payload's jsx field

    Returns:
        Newline-joined readable text (may be empty)
    """
    lines: list[str] = []
    found_structure = False

    title_match = _TITLE_BLOCK.search(markup)
    if title_match:
        found_structure = True
        title = strip_tags(title_match.group(2))
        if title:
            lines.append(title)

    # (offset, text) so both description forms keep document order
    descriptions: list[tuple[int, str]] = []
    for element in _ELEMENT_PATTERN.finditer(markup):
        attributes = parse_attributes(element.group(2))
        if "title" in attributes and "value" in attributes:
            found_structure = True
            lines.append(f"{attributes['title']}: {attributes['value']}")
        elif "title" in attributes and not title_match and not lines:
            found_structure = True
            lines.append(attributes["title"])
        if attributes.get("description"):
            found_structure = True
            descriptions.append((element.start(), attributes["description"]))

    for block in _DESCRIPTION_BLOCK.finditer(markup):
        found_structure = True
        descriptions.append((block.start(), strip_tags(block.group(2))))

    descriptions.sort(key=lambda entry: entry[0])
    for _, description in descriptions:
        if description and not _is_duplicate(description, lines):
            lines.append(description)

    if not found_structure:
        return strip_tags(markup)
    return "\n".join(lines).strip()
