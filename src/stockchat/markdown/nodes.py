"""Node types produced by the markdown parser.

Block and inline nodes are tagged unions discriminated on ``kind`` so every
node's payload shape is known statically. Nodes are immutable values; two
parses of the same text compare equal.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# Inline spans

class Plain(_Node):
    kind: Literal["plain"] = "plain"
    text: str


class Code(_Node):
    kind: Literal["code"] = "code"
    text: str


class Bold(_Node):
    kind: Literal["bold"] = "bold"
    children: list["InlineSpan"] = Field(default_factory=list)


class Italic(_Node):
    kind: Literal["italic"] = "italic"
    children: list["InlineSpan"] = Field(default_factory=list)


class BoldItalic(_Node):
    kind: Literal["bold_italic"] = "bold_italic"
    children: list["InlineSpan"] = Field(default_factory=list)


class Strikethrough(_Node):
    kind: Literal["strikethrough"] = "strikethrough"
    children: list["InlineSpan"] = Field(default_factory=list)


InlineSpan = Annotated[
    Union[Plain, Code, Bold, Italic, BoldItalic, Strikethrough],
    Field(discriminator="kind"),
]

for _model in (Bold, Italic, BoldItalic, Strikethrough):
    _model.model_rebuild()


# Blocks

class Heading(_Node):
    kind: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=3)
    children: list[InlineSpan] = Field(default_factory=list)


class Paragraph(_Node):
    kind: Literal["paragraph"] = "paragraph"
    children: list[InlineSpan] = Field(default_factory=list)


class ListBlock(_Node):
    kind: Literal["list"] = "list"
    ordered: bool = False
    items: list[list[InlineSpan]] = Field(default_factory=list)


class TableBlock(_Node):
    kind: Literal["table"] = "table"
    headers: list[str] = Field(default_factory=list)
    rows: list[list[list[InlineSpan]]] = Field(default_factory=list)


class CodeBlock(_Node):
    kind: Literal["code_block"] = "code_block"
    language: str | None = None
    lines: list[str] = Field(default_factory=list)


class Blockquote(_Node):
    kind: Literal["blockquote"] = "blockquote"
    children: list[InlineSpan] = Field(default_factory=list)


class Rule(_Node):
    kind: Literal["rule"] = "rule"


class Spacer(_Node):
    kind: Literal["spacer"] = "spacer"


MarkdownNode = Annotated[
    Union[Heading, Paragraph, ListBlock, TableBlock, CodeBlock, Blockquote, Rule, Spacer],
    Field(discriminator="kind"),
]


def plain_text(spans: list[InlineSpan]) -> str:
    """Flatten inline spans to their literal text."""
    parts = []
    for span in spans:
        if isinstance(span, (Plain, Code)):
            parts.append(span.text)
        else:
            parts.append(plain_text(span.children))
    return "".join(parts)
